"""
CONTRACT 1: Price History Input

Input: PriceSeries (supplied by the caller)
Consumed by: Indicator Engine, Signal Aggregator, Recommendation Service

The engine never fetches data. Whoever calls it hands over an ordered
OHLCV history; this module validates that history at the boundary.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class Exchange(str, Enum):
    NSE = "NSE"
    BSE = "BSE"


class NewsSentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


# =============================================================================
# PRICE POINTS
# =============================================================================


class PricePoint(BaseModel):
    """Single daily candle."""

    model_config = ConfigDict(frozen=True)

    date: datetime
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> "PricePoint":
        if self.high < self.low:
            raise ValueError(
                f"high ({self.high}) is below low ({self.low}) on {self.date.isoformat()}"
            )
        for name, price in (("open", self.open), ("close", self.close)):
            if not self.low <= price <= self.high:
                raise ValueError(
                    f"{name} ({price}) is outside the {self.low}-{self.high} range "
                    f"on {self.date.isoformat()}"
                )
        return self


class PriceSeries(BaseModel):
    """
    Ordered price history for one symbol.

    Dates must be strictly ascending (which also rules out duplicates).
    The series is frozen; the engine only ever reads from it.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "symbol": "RELIANCE",
                "exchange": "NSE",
                "points": [
                    {
                        "date": "2024-02-01T00:00:00+05:30",
                        "open": 2440.0,
                        "high": 2465.0,
                        "low": 2435.0,
                        "close": 2450.5,
                        "volume": 5000000,
                    }
                ],
            }
        },
    )

    symbol: Optional[str] = Field(default=None, description="e.g. RELIANCE, TCS")
    exchange: Exchange = Exchange.NSE
    points: list[PricePoint] = Field(..., min_length=1)

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: Optional[str]) -> Optional[str]:
        return value.upper().strip() if value else value

    @field_validator("points")
    @classmethod
    def _check_order(cls, points: list[PricePoint]) -> list[PricePoint]:
        for previous, current in zip(points, points[1:]):
            if current.date <= previous.date:
                raise ValueError(
                    "price points must have strictly ascending dates: "
                    f"{current.date.isoformat()} follows {previous.date.isoformat()}"
                )
        return points

    def __len__(self) -> int:
        return len(self.points)

    @property
    def closes(self) -> np.ndarray:
        return np.array([p.close for p in self.points], dtype=float)

    @property
    def highs(self) -> np.ndarray:
        return np.array([p.high for p in self.points], dtype=float)

    @property
    def lows(self) -> np.ndarray:
        return np.array([p.low for p in self.points], dtype=float)

    @property
    def volumes(self) -> np.ndarray:
        return np.array([p.volume for p in self.points], dtype=float)

    @property
    def current_price(self) -> float:
        return self.points[-1].close
