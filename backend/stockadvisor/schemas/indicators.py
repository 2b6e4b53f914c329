"""
CONTRACT 2: Indicator Engine

Input: PriceSeries
Output: TechnicalAnalysis

Every indicator reports its own signal. When the series is too short for an
indicator, its result carries signal=insufficient_data and null readings
instead of raising, so the other indicators still report.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from stockadvisor.schemas.signals import TradingSignal


# =============================================================================
# ENUMS
# =============================================================================


class IndicatorSignal(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"
    OVERBOUGHT = "overbought"
    OVERSOLD = "oversold"
    STRONG_BULLISH = "strong_bullish"
    STRONG_BEARISH = "strong_bearish"
    NEAR_SUPPORT = "near_support"
    NEAR_RESISTANCE = "near_resistance"
    INSUFFICIENT_DATA = "insufficient_data"


class VolumeTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"


class _Result(BaseModel):
    model_config = ConfigDict(frozen=True)

    signal: IndicatorSignal

    @property
    def sufficient(self) -> bool:
        return self.signal != IndicatorSignal.INSUFFICIENT_DATA


# =============================================================================
# OUTPUT: Per-indicator results
# =============================================================================


class IndicatorResult(_Result):
    """Single-line indicator (RSI, SMA, EMA)."""

    current: Optional[float] = None
    period: int = Field(..., ge=1)
    values: list[float] = Field(default_factory=list, description="Historical series for charting")


class MACDValues(BaseModel):
    """MACD series, each aligned on the most recent bar."""

    macd: list[float]
    signal: list[float]
    histogram: list[float] = Field(..., description="Same length as signal")


class MACDResult(_Result):
    macd_line: Optional[float] = None
    signal_line: Optional[float] = None
    histogram: Optional[float] = None
    fast_period: int = 12
    slow_period: int = 26
    signal_period: int = 9
    values: Optional[MACDValues] = None


class BollingerValues(BaseModel):
    upper: list[float]
    middle: list[float]
    lower: list[float]


class BollingerBandsResult(_Result):
    upper_band: Optional[float] = None
    middle_band: Optional[float] = None
    lower_band: Optional[float] = None
    period: int = 20
    std_dev: float = 2.0
    values: Optional[BollingerValues] = None


class PivotPoint(BaseModel):
    """Strict local extremum found in the high or low series."""

    index: int = Field(..., ge=0)
    price: float


class SupportResistanceResult(_Result):
    support: list[float] = Field(default_factory=list, description="Ascending")
    resistance: list[float] = Field(default_factory=list, description="Descending")
    lookback: int = 10
    pivot_highs: list[PivotPoint] = Field(default_factory=list)
    pivot_lows: list[PivotPoint] = Field(default_factory=list)

    def support_below(self, price: float) -> Optional[float]:
        """Highest support level strictly below price."""
        below = [level for level in self.support if level < price]
        return max(below) if below else None


class VolumeAnalysisResult(_Result):
    average_volume: Optional[int] = None
    current_volume: Optional[int] = None
    volume_ratio: Optional[float] = Field(default=None, ge=0)
    volume_trend: Optional[VolumeTrend] = None
    on_balance_volume: Optional[int] = None
    volume_price_trend: Optional[float] = None
    period: int = 20


class StochasticResult(_Result):
    k: float = Field(..., ge=0, le=100)
    d: float = Field(..., ge=0, le=100)
    k_period: int = 14
    d_period: int = 3


class OscillatorResult(_Result):
    """Williams %R or CCI reading."""

    current: float
    period: int


class MomentumIndicators(BaseModel):
    """Momentum bundle. A sub-indicator is None when its own window is not met."""

    rate_of_change: Optional[float] = None
    stochastic: Optional[StochasticResult] = None
    williams_r: Optional[OscillatorResult] = None
    cci: Optional[OscillatorResult] = None


class MovingAverages(BaseModel):
    sma20: IndicatorResult
    sma50: IndicatorResult
    sma200: IndicatorResult
    ema12: IndicatorResult
    ema26: IndicatorResult


# =============================================================================
# OUTPUT: TechnicalAnalysis (Complete Response)
# =============================================================================


class TechnicalIndicators(BaseModel):
    rsi: IndicatorResult
    macd: MACDResult
    moving_averages: MovingAverages
    bollinger_bands: BollingerBandsResult
    support_resistance: SupportResistanceResult
    volume_analysis: VolumeAnalysisResult
    momentum: MomentumIndicators


class TechnicalAnalysis(BaseModel):
    """
    Complete technical analysis for a price series.
    Returned by: Indicator Service
    Consumed by: Recommendation Service, API
    """

    symbol: Optional[str] = None
    data_points: int = Field(..., ge=1)
    current_price: float = Field(..., gt=0)
    last_updated: datetime
    indicators: TechnicalIndicators
    signals: TradingSignal

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "symbol": "TCS",
                "data_points": 120,
                "current_price": 3850.25,
                "last_updated": "2024-02-04T15:30:00+05:30",
                "indicators": {
                    "rsi": {"current": 61.4, "signal": "bullish", "period": 14},
                    "macd": {"macd_line": 12.3456, "signal_line": 10.1, "signal": "bullish"},
                },
                "signals": {
                    "overall": "bullish",
                    "strength": 54,
                    "recommendation": "buy",
                },
            }
        }
    )
