"""
CONTRACT 3: Signal Aggregator

Input: Indicator results (or the raw close/high/low/volume arrays)
Output: TradingSignal
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class SignalDirection(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class TradeRecommendation(str, Enum):
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


class SignalComponents(BaseModel):
    """Direction of each indicator family that took part in the vote."""

    trend: SignalDirection = SignalDirection.NEUTRAL
    momentum: SignalDirection = SignalDirection.NEUTRAL
    volume: SignalDirection = SignalDirection.NEUTRAL
    volatility: SignalDirection = SignalDirection.NEUTRAL


class TradingSignal(BaseModel):
    """
    Overall signal from the weighted indicator vote.

    total_signals is the number of indicators that had enough data to vote.
    A neutral signal with total_signals == 0 means "no signal", not a
    confirmed neutral reading.
    """

    model_config = ConfigDict(frozen=True)

    overall: SignalDirection = SignalDirection.NEUTRAL
    strength: int = Field(default=0, ge=0, le=100)
    components: SignalComponents = Field(default_factory=SignalComponents)
    recommendation: TradeRecommendation = TradeRecommendation.HOLD
    total_signals: int = Field(default=0, ge=0)
    bullish_signals: float = Field(default=0.0, ge=0)
    bearish_signals: float = Field(default=0.0, ge=0)

    @property
    def has_signal(self) -> bool:
        return self.total_signals > 0
