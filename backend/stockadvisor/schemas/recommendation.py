"""
CONTRACT 4: Recommendation Scorer

Input: RecommendationRequest (price series + optional fundamental/sentiment inputs)
Output: ScoredRecommendation

Technical signals dominate short horizons, fundamentals dominate long ones.
The engine suggests; it never places trades.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from stockadvisor.schemas.market import NewsSentiment, PriceSeries


# =============================================================================
# ENUMS
# =============================================================================


class TimeHorizon(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class RecommendationAction(str, Enum):
    STRONG_BUY = "strong_buy"
    BUY = "buy"
    HOLD = "hold"
    SELL = "sell"
    STRONG_SELL = "strong_sell"

    @property
    def is_buy(self) -> bool:
        return self in (RecommendationAction.STRONG_BUY, RecommendationAction.BUY)


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# =============================================================================
# SCORING INPUTS
# =============================================================================


class HorizonWeights(BaseModel):
    """Component weights for one time horizon. Must sum to exactly 1.0."""

    model_config = ConfigDict(frozen=True)

    technical: float = Field(..., ge=0, le=1)
    fundamental: float = Field(..., ge=0, le=1)
    sentiment: float = Field(..., ge=0, le=1)

    @model_validator(mode="after")
    def _check_sum(self) -> "HorizonWeights":
        total = self.technical + self.fundamental + self.sentiment
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"weights must sum to 1.0, got {total}")
        return self


class ComponentScores(BaseModel):
    """Raw 0-100 scores. A missing component is None."""

    technical: Optional[float] = Field(default=None, ge=0, le=100)
    fundamental: Optional[float] = Field(default=None, ge=0, le=100)
    sentiment: Optional[float] = Field(default=None, ge=0, le=100)


class FundamentalSnapshot(BaseModel):
    """Precomputed fundamental scores supplied by the caller."""

    composite_score: float = Field(default=50, ge=0, le=100)
    quality_score: float = Field(default=50, ge=0, le=100)
    growth_score: float = Field(default=50, ge=0, le=100)
    value_score: float = Field(default=50, ge=0, le=100)
    momentum_score: float = Field(default=50, ge=0, le=100)
    financial_health_score: Optional[float] = Field(default=None, ge=0, le=100)
    risk_level: Optional[RiskLevel] = None


class SentimentSnapshot(BaseModel):
    """Aggregated news sentiment supplied by the caller."""

    sentiment: NewsSentiment = NewsSentiment.NEUTRAL
    score: float = Field(default=50, ge=0, le=100)
    news_count: int = Field(default=0, ge=0)


class RecommendationRequest(BaseModel):
    """Everything needed to score one symbol."""

    symbol: str = Field(..., min_length=1)
    series: PriceSeries
    fundamentals: Optional[FundamentalSnapshot] = None
    sentiment: Optional[SentimentSnapshot] = None


class RecommendationBatchRequest(BaseModel):
    """Symbols to rank, each with its own inputs."""

    requests: list[RecommendationRequest] = Field(..., min_length=1)
    limit: Optional[int] = Field(default=None, ge=1)


# =============================================================================
# OUTPUT
# =============================================================================


class PriceTargets(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry_price: Optional[float] = None
    target_price: Optional[float] = None
    stop_loss: Optional[float] = None
    expected_return: Optional[float] = Field(default=None, description="% from entry to target")


class ScoredRecommendation(BaseModel):
    """
    One analysis result. Created once per request and never mutated.
    Returned by: Recommendation Service
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    time_horizon: TimeHorizon
    scores: ComponentScores = Field(..., description="Resolved scores, neutral 50 for missing inputs")
    confidence: int = Field(..., ge=0, le=100)
    action: RecommendationAction
    current_price: Optional[float] = None
    entry_price: Optional[float] = None
    target_price: Optional[float] = None
    stop_loss: Optional[float] = None
    expected_return: Optional[float] = None
    effective_weight: float = Field(
        ..., ge=0, le=1, description="Share of the weight backed by supplied inputs"
    )
    reasons: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    generated_at: datetime


class RecommendationBatch(BaseModel):
    """Ranked recommendations for one horizon."""

    time_horizon: TimeHorizon
    period: str = Field(..., description="Holding period label, e.g. '1 week'")
    recommendations: list[ScoredRecommendation]
    total_analyzed: int = Field(..., ge=0)
    successful_analyses: int = Field(..., ge=0)
    generated_at: datetime


class AllRecommendations(BaseModel):
    daily: Optional[RecommendationBatch] = None
    weekly: Optional[RecommendationBatch] = None
    monthly: Optional[RecommendationBatch] = None
    yearly: Optional[RecommendationBatch] = None
    errors: dict[str, str] = Field(default_factory=dict)
    generated_at: datetime


class TradingStrategy(BaseModel):
    entry_strategy: Optional[str] = None
    exit_strategy: Optional[str] = None
    risk_management: Optional[str] = None
    position_sizing: Optional[str] = None


class StockPick(BaseModel):
    """Stock of the week / month."""

    recommendation: ScoredRecommendation
    prediction_type: str
    valid_from: datetime
    valid_until: datetime
    key_highlights: list[str]
    trading_strategy: TradingStrategy
    total_analyzed: int
    selection_criteria: str
