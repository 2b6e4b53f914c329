"""
Recommendation scoring policy.

Per-horizon weights, action bands and price-target factors. Short horizons
lean on technicals and sentiment, long horizons on fundamentals.
"""

from dataclasses import dataclass

from stockadvisor.schemas.recommendation import HorizonWeights, TimeHorizon

NEUTRAL_SCORE = 50.0

HORIZON_WEIGHTS: dict[TimeHorizon, HorizonWeights] = {
    TimeHorizon.DAILY: HorizonWeights(technical=0.60, sentiment=0.30, fundamental=0.10),
    TimeHorizon.WEEKLY: HorizonWeights(technical=0.50, sentiment=0.25, fundamental=0.25),
    TimeHorizon.MONTHLY: HorizonWeights(technical=0.30, sentiment=0.20, fundamental=0.50),
    TimeHorizon.YEARLY: HorizonWeights(technical=0.15, sentiment=0.10, fundamental=0.75),
}

HOLDING_PERIODS: dict[TimeHorizon, str] = {
    TimeHorizon.DAILY: "1 day",
    TimeHorizon.WEEKLY: "1 week",
    TimeHorizon.MONTHLY: "1 month",
    TimeHorizon.YEARLY: "1+ years",
}


@dataclass(frozen=True)
class ActionBands:
    """Lower bounds (inclusive) of each confidence band."""

    strong_buy: int = 80
    buy: int = 65
    hold: int = 40
    sell: int = 25


@dataclass(frozen=True)
class PriceFactor:
    """Multiplier = base + (confidence - 50) * slope, sign applied by the caller."""

    base: float
    slope: float


TARGET_FACTORS: dict[TimeHorizon, PriceFactor] = {
    TimeHorizon.DAILY: PriceFactor(1.02, 0.0005),
    TimeHorizon.WEEKLY: PriceFactor(1.05, 0.001),
    TimeHorizon.MONTHLY: PriceFactor(1.10, 0.002),
    TimeHorizon.YEARLY: PriceFactor(1.20, 0.004),
}

STOP_FACTORS: dict[TimeHorizon, PriceFactor] = {
    TimeHorizon.DAILY: PriceFactor(0.98, 0.0002),
    TimeHorizon.WEEKLY: PriceFactor(0.95, 0.0005),
    TimeHorizon.MONTHLY: PriceFactor(0.90, 0.001),
    TimeHorizon.YEARLY: PriceFactor(0.85, 0.002),
}


@dataclass(frozen=True)
class ScoringPolicy:
    bands: ActionBands = ActionBands()

    # Batch filtering
    min_confidence: int = 25

    # Entry moves down to a support only if it is within this fraction of price
    entry_support_floor: float = 0.95

    # Reason/risk cut-offs on 0-100 component scores
    strong_component: float = 60.0
    weak_component: float = 40.0
    excellent_component: float = 70.0
    poor_value_score: float = 30.0
    high_volume_ratio: float = 1.5
    busy_news_count: int = 5

    # Stock picks
    week_pick_days: int = 7
    month_pick_days: int = 30
    month_pick_min_fundamental: float = 60.0
    month_pick_confidence_weight: float = 0.6
    month_pick_fundamental_weight: float = 0.4
    max_highlights: int = 5


DEFAULT_SCORING_POLICY = ScoringPolicy()
