"""
Recommendation Scorer

Turns component scores into a confidence, an action and price targets for
one time horizon. Also derives the component scores themselves from a
technical analysis and the caller's fundamental/sentiment snapshots.

Nothing here raises on partial input: a missing component scores a neutral
50 and the share of weight it would have carried is reported separately.
"""

import logging
import math
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from stockadvisor.schemas.indicators import SupportResistanceResult, TechnicalAnalysis
from stockadvisor.schemas.market import NewsSentiment
from stockadvisor.schemas.recommendation import (
    ComponentScores,
    FundamentalSnapshot,
    HorizonWeights,
    PriceTargets,
    RecommendationAction,
    RiskLevel,
    ScoredRecommendation,
    SentimentSnapshot,
    TimeHorizon,
)
from stockadvisor.schemas.signals import SignalDirection
from stockadvisor.services.recommendation.policy import (
    DEFAULT_SCORING_POLICY,
    HORIZON_WEIGHTS,
    NEUTRAL_SCORE,
    STOP_FACTORS,
    TARGET_FACTORS,
    ScoringPolicy,
)

logger = logging.getLogger(__name__)
IST = ZoneInfo("Asia/Kolkata")

COMPONENTS = ("technical", "fundamental", "sentiment")


def _round_score(value: float) -> int:
    """Round half up and clamp to 0-100."""
    return max(0, min(100, int(math.floor(value + 0.5))))


class RecommendationScorer:
    """Weighted multi-timeframe scoring."""

    def __init__(
        self,
        policy: ScoringPolicy = DEFAULT_SCORING_POLICY,
        weights: Optional[dict[TimeHorizon, HorizonWeights]] = None,
    ):
        self.policy = policy
        self.weights = dict(weights or HORIZON_WEIGHTS)

    def weights_for(self, horizon: TimeHorizon) -> HorizonWeights:
        return self.weights[horizon]

    # =========================================================================
    # COMPOSITE SCORE
    # =========================================================================

    def resolve(self, scores: ComponentScores) -> ComponentScores:
        """Fill missing components with the neutral score."""
        return ComponentScores(
            **{
                name: NEUTRAL_SCORE if getattr(scores, name) is None else getattr(scores, name)
                for name in COMPONENTS
            }
        )

    def score(
        self,
        scores: ComponentScores,
        weights: Optional[HorizonWeights] = None,
        horizon: TimeHorizon = TimeHorizon.WEEKLY,
    ) -> int:
        """
        Confidence = round(sum(score_i * weight_i)).

        Args:
            scores: Raw 0-100 component scores, any of which may be None
            weights: Explicit weight set; defaults to the horizon's weights
            horizon: Used only to pick the weights when none are given
        """
        if weights is None:
            weights = self.weights_for(horizon)
        resolved = self.resolve(scores)
        total = sum(getattr(resolved, name) * getattr(weights, name) for name in COMPONENTS)
        return _round_score(total)

    def effective_weight(self, scores: ComponentScores, weights: HorizonWeights) -> float:
        """Share of the weight carried by components that were actually supplied."""
        supplied = sum(
            getattr(weights, name) for name in COMPONENTS if getattr(scores, name) is not None
        )
        return round(min(supplied, 1.0), 4)

    def action_for(self, confidence: int) -> RecommendationAction:
        bands = self.policy.bands
        if confidence >= bands.strong_buy:
            return RecommendationAction.STRONG_BUY
        if confidence >= bands.buy:
            return RecommendationAction.BUY
        if confidence >= bands.hold:
            return RecommendationAction.HOLD
        if confidence >= bands.sell:
            return RecommendationAction.SELL
        return RecommendationAction.STRONG_SELL

    # =========================================================================
    # PRICE TARGETS
    # =========================================================================

    def price_targets(
        self,
        current_price: Optional[float],
        confidence: int,
        horizon: TimeHorizon,
        levels: Optional[SupportResistanceResult] = None,
    ) -> PriceTargets:
        """
        Entry, target and stop for a long position.

        Entry is the current price unless a support sits just below it
        (within entry_support_floor). The stop goes under the nearest support
        below entry, or at a horizon-dependent percentage floor.
        """
        if not current_price or current_price <= 0:
            return PriceTargets()

        entry = current_price
        if levels is not None:
            support = levels.support_below(current_price)
            if support is not None and support > current_price * self.policy.entry_support_floor:
                entry = support

        offset = confidence - NEUTRAL_SCORE
        target_factor = TARGET_FACTORS[horizon]
        target = entry * (target_factor.base + offset * target_factor.slope)

        stop = levels.support_below(entry) if levels is not None else None
        if stop is None:
            stop_factor = STOP_FACTORS[horizon]
            stop = entry * (stop_factor.base - offset * stop_factor.slope)

        entry, target, stop = round(entry, 2), round(target, 2), round(stop, 2)
        return PriceTargets(
            entry_price=entry,
            target_price=target,
            stop_loss=stop,
            expected_return=round((target - entry) / entry * 100, 2),
        )

    # =========================================================================
    # COMPONENT SCORES
    # =========================================================================

    def technical_score(self, analysis: TechnicalAnalysis, horizon: TimeHorizon) -> int:
        """
        Technical score around a neutral 50.

        Day trades reward oversold RSI; longer holds prefer RSI in the 40-60
        band. MACD, the SMA20/50 cross, the overall signal and a volume surge
        move the score from there.
        """
        score = NEUTRAL_SCORE
        ind = analysis.indicators

        rsi = ind.rsi.current
        if rsi is not None:
            if horizon == TimeHorizon.DAILY:
                if rsi < 30:
                    score += 20
                elif rsi > 70:
                    score -= 20
                elif 40 <= rsi <= 60:
                    score += 10
            else:
                if 40 <= rsi <= 60:
                    score += 15
                elif rsi < 30 or rsi > 70:
                    score -= 10

        if ind.macd.macd_line is not None and ind.macd.signal_line is not None:
            score += 15 if ind.macd.macd_line > ind.macd.signal_line else -10

        sma20 = ind.moving_averages.sma20.current
        sma50 = ind.moving_averages.sma50.current
        if sma20 is not None and sma50 is not None:
            score += 10 if sma20 > sma50 else -10

        if analysis.signals.overall == SignalDirection.BULLISH:
            score += 15
        elif analysis.signals.overall == SignalDirection.BEARISH:
            score -= 15

        ratio = ind.volume_analysis.volume_ratio
        if ratio is not None and ratio > self.policy.high_volume_ratio:
            score += 10

        return _round_score(score)

    def fundamental_score(self, snapshot: FundamentalSnapshot, horizon: TimeHorizon) -> int:
        if horizon == TimeHorizon.YEARLY:
            score = (
                snapshot.quality_score * 0.4
                + snapshot.growth_score * 0.3
                + snapshot.value_score * 0.3
            )
        elif horizon == TimeHorizon.MONTHLY:
            score = snapshot.composite_score
        else:
            score = snapshot.composite_score * 0.7 + snapshot.momentum_score * 0.3

        if (
            snapshot.financial_health_score is not None
            and snapshot.financial_health_score > self.policy.excellent_component
        ):
            score += 5
        if snapshot.risk_level == RiskLevel.HIGH:
            score -= 10

        return _round_score(score)

    def sentiment_score(self, snapshot: SentimentSnapshot, horizon: TimeHorizon) -> int:
        # Shorter holds react more to news
        if horizon == TimeHorizon.DAILY:
            positive, negative = 10, -15
        elif horizon == TimeHorizon.WEEKLY:
            positive, negative = 5, -10
        else:
            positive, negative = 3, -5

        score = snapshot.score
        if snapshot.sentiment == NewsSentiment.POSITIVE:
            score += positive
        elif snapshot.sentiment == NewsSentiment.NEGATIVE:
            score += negative

        if horizon == TimeHorizon.DAILY and snapshot.news_count > self.policy.busy_news_count:
            score += 5

        return _round_score(score)

    # =========================================================================
    # REASONS & RISKS
    # =========================================================================

    def reasons(
        self,
        horizon: TimeHorizon,
        scores: ComponentScores,
        analysis: Optional[TechnicalAnalysis],
        fundamentals: Optional[FundamentalSnapshot],
        sentiment: Optional[SentimentSnapshot],
    ) -> list[str]:
        p = self.policy
        reasons: list[str] = []

        if analysis is not None and scores.technical is not None and scores.technical > p.strong_component:
            rsi = analysis.indicators.rsi.current
            ratio = analysis.indicators.volume_analysis.volume_ratio
            if analysis.signals.overall == SignalDirection.BULLISH:
                reasons.append("Strong bullish technical trend")
            if rsi is not None and rsi < 40:
                reasons.append("Oversold conditions present buying opportunity")
            if ratio is not None and ratio > p.high_volume_ratio:
                reasons.append("High volume supports price movement")

        if fundamentals is not None and scores.fundamental is not None and scores.fundamental > p.strong_component:
            if fundamentals.growth_score > p.excellent_component:
                reasons.append("Strong growth prospects")
            if fundamentals.quality_score > p.excellent_component:
                reasons.append("High-quality business fundamentals")
            health = fundamentals.financial_health_score
            if health is not None and health > p.excellent_component:
                reasons.append("Excellent financial health")

        if sentiment is not None and scores.sentiment is not None and scores.sentiment > p.strong_component:
            if sentiment.sentiment == NewsSentiment.POSITIVE:
                reasons.append("Positive market sentiment and news coverage")
            if sentiment.news_count > p.busy_news_count:
                reasons.append("High media attention and investor interest")

        if horizon == TimeHorizon.DAILY and analysis is not None:
            reasons.append("Short-term technical setup favorable for day trading")
        elif horizon == TimeHorizon.YEARLY and fundamentals is not None:
            reasons.append("Strong long-term fundamentals support investment thesis")

        return reasons or ["Based on comprehensive multi-factor analysis"]

    def risks(
        self,
        horizon: TimeHorizon,
        scores: ComponentScores,
        analysis: Optional[TechnicalAnalysis],
        fundamentals: Optional[FundamentalSnapshot],
        sentiment: Optional[SentimentSnapshot],
    ) -> list[str]:
        p = self.policy
        risks: list[str] = []

        if analysis is not None and scores.technical is not None and scores.technical < p.weak_component:
            rsi = analysis.indicators.rsi.current
            if analysis.signals.overall == SignalDirection.BEARISH:
                risks.append("Bearish technical trend indicates downside risk")
            if rsi is not None and rsi > 70:
                risks.append("Overbought conditions may lead to correction")

        if fundamentals is not None and scores.fundamental is not None and scores.fundamental < p.weak_component:
            if fundamentals.risk_level == RiskLevel.HIGH:
                risks.append("High financial risk due to poor fundamentals")
            if fundamentals.value_score < p.poor_value_score:
                risks.append("Stock appears overvalued based on fundamentals")

        if sentiment is not None and scores.sentiment is not None and scores.sentiment < p.weak_component:
            if sentiment.sentiment == NewsSentiment.NEGATIVE:
                risks.append("Negative sentiment may pressure stock price")

        risks.append("Market volatility and economic conditions")
        risks.append("Sector-specific risks and competition")

        if horizon == TimeHorizon.DAILY:
            risks.append("High volatility risk for short-term trading")
        elif horizon == TimeHorizon.YEARLY:
            risks.append("Long-term business and industry changes")

        return risks

    # =========================================================================
    # FULL RECOMMENDATION
    # =========================================================================

    def recommend(
        self,
        symbol: str,
        horizon: TimeHorizon,
        analysis: Optional[TechnicalAnalysis],
        fundamentals: Optional[FundamentalSnapshot] = None,
        sentiment: Optional[SentimentSnapshot] = None,
    ) -> ScoredRecommendation:
        """Score one symbol for one horizon from whatever inputs are available."""
        weights = self.weights_for(horizon)
        raw = ComponentScores(
            technical=self.technical_score(analysis, horizon) if analysis is not None else None,
            fundamental=self.fundamental_score(fundamentals, horizon) if fundamentals is not None else None,
            sentiment=self.sentiment_score(sentiment, horizon) if sentiment is not None else None,
        )

        confidence = self.score(raw, weights)
        effective_weight = self.effective_weight(raw, weights)
        if effective_weight < 1.0:
            logger.debug(f"{symbol} {horizon.value}: scored on {effective_weight:.0%} of the weight")

        current_price = analysis.current_price if analysis is not None else None
        levels = analysis.indicators.support_resistance if analysis is not None else None
        targets = self.price_targets(current_price, confidence, horizon, levels)

        return ScoredRecommendation(
            symbol=symbol,
            time_horizon=horizon,
            scores=self.resolve(raw),
            confidence=confidence,
            action=self.action_for(confidence),
            current_price=current_price,
            entry_price=targets.entry_price,
            target_price=targets.target_price,
            stop_loss=targets.stop_loss,
            expected_return=targets.expected_return,
            effective_weight=effective_weight,
            reasons=self.reasons(horizon, raw, analysis, fundamentals, sentiment),
            risks=self.risks(horizon, raw, analysis, fundamentals, sentiment),
            generated_at=datetime.now(IST),
        )


# Singleton instance
_scorer_instance: Optional[RecommendationScorer] = None


def get_recommendation_scorer() -> RecommendationScorer:
    """Get or create recommendation scorer instance."""
    global _scorer_instance
    if _scorer_instance is None:
        _scorer_instance = RecommendationScorer()
    return _scorer_instance
