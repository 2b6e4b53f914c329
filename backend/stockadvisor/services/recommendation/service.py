"""
Recommendation Service Implementation

Runs the pipeline for each symbol:
    PriceSeries → Indicator Engine → Recommendation Scorer

and ranks the results per time horizon. Each symbol is scored in a worker
thread; the engine itself holds no state, so no locking is needed.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from stockadvisor.core.config import settings
from stockadvisor.schemas.recommendation import (
    AllRecommendations,
    RecommendationBatch,
    RecommendationRequest,
    ScoredRecommendation,
    StockPick,
    TimeHorizon,
    TradingStrategy,
)
from stockadvisor.services.base import NoRecommendationError, ValidationError
from stockadvisor.services.indicators import get_indicator_service
from stockadvisor.services.recommendation.interface import (
    RecommendationInput,
    RecommendationServiceInterface,
)
from stockadvisor.services.recommendation.policy import HOLDING_PERIODS
from stockadvisor.services.recommendation.scorer import get_recommendation_scorer

logger = logging.getLogger(__name__)
IST = ZoneInfo("Asia/Kolkata")


class RecommendationService(RecommendationServiceInterface):
    """
    Recommendation Service.

    Failures on individual symbols are logged and dropped from a batch so
    one bad series never sinks the whole list.
    """

    def __init__(self, indicator_service=None, scorer=None):
        self._indicator_service = indicator_service
        self._scorer = scorer

    @property
    def indicator_service(self):
        """Lazy load indicator service."""
        if self._indicator_service is None:
            self._indicator_service = get_indicator_service()
        return self._indicator_service

    @property
    def scorer(self):
        """Lazy load recommendation scorer."""
        if self._scorer is None:
            self._scorer = get_recommendation_scorer()
        return self._scorer

    async def execute(self, input_data: RecommendationInput) -> ScoredRecommendation:
        return await asyncio.to_thread(
            self.analyze_symbol, input_data.request, input_data.time_horizon
        )

    def analyze_symbol(
        self, request: RecommendationRequest, horizon: TimeHorizon
    ) -> ScoredRecommendation:
        if len(request.series) > settings.max_series_points:
            raise ValidationError(
                self.name,
                f"Series for {request.symbol} has {len(request.series)} points, "
                f"limit is {settings.max_series_points}",
                {"symbol": request.symbol, "points": len(request.series)},
            )

        analysis = self.indicator_service.analyze(request.series, symbol=request.symbol)
        return self.scorer.recommend(
            symbol=request.symbol,
            horizon=horizon,
            analysis=analysis,
            fundamentals=request.fundamentals,
            sentiment=request.sentiment,
        )

    # =========================================================================
    # BATCHES
    # =========================================================================

    async def generate(
        self,
        requests: list[RecommendationRequest],
        horizon: TimeHorizon,
        limit: Optional[int] = None,
    ) -> RecommendationBatch:
        """
        Score every symbol, drop low-confidence results and rank the rest.

        Args:
            requests: One entry per symbol
            horizon: Time horizon to score for
            limit: Maximum recommendations returned (default from settings)
        """
        limit = limit or settings.default_recommendation_limit
        logger.info(f"Generating {horizon.value} recommendations for {len(requests)} symbols")

        results = await asyncio.gather(
            *(asyncio.to_thread(self.analyze_symbol, request, horizon) for request in requests),
            return_exceptions=True,
        )

        min_confidence = self.scorer.policy.min_confidence
        qualified: list[ScoredRecommendation] = []
        for request, result in zip(requests, results):
            if isinstance(result, Exception):
                logger.warning(
                    f"Failed to analyze {request.symbol} for {horizon.value} recommendations: {result}"
                )
                continue
            if isinstance(result, BaseException):
                raise result
            if result.confidence >= min_confidence:
                qualified.append(result)

        qualified.sort(key=lambda rec: rec.confidence, reverse=True)

        return RecommendationBatch(
            time_horizon=horizon,
            period=HOLDING_PERIODS[horizon],
            recommendations=qualified[:limit],
            total_analyzed=len(requests),
            successful_analyses=len(qualified),
            generated_at=datetime.now(IST),
        )

    async def generate_all(
        self, requests: list[RecommendationRequest], limit: Optional[int] = None
    ) -> AllRecommendations:
        """Batches for every horizon. A failing horizon is reported in errors."""
        batches: dict[str, RecommendationBatch] = {}
        errors: dict[str, str] = {}

        for horizon in TimeHorizon:
            try:
                batches[horizon.value] = await self.generate(requests, horizon, limit)
            except Exception as e:
                logger.error(f"Error generating {horizon.value} recommendations: {e}")
                errors[horizon.value] = str(e)

        return AllRecommendations(**batches, errors=errors, generated_at=datetime.now(IST))

    # =========================================================================
    # STOCK PICKS
    # =========================================================================

    async def stock_of_the_week(self, requests: list[RecommendationRequest]) -> StockPick:
        """Highest-confidence buy for a one-week swing trade."""
        logger.info("Generating stock of the week prediction")
        batch = await self.generate(requests, TimeHorizon.WEEKLY, limit=max(len(requests), 1))

        candidates = [rec for rec in batch.recommendations if rec.action.is_buy]
        if not candidates:
            raise NoRecommendationError(
                self.name,
                "No suitable weekly pick found",
                {"total_analyzed": batch.total_analyzed},
            )

        top_pick = max(candidates, key=lambda rec: rec.confidence)
        return self._build_pick(
            top_pick,
            batch,
            prediction_type="stock_of_the_week",
            valid_days=self.scorer.policy.week_pick_days,
            selection_criteria="Highest confidence swing trading opportunity",
        )

    async def stock_of_the_month(self, requests: list[RecommendationRequest]) -> StockPick:
        """Best balance of confidence and fundamentals for a one-month hold."""
        logger.info("Generating stock of the month prediction")
        policy = self.scorer.policy
        batch = await self.generate(requests, TimeHorizon.MONTHLY, limit=max(len(requests), 1))

        candidates = [
            rec
            for rec in batch.recommendations
            if rec.action.is_buy and rec.scores.fundamental >= policy.month_pick_min_fundamental
        ]
        if not candidates:
            raise NoRecommendationError(
                self.name,
                "No suitable monthly pick found",
                {"total_analyzed": batch.total_analyzed},
            )

        top_pick = max(
            candidates,
            key=lambda rec: (
                rec.confidence * policy.month_pick_confidence_weight
                + rec.scores.fundamental * policy.month_pick_fundamental_weight
            ),
        )
        return self._build_pick(
            top_pick,
            batch,
            prediction_type="stock_of_the_month",
            valid_days=policy.month_pick_days,
            selection_criteria="Best balanced opportunity with strong fundamentals",
        )

    def _build_pick(
        self,
        recommendation: ScoredRecommendation,
        batch: RecommendationBatch,
        prediction_type: str,
        valid_days: int,
        selection_criteria: str,
    ) -> StockPick:
        valid_from = datetime.now(IST)
        return StockPick(
            recommendation=recommendation,
            prediction_type=prediction_type,
            valid_from=valid_from,
            valid_until=valid_from + timedelta(days=valid_days),
            key_highlights=self._key_highlights(recommendation),
            trading_strategy=self._trading_strategy(recommendation),
            total_analyzed=batch.total_analyzed,
            selection_criteria=selection_criteria,
        )

    def _key_highlights(self, rec: ScoredRecommendation) -> list[str]:
        scores = rec.scores
        highlights = []

        if scores.technical > 70:
            highlights.append(f"Strong technical setup with {scores.technical:.0f}% technical score")
        if scores.fundamental > 70:
            highlights.append(f"Solid fundamentals with {scores.fundamental:.0f}% fundamental score")
        if scores.sentiment > 65:
            highlights.append(f"Positive market sentiment with {scores.sentiment:.0f}% sentiment score")

        if rec.target_price and rec.current_price:
            upside = (rec.target_price - rec.current_price) / rec.current_price * 100
            highlights.append(f"{upside:.1f}% upside potential to target price of ₹{rec.target_price}")

        if rec.time_horizon == TimeHorizon.WEEKLY:
            highlights.append("Ideal for swing trading with 1-week holding period")
        elif rec.time_horizon == TimeHorizon.MONTHLY:
            highlights.append("Balanced opportunity for medium-term investment")

        return highlights[: self.scorer.policy.max_highlights]

    def _trading_strategy(self, rec: ScoredRecommendation) -> TradingStrategy:
        strategy = TradingStrategy()

        if rec.entry_price and rec.current_price:
            if rec.entry_price < rec.current_price:
                strategy.entry_strategy = f"Wait for pullback to ₹{rec.entry_price} for optimal entry"
            else:
                strategy.entry_strategy = (
                    f"Current price ₹{rec.current_price} offers good entry opportunity"
                )

        if rec.target_price and rec.stop_loss:
            strategy.exit_strategy = f"Target: ₹{rec.target_price}, Stop Loss: ₹{rec.stop_loss}"

        if rec.stop_loss and rec.current_price:
            risk_percent = (rec.current_price - rec.stop_loss) / rec.current_price * 100
            strategy.risk_management = f"Risk {risk_percent:.1f}% with stop loss at ₹{rec.stop_loss}"

        if rec.time_horizon == TimeHorizon.WEEKLY:
            strategy.position_sizing = "Moderate position size suitable for swing trading"
        elif rec.time_horizon == TimeHorizon.MONTHLY:
            strategy.position_sizing = "Standard position size for medium-term holding"

        return strategy


# Singleton instance
_service_instance: Optional[RecommendationService] = None


def get_recommendation_service() -> RecommendationService:
    """Get or create recommendation service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = RecommendationService()
    return _service_instance
