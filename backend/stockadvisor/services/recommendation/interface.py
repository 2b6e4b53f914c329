"""
Recommendation Service Interface

Scores symbols per time horizon and picks the stock of the week/month.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Optional

from stockadvisor.services.base import BaseService
from stockadvisor.schemas.recommendation import (
    AllRecommendations,
    RecommendationBatch,
    RecommendationRequest,
    ScoredRecommendation,
    StockPick,
    TimeHorizon,
)


@dataclass
class RecommendationInput:
    """Request to score one symbol."""

    request: RecommendationRequest
    time_horizon: TimeHorizon = TimeHorizon.WEEKLY


class RecommendationServiceInterface(BaseService[RecommendationInput, ScoredRecommendation]):
    """
    Recommendation Service Contract.

    INPUT: RecommendationInput
        - request: symbol, price series, optional fundamentals/sentiment
        - time_horizon: daily | weekly | monthly | yearly

    OUTPUT: ScoredRecommendation
        - scores, confidence, action
        - entry/target/stop prices and expected return
        - reasons and risks

    PIPELINE:
        PriceSeries ──▶ Indicator Engine ──▶ TechnicalAnalysis
                                                  │
        FundamentalSnapshot, SentimentSnapshot ───┤
                                                  ▼
                                        Recommendation Scorer
                                                  │
                                                  ▼
                                         ScoredRecommendation
    """

    @property
    def name(self) -> str:
        return "RecommendationService"

    @abstractmethod
    async def execute(self, input_data: RecommendationInput) -> ScoredRecommendation:
        pass

    @abstractmethod
    def analyze_symbol(
        self, request: RecommendationRequest, horizon: TimeHorizon
    ) -> ScoredRecommendation:
        """Score a single symbol synchronously."""
        pass

    @abstractmethod
    async def generate(
        self,
        requests: list[RecommendationRequest],
        horizon: TimeHorizon,
        limit: Optional[int] = None,
    ) -> RecommendationBatch:
        """Rank a batch of symbols for one horizon."""
        pass

    @abstractmethod
    async def generate_all(
        self, requests: list[RecommendationRequest], limit: Optional[int] = None
    ) -> AllRecommendations:
        pass

    @abstractmethod
    async def stock_of_the_week(self, requests: list[RecommendationRequest]) -> StockPick:
        pass

    @abstractmethod
    async def stock_of_the_month(self, requests: list[RecommendationRequest]) -> StockPick:
        pass
