"""
Recommendation Service

CONTRACT:
    Input:  RecommendationRequest (price series + optional fundamentals/sentiment)
    Output: ScoredRecommendation per time horizon

RESPONSIBILITIES:
    - Score technical, fundamental and sentiment components
    - Weight them per horizon into a 0-100 confidence and an action
    - Derive entry, target and stop-loss prices
    - Rank batches and pick the stock of the week/month

Suggestions only. Nothing here places trades.
"""

from stockadvisor.services.recommendation.interface import (
    RecommendationInput,
    RecommendationServiceInterface,
)
from stockadvisor.services.recommendation.policy import (
    DEFAULT_SCORING_POLICY,
    HORIZON_WEIGHTS,
    ScoringPolicy,
)
from stockadvisor.services.recommendation.scorer import (
    RecommendationScorer,
    get_recommendation_scorer,
)
from stockadvisor.services.recommendation.service import (
    RecommendationService,
    get_recommendation_service,
)

__all__ = [
    "RecommendationInput",
    "RecommendationServiceInterface",
    "RecommendationScorer",
    "get_recommendation_scorer",
    "RecommendationService",
    "get_recommendation_service",
    "ScoringPolicy",
    "DEFAULT_SCORING_POLICY",
    "HORIZON_WEIGHTS",
]
