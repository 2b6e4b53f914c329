"""
Recommendation API Endpoints

Multi-timeframe recommendations for caller-supplied price series.
Suggestions only.
"""

import logging

from fastapi import APIRouter, HTTPException

from stockadvisor.core.config import settings
from stockadvisor.schemas.recommendation import (
    AllRecommendations,
    HorizonWeights,
    RecommendationBatch,
    RecommendationBatchRequest,
    RecommendationRequest,
    ScoredRecommendation,
    StockPick,
    TimeHorizon,
)
from stockadvisor.services.base import NoRecommendationError, ServiceError
from stockadvisor.services.recommendation import (
    RecommendationInput,
    get_recommendation_scorer,
    get_recommendation_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _limit(body: RecommendationBatchRequest) -> int:
    return min(body.limit or settings.default_recommendation_limit, settings.max_recommendation_limit)


@router.get("/weights", response_model=dict[TimeHorizon, HorizonWeights])
async def get_weights():
    """Component weights per time horizon."""
    return get_recommendation_scorer().weights


@router.post("/analyze/{horizon}", response_model=ScoredRecommendation)
async def analyze_symbol(horizon: TimeHorizon, request: RecommendationRequest):
    """Score one symbol for one time horizon."""
    service = get_recommendation_service()
    try:
        return await service.execute(RecommendationInput(request=request, time_horizon=horizon))
    except (ServiceError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/all", response_model=AllRecommendations)
async def get_all_recommendations(body: RecommendationBatchRequest):
    """Ranked recommendations for every time horizon."""
    return await get_recommendation_service().generate_all(body.requests, _limit(body))


@router.post("/stock-of-the-week", response_model=StockPick)
async def get_stock_of_the_week(body: RecommendationBatchRequest):
    """Single best weekly swing-trade pick."""
    try:
        return await get_recommendation_service().stock_of_the_week(body.requests)
    except NoRecommendationError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/stock-of-the-month", response_model=StockPick)
async def get_stock_of_the_month(body: RecommendationBatchRequest):
    """Single best monthly pick with strong fundamentals."""
    try:
        return await get_recommendation_service().stock_of_the_month(body.requests)
    except NoRecommendationError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/{horizon}", response_model=RecommendationBatch)
async def get_recommendations(horizon: TimeHorizon, body: RecommendationBatchRequest):
    """Ranked recommendations for one time horizon."""
    return await get_recommendation_service().generate(body.requests, horizon, _limit(body))
