"""
StockAdvisor Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from stockadvisor.schemas.market import (
    Exchange,
    NewsSentiment,
    PricePoint,
    PriceSeries,
)
from stockadvisor.schemas.indicators import (
    IndicatorSignal,
    IndicatorResult,
    MACDResult,
    BollingerBandsResult,
    SupportResistanceResult,
    VolumeAnalysisResult,
    MomentumIndicators,
    TechnicalAnalysis,
)
from stockadvisor.schemas.signals import (
    SignalDirection,
    TradeRecommendation,
    TradingSignal,
)
from stockadvisor.schemas.recommendation import (
    TimeHorizon,
    RecommendationAction,
    HorizonWeights,
    ComponentScores,
    RecommendationRequest,
    ScoredRecommendation,
    RecommendationBatch,
    StockPick,
)

__all__ = [
    # Market
    "Exchange",
    "NewsSentiment",
    "PricePoint",
    "PriceSeries",
    # Indicators
    "IndicatorSignal",
    "IndicatorResult",
    "MACDResult",
    "BollingerBandsResult",
    "SupportResistanceResult",
    "VolumeAnalysisResult",
    "MomentumIndicators",
    "TechnicalAnalysis",
    # Signals
    "SignalDirection",
    "TradeRecommendation",
    "TradingSignal",
    # Recommendation
    "TimeHorizon",
    "RecommendationAction",
    "HorizonWeights",
    "ComponentScores",
    "RecommendationRequest",
    "ScoredRecommendation",
    "RecommendationBatch",
    "StockPick",
]
