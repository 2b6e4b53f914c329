"""
Indicator Engine Service

CONTRACT:
    Input:  PriceSeries (ordered OHLCV history)
    Output: TechnicalAnalysis

RESPONSIBILITIES:
    - Calculate RSI, MACD, SMA/EMA, Bollinger Bands
    - Detect support/resistance from strict pivots
    - Analyse volume (ratio, OBV, VPT) and momentum oscillators
    - Report insufficient data per indicator instead of failing

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from stockadvisor.services.indicators.interface import IndicatorServiceInterface
from stockadvisor.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
]
