"""
Technical Analysis API Endpoints

The caller posts a price series; nothing is fetched here.
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from stockadvisor.schemas.market import PriceSeries
from stockadvisor.schemas.indicators import TechnicalAnalysis
from stockadvisor.schemas.signals import TradingSignal
from stockadvisor.services.indicators import get_indicator_service
from stockadvisor.services.signals import get_signal_aggregator

logger = logging.getLogger(__name__)

router = APIRouter()


class IndicatorName(str, Enum):
    RSI = "rsi"
    SMA = "sma"
    EMA = "ema"
    MACD = "macd"
    BOLLINGER_BANDS = "bollinger_bands"
    SUPPORT_RESISTANCE = "support_resistance"
    VOLUME_ANALYSIS = "volume_analysis"
    MOMENTUM = "momentum"


@router.post("/technical", response_model=TechnicalAnalysis)
async def analyze_technical(series: PriceSeries):
    """
    Full technical analysis of a price series.

    Indicators without enough history report signal=insufficient_data;
    the rest are still calculated.
    """
    service = get_indicator_service()
    try:
        return await asyncio.to_thread(service.analyze, series)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/signals", response_model=TradingSignal)
async def get_signals(series: PriceSeries):
    """Aggregated buy/sell/hold signal from the indicator vote."""
    aggregator = get_signal_aggregator()
    try:
        return await asyncio.to_thread(
            aggregator.aggregate, series.closes, series.highs, series.lows, series.volumes
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/indicators/{name}")
async def get_single_indicator(
    name: IndicatorName,
    series: PriceSeries,
    period: Optional[int] = Query(default=None, ge=1, le=500),
    fast_period: int = Query(default=12, ge=1),
    slow_period: int = Query(default=26, ge=1),
    signal_period: int = Query(default=9, ge=1),
    std_dev: float = Query(default=2.0, gt=0),
    lookback: int = Query(default=10, ge=1),
):
    """
    Calculate one indicator.

    `period` applies to RSI (default 14), SMA/EMA (default 20), Bollinger
    Bands (default 20) and volume analysis (default 20).
    """
    service = get_indicator_service()
    closes, highs, lows, volumes = series.closes, series.highs, series.lows, series.volumes

    calculators = {
        IndicatorName.RSI: lambda: service.compute_rsi(closes, period or 14),
        IndicatorName.SMA: lambda: service.compute_sma(closes, period or 20),
        IndicatorName.EMA: lambda: service.compute_ema(closes, period or 20),
        IndicatorName.MACD: lambda: service.compute_macd(
            closes, fast_period, slow_period, signal_period
        ),
        IndicatorName.BOLLINGER_BANDS: lambda: service.compute_bollinger_bands(
            closes, period or 20, std_dev
        ),
        IndicatorName.SUPPORT_RESISTANCE: lambda: service.compute_support_resistance(
            highs, lows, closes, lookback
        ),
        IndicatorName.VOLUME_ANALYSIS: lambda: service.compute_volume_analysis(
            volumes, closes, period or 20
        ),
        IndicatorName.MOMENTUM: lambda: service.compute_momentum(closes, highs, lows),
    }

    try:
        result = await asyncio.to_thread(calculators[name])
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"indicator": name.value, "symbol": series.symbol, "result": result.model_dump(mode="json")}
