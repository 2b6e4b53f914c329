"""Pytest configuration and shared fixtures."""

import math
from datetime import datetime, timedelta
from typing import Optional

import pytest

from stockadvisor.schemas.indicators import (
    BollingerBandsResult,
    IndicatorResult,
    IndicatorSignal,
    MACDResult,
    MomentumIndicators,
    MovingAverages,
    SupportResistanceResult,
    TechnicalAnalysis,
    TechnicalIndicators,
    VolumeAnalysisResult,
)
from stockadvisor.schemas.market import PricePoint, PriceSeries
from stockadvisor.schemas.signals import SignalDirection, TradingSignal

START = datetime(2024, 1, 1, 9, 15)
INSUFFICIENT = IndicatorSignal.INSUFFICIENT_DATA


def build_series(
    closes: list[float],
    volumes: Optional[list[int]] = None,
    spread: float = 1.0,
    symbol: str = "TEST",
) -> PriceSeries:
    """Daily candles around each close, high/low one spread away."""
    volumes = volumes or [100_000] * len(closes)
    points = [
        PricePoint(
            date=START + timedelta(days=i),
            open=close,
            high=close + spread,
            low=close - spread,
            close=close,
            volume=volume,
        )
        for i, (close, volume) in enumerate(zip(closes, volumes))
    ]
    return PriceSeries(symbol=symbol, points=points)


def _line(current: Optional[float], period: int) -> IndicatorResult:
    if current is None:
        return IndicatorResult(signal=INSUFFICIENT, period=period)
    return IndicatorResult(current=current, signal=IndicatorSignal.NEUTRAL, period=period)


def build_analysis(
    rsi: Optional[float] = None,
    macd: Optional[tuple[float, float]] = None,
    sma20: Optional[float] = None,
    sma50: Optional[float] = None,
    overall: SignalDirection = SignalDirection.NEUTRAL,
    volume_ratio: Optional[float] = None,
    support: Optional[list[float]] = None,
    current_price: float = 100.0,
    symbol: str = "TEST",
) -> TechnicalAnalysis:
    """A TechnicalAnalysis with only the readings the scorer looks at."""
    if macd is None:
        macd_result = MACDResult(signal=INSUFFICIENT)
    else:
        macd_result = MACDResult(
            macd_line=macd[0],
            signal_line=macd[1],
            histogram=round(macd[0] - macd[1], 4),
            signal=IndicatorSignal.NEUTRAL,
        )

    if volume_ratio is None:
        volume = VolumeAnalysisResult(signal=INSUFFICIENT)
    else:
        volume = VolumeAnalysisResult(volume_ratio=volume_ratio, signal=IndicatorSignal.NEUTRAL)

    return TechnicalAnalysis(
        symbol=symbol,
        data_points=60,
        current_price=current_price,
        last_updated=START,
        indicators=TechnicalIndicators(
            rsi=_line(rsi, 14),
            macd=macd_result,
            moving_averages=MovingAverages(
                sma20=_line(sma20, 20),
                sma50=_line(sma50, 50),
                sma200=_line(None, 200),
                ema12=_line(None, 12),
                ema26=_line(None, 26),
            ),
            bollinger_bands=BollingerBandsResult(signal=INSUFFICIENT),
            support_resistance=SupportResistanceResult(
                support=support or [], signal=IndicatorSignal.NEUTRAL
            ),
            volume_analysis=volume,
            momentum=MomentumIndicators(),
        ),
        signals=TradingSignal(overall=overall),
    )


@pytest.fixture
def series_factory():
    """Build a PriceSeries from a list of closes."""
    return build_series


@pytest.fixture
def analysis_factory():
    """Build a hand-made TechnicalAnalysis."""
    return build_analysis


@pytest.fixture
def rising_series() -> PriceSeries:
    """60 strictly rising closes."""
    return build_series([100.0 + i for i in range(60)], symbol="RISING")


@pytest.fixture
def falling_series() -> PriceSeries:
    """60 strictly falling closes."""
    return build_series([200.0 - i for i in range(60)], symbol="FALLING")


@pytest.fixture
def wave_series() -> PriceSeries:
    """120 closes oscillating around a gentle uptrend."""
    closes = [100.0 + 10 * math.sin(i / 5) + 0.2 * i for i in range(120)]
    volumes = [100_000 + 5_000 * (i % 7) for i in range(120)]
    return build_series(closes, volumes, symbol="WAVE")


@pytest.fixture
def short_series() -> PriceSeries:
    """Too short for every indicator that feeds the signal vote."""
    return build_series([100.0 + i for i in range(10)], symbol="SHORT")
