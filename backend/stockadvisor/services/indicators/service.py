"""
Indicator Engine Service Implementation

Calculates all technical indicators from a price series.
Pure Python/NumPy calculations over the full history, so both the current
reading and the historical series are available for charting.
"""

import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

import numpy as np

from stockadvisor.core.config import settings
from stockadvisor.schemas.market import PriceSeries
from stockadvisor.schemas.indicators import (
    BollingerBandsResult,
    BollingerValues,
    IndicatorResult,
    IndicatorSignal,
    MACDResult,
    MACDValues,
    MomentumIndicators,
    MovingAverages,
    OscillatorResult,
    PivotPoint,
    StochasticResult,
    SupportResistanceResult,
    TechnicalAnalysis,
    TechnicalIndicators,
    VolumeAnalysisResult,
    VolumeTrend,
)
from stockadvisor.services.indicators.interface import IndicatorServiceInterface
from stockadvisor.services.indicators.outcome import InsufficientData
from stockadvisor.services.indicators.thresholds import DEFAULT_THRESHOLDS, IndicatorThresholds
from stockadvisor.services.indicators.calculations import (
    sma,
    ema,
    rsi,
    macd,
    bollinger_bands,
    find_support_resistance,
    volume_profile,
    rate_of_change,
    stochastic,
    williams_r,
    cci,
    round_price,
    round_macd,
    round_series,
)
from stockadvisor.services.signals import get_signal_aggregator

logger = logging.getLogger(__name__)
IST = ZoneInfo("Asia/Kolkata")

INSUFFICIENT = IndicatorSignal.INSUFFICIENT_DATA


def _as_array(data) -> np.ndarray:
    return np.asarray(data, dtype=float)


def _trend_signal(price: float, average: float) -> IndicatorSignal:
    """Bullish/bearish by comparing the last price to a moving average."""
    if price > average:
        return IndicatorSignal.BULLISH
    if price < average:
        return IndicatorSignal.BEARISH
    return IndicatorSignal.NEUTRAL


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Stateless: every method is a deterministic function of its inputs, so a
    single instance can be shared across concurrent analyses.
    """

    def __init__(self, thresholds: IndicatorThresholds = DEFAULT_THRESHOLDS):
        self.thresholds = thresholds

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: PriceSeries) -> TechnicalAnalysis:
        """Calculate the full indicator set for one series."""
        return self.analyze(input_data)

    def analyze(self, series: PriceSeries, symbol: Optional[str] = None) -> TechnicalAnalysis:
        """Calculate all indicators and the aggregated signal for a series."""
        symbol = symbol or series.symbol
        if len(series) < settings.min_analysis_points:
            logger.warning(
                f"{symbol or 'series'}: {len(series)} points is below the recommended "
                f"{settings.min_analysis_points}; some indicators will report insufficient data"
            )

        closes, highs, lows, volumes = series.closes, series.highs, series.lows, series.volumes

        rsi_result = self.compute_rsi(closes)
        macd_result = self.compute_macd(closes)
        moving_averages = MovingAverages(
            sma20=self.compute_sma(closes, 20),
            sma50=self.compute_sma(closes, 50),
            sma200=self.compute_sma(closes, 200),
            ema12=self.compute_ema(closes, 12),
            ema26=self.compute_ema(closes, 26),
        )
        bollinger = self.compute_bollinger_bands(closes)
        volume = self.compute_volume_analysis(volumes, closes)

        signals = get_signal_aggregator().aggregate_indicators(
            rsi=rsi_result,
            macd=macd_result,
            sma_short=moving_averages.sma20,
            sma_long=moving_averages.sma50,
            volume=volume,
            bollinger=bollinger,
        )

        return TechnicalAnalysis(
            symbol=symbol,
            data_points=len(series),
            current_price=series.current_price,
            last_updated=datetime.now(IST),
            indicators=TechnicalIndicators(
                rsi=rsi_result,
                macd=macd_result,
                moving_averages=moving_averages,
                bollinger_bands=bollinger,
                support_resistance=self.compute_support_resistance(highs, lows, closes),
                volume_analysis=volume,
                momentum=self.compute_momentum(closes, highs, lows),
            ),
            signals=signals,
        )

    # =========================================================================
    # SINGLE INDICATORS
    # =========================================================================

    def compute_rsi(self, closes: np.ndarray, period: int = 14) -> IndicatorResult:
        outcome = rsi(_as_array(closes), period)
        if isinstance(outcome, InsufficientData):
            logger.debug(str(outcome))
            return IndicatorResult(signal=INSUFFICIENT, period=period)

        current = float(outcome.value[-1])
        t = self.thresholds
        if current > t.rsi_overbought:
            signal = IndicatorSignal.OVERBOUGHT
        elif current < t.rsi_oversold:
            signal = IndicatorSignal.OVERSOLD
        elif current > t.rsi_midline:
            signal = IndicatorSignal.BULLISH
        else:
            signal = IndicatorSignal.BEARISH

        return IndicatorResult(
            current=round_price(current),
            signal=signal,
            period=period,
            values=round_series(outcome.value),
        )

    def compute_sma(self, closes: np.ndarray, period: int) -> IndicatorResult:
        return self._moving_average(_as_array(closes), period, sma)

    def compute_ema(self, closes: np.ndarray, period: int) -> IndicatorResult:
        return self._moving_average(_as_array(closes), period, ema)

    def _moving_average(self, closes: np.ndarray, period: int, func) -> IndicatorResult:
        outcome = func(closes, period)
        if isinstance(outcome, InsufficientData):
            logger.debug(str(outcome))
            return IndicatorResult(signal=INSUFFICIENT, period=period)

        current = float(outcome.value[-1])
        return IndicatorResult(
            current=round_price(current),
            signal=_trend_signal(float(closes[-1]), current),
            period=period,
            values=round_series(outcome.value),
        )

    def compute_macd(
        self,
        closes: np.ndarray,
        fast_period: int = 12,
        slow_period: int = 26,
        signal_period: int = 9,
    ) -> MACDResult:
        periods = dict(fast_period=fast_period, slow_period=slow_period, signal_period=signal_period)
        outcome = macd(_as_array(closes), fast_period, slow_period, signal_period)
        if isinstance(outcome, InsufficientData):
            logger.debug(str(outcome))
            return MACDResult(signal=INSUFFICIENT, **periods)

        series = outcome.value
        macd_now = float(series.macd_line[-1])
        signal_now = float(series.signal_line[-1])
        hist_now = float(series.histogram[-1])

        if macd_now > signal_now and hist_now > 0:
            signal = IndicatorSignal.BULLISH
        elif macd_now < signal_now and hist_now < 0:
            signal = IndicatorSignal.BEARISH
        else:
            signal = IndicatorSignal.NEUTRAL

        # Histogram from the rounded lines, so it equals macd - signal to 4 decimals
        macd_values = round_series(series.macd_line, 4)
        signal_values = round_series(series.signal_line, 4)
        offset = len(macd_values) - len(signal_values)
        histogram_values = [
            round_macd(m - s) for m, s in zip(macd_values[offset:], signal_values)
        ]

        return MACDResult(
            macd_line=macd_values[-1],
            signal_line=signal_values[-1],
            histogram=histogram_values[-1],
            signal=signal,
            values=MACDValues(
                macd=macd_values, signal=signal_values, histogram=histogram_values
            ),
            **periods,
        )

    def compute_bollinger_bands(
        self, closes: np.ndarray, period: int = 20, std_dev: float = 2.0
    ) -> BollingerBandsResult:
        closes = _as_array(closes)
        outcome = bollinger_bands(closes, period, std_dev)
        if isinstance(outcome, InsufficientData):
            logger.debug(str(outcome))
            return BollingerBandsResult(signal=INSUFFICIENT, period=period, std_dev=std_dev)

        bands = outcome.value
        price = float(closes[-1])
        upper, middle, lower = float(bands.upper[-1]), float(bands.middle[-1]), float(bands.lower[-1])

        if price >= upper:
            signal = IndicatorSignal.OVERBOUGHT
        elif price <= lower:
            signal = IndicatorSignal.OVERSOLD
        elif price > middle:
            signal = IndicatorSignal.BULLISH
        else:
            signal = IndicatorSignal.BEARISH

        return BollingerBandsResult(
            upper_band=round_price(upper),
            middle_band=round_price(middle),
            lower_band=round_price(lower),
            signal=signal,
            period=period,
            std_dev=std_dev,
            values=BollingerValues(
                upper=round_series(bands.upper),
                middle=round_series(bands.middle),
                lower=round_series(bands.lower),
            ),
        )

    def compute_support_resistance(
        self, highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, lookback: int = 10
    ) -> SupportResistanceResult:
        t = self.thresholds
        outcome = find_support_resistance(_as_array(highs), _as_array(lows), lookback, t.max_levels)
        if isinstance(outcome, InsufficientData):
            logger.debug(str(outcome))
            return SupportResistanceResult(signal=INSUFFICIENT, lookback=lookback)

        levels = outcome.value
        price = float(_as_array(closes)[-1])

        if levels.resistance and price >= levels.resistance[0] * t.resistance_proximity:
            signal = IndicatorSignal.NEAR_RESISTANCE
        elif levels.support and price <= levels.support[0] * t.support_proximity:
            signal = IndicatorSignal.NEAR_SUPPORT
        else:
            signal = IndicatorSignal.NEUTRAL

        def to_points(pivots):
            return [
                PivotPoint(index=p.index, price=round_price(p.price))
                for p in pivots[-t.max_reported_pivots:]
            ]

        return SupportResistanceResult(
            support=[round_price(level) for level in levels.support],
            resistance=[round_price(level) for level in levels.resistance],
            signal=signal,
            lookback=lookback,
            pivot_highs=to_points(levels.pivot_highs),
            pivot_lows=to_points(levels.pivot_lows),
        )

    def compute_volume_analysis(
        self, volumes: np.ndarray, closes: np.ndarray, period: int = 20
    ) -> VolumeAnalysisResult:
        outcome = volume_profile(_as_array(volumes), _as_array(closes), period)
        if isinstance(outcome, InsufficientData):
            logger.debug(str(outcome))
            return VolumeAnalysisResult(signal=INSUFFICIENT, period=period)

        profile = outcome.value
        t = self.thresholds
        obv = profile.on_balance_volume
        window = min(t.obv_trend_window, len(obv))
        rising = obv[-1] > obv[-window]
        trend = VolumeTrend.INCREASING if rising else VolumeTrend.DECREASING

        ratio = profile.volume_ratio
        if ratio > t.volume_strong_ratio:
            signal = IndicatorSignal.STRONG_BULLISH if rising else IndicatorSignal.STRONG_BEARISH
        elif ratio > t.volume_moderate_ratio:
            signal = IndicatorSignal.BULLISH if rising else IndicatorSignal.BEARISH
        else:
            signal = IndicatorSignal.NEUTRAL

        return VolumeAnalysisResult(
            average_volume=round(profile.average_volume),
            current_volume=round(profile.current_volume),
            volume_ratio=round_price(ratio),
            volume_trend=trend,
            on_balance_volume=round(float(obv[-1])),
            volume_price_trend=round_price(profile.volume_price_trend[-1]),
            signal=signal,
            period=period,
        )

    def compute_momentum(
        self, closes: np.ndarray, highs: np.ndarray, lows: np.ndarray
    ) -> MomentumIndicators:
        """ROC, Stochastic, Williams %R and CCI, each gated on its own window."""
        closes, highs, lows = _as_array(closes), _as_array(highs), _as_array(lows)
        t = self.thresholds
        momentum = {}

        roc = rate_of_change(closes, 12)
        if not isinstance(roc, InsufficientData):
            momentum["rate_of_change"] = round_price(roc.value)

        stoch = stochastic(highs, lows, closes, 14, 3)
        if not isinstance(stoch, InsufficientData):
            k, d = float(stoch.value.k[-1]), float(stoch.value.d[-1])
            if k > t.stochastic_overbought and d > t.stochastic_overbought:
                signal = IndicatorSignal.OVERBOUGHT
            elif k < t.stochastic_oversold and d < t.stochastic_oversold:
                signal = IndicatorSignal.OVERSOLD
            elif k > d:
                signal = IndicatorSignal.BULLISH
            else:
                signal = IndicatorSignal.BEARISH
            momentum["stochastic"] = StochasticResult(
                k=round_price(k), d=round_price(d), signal=signal, k_period=14, d_period=3
            )

        wr = williams_r(highs, lows, closes, 14)
        if not isinstance(wr, InsufficientData):
            current = float(wr.value[-1])
            if current <= t.williams_oversold:
                signal = IndicatorSignal.OVERSOLD
            elif current >= t.williams_overbought:
                signal = IndicatorSignal.OVERBOUGHT
            elif current > t.williams_midline:
                signal = IndicatorSignal.BULLISH
            else:
                signal = IndicatorSignal.BEARISH
            momentum["williams_r"] = OscillatorResult(
                current=round_price(current), signal=signal, period=14
            )

        cci_outcome = cci(highs, lows, closes, 20)
        if not isinstance(cci_outcome, InsufficientData):
            current = float(cci_outcome.value[-1])
            if current > t.cci_overbought:
                signal = IndicatorSignal.OVERBOUGHT
            elif current < t.cci_oversold:
                signal = IndicatorSignal.OVERSOLD
            elif current > 0:
                signal = IndicatorSignal.BULLISH
            else:
                signal = IndicatorSignal.BEARISH
            momentum["cci"] = OscillatorResult(
                current=round_price(current), signal=signal, period=20
            )

        return MomentumIndicators(**momentum)


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
