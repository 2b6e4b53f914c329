"""
Signal Aggregator Implementation

Reduces RSI, MACD, SMA20/50, volume analysis and Bollinger Bands to one
overall trading signal through a fixed-weight vote.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from stockadvisor.schemas.indicators import (
    BollingerBandsResult,
    IndicatorResult,
    IndicatorSignal,
    MACDResult,
    VolumeAnalysisResult,
)
from stockadvisor.schemas.signals import (
    SignalComponents,
    SignalDirection,
    TradeRecommendation,
    TradingSignal,
)
from stockadvisor.services.signals.policy import DEFAULT_VOTING_POLICY, VotingPolicy

logger = logging.getLogger(__name__)


@dataclass
class _Tally:
    bullish: float = 0.0
    bearish: float = 0.0
    total: int = 0

    def add(self, bullish: float = 0.0, bearish: float = 0.0) -> None:
        self.bullish += bullish
        self.bearish += bearish
        self.total += 1


def _direction(bullish: float, bearish: float) -> SignalDirection:
    if bullish > bearish:
        return SignalDirection.BULLISH
    if bearish > bullish:
        return SignalDirection.BEARISH
    return SignalDirection.NEUTRAL


class SignalAggregator:
    """
    Weighted voting over indicator signals.

    Each indicator with enough data casts at most one vote. Overbought and
    oversold readings, MACD direction, the SMA cross and volume signals are
    full votes; a plain bullish/bearish lean on RSI or Bollinger is a half
    vote.
    """

    def __init__(self, policy: VotingPolicy = DEFAULT_VOTING_POLICY, indicator_service=None):
        self.policy = policy
        self._indicator_service = indicator_service

    @property
    def indicator_service(self):
        """Lazy load indicator service."""
        if self._indicator_service is None:
            from stockadvisor.services.indicators import get_indicator_service

            self._indicator_service = get_indicator_service()
        return self._indicator_service

    def aggregate(
        self,
        closes: np.ndarray,
        highs: Optional[np.ndarray] = None,
        lows: Optional[np.ndarray] = None,
        volumes: Optional[np.ndarray] = None,
    ) -> TradingSignal:
        """Compute the voting indicators from raw arrays, then aggregate them."""
        closes = np.asarray(closes, dtype=float)
        service = self.indicator_service

        if volumes is None:
            volume = VolumeAnalysisResult(signal=IndicatorSignal.INSUFFICIENT_DATA)
        else:
            volume = service.compute_volume_analysis(np.asarray(volumes, dtype=float), closes)

        return self.aggregate_indicators(
            rsi=service.compute_rsi(closes),
            macd=service.compute_macd(closes),
            sma_short=service.compute_sma(closes, self.policy.short_ma_period),
            sma_long=service.compute_sma(closes, self.policy.long_ma_period),
            volume=volume,
            bollinger=service.compute_bollinger_bands(closes),
        )

    def aggregate_indicators(
        self,
        rsi: IndicatorResult,
        macd: MACDResult,
        sma_short: IndicatorResult,
        sma_long: IndicatorResult,
        volume: VolumeAnalysisResult,
        bollinger: BollingerBandsResult,
    ) -> TradingSignal:
        """Aggregate precomputed indicator results."""
        full = self.policy.full_vote
        tally = _Tally()
        momentum = _Tally()
        components = {}

        # RSI
        if rsi.current is not None:
            bull, bear = self._banded_vote(rsi.signal)
            tally.add(bull, bear)
            momentum.add(bull, bear)

        # MACD
        if macd.macd_line is not None:
            bull = full if macd.signal == IndicatorSignal.BULLISH else 0.0
            bear = full if macd.signal == IndicatorSignal.BEARISH else 0.0
            tally.add(bull, bear)
            momentum.add(bull, bear)

        if momentum.total:
            components["momentum"] = _direction(momentum.bullish, momentum.bearish)

        # Moving average cross
        if sma_short.current is not None and sma_long.current is not None:
            if sma_short.current > sma_long.current:
                tally.add(bullish=full)
                components["trend"] = SignalDirection.BULLISH
            else:
                tally.add(bearish=full)
                components["trend"] = SignalDirection.BEARISH

        # Volume
        if volume.sufficient:
            bull = full if "bullish" in volume.signal.value else 0.0
            bear = full if "bearish" in volume.signal.value else 0.0
            tally.add(bull, bear)
            components["volume"] = _direction(bull, bear)

        # Bollinger Bands
        if bollinger.sufficient:
            bull, bear = self._banded_vote(bollinger.signal)
            tally.add(bull, bear)
            components["volatility"] = _direction(bull, bear)

        if tally.total == 0:
            logger.debug("No indicator had enough data; returning neutral signal")
            return TradingSignal()

        bullish_ratio = tally.bullish / tally.total
        bearish_ratio = tally.bearish / tally.total

        if bullish_ratio > self.policy.decision_ratio:
            overall, recommendation = SignalDirection.BULLISH, TradeRecommendation.BUY
        elif bearish_ratio > self.policy.decision_ratio:
            overall, recommendation = SignalDirection.BEARISH, TradeRecommendation.SELL
        else:
            overall, recommendation = SignalDirection.NEUTRAL, TradeRecommendation.HOLD

        return TradingSignal(
            overall=overall,
            strength=round(abs(bullish_ratio - bearish_ratio) * 100),
            components=SignalComponents(**components),
            recommendation=recommendation,
            total_signals=tally.total,
            bullish_signals=tally.bullish,
            bearish_signals=tally.bearish,
        )

    def _banded_vote(self, signal: IndicatorSignal) -> tuple[float, float]:
        """Votes for indicators with overbought/oversold bands (RSI, Bollinger)."""
        full, half = self.policy.full_vote, self.policy.half_vote
        if signal == IndicatorSignal.OVERSOLD:
            return full, 0.0
        if signal == IndicatorSignal.OVERBOUGHT:
            return 0.0, full
        if signal == IndicatorSignal.BULLISH:
            return half, 0.0
        if signal == IndicatorSignal.BEARISH:
            return 0.0, half
        return 0.0, 0.0


# Singleton instance
_aggregator_instance: Optional[SignalAggregator] = None


def get_signal_aggregator() -> SignalAggregator:
    """Get or create signal aggregator instance."""
    global _aggregator_instance
    if _aggregator_instance is None:
        _aggregator_instance = SignalAggregator()
    return _aggregator_instance
