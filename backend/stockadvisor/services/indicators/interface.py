"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from typing import Optional

import numpy as np

from stockadvisor.services.base import BaseService
from stockadvisor.schemas.market import PriceSeries
from stockadvisor.schemas.indicators import (
    BollingerBandsResult,
    IndicatorResult,
    MACDResult,
    MomentumIndicators,
    SupportResistanceResult,
    TechnicalAnalysis,
    VolumeAnalysisResult,
)


class IndicatorServiceInterface(BaseService[PriceSeries, TechnicalAnalysis]):
    """
    Indicator Engine Service Contract.

    INPUT: PriceSeries
        - points: chronologically ascending OHLCV candles

    OUTPUT: TechnicalAnalysis
        - indicators: rsi, macd, moving averages, bollinger bands,
          support/resistance, volume analysis, momentum bundle
        - signals: aggregated TradingSignal

    Each compute_* method is synchronous and works on plain arrays, so it
    can be called on its own. An indicator without enough data reports
    signal=insufficient_data rather than raising.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: PriceSeries) -> TechnicalAnalysis:
        """Run the full analysis for one series."""
        pass

    @abstractmethod
    def analyze(self, series: PriceSeries, symbol: Optional[str] = None) -> TechnicalAnalysis:
        """Synchronous full analysis."""
        pass

    @abstractmethod
    def compute_rsi(self, closes: np.ndarray, period: int = 14) -> IndicatorResult:
        pass

    @abstractmethod
    def compute_sma(self, closes: np.ndarray, period: int) -> IndicatorResult:
        pass

    @abstractmethod
    def compute_ema(self, closes: np.ndarray, period: int) -> IndicatorResult:
        pass

    @abstractmethod
    def compute_macd(
        self,
        closes: np.ndarray,
        fast_period: int = 12,
        slow_period: int = 26,
        signal_period: int = 9,
    ) -> MACDResult:
        pass

    @abstractmethod
    def compute_bollinger_bands(
        self, closes: np.ndarray, period: int = 20, std_dev: float = 2.0
    ) -> BollingerBandsResult:
        pass

    @abstractmethod
    def compute_support_resistance(
        self, highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, lookback: int = 10
    ) -> SupportResistanceResult:
        pass

    @abstractmethod
    def compute_volume_analysis(
        self, volumes: np.ndarray, closes: np.ndarray, period: int = 20
    ) -> VolumeAnalysisResult:
        pass

    @abstractmethod
    def compute_momentum(
        self, closes: np.ndarray, highs: np.ndarray, lows: np.ndarray
    ) -> MomentumIndicators:
        pass
