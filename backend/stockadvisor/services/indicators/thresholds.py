"""
Indicator signal thresholds.

Heuristic cut-offs used to turn indicator readings into signals. They are
kept together here so they can be tuned and tested in one place.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class IndicatorThresholds:
    # RSI
    rsi_overbought: float = 70.0
    rsi_oversold: float = 30.0
    rsi_midline: float = 50.0

    # Support/resistance proximity, as a fraction of the level
    resistance_proximity: float = 0.98
    support_proximity: float = 1.02
    max_levels: int = 5
    max_reported_pivots: int = 10

    # Volume
    volume_strong_ratio: float = 1.5
    volume_moderate_ratio: float = 1.2
    obv_trend_window: int = 5

    # Stochastic
    stochastic_overbought: float = 80.0
    stochastic_oversold: float = 20.0

    # Williams %R
    williams_overbought: float = -20.0
    williams_oversold: float = -80.0
    williams_midline: float = -50.0

    # CCI
    cci_overbought: float = 100.0
    cci_oversold: float = -100.0


DEFAULT_THRESHOLDS = IndicatorThresholds()
