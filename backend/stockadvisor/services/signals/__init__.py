"""
Signal Aggregator

CONTRACT:
    Input:  close/high/low/volume arrays, or precomputed indicator results
    Output: TradingSignal

RESPONSIBILITIES:
    - Collect bullish/bearish votes from RSI, MACD, SMA20/50, volume, Bollinger
    - Turn the vote into overall direction, strength and buy/sell/hold
    - Degrade to a neutral signal when no indicator has enough data

PURE PYTHON - deterministic, no I/O.
"""

from stockadvisor.services.signals.aggregator import SignalAggregator, get_signal_aggregator
from stockadvisor.services.signals.policy import DEFAULT_VOTING_POLICY, VotingPolicy

__all__ = [
    "SignalAggregator",
    "get_signal_aggregator",
    "VotingPolicy",
    "DEFAULT_VOTING_POLICY",
]
