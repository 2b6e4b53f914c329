"""
Voting policy for the signal aggregator.

The weights and the decision ratio are a heuristic, not a statistical
model. Changing them changes which symbols get buy/sell calls.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class VotingPolicy:
    full_vote: float = 1.0  # trend, overbought/oversold, MACD, volume
    half_vote: float = 0.5  # plain bullish/bearish lean on RSI and Bollinger
    decision_ratio: float = 0.6  # share of votes needed for a buy/sell call
    short_ma_period: int = 20
    long_ma_period: int = 50


DEFAULT_VOTING_POLICY = VotingPolicy()
