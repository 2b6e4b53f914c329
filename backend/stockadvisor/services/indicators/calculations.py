"""
Technical Indicator Calculations

Pure NumPy implementations of technical indicators.
All math is deterministic; nothing here reads or mutates shared state.

Series returned by these functions are compact: they start at the first
bar where the indicator is defined and end at the most recent bar, so any
two series can be aligned on their last element.
"""

from dataclasses import dataclass

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from stockadvisor.services.indicators.outcome import InsufficientData, Ok, Outcome

RSI_LOSS_FLOOR = 0.0001
CCI_CONSTANT = 0.015


@dataclass(frozen=True)
class MACDSeries:
    macd_line: np.ndarray
    signal_line: np.ndarray
    histogram: np.ndarray


@dataclass(frozen=True)
class BandSeries:
    upper: np.ndarray
    middle: np.ndarray
    lower: np.ndarray


@dataclass(frozen=True)
class Pivot:
    index: int
    price: float


@dataclass(frozen=True)
class PivotLevels:
    support: list[float]
    resistance: list[float]
    pivot_highs: list[Pivot]
    pivot_lows: list[Pivot]


@dataclass(frozen=True)
class VolumeProfile:
    average_volume: float
    current_volume: float
    volume_ratio: float
    on_balance_volume: np.ndarray
    volume_price_trend: np.ndarray


@dataclass(frozen=True)
class StochasticSeries:
    k: np.ndarray
    d: np.ndarray


def _check_period(period: int) -> None:
    if period < 1:
        raise ValueError(f"period must be a positive integer, got {period}")


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> Outcome[np.ndarray]:
    """Simple Moving Average."""
    _check_period(period)
    if len(data) < period:
        return InsufficientData("sma", period, len(data))

    return Ok(sliding_window_view(data, period).mean(axis=1))


def ema(data: np.ndarray, period: int) -> Outcome[np.ndarray]:
    """Exponential Moving Average, seeded with the SMA of the first window."""
    _check_period(period)
    if len(data) < period:
        return InsufficientData("ema", period, len(data))

    multiplier = 2 / (period + 1)
    result = np.empty(len(data) - period + 1)

    # Start with SMA
    result[0] = np.mean(data[:period])

    for i, price in enumerate(data[period:], start=1):
        result[i] = price * multiplier + result[i - 1] * (1 - multiplier)

    return Ok(result)


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    rs = avg_gain / (avg_loss or RSI_LOSS_FLOOR)
    return 100 - (100 / (1 + rs))


def rsi(closes: np.ndarray, period: int = 14) -> Outcome[np.ndarray]:
    """Relative Strength Index with Wilder smoothing."""
    _check_period(period)
    if len(closes) <= period:
        return InsufficientData("rsi", period + 1, len(closes))

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    # First average is a plain mean
    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))
    values = [_rsi_value(avg_gain, avg_loss)]

    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period
        values.append(_rsi_value(avg_gain, avg_loss))

    return Ok(np.array(values))


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> Outcome[MACDSeries]:
    """
    MACD (Moving Average Convergence Divergence).

    The MACD line only covers bars where both EMAs are defined. The signal
    line is an EMA of the MACD line and the histogram covers the signal
    line's range.
    """
    _check_period(signal_period)
    required = max(fast_period, slow_period) + signal_period
    if len(closes) < required:
        return InsufficientData("macd", required, len(closes))

    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)
    if not isinstance(fast_ema, Ok) or not isinstance(slow_ema, Ok):
        return InsufficientData("macd", required, len(closes))

    overlap = min(len(fast_ema.value), len(slow_ema.value))
    macd_line = fast_ema.value[-overlap:] - slow_ema.value[-overlap:]

    signal_ema = ema(macd_line, signal_period)
    if not isinstance(signal_ema, Ok):
        return InsufficientData("macd", required, len(closes))

    signal_line = signal_ema.value
    histogram = macd_line[-len(signal_line):] - signal_line

    return Ok(MACDSeries(macd_line=macd_line, signal_line=signal_line, histogram=histogram))


def rate_of_change(closes: np.ndarray, period: int = 12) -> Outcome[float]:
    """Percent change of the last close against the close `period` bars from the end."""
    _check_period(period)
    if len(closes) < period:
        return InsufficientData("rate_of_change", period, len(closes))

    base = closes[-period]
    return Ok(float((closes[-1] - base) / base * 100))


def stochastic(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
    k_period: int = 14,
    d_period: int = 3,
) -> Outcome[StochasticSeries]:
    """
    Stochastic Oscillator.

    %K is 50 when the high/low range over the window is flat.
    """
    _check_period(k_period)
    _check_period(d_period)
    required = k_period + d_period - 1
    if len(closes) < required:
        return InsufficientData("stochastic", required, len(closes))

    highest_high = sliding_window_view(highs, k_period).max(axis=1)
    lowest_low = sliding_window_view(lows, k_period).min(axis=1)
    price_range = highest_high - lowest_low

    with np.errstate(divide="ignore", invalid="ignore"):
        k = np.where(
            price_range > 0,
            (closes[k_period - 1 :] - lowest_low) / price_range * 100,
            50.0,
        )

    d = sliding_window_view(k, d_period).mean(axis=1)
    return Ok(StochasticSeries(k=k, d=d))


def williams_r(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> Outcome[np.ndarray]:
    """Williams %R. Returns -50 where the high/low range is flat."""
    _check_period(period)
    if len(closes) < period:
        return InsufficientData("williams_r", period, len(closes))

    highest_high = sliding_window_view(highs, period).max(axis=1)
    lowest_low = sliding_window_view(lows, period).min(axis=1)
    price_range = highest_high - lowest_low

    with np.errstate(divide="ignore", invalid="ignore"):
        result = np.where(
            price_range > 0,
            (highest_high - closes[period - 1 :]) / price_range * -100,
            -50.0,
        )

    return Ok(result)


def cci(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 20
) -> Outcome[np.ndarray]:
    """Commodity Channel Index. Returns 0 where the mean deviation is zero."""
    _check_period(period)
    if len(closes) < period:
        return InsufficientData("cci", period, len(closes))

    typical_price = (highs + lows + closes) / 3
    windows = sliding_window_view(typical_price, period)
    tp_sma = windows.mean(axis=1)
    mean_dev = np.abs(windows - tp_sma[:, None]).mean(axis=1)

    with np.errstate(divide="ignore", invalid="ignore"):
        result = np.where(
            mean_dev > 0,
            (typical_price[period - 1 :] - tp_sma) / (CCI_CONSTANT * mean_dev),
            0.0,
        )

    return Ok(result)


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> Outcome[BandSeries]:
    """Bollinger Bands using the population standard deviation."""
    _check_period(period)
    if len(closes) < period:
        return InsufficientData("bollinger_bands", period, len(closes))

    windows = sliding_window_view(closes, period)
    middle = windows.mean(axis=1)
    std = windows.std(axis=1)

    return Ok(
        BandSeries(
            upper=middle + (std_dev * std),
            middle=middle,
            lower=middle - (std_dev * std),
        )
    )


# =============================================================================
# VOLUME INDICATORS
# =============================================================================


def on_balance_volume(closes: np.ndarray, volumes: np.ndarray) -> np.ndarray:
    """On-Balance Volume, one entry per bar after the first."""
    direction = np.sign(np.diff(closes))
    return np.cumsum(direction * volumes[1:])


def volume_price_trend(closes: np.ndarray, volumes: np.ndarray) -> np.ndarray:
    """Volume-Price Trend, one entry per bar after the first."""
    pct_change = np.diff(closes) / closes[:-1]
    return np.cumsum(volumes[1:] * pct_change)


def volume_profile(
    volumes: np.ndarray, closes: np.ndarray, period: int = 20
) -> Outcome[VolumeProfile]:
    """Volume average, current/average ratio, OBV and VPT."""
    _check_period(period)
    # Align on the last bar when one history is longer
    available = min(len(volumes), len(closes))
    if available < max(period, 2):
        return InsufficientData("volume_analysis", max(period, 2), available)
    volumes, closes = volumes[-available:], closes[-available:]

    average = float(np.mean(volumes[-period:]))
    current = float(volumes[-1])
    ratio = current / average if average > 0 else 0.0

    return Ok(
        VolumeProfile(
            average_volume=average,
            current_volume=current,
            volume_ratio=ratio,
            on_balance_volume=on_balance_volume(closes, volumes),
            volume_price_trend=volume_price_trend(closes, volumes),
        )
    )


# =============================================================================
# SUPPORT/RESISTANCE
# =============================================================================


def find_pivots(
    highs: np.ndarray, lows: np.ndarray, lookback: int = 10
) -> Outcome[tuple[list[Pivot], list[Pivot]]]:
    """
    Find pivot highs and lows.

    A pivot high at i is strictly greater than every other high in
    [i - lookback, i + lookback]; a pivot low is strictly lower than every
    other low in that window. Equal neighbours disqualify a pivot.
    """
    _check_period(lookback)
    window = 2 * lookback + 1
    if len(highs) <= window:
        return InsufficientData("support_resistance", window + 1, len(highs))

    pivot_highs: list[Pivot] = []
    pivot_lows: list[Pivot] = []

    for i in range(lookback, len(highs) - lookback):
        start, stop = i - lookback, i + lookback + 1
        neighbour_highs = np.delete(highs[start:stop], lookback)
        neighbour_lows = np.delete(lows[start:stop], lookback)

        if np.all(neighbour_highs < highs[i]):
            pivot_highs.append(Pivot(index=i, price=float(highs[i])))
        if np.all(neighbour_lows > lows[i]):
            pivot_lows.append(Pivot(index=i, price=float(lows[i])))

    return Ok((pivot_highs, pivot_lows))


def find_support_resistance(
    highs: np.ndarray, lows: np.ndarray, lookback: int = 10, max_levels: int = 5
) -> Outcome[PivotLevels]:
    """
    Support/resistance from the most recent pivots.

    Returns resistance sorted descending and support sorted ascending, each
    drawn from the last `max_levels` pivots.
    """
    pivots = find_pivots(highs, lows, lookback)
    if not isinstance(pivots, Ok):
        return pivots

    pivot_highs, pivot_lows = pivots.value
    recent_highs = [p.price for p in pivot_highs[-max_levels:]]
    recent_lows = [p.price for p in pivot_lows[-max_levels:]]

    return Ok(
        PivotLevels(
            support=sorted(recent_lows),
            resistance=sorted(recent_highs, reverse=True),
            pivot_highs=pivot_highs,
            pivot_lows=pivot_lows,
        )
    )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def round_price(value: float) -> float:
    return round(float(value), 2)


def round_macd(value: float) -> float:
    return round(float(value), 4)


def round_series(values: np.ndarray, decimals: int = 2) -> list[float]:
    return [round(float(v), decimals) for v in values]
