"""Tests for the pure indicator calculations"""

import numpy as np
import pytest

from stockadvisor.services.indicators.calculations import (
    bollinger_bands,
    cci,
    ema,
    find_pivots,
    find_support_resistance,
    macd,
    on_balance_volume,
    rate_of_change,
    rsi,
    sma,
    stochastic,
    volume_price_trend,
    volume_profile,
    williams_r,
)
from stockadvisor.services.indicators.outcome import InsufficientData, Ok


class TestMovingAverages:
    """Test SMA and EMA"""

    def test_sma_of_ascending_closes(self):
        closes = np.arange(10, 30, dtype=float)

        result = sma(closes, 20)
        assert isinstance(result, Ok)
        assert result.value.tolist() == [19.5]

    def test_sma_insufficient_data(self):
        result = sma(np.ones(5), 10)

        assert isinstance(result, InsufficientData)
        assert result.required == 10
        assert result.available == 5

    def test_ema_seeded_with_sma(self):
        result = ema(np.array([1.0, 2.0, 3.0, 4.0, 5.0, 6.0]), 5)

        assert isinstance(result, Ok)
        assert result.value[0] == pytest.approx(3.0)
        assert result.value[1] == pytest.approx(4.0)  # 6 * 1/3 + 3 * 2/3

    def test_ema_insufficient_data(self):
        assert isinstance(ema(np.ones(4), 5), InsufficientData)

    def test_non_positive_period_rejected(self):
        with pytest.raises(ValueError):
            sma(np.ones(5), 0)


class TestRSI:
    """Test RSI calculation"""

    def test_rsi_in_range(self, wave_series):
        result = rsi(wave_series.closes)

        assert isinstance(result, Ok)
        assert np.all(result.value >= 0)
        assert np.all(result.value <= 100)

    def test_rsi_idempotent(self, wave_series):
        first = rsi(wave_series.closes)
        second = rsi(wave_series.closes)
        assert np.array_equal(first.value, second.value)

    def test_rsi_needs_more_than_period(self):
        assert isinstance(rsi(np.arange(14, dtype=float), 14), InsufficientData)

        result = rsi(np.arange(15, dtype=float), 14)
        assert isinstance(result, Ok)
        assert len(result.value) == 1

    def test_rsi_rising_is_near_100(self):
        result = rsi(np.arange(1, 40, dtype=float))
        assert result.value[-1] > 99

    def test_rsi_falling_is_near_0(self):
        result = rsi(np.arange(40, 1, -1, dtype=float))
        assert result.value[-1] < 1


class TestMACD:
    """Test MACD calculation"""

    def test_histogram_is_macd_minus_signal(self, wave_series):
        result = macd(wave_series.closes)

        assert isinstance(result, Ok)
        series = result.value
        offset = len(series.macd_line) - len(series.signal_line)
        assert np.allclose(series.histogram, series.macd_line[offset:] - series.signal_line)

    def test_series_lengths_align_on_last_bar(self):
        result = macd(np.linspace(100, 160, 60))

        series = result.value
        assert len(series.macd_line) == 60 - 26 + 1
        assert len(series.signal_line) == len(series.macd_line) - 9 + 1
        assert len(series.histogram) == len(series.signal_line)

    def test_insufficient_below_slow_plus_signal(self):
        assert isinstance(macd(np.linspace(100, 134, 34)), InsufficientData)
        assert isinstance(macd(np.linspace(100, 135, 35)), Ok)


class TestMomentum:
    """Test ROC, Stochastic, Williams %R and CCI"""

    def test_rate_of_change(self):
        result = rate_of_change(np.arange(1, 13, dtype=float), 12)
        assert result.value == pytest.approx(1100.0)

    def test_rate_of_change_insufficient(self):
        assert isinstance(rate_of_change(np.arange(1, 12, dtype=float), 12), InsufficientData)

    def test_stochastic_flat_range_is_50(self):
        flat = np.full(20, 50.0)

        result = stochastic(flat, flat, flat)
        assert np.all(result.value.k == 50.0)
        assert np.all(result.value.d == 50.0)

    def test_stochastic_needs_k_plus_d_minus_one(self):
        data = np.linspace(10, 20, 15)
        assert isinstance(stochastic(data + 1, data - 1, data, 14, 3), InsufficientData)

        data = np.linspace(10, 20, 16)
        assert isinstance(stochastic(data + 1, data - 1, data, 14, 3), Ok)

    def test_williams_flat_range_is_minus_50(self):
        flat = np.full(14, 50.0)
        assert williams_r(flat, flat, flat).value.tolist() == [-50.0]

    def test_williams_close_at_high_is_zero(self):
        closes = np.linspace(10, 20, 14)
        result = williams_r(closes, closes - 1, closes)
        assert result.value[-1] == pytest.approx(0.0)

    def test_cci_zero_deviation_is_zero(self):
        flat = np.full(20, 50.0)
        assert cci(flat, flat, flat).value.tolist() == [0.0]


class TestBollingerBands:
    """Test Bollinger Bands"""

    def test_band_ordering(self, wave_series):
        bands = bollinger_bands(wave_series.closes).value

        assert np.all(bands.upper >= bands.middle)
        assert np.all(bands.middle >= bands.lower)

    def test_flat_series_collapses_bands(self):
        bands = bollinger_bands(np.full(20, 100.0)).value

        assert bands.upper.tolist() == [100.0]
        assert bands.lower.tolist() == [100.0]

    def test_population_std(self):
        closes = np.array([1.0, 3.0] * 10)

        bands = bollinger_bands(closes, 20, 2.0).value
        assert bands.middle[-1] == pytest.approx(2.0)
        assert bands.upper[-1] == pytest.approx(4.0)  # population std is 1


class TestVolume:
    """Test OBV, VPT and the volume profile"""

    def test_obv_skips_first_bar(self):
        closes = np.array([10.0, 11.0, 10.0, 10.0])
        volumes = np.array([100.0, 200.0, 300.0, 400.0])

        assert on_balance_volume(closes, volumes).tolist() == [200.0, -100.0, -100.0]

    def test_vpt(self):
        result = volume_price_trend(np.array([10.0, 11.0]), np.array([0.0, 100.0]))
        assert result[-1] == pytest.approx(10.0)

    def test_zero_average_volume_gives_zero_ratio(self):
        result = volume_profile(np.zeros(20), np.linspace(10, 20, 20))
        assert result.value.volume_ratio == 0.0

    def test_volume_ratio(self):
        volumes = np.array([1000.0] * 19 + [5000.0])

        result = volume_profile(volumes, np.linspace(10, 20, 20))
        assert result.value.average_volume == pytest.approx(1200.0)
        assert result.value.volume_ratio == pytest.approx(5000.0 / 1200.0)

    def test_unequal_lengths_align_on_last_bar(self):
        closes = np.linspace(10, 40, 60)
        volumes = np.arange(1.0, 31.0)

        result = volume_profile(volumes, closes)
        aligned = volume_profile(volumes, closes[-30:])
        assert isinstance(result, Ok)
        assert len(result.value.on_balance_volume) == 29
        assert result.value.on_balance_volume.tolist() == aligned.value.on_balance_volume.tolist()
        assert result.value.volume_price_trend[-1] == pytest.approx(aligned.value.volume_price_trend[-1])


class TestPivots:
    """Test pivot detection and support/resistance"""

    def test_single_peak_is_pivot_high(self):
        highs = np.array([1.0] * 5 + [5.0] + [1.0] * 5)
        lows = np.full(11, 0.5)

        pivot_highs, pivot_lows = find_pivots(highs, lows, lookback=2).value
        assert [(p.index, p.price) for p in pivot_highs] == [(5, 5.0)]
        assert pivot_lows == []  # equal lows never qualify

    def test_ties_are_not_pivots(self):
        highs = np.array([1.0, 1.0, 1.0, 5.0, 5.0, 1.0, 1.0, 1.0])
        lows = np.full(8, 0.5)

        pivot_highs, _ = find_pivots(highs, lows, lookback=2).value
        assert pivot_highs == []

    def test_insufficient_without_room_for_a_window(self):
        assert isinstance(find_pivots(np.ones(5), np.ones(5), lookback=2), InsufficientData)
        assert isinstance(find_pivots(np.ones(6), np.ones(6), lookback=2), Ok)

    def test_levels_drawn_from_input(self, wave_series):
        highs, lows = wave_series.highs, wave_series.lows

        levels = find_support_resistance(highs, lows).value
        assert levels.resistance
        assert levels.support
        assert len(levels.resistance) <= 5
        assert len(levels.support) <= 5
        assert all(level in highs for level in levels.resistance)
        assert all(level in lows for level in levels.support)
        assert levels.resistance == sorted(levels.resistance, reverse=True)
        assert levels.support == sorted(levels.support)
