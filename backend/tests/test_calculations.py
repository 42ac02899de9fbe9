"""Indicator math: warm-up, seeds, alignment and edge cases."""

import random

import numpy as np
import pytest

from chartcore.schemas.chart import BandSeries, IndicatorPoint, MACDSeries
from chartcore.services.indicators.calculations import (
    bollinger_bands,
    ema,
    macd,
    rsi,
    sma,
)
from tests.helpers import make_series, wave

TOL = 1e-9


# =============================================================================
# SMA
# =============================================================================


@pytest.mark.parametrize("period", [1, 5, 20, 50])
def test_sma_length(series_50, period):
    assert len(sma(series_50, period)) == len(series_50) - period + 1


def test_sma_short_or_invalid_period_is_empty(series_50):
    assert sma(series_50[:19], 20) == []
    assert sma(series_50, 0) == []
    assert sma([], 5) == []


def test_sma_20_over_50_daily_closes(series_50, fifty_closes):
    result = sma(series_50, 20)

    assert len(result) == 31
    assert result[0].value == pytest.approx(np.mean(fifty_closes[0:20]), abs=TOL)
    assert result[-1].value == pytest.approx(np.mean(fifty_closes[30:50]), abs=TOL)
    assert result[0].timestamp == series_50[19].timestamp
    assert result[-1].timestamp == series_50[-1].timestamp


def test_sma_falls_back_to_value_without_close():
    data = [{"timestamp": i, "value": float(i)} for i in range(5)]
    assert [p.value for p in sma(data, 2)] == [0.5, 1.5, 2.5, 3.5]


# =============================================================================
# EMA
# =============================================================================


def test_ema_seed_equals_sma_of_first_period(series_50):
    seed = ema(series_50, 12)[0]
    assert seed.value == pytest.approx(sma(series_50[:12], 12)[0].value, abs=TOL)
    assert seed.timestamp == series_50[11].timestamp


def test_ema_recurrence(series_50):
    period = 10
    result = ema(series_50, period)
    k = 2 / (period + 1)

    assert len(result) == len(series_50) - period + 1
    for i in range(1, len(result)):
        price = series_50[period - 1 + i].close
        expected = (price - result[i - 1].value) * k + result[i - 1].value
        assert result[i].value == pytest.approx(expected, abs=TOL)


def test_ema_short_is_empty(series_50):
    assert ema(series_50[:25], 26) == []


# =============================================================================
# RSI
# =============================================================================


def test_rsi_needs_period_plus_one_points():
    assert rsi(make_series([10, 11, 12, 13, 14]), 14) == []
    assert rsi(make_series(wave(14)), 14) == []
    assert len(rsi(make_series(wave(15)), 14)) == 1


def test_rsi_timestamps_offset_by_one(series_50):
    result = rsi(series_50, 14)
    assert len(result) == len(series_50) - 14
    assert result[0].timestamp == series_50[14].timestamp
    assert result[-1].timestamp == series_50[-1].timestamp


def test_rsi_without_losses_saturates_below_100():
    result = rsi(make_series([float(i) for i in range(1, 31)]), 14)
    expected = 100 - 100 / (1 + 100)
    assert all(p.value == pytest.approx(expected, abs=TOL) for p in result)
    assert expected == pytest.approx(99.0099, abs=1e-4)


def test_rsi_flat_series_uses_same_convention():
    result = rsi(make_series([50.0] * 20), 14)
    assert result[0].value == pytest.approx(100 - 100 / 101, abs=TOL)


def test_rsi_all_losses_is_zero():
    result = rsi(make_series([float(40 - i) for i in range(30)]), 14)
    assert all(p.value == pytest.approx(0.0, abs=TOL) for p in result)


def test_rsi_wilder_smoothing_matches_manual():
    closes = wave(30)
    period = 5
    result = rsi(make_series(closes), period)

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas > 0, 0.0, -deltas)
    avg_gain, avg_loss = gains[:period].mean(), losses[:period].mean()
    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period

    assert result[-1].value == pytest.approx(100 - 100 / (1 + avg_gain / avg_loss), abs=TOL)


def test_rsi_bounded_for_random_series():
    rng = random.Random(7)
    for _ in range(20):
        closes = [rng.uniform(1, 500) for _ in range(rng.randint(15, 120))]
        for point in rsi(make_series(closes), 14):
            assert 0 <= point.value <= 100


# =============================================================================
# MACD
# =============================================================================


def test_macd_short_is_all_empty(series_50):
    assert macd(series_50[:25]) == MACDSeries()


def test_macd_alignment(series_50):
    result = macd(series_50, 12, 26, 9)
    fast = {p.timestamp: p.value for p in ema(series_50, 12)}
    slow = ema(series_50, 26)

    assert len(result.macd) == len(slow) == 25
    assert result.macd[0].timestamp == series_50[25].timestamp
    for point, slow_point in zip(result.macd, slow):
        assert point.value == pytest.approx(fast[point.timestamp] - slow_point.value, abs=TOL)

    assert len(result.signal) == len(result.macd) - 8
    assert len(result.histogram) == len(result.signal)
    for i, hist in enumerate(result.histogram):
        assert hist.timestamp == result.signal[i].timestamp
        assert hist.value == pytest.approx(
            result.macd[i + 8].value - result.signal[i].value, abs=TOL
        )


def test_macd_signal_empty_when_line_too_short():
    result = macd(make_series(wave(30)), 12, 26, 9)
    assert len(result.macd) == 5
    assert result.signal == []
    assert result.histogram == []


# =============================================================================
# BOLLINGER BANDS
# =============================================================================


def test_bollinger_short_is_all_empty(series_50):
    assert bollinger_bands(series_50[:19], 20) == BandSeries()


def test_bollinger_middle_is_sma_and_bands_symmetric(series_50):
    bands = bollinger_bands(series_50, 20, 2)
    middle = sma(series_50, 20)

    assert len(bands.upper) == len(bands.middle) == len(bands.lower) == 31
    for up, mid, low, ref in zip(bands.upper, bands.middle, bands.lower, middle):
        assert mid.value == pytest.approx(ref.value, abs=TOL)
        assert up.value - mid.value == pytest.approx(mid.value - low.value, abs=TOL)
        assert up.timestamp == mid.timestamp == low.timestamp


def test_bollinger_uses_population_std(fifty_closes, series_50):
    bands = bollinger_bands(series_50, 20, 2)
    window = np.array(fifty_closes[:20])
    expected = window.mean() + 2 * window.std(ddof=0)
    assert bands.upper[0].value == pytest.approx(expected, abs=TOL)


def test_bollinger_flat_series_collapses():
    bands = bollinger_bands(make_series([25.0] * 20), 20)
    assert bands.upper == bands.middle == bands.lower == [
        IndicatorPoint(timestamp=bands.middle[0].timestamp, value=25.0)
    ]
