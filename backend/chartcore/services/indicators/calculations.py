"""
Technical Indicator Calculations

Pure Python/NumPy implementations of chart overlay indicators.
All math is deterministic; nothing here sanitizes input.

Every function takes an ordered sequence of points (PricePoint,
IndicatorPoint or plain dicts) and returns {timestamp, value} series with
the warm-up period omitted. Insufficient data returns empty output instead
of raising.
"""

from typing import Any, Sequence

import numpy as np

from chartcore.schemas.chart import (
    BandSeries,
    IndicatorPoint,
    IndicatorSeries,
    MACDSeries,
)


def _price_of(point: Any) -> float:
    """Close price, falling back to value (line-only points)."""
    if isinstance(point, dict):
        price = point.get("close")
        return point.get("value") if price is None else price
    price = getattr(point, "close", None)
    return point.value if price is None else price


def _timestamp_of(point: Any) -> int:
    if isinstance(point, dict):
        return point["timestamp"]
    return point.timestamp


def _prices(data: Sequence[Any]) -> np.ndarray:
    return np.array([_price_of(p) for p in data], dtype=float)


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: Sequence[Any], period: int) -> IndicatorSeries:
    """Simple Moving Average."""
    if period < 1 or len(data) < period:
        return []

    prices = _prices(data)
    result = []
    for i in range(period - 1, len(data)):
        result.append(
            IndicatorPoint(
                timestamp=_timestamp_of(data[i]),
                value=float(np.mean(prices[i - period + 1 : i + 1])),
            )
        )
    return result


def ema(data: Sequence[Any], period: int) -> IndicatorSeries:
    """Exponential Moving Average, seeded with the SMA of the first period."""
    if period < 1 or len(data) < period:
        return []

    prices = _prices(data)
    multiplier = 2 / (period + 1)

    # Start with SMA
    value = float(np.mean(prices[:period]))
    result = [IndicatorPoint(timestamp=_timestamp_of(data[period - 1]), value=value)]

    for i in range(period, len(data)):
        value = (prices[i] - value) * multiplier + value
        result.append(IndicatorPoint(timestamp=_timestamp_of(data[i]), value=float(value)))

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    # No losses: RS is pinned at 100, so RSI lands at ~99.01 rather than 100.
    rs = 100.0 if avg_loss == 0 else avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def rsi(data: Sequence[Any], period: int = 14) -> IndicatorSeries:
    """
    Relative Strength Index with Wilder smoothing.

    Values are tagged with the later point of each price change, so the
    first output carries data[period].timestamp.
    """
    if period < 1 or len(data) < period + 1:
        return []

    # Calculate price changes
    deltas = np.diff(_prices(data))

    # Separate gains and losses (losses as positive magnitudes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas > 0, 0.0, np.abs(deltas))

    # First average
    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))

    result = [
        IndicatorPoint(
            timestamp=_timestamp_of(data[period]),
            value=_rsi_from_averages(avg_gain, avg_loss),
        )
    ]

    # Subsequent RSI values using smoothed averages
    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result.append(
            IndicatorPoint(
                timestamp=_timestamp_of(data[i + 1]),
                value=float(_rsi_from_averages(avg_gain, avg_loss)),
            )
        )

    return result


def macd(
    data: Sequence[Any],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDSeries:
    """
    MACD (Moving Average Convergence Divergence).

    The MACD line starts at the first slow EMA value; the fast EMA is read
    at the matching offset. Histogram points carry the signal timestamps.
    """
    if len(data) < slow_period:
        return MACDSeries()

    fast_ema = ema(data, fast_period)
    slow_ema = ema(data, slow_period)

    offset = (slow_period - 1) - (fast_period - 1)
    macd_line = []
    for i, slow_point in enumerate(slow_ema):
        fast_index = i + offset
        if 0 <= fast_index < len(fast_ema):
            macd_line.append(
                IndicatorPoint(
                    timestamp=slow_point.timestamp,
                    value=fast_ema[fast_index].value - slow_point.value,
                )
            )

    # Signal line is EMA of MACD line
    signal_line = ema(macd_line, signal_period)

    histogram = []
    for i, signal_point in enumerate(signal_line):
        macd_index = i + (signal_period - 1)
        if macd_index < len(macd_line):
            histogram.append(
                IndicatorPoint(
                    timestamp=signal_point.timestamp,
                    value=macd_line[macd_index].value - signal_point.value,
                )
            )

    return MACDSeries(macd=macd_line, signal=signal_line, histogram=histogram)


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def bollinger_bands(
    data: Sequence[Any], period: int = 20, multiplier: float = 2.0
) -> BandSeries:
    """
    Bollinger Bands.

    Uses the population standard deviation of each window.
    """
    if period < 1 or len(data) < period:
        return BandSeries()

    prices = _prices(data)
    middle = sma(data, period)
    upper = []
    lower = []

    for i in range(period - 1, len(data)):
        std = float(np.std(prices[i - period + 1 : i + 1]))
        middle_value = middle[i - (period - 1)].value
        timestamp = _timestamp_of(data[i])

        upper.append(IndicatorPoint(timestamp=timestamp, value=middle_value + multiplier * std))
        lower.append(IndicatorPoint(timestamp=timestamp, value=middle_value - multiplier * std))

    return BandSeries(upper=upper, middle=middle, lower=lower)
