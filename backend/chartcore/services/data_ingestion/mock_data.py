"""
Mock Chart Data Generator

Generates realistic price walks for development, demos and when every
real source is unavailable.
"""

import random
import time
from typing import Optional

from chartcore.schemas.chart import TimeRange
from chartcore.services.data_ingestion.interface import DataSourceInterface, RawPoint


# Base prices for common symbols
SYMBOL_BASE_PRICES = {
    "AAPL": 175.0,
    "MSFT": 380.0,
    "GOOGL": 140.0,
    "AMZN": 150.0,
    "NVDA": 480.0,
    "META": 350.0,
    "TSLA": 240.0,
    "BRK.B": 380.0,
    "JPM": 155.0,
    "V": 260.0,
    "UNH": 510.0,
    "JNJ": 160.0,
    "WMT": 165.0,
    "XOM": 110.0,
    "MA": 430.0,
    "PG": 155.0,
    "HD": 340.0,
    "CVX": 155.0,
    "ABBV": 170.0,
    "MRK": 115.0,
}

# Points per range (1D = 6.5h of 5-min bars, others trading days)
RANGE_POINTS = {
    TimeRange.D1: 78,
    TimeRange.W1: 5,
    TimeRange.M1: 21,
    TimeRange.M3: 63,
    TimeRange.Y1: 252,
    TimeRange.ALL: 1260,
}

# Bar interval in milliseconds
RANGE_INTERVAL_MS = {
    TimeRange.D1: 300_000,
    TimeRange.W1: 86_400_000,
    TimeRange.M1: 86_400_000,
    TimeRange.M3: 86_400_000,
    TimeRange.Y1: 86_400_000,
    TimeRange.ALL: 86_400_000,
}

# Drift over the whole range
RANGE_TREND = {
    TimeRange.D1: 0.005,
    TimeRange.W1: 0.02,
    TimeRange.M1: 0.05,
    TimeRange.M3: 0.08,
    TimeRange.Y1: 0.15,
    TimeRange.ALL: 0.50,
}


def get_base_price(symbol: str) -> float:
    """Known price, else a stable 50-250 price derived from the symbol."""
    symbol = symbol.upper()
    if symbol in SYMBOL_BASE_PRICES:
        return SYMBOL_BASE_PRICES[symbol]
    return 50.0 + (sum(ord(ch) for ch in symbol) % 200)


def generate_chart_data(
    symbol: str,
    time_range: TimeRange,
    now_ms: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> list[RawPoint]:
    """Random walk with a slight upward bias, bounded to 70-150% of base."""
    time_range = TimeRange(time_range)
    rng = rng or random.Random()
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)

    base_price = get_base_price(symbol)
    points = RANGE_POINTS[time_range]
    interval = RANGE_INTERVAL_MS[time_range]
    trend_percent = RANGE_TREND[time_range]
    volatility = base_price * (0.005 if time_range == TimeRange.D1 else 0.015)

    data = []
    price = base_price

    for i in range(points):
        trend = (i / points) * (base_price * trend_percent)

        price += (rng.random() - 0.48) * volatility
        price = min(max(price, base_price * 0.7), base_price * 1.5)

        final_price = base_price + trend + (price - base_price)

        # Create OHLC
        daily_range = final_price * 0.01
        open_ = final_price + (rng.random() - 0.5) * daily_range
        close = final_price + (rng.random() - 0.5) * daily_range
        high = max(open_, close) + rng.random() * daily_range * 0.5
        low = min(open_, close) - rng.random() * daily_range * 0.5

        data.append(
            {
                "timestamp": now_ms - (points - i) * interval,
                "value": round(close, 2),
                "open": round(max(0.0, open_), 2),
                "high": round(max(0.0, high), 2),
                "low": round(max(0.0, low), 2),
                "close": round(max(0.0, close), 2),
                "volume": rng.randint(100_000, 5_000_000),
            }
        )

    return data


class MockDataSource(DataSourceInterface):
    """Deterministic when seeded."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    @property
    def name(self) -> str:
        return "Mock"

    async def fetch_series(self, symbol: str, time_range: TimeRange) -> list[RawPoint]:
        return generate_chart_data(symbol, time_range, rng=self._rng)
