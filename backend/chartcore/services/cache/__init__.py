"""
Cache module for StockChart.

Injectable chart-series cache: Redis when available, in-memory otherwise.
"""

from chartcore.services.cache.chart_cache import (
    ChartCache,
    MemoryChartCache,
    NullChartCache,
    RedisChartCache,
    chart_cache_key,
    get_chart_cache,
    init_redis,
    close_redis,
)

__all__ = [
    "ChartCache",
    "MemoryChartCache",
    "NullChartCache",
    "RedisChartCache",
    "chart_cache_key",
    "get_chart_cache",
    "init_redis",
    "close_redis",
]
