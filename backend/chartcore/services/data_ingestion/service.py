"""
Data Source Composition

Fallback across providers and caching of fetched series.
Primary: Polygon.io (when an API key is configured)
Fallback: Mock data (if enabled)
"""

import logging
from typing import Optional, Sequence

from chartcore.core.config import settings
from chartcore.schemas.chart import TimeRange
from chartcore.services.base import FetchError
from chartcore.services.cache.chart_cache import ChartCache, chart_cache_key, get_chart_cache
from chartcore.services.data_ingestion.interface import DataSourceInterface, RawPoint
from chartcore.services.data_ingestion.mock_data import MockDataSource
from chartcore.services.data_ingestion.polygon_adapter import PolygonDataSource

logger = logging.getLogger(__name__)


class FallbackDataSource(DataSourceInterface):
    """Tries each source in order; first non-empty result wins."""

    def __init__(self, sources: Sequence[DataSourceInterface]):
        if not sources:
            raise ValueError("FallbackDataSource needs at least one source")
        self._sources = list(sources)

    @property
    def name(self) -> str:
        return " -> ".join(s.name for s in self._sources)

    async def fetch_series(self, symbol: str, time_range: TimeRange) -> list[RawPoint]:
        errors: list[str] = []

        for source in self._sources:
            try:
                points = await source.fetch_series(symbol, time_range)
            except Exception as e:
                logger.warning(f"{source.name} failed for {symbol}: {e}")
                errors.append(f"{source.name}: {e}")
                continue

            if points:
                return points
            logger.info(f"{source.name} returned no data for {symbol}, trying next source")

        if errors:
            raise FetchError(
                f"All data sources failed for {symbol}",
                details={"errors": errors},
            )
        return []

    async def health_check(self) -> bool:
        for source in self._sources:
            if await source.health_check():
                return True
        return False

    async def close(self) -> None:
        for source in self._sources:
            await source.close()


class CachedDataSource(DataSourceInterface):
    """Caches non-empty responses of another source under chart:{SYMBOL}:{range}."""

    def __init__(
        self,
        source: DataSourceInterface,
        cache: ChartCache,
        ttl: Optional[int] = None,
    ):
        self._source = source
        self._cache = cache
        self._ttl = ttl or settings.chart_cache_ttl

    @property
    def name(self) -> str:
        return f"Cached({self._source.name})"

    async def fetch_series(self, symbol: str, time_range: TimeRange) -> list[RawPoint]:
        key = chart_cache_key(symbol, TimeRange(time_range).value)

        cached = await self._cache.get(key)
        if cached:
            logger.debug(f"Cache hit {key}")
            return cached

        points = await self._source.fetch_series(symbol, time_range)
        if points:
            await self._cache.set(key, points, self._ttl)
        return points

    async def health_check(self) -> bool:
        return await self._source.health_check()

    async def close(self) -> None:
        await self._source.close()


# Singleton instance
_data_source: Optional[DataSourceInterface] = None


def build_data_source(cache: Optional[ChartCache] = None) -> DataSourceInterface:
    """Assemble the configured source chain."""
    sources: list[DataSourceInterface] = []
    if settings.polygon_api_key:
        sources.append(PolygonDataSource())
    if settings.enable_mock_data or not sources:
        sources.append(MockDataSource())

    chain = sources[0] if len(sources) == 1 else FallbackDataSource(sources)
    return CachedDataSource(chain, cache or get_chart_cache())


def get_data_source() -> DataSourceInterface:
    """Get or create the configured data source."""
    global _data_source
    if _data_source is None:
        _data_source = build_data_source()
    return _data_source


async def close_data_source() -> None:
    global _data_source
    if _data_source is not None:
        await _data_source.close()
        _data_source = None
