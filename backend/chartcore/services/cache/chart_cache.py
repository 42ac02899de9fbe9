"""
Chart data cache.

Injectable get/set(ttl) collaborator for fetched chart series, so data
sources carry no process-wide state and tests can use an in-memory or
no-op cache.

Keys:
- chart:{SYMBOL}:{range} -> JSON list of raw points
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from chartcore.core.config import settings

logger = logging.getLogger(__name__)

# Global Redis connection pool
_redis_pool: Optional[redis.Redis] = None


async def init_redis(url: str = None) -> Optional[redis.Redis]:
    """
    Initialize Redis connection pool.
    Called on application startup. Returns None if Redis is unreachable.
    """
    global _redis_pool

    if _redis_pool is not None:
        return _redis_pool

    redis_url = url or settings.redis_url
    client = redis.from_url(redis_url, encoding="utf-8", decode_responses=True)
    try:
        # Test connection
        await client.ping()
    except (RedisError, OSError) as e:
        logger.warning(f"Redis connection failed: {e}. Using in-memory cache.")
        await client.aclose()
        return None

    _redis_pool = client
    logger.info(f"Redis connected: {redis_url}")
    return _redis_pool


async def close_redis() -> None:
    """Close Redis connection pool."""
    global _redis_pool
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None
        logger.info("Redis connection closed")


def get_redis() -> Optional[redis.Redis]:
    """Get the Redis connection pool."""
    return _redis_pool


def chart_cache_key(symbol: str, time_range: str) -> str:
    return f"chart:{symbol.upper()}:{time_range}"


class ChartCache(ABC):
    """Async key/value cache with per-entry TTL (seconds)."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int = None) -> bool:
        pass


class NullChartCache(ChartCache):
    """Never stores anything."""

    async def get(self, key: str) -> Optional[Any]:
        return None

    async def set(self, key: str, value: Any, ttl: int = None) -> bool:
        return False


class MemoryChartCache(ChartCache):
    """In-process cache; expired entries are dropped on read and on every write."""

    def __init__(self, default_ttl: int = None, clock=time.monotonic):
        self._entries: dict[str, tuple[float, Any]] = {}
        self._default_ttl = default_ttl or settings.chart_cache_ttl
        self._clock = clock

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Any, ttl: int = None) -> bool:
        now = self._clock()
        self._prune(now)
        self._entries[key] = (now + (ttl or self._default_ttl), value)
        return True

    def _prune(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()


class RedisChartCache(ChartCache):
    """
    Redis-backed cache storing JSON values.

    Falls back to an in-memory cache whenever Redis is unavailable or a
    command fails.
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None, default_ttl: int = None):
        self._redis = redis_client
        self._default_ttl = default_ttl or settings.chart_cache_ttl
        self._memory = MemoryChartCache(self._default_ttl)

    @property
    def redis(self) -> Optional[redis.Redis]:
        return self._redis if self._redis is not None else get_redis()

    async def get(self, key: str) -> Optional[Any]:
        if self.redis is not None:
            try:
                value = await self.redis.get(key)
            except RedisError as e:
                logger.debug(f"Redis get failed for {key}: {e}")
            else:
                if not value:
                    return None
                try:
                    return json.loads(value)
                except ValueError:
                    logger.warning(f"Discarding undecodable cache entry {key}")
                    return None

        # Fallback to memory
        return await self._memory.get(key)

    async def set(self, key: str, value: Any, ttl: int = None) -> bool:
        ttl = ttl or self._default_ttl

        if self.redis is not None:
            try:
                await self.redis.set(key, json.dumps(value), ex=ttl)
                return True
            except RedisError as e:
                logger.debug(f"Redis set failed for {key}: {e}")

        return await self._memory.set(key, value, ttl)


# Singleton instance
_chart_cache: Optional[ChartCache] = None


def get_chart_cache() -> ChartCache:
    """Get the chart cache singleton (Redis when connected, memory otherwise)."""
    global _chart_cache
    if _chart_cache is None:
        _chart_cache = RedisChartCache()
    return _chart_cache
