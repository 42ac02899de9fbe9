"""
Polygon.io Aggregates Adapter

Fetches OHLC bars from the Polygon.io aggregates endpoint and maps them to
raw chart points. Bars are returned unvalidated; the chart pipeline
sanitizes them.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import aiohttp

from chartcore.core.config import settings
from chartcore.schemas.chart import TimeRange
from chartcore.services.base import FetchError
from chartcore.services.data_ingestion.interface import DataSourceInterface, RawPoint

logger = logging.getLogger(__name__)


# (lookback days, multiplier, timespan) per range
RANGE_BARS = {
    TimeRange.D1: (1, 5, "minute"),
    TimeRange.W1: (7, 1, "hour"),
    TimeRange.M1: (30, 1, "day"),
    TimeRange.M3: (90, 1, "day"),
    TimeRange.Y1: (365, 1, "day"),
    TimeRange.ALL: (5 * 365, 1, "week"),  # weekly bars keep 5y light
}


def get_date_range(time_range: TimeRange, now: Optional[datetime] = None) -> dict[str, Any]:
    """Aggregates window and bar size for a time range."""
    now = now or datetime.now(timezone.utc)
    days, multiplier, timespan = RANGE_BARS.get(TimeRange(time_range), RANGE_BARS[TimeRange.M1])

    return {
        "from": (now - timedelta(days=days)).strftime("%Y-%m-%d"),
        "to": now.strftime("%Y-%m-%d"),
        "multiplier": multiplier,
        "timespan": timespan,
    }


def transform_bars(results: Optional[list[dict]]) -> list[RawPoint]:
    """Polygon bars {t, o, h, l, c, v} -> raw chart points."""
    if not results:
        return []

    return [
        {
            "timestamp": bar.get("t"),
            "value": bar.get("c"),  # line charts use the close
            "open": bar.get("o"),
            "high": bar.get("h"),
            "low": bar.get("l"),
            "close": bar.get("c"),
            "volume": bar.get("v"),
        }
        for bar in results
    ]


class PolygonDataSource(DataSourceInterface):
    """Aggregates (candles) from Polygon.io."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: Optional[float] = None,
    ):
        self._api_key = api_key or settings.polygon_api_key
        self._base_url = (base_url or settings.polygon_base_url).rstrip("/")
        self._session = session
        self._timeout = timeout or settings.http_timeout_seconds

    @property
    def name(self) -> str:
        return "Polygon.io"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_json(self, url: str, params: dict) -> dict:
        session = await self._ensure_session()
        try:
            async with session.get(url, params=params) as response:
                if response.status != 200:
                    raise FetchError(
                        f"Polygon.io API error: {response.status} {response.reason}",
                        details={"status": response.status},
                    )
                return await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(f"Polygon.io request failed: {str(e) or type(e).__name__}") from e

    async def fetch_series(self, symbol: str, time_range: TimeRange) -> list[RawPoint]:
        if not self._api_key:
            raise FetchError("Polygon.io API key not configured")

        symbol = symbol.upper().strip()
        window = get_date_range(time_range)
        url = (
            f"{self._base_url}/v2/aggs/ticker/{symbol}/range/"
            f"{window['multiplier']}/{window['timespan']}/{window['from']}/{window['to']}"
        )
        params = {"adjusted": "true", "sort": "asc", "apiKey": self._api_key}

        logger.info(f"Fetching {TimeRange(time_range).value} aggregates for {symbol} from Polygon.io")
        data = await self._get_json(url, params)

        if data.get("status") == "ERROR":
            raise FetchError(f"Polygon.io API error: {data.get('error') or 'Unknown error'}")

        results = data.get("results") or []
        if not results:
            logger.warning(f"No data returned for {symbol} ({TimeRange(time_range).value})")
            return []

        logger.debug(f"Retrieved {len(results)} bars for {symbol}")
        return transform_bars(results)

    async def health_check(self) -> bool:
        return bool(self._api_key)
