"""
Chart Session

One chart display for a (symbol, time range) pair: owns the sanitized
Series, the zoom window and the active indicator selection.

State machine:
    LOADING -> READY      fetch + ingest produced points
    LOADING -> ERROR      fetch failed or nothing survived sanitize
    READY/ERROR -> LOADING  symbol/range change or retry()

Every fetch is tagged with (symbol, range, generation). A response is only
applied while its tag still matches the session, so a late answer for a
previous symbol can never overwrite newer state.
"""

import asyncio
import logging
import math
from typing import Iterable, Optional, Union

from chartcore.core.config import settings
from chartcore.schemas.chart import (
    ChangeSummary,
    ChartSnapshot,
    ChartState,
    Domain,
    IndicatorOverlay,
    PricePoint,
    Series,
    TimeRange,
    ZoomWindow,
)
from chartcore.services.base import ChartError, EmptySeriesError, FetchError
from chartcore.services.chart.formatting import change_summary
from chartcore.services.chart.sanitize import ingest
from chartcore.services.chart.zoom import (
    FULL_WINDOW,
    compute_domain,
    index_range_to_window,
    pan,
    pinch,
    pixels_to_percent,
    window_to_index_range,
)
from chartcore.services.data_ingestion.interface import DataSourceInterface
from chartcore.services.indicators.registry import (
    IndicatorKind,
    IndicatorResult,
    parse_indicator_kind,
)
from chartcore.services.indicators.service import IndicatorService, get_indicator_service

logger = logging.getLogger(__name__)

RequestKey = tuple[str, TimeRange, int]


def _normalize_symbol(symbol: str) -> str:
    return symbol.upper().strip()


class ChartSession:
    """Chart state for one symbol/time-range, driven by discrete events."""

    def __init__(
        self,
        data_source: DataSourceInterface,
        symbol: str,
        time_range: Union[TimeRange, str] = TimeRange.M1,
        indicators: Iterable[str] = (),
        indicator_service: Optional[IndicatorService] = None,
        max_points: int = None,
        min_visible_points: int = None,
    ):
        self._data_source = data_source
        self._indicators = indicator_service or get_indicator_service()
        self._max_points = max_points or settings.max_series_points
        self._min_visible = min_visible_points or settings.min_visible_points

        self._symbol = _normalize_symbol(symbol)
        self._time_range = TimeRange(time_range)
        self._active: tuple[IndicatorKind, ...] = ()
        self.set_active_indicators(indicators)

        self._state = ChartState.LOADING
        self._error: Optional[str] = None
        self._series: Series = ()
        self._window: ZoomWindow = FULL_WINDOW
        self._range: tuple[int, int] = (0, 0)
        self._computed: Optional[dict[IndicatorKind, IndicatorResult]] = None

        self._generation = 0
        self._pending: Optional[asyncio.Future] = None
        self._closed = False

    # ============ Properties ============

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def time_range(self) -> TimeRange:
        return self._time_range

    @property
    def state(self) -> ChartState:
        return self._state

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def series(self) -> Series:
        return self._series

    @property
    def window(self) -> ZoomWindow:
        return self._window

    @property
    def active_indicators(self) -> tuple[IndicatorKind, ...]:
        return self._active

    @property
    def is_closed(self) -> bool:
        return self._closed

    # ============ Loading ============

    def _request_key(self) -> RequestKey:
        return (self._symbol, self._time_range, self._generation)

    def _is_stale(self, key: RequestKey) -> bool:
        return self._closed or key != self._request_key()

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def _reset(self) -> None:
        self._state = ChartState.LOADING
        self._error = None
        self._series = ()
        self._computed = None
        self._window = FULL_WINDOW
        self._range = (0, 0)

    def _fail(self, message: str) -> ChartState:
        self._state = ChartState.ERROR
        self._error = message
        self._series = ()
        self._computed = None
        self._range = (0, 0)
        return self._state

    @staticmethod
    def _error_message(error: Exception) -> str:
        if isinstance(error, ChartError):
            return error.message
        return str(error) or FetchError.default_message

    async def load(self) -> ChartState:
        """
        Fetch and ingest data for the current symbol/range.

        Returns the resulting state. A response that went stale while in
        flight is discarded and the current state returned unchanged.
        """
        if self._closed:
            logger.debug(f"Ignoring load on closed session {self._symbol}")
            return self._state

        self._cancel_pending()
        self._generation += 1
        key = self._request_key()
        symbol, time_range, _ = key
        self._reset()

        logger.debug(f"Loading chart data for {symbol} ({time_range.value})")
        fetch = asyncio.ensure_future(self._data_source.fetch_series(symbol, time_range))
        self._pending = fetch

        try:
            raw_points = await fetch
        except asyncio.CancelledError:
            if self._is_stale(key):
                logger.debug(f"Fetch for {symbol} ({time_range.value}) cancelled")
                return self._state
            raise
        except Exception as e:
            if self._is_stale(key):
                logger.debug(f"Ignoring failure of stale fetch for {symbol}: {e}")
                return self._state
            logger.warning(f"Chart data fetch failed for {symbol} ({time_range.value}): {e}")
            return self._fail(self._error_message(e))
        finally:
            if self._pending is fetch:
                self._pending = None

        if self._is_stale(key):
            logger.debug(f"Discarding stale response for {symbol} ({time_range.value})")
            return self._state

        try:
            series = ingest(raw_points, self._max_points)
        except EmptySeriesError as e:
            logger.warning(f"No usable chart data for {symbol} ({time_range.value})")
            return self._fail(e.message)

        self._series = series
        self._state = ChartState.READY
        self.reset_zoom()
        logger.info(f"Chart data ready for {symbol} ({time_range.value}): {len(series)} points")
        return self._state

    async def set_symbol(self, symbol: str) -> ChartState:
        """Switch symbol; resets state and refetches."""
        self._symbol = _normalize_symbol(symbol)
        return await self.load()

    async def set_time_range(self, time_range: Union[TimeRange, str]) -> ChartState:
        """Switch time range; resets state and refetches."""
        self._time_range = TimeRange(time_range)
        return await self.load()

    async def retry(self) -> ChartState:
        """Refetch the current symbol/range (e.g. pull-to-refresh)."""
        return await self.load()

    def close(self) -> None:
        """Tear down: cancel the in-flight fetch and ignore late responses."""
        self._closed = True
        self._generation += 1
        self._cancel_pending()

    # ============ Zoom / Pan ============

    def set_zoom_window(self, start: float, end: float) -> ZoomWindow:
        """
        Set the visible window in percent. Returns the effective window,
        which may be wider than requested to keep the minimum point count.
        """
        total = len(self._series)
        if total == 0:
            lo_pct = max(0.0, min(100.0, start))
            hi_pct = max(0.0, min(100.0, end))
            self._window = ZoomWindow(start=min(lo_pct, hi_pct), end=max(lo_pct, hi_pct))
            self._range = (0, 0)
            return self._window

        lo, hi = window_to_index_range(start, end, total, self._min_visible)
        self._range = (lo, hi)
        self._window = index_range_to_window(lo, hi, total)
        return self._window

    def _apply_gesture(self, target: ZoomWindow) -> ZoomWindow:
        # A gesture that leaves the window in place keeps the current index range.
        if math.isclose(target.start, self._window.start, abs_tol=1e-9) and math.isclose(
            target.end, self._window.end, abs_tol=1e-9
        ):
            return self._window
        return self.set_zoom_window(target.start, target.end)

    def apply_pinch(self, scale: float, center_percent: float) -> ZoomWindow:
        """Continuous pinch update; scale > 1 zooms in."""
        return self._apply_gesture(pinch(self._window, scale, center_percent))

    def apply_pan(self, delta_percent: float) -> ZoomWindow:
        """Shift the window by a percentage of the full series."""
        return self._apply_gesture(pan(self._window, delta_percent))

    def pan_by_pixels(self, translation_px: float, chart_width_px: float) -> ZoomWindow:
        """Two-pointer pan gesture in screen pixels."""
        return self.apply_pan(pixels_to_percent(self._window, translation_px, chart_width_px))

    def reset_zoom(self) -> ZoomWindow:
        return self.set_zoom_window(FULL_WINDOW.start, FULL_WINDOW.end)

    # ============ Indicators ============

    def set_active_indicators(self, indicator_ids: Iterable[str]) -> tuple[IndicatorKind, ...]:
        """
        Select overlays by id. Unknown ids raise UnknownIndicatorError and
        leave the selection untouched.
        """
        kinds = tuple(dict.fromkeys(parse_indicator_kind(i) for i in indicator_ids))
        if kinds != self._active:
            self._active = kinds
            self._computed = None
        return self._active

    def _indicator_results(self) -> dict[IndicatorKind, IndicatorResult]:
        # Computed once per (series, selection); zooming only re-filters.
        if self._computed is None:
            self._computed = self._indicators.compute_all(self._series, self._active)
        return self._computed

    # ============ Presentation ============

    def get_visible_slice(self) -> list[PricePoint]:
        if self._state != ChartState.READY:
            return []
        lo, hi = self._range
        return list(self._series[lo:hi])

    def get_domain(self) -> Domain:
        return compute_domain(self.get_visible_slice())

    def get_active_indicator_overlays(self) -> list[IndicatorOverlay]:
        if self._state != ChartState.READY or not self._active:
            return []
        visible = {p.timestamp for p in self.get_visible_slice()}
        return self._indicators.build_overlays(
            self._series,
            self._active,
            visible,
            computed=self._indicator_results(),
        )

    def get_change_summary(self) -> ChangeSummary:
        return change_summary(self._series)

    def get_latest_point(self) -> Optional[PricePoint]:
        return self._series[-1] if self._series else None

    def snapshot(self) -> ChartSnapshot:
        """Everything needed for one render pass."""
        return ChartSnapshot(
            symbol=self._symbol,
            time_range=self._time_range,
            state=self._state,
            error=self._error,
            total_points=len(self._series),
            window=self._window,
            points=self.get_visible_slice(),
            domain=self.get_domain(),
            overlays=self.get_active_indicator_overlays(),
            change=self.get_change_summary(),
        )
