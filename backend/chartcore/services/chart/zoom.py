"""
Zoom Window Math

Pure state transitions for the visible window of a Series. Gesture
recognizers translate raw touch events into these calls; nothing here does
I/O or keeps state.
"""

import math
from typing import Sequence

from chartcore.core.config import settings
from chartcore.schemas.chart import Domain, PricePoint, ZoomWindow

FULL_WINDOW = ZoomWindow(start=0.0, end=100.0)

# Percent -> index products within this many digits of an integer snap to it.
SNAP_DIGITS = 9


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _clamp_percent(value: float, fallback: float) -> float:
    if value is None or not math.isfinite(value):
        return fallback
    return _clamp(float(value), 0.0, 100.0)


def _slide_into_bounds(start: float, end: float) -> ZoomWindow:
    """Shift [start, end] back inside [0, 100] keeping its width."""
    if start < 0:
        end -= start
        start = 0.0
    if end > 100:
        start -= end - 100
        end = 100.0
    return ZoomWindow(start=_clamp(start, 0.0, 100.0), end=_clamp(end, 0.0, 100.0))


def window_to_index_range(
    start: float, end: float, total: int, min_points: int = None
) -> tuple[int, int]:
    """
    Map a percentage window to a [lo, hi) index range over ``total`` points.

    The range always holds at least min(min_points, total) points: the start
    is pulled back first (keeping the end), then the end is pushed forward
    if the start is already at 0.
    Mapping the effective window of a range back gives the same range.
    """
    if total <= 0:
        return 0, 0

    floor_points = min(min_points or settings.min_visible_points, total)
    start = _clamp_percent(start, 0.0)
    end = _clamp_percent(end, 100.0)
    if end < start:
        start, end = end, start

    lo = int(_clamp(math.floor(round(start / 100 * total, SNAP_DIGITS)), 0, total))
    hi = int(_clamp(math.ceil(round(end / 100 * total, SNAP_DIGITS)), 0, total))

    if hi - lo < floor_points:
        lo = max(0, hi - floor_points)
        if hi - lo < floor_points:
            hi = min(total, lo + floor_points)

    return lo, hi


def index_range_to_window(lo: int, hi: int, total: int) -> ZoomWindow:
    """Effective percentage window for an index range."""
    if total <= 0:
        return FULL_WINDOW
    return ZoomWindow(
        start=_clamp(lo / total * 100, 0.0, 100.0),
        end=_clamp(hi / total * 100, 0.0, 100.0),
    )


def pinch(
    window: ZoomWindow,
    scale: float,
    center_percent: float,
    min_width: float = None,
) -> ZoomWindow:
    """
    Zoom around a fixed center. scale > 1 zooms in (fingers spreading).

    Non-positive or non-finite scales leave the window unchanged.
    """
    if scale is None or not math.isfinite(scale) or scale <= 0:
        return window

    min_width = settings.min_zoom_width_percent if min_width is None else min_width
    width = _clamp(window.width / scale, min_width, 100.0)
    center = _clamp_percent(center_percent, (window.start + window.end) / 2)

    return _slide_into_bounds(center - width / 2, center + width / 2)


def pan(window: ZoomWindow, delta_percent: float) -> ZoomWindow:
    """Shift the window by delta_percent, sliding at the edges."""
    if delta_percent is None or not math.isfinite(delta_percent):
        return window
    return _slide_into_bounds(window.start + delta_percent, window.end + delta_percent)


def pixels_to_percent(
    window: ZoomWindow, translation_px: float, chart_width_px: float
) -> float:
    """
    Convert a horizontal drag into a window shift.

    Dragging right (positive translation) moves towards older data. A full
    chart-width drag shifts the window by its own width.
    """
    if not chart_width_px or chart_width_px <= 0 or not math.isfinite(translation_px):
        return 0.0
    return -(translation_px / chart_width_px) * window.width


def compute_domain(points: Sequence[PricePoint]) -> Domain:
    """Min of lows/values and max of highs/values over the visible slice."""
    if not points:
        return Domain(min=0, max=1)

    low = min(min(p.low, p.value) for p in points)
    high = max(max(p.high, p.value) for p in points)
    return Domain(min=low, max=high)
