"""
Chart Series Sanitizer

Raw points from a data source -> sanitized, sorted, bounded Series.
Each stage returns a new sequence; input is never mutated.
"""

import logging
import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Iterable, Optional

from chartcore.core.config import settings
from chartcore.schemas.chart import PricePoint, Series
from chartcore.services.base import EmptySeriesError, InvalidPointError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("timestamp", "value", "open", "high", "low", "close")


def _field(raw: Any, name: str) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(name)
    return getattr(raw, name, None)


def _to_number(value: Any) -> float:
    """Coerce to float; anything unusable becomes NaN."""
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, datetime):
        return value.timestamp() * 1000
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def sanitize_point(raw: Any) -> PricePoint:
    """
    Validate one raw point and repair its high/low.

    ``value`` and ``close`` are interchangeable on input: whichever is
    missing is taken from the other.

    Raises:
        InvalidPointError: a required field is missing or non-finite
    """
    if raw is None:
        raise InvalidPointError("Empty point")

    numbers = {name: _to_number(_field(raw, name)) for name in REQUIRED_FIELDS}
    if math.isnan(numbers["value"]):
        numbers["value"] = numbers["close"]
    if math.isnan(numbers["close"]):
        numbers["close"] = numbers["value"]

    bad = [name for name, v in numbers.items() if not math.isfinite(v)]
    if bad:
        raise InvalidPointError(
            f"Non-finite fields: {', '.join(bad)}", details={"fields": bad}
        )

    o, h, l, c = numbers["open"], numbers["high"], numbers["low"], numbers["close"]
    high = max(h, o, c, l)
    low = min(l, o, c, h)
    if not (math.isfinite(high) and math.isfinite(low)):
        raise InvalidPointError("Non-finite high/low after correction")

    volume: Optional[float] = _to_number(_field(raw, "volume"))
    if not math.isfinite(volume) or volume < 0:
        volume = None

    return PricePoint(
        timestamp=int(numbers["timestamp"]),
        value=numbers["value"],
        open=o,
        high=high,
        low=low,
        close=c,
        volume=volume,
    )


def ingest(raw_points: Optional[Iterable[Any]], max_points: int = None) -> Series:
    """
    Sanitize, sort and trim raw points into a Series.

    Args:
        raw_points: points as returned by a data source
        max_points: working-set cap (defaults to settings.max_series_points)

    Returns:
        Tuple of PricePoint, ascending by timestamp, at most max_points long

    Raises:
        EmptySeriesError: nothing survived sanitization
    """
    limit = max_points or settings.max_series_points
    raw_list = list(raw_points or [])
    if not raw_list:
        raise EmptySeriesError()

    points = []
    dropped = 0
    for raw in raw_list:
        try:
            points.append(sanitize_point(raw))
        except InvalidPointError:
            dropped += 1

    if dropped:
        logger.debug(f"Dropped {dropped}/{len(raw_list)} invalid chart points")

    if not points:
        raise EmptySeriesError(details={"received": len(raw_list), "dropped": dropped})

    # Stable sort; duplicate timestamps keep source order
    points.sort(key=lambda p: p.timestamp)

    if len(points) > limit:
        logger.debug(f"Trimmed long dataset: {len(points)} -> {limit} points")
        points = points[-limit:]

    return tuple(points)
