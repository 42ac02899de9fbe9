"""
Chart label helpers.
"""

import math
from datetime import datetime
from typing import Any, Sequence
from zoneinfo import ZoneInfo

from chartcore.schemas.chart import ChangeSummary, PricePoint, TimeRange

UTC = ZoneInfo("UTC")


def format_price(value: Any) -> str:
    """$-prefixed price with 2 decimals; junk renders as $0.00."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "$0.00"
    if not math.isfinite(number):
        return "$0.00"
    return f"${number:.2f}"


def format_timestamp(
    timestamp: Any, time_range: TimeRange = TimeRange.D1, tz: ZoneInfo = UTC
) -> str:
    """Time of day for intraday charts, 'Mon D' otherwise."""
    try:
        dt = datetime.fromtimestamp(float(timestamp) / 1000, tz=tz)
    except (TypeError, ValueError, OverflowError, OSError):
        return ""

    if TimeRange(time_range) == TimeRange.D1:
        return dt.strftime("%I:%M %p")
    return f"{dt:%b} {dt.day}"


def change_summary(series: Sequence[PricePoint]) -> ChangeSummary:
    """Percent change from the first to the last value."""
    if not series:
        return ChangeSummary()

    start = series[0].value
    end = series[-1].value

    safe_start = start if math.isfinite(start) and start != 0 else None
    if math.isfinite(end):
        safe_end = end
    else:
        safe_end = safe_start if safe_start is not None else 0.0

    percent = ((safe_end - safe_start) / safe_start) * 100 if safe_start is not None else 0.0

    return ChangeSummary(
        change_percent=percent if math.isfinite(percent) else 0.0,
        is_positive=safe_end >= (safe_start if safe_start is not None else safe_end),
    )
