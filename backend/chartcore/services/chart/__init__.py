"""
Chart Series Manager

CONTRACT:
    Input:  raw points from a DataSource for (symbol, time range)
    Output: visible slice, y-domain and indicator overlays for rendering

RESPONSIBILITIES:
    - Sanitize raw OHLC points (drop non-finite, repair high/low)
    - Sort ascending and trim to the most recent points
    - Maintain a percentage zoom window with a minimum visible point count
    - Pinch / pan as pure state transitions
    - Discard fetch responses that went stale
"""

from chartcore.services.chart.sanitize import ingest, sanitize_point
from chartcore.services.chart.session import ChartSession
from chartcore.services.chart.formatting import (
    change_summary,
    format_price,
    format_timestamp,
)

__all__ = [
    "ingest",
    "sanitize_point",
    "ChartSession",
    "change_summary",
    "format_price",
    "format_timestamp",
]
