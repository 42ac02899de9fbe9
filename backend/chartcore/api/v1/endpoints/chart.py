"""
Chart API Endpoints

One-shot chart render: fetch, sanitize, zoom, overlay.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from chartcore.schemas.chart import ChartSnapshot, ChartState, TimeRange
from chartcore.services.base import UnknownIndicatorError
from chartcore.services.chart import ChartSession
from chartcore.services.data_ingestion import DataSourceInterface, get_data_source

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_indicator_ids(indicators: Optional[str]) -> list[str]:
    """Comma-separated query value -> ids."""
    if not indicators:
        return []
    return [i.strip() for i in indicators.split(",") if i.strip()]


@router.get("/{symbol}", response_model=ChartSnapshot)
async def get_chart(
    symbol: str,
    time_range: TimeRange = Query(default=TimeRange.M1, alias="range"),
    zoom_from: float = Query(default=0.0, ge=0, le=100),
    zoom_to: float = Query(default=100.0, ge=0, le=100),
    indicators: Optional[str] = Query(default=None, description="Comma-separated indicator ids"),
    data_source: DataSourceInterface = Depends(get_data_source),
):
    """
    Get the visible slice of a chart with its overlays.

    Returns:
        - Visible points for the requested zoom window (at least 10 when available)
        - Y-axis domain of the visible points
        - Indicator overlays computed on the full series
        - Change over the whole range
    """
    try:
        session = ChartSession(
            data_source,
            symbol,
            time_range,
            indicators=parse_indicator_ids(indicators),
        )
    except UnknownIndicatorError as e:
        raise HTTPException(status_code=400, detail=e.message)

    try:
        state = await session.load()
        if state == ChartState.ERROR:
            raise HTTPException(status_code=404, detail=session.error)

        session.set_zoom_window(zoom_from, zoom_to)
        return session.snapshot()
    finally:
        session.close()
