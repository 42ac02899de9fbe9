"""
Indicator API Endpoints

Registry listing and oscillator series (RSI, MACD) for the technicals tab.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from chartcore.schemas.chart import ChartState, IndicatorPoint, MACDSeries, TimeRange
from chartcore.services.chart import ChartSession
from chartcore.services.data_ingestion import DataSourceInterface, get_data_source
from chartcore.services.indicators import get_available_indicators
from chartcore.services.indicators.calculations import macd, rsi

logger = logging.getLogger(__name__)

router = APIRouter()


class IndicatorInfo(BaseModel):
    """Registry entry as shown in the indicator picker."""
    id: str
    name: str
    color: str
    is_band: bool


class MomentumResponse(BaseModel):
    """RSI and MACD over the full series."""
    symbol: str
    time_range: TimeRange
    points: int
    rsi: list[IndicatorPoint]
    macd: MACDSeries


@router.get("", response_model=list[IndicatorInfo])
async def list_indicators():
    """Chart overlays available for selection."""
    return [
        IndicatorInfo(id=d.id, name=d.name, color=d.color, is_band=d.is_band)
        for d in get_available_indicators()
    ]


@router.get("/{symbol}/momentum", response_model=MomentumResponse)
async def get_momentum(
    symbol: str,
    time_range: TimeRange = Query(default=TimeRange.M3, alias="range"),
    rsi_period: int = Query(default=14, ge=2, le=100),
    data_source: DataSourceInterface = Depends(get_data_source),
):
    """
    Get RSI and MACD for a symbol.

    Series are empty (not an error) when the range is too short for the
    indicator's warm-up period.
    """
    session = ChartSession(data_source, symbol, time_range)
    try:
        state = await session.load()
        if state == ChartState.ERROR:
            raise HTTPException(status_code=404, detail=session.error)

        series = session.series
        return MomentumResponse(
            symbol=session.symbol,
            time_range=session.time_range,
            points=len(series),
            rsi=rsi(series, rsi_period),
            macd=macd(series),
        )
    finally:
        session.close()
