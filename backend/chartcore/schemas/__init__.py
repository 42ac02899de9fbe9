"""
StockChart Schema Contracts

Shapes shared between the indicator engine, the chart series manager and
the API layer.
"""

from chartcore.schemas.chart import (
    TimeRange,
    ChartState,
    PricePoint,
    Series,
    IndicatorPoint,
    IndicatorSeries,
    BandSeries,
    MACDSeries,
    ZoomWindow,
    Domain,
    IndicatorOverlay,
    ChangeSummary,
    ChartSnapshot,
)

__all__ = [
    "TimeRange",
    "ChartState",
    "PricePoint",
    "Series",
    "IndicatorPoint",
    "IndicatorSeries",
    "BandSeries",
    "MACDSeries",
    "ZoomWindow",
    "Domain",
    "IndicatorOverlay",
    "ChangeSummary",
    "ChartSnapshot",
]
