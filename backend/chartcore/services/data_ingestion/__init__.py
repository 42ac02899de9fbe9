"""
Chart Data Sources

CONTRACT:
    Input:  symbol + TimeRange
    Output: list of raw OHLC points (unvalidated)

RESPONSIBILITIES:
    - Fetch aggregates from Polygon.io
    - Generate mock walks when no real source is available
    - Fall back across providers
    - Cache fetched series (Redis / memory)
"""

from chartcore.services.data_ingestion.interface import DataSourceInterface, RawPoint
from chartcore.services.data_ingestion.mock_data import MockDataSource
from chartcore.services.data_ingestion.polygon_adapter import PolygonDataSource
from chartcore.services.data_ingestion.service import (
    CachedDataSource,
    FallbackDataSource,
    build_data_source,
    close_data_source,
    get_data_source,
)

__all__ = [
    "DataSourceInterface",
    "RawPoint",
    "MockDataSource",
    "PolygonDataSource",
    "CachedDataSource",
    "FallbackDataSource",
    "build_data_source",
    "close_data_source",
    "get_data_source",
]
