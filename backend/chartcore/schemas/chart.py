"""
Chart Contracts

Input:  raw points from a data source (dicts with timestamp/open/high/low/close)
Output: sanitized Series, zoom window, visible slice, domain, indicator overlays

A Series is a tuple of PricePoint sorted ascending by timestamp.
"""

from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================


class TimeRange(str, Enum):
    D1 = "1D"
    W1 = "1W"
    M1 = "1M"
    M3 = "3M"
    Y1 = "1Y"
    ALL = "ALL"


class ChartState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


# =============================================================================
# SERIES
# =============================================================================


class PricePoint(BaseModel):
    """One sanitized OHLC sample. high/low already cover open and close."""

    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(..., description="Milliseconds since epoch")
    value: float = Field(..., description="Close price used for line mode")
    open: float
    high: float
    low: float
    close: float
    volume: Optional[float] = Field(default=None, ge=0)


Series = tuple[PricePoint, ...]


class IndicatorPoint(BaseModel):
    """One value of an indicator series."""

    model_config = ConfigDict(frozen=True)

    timestamp: int
    value: float


IndicatorSeries = list[IndicatorPoint]


class BandSeries(BaseModel):
    """Band-style indicator output (Bollinger Bands)."""

    upper: list[IndicatorPoint] = Field(default_factory=list)
    middle: list[IndicatorPoint] = Field(default_factory=list)
    lower: list[IndicatorPoint] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.upper or self.middle or self.lower)


class MACDSeries(BaseModel):
    """MACD line, signal line and histogram."""

    macd: list[IndicatorPoint] = Field(default_factory=list)
    signal: list[IndicatorPoint] = Field(default_factory=list)
    histogram: list[IndicatorPoint] = Field(default_factory=list)


# =============================================================================
# VIEW
# =============================================================================


class ZoomWindow(BaseModel):
    """Visible part of a Series as a percentage range [from, to]."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    start: float = Field(default=0.0, alias="from", ge=0, le=100)
    end: float = Field(default=100.0, alias="to", ge=0, le=100)

    @property
    def width(self) -> float:
        return self.end - self.start


class Domain(BaseModel):
    """Vertical extent of the visible slice."""

    min: float
    max: float


class IndicatorOverlay(BaseModel):
    """An indicator filtered to the visible slice, ready for drawing."""

    id: str
    name: str
    color: str
    data: Union[BandSeries, list[IndicatorPoint]]

    @property
    def is_band(self) -> bool:
        return isinstance(self.data, BandSeries)


class ChangeSummary(BaseModel):
    """Change from first to last value of a series."""

    change_percent: float = 0.0
    is_positive: bool = True


class ChartSnapshot(BaseModel):
    """Everything the presentation layer needs for one render pass."""

    symbol: str
    time_range: TimeRange
    state: ChartState
    error: Optional[str] = None
    total_points: int = 0
    window: ZoomWindow = Field(default_factory=ZoomWindow)
    points: list[PricePoint] = Field(default_factory=list)
    domain: Domain = Field(default_factory=lambda: Domain(min=0, max=1))
    overlays: list[IndicatorOverlay] = Field(default_factory=list)
    change: ChangeSummary = Field(default_factory=ChangeSummary)
