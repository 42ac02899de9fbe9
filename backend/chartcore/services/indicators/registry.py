"""
Indicator Registry

Closed set of chart overlay indicators. Adding an indicator means adding a
kind and one descriptor below; nothing else changes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence, Union

from chartcore.schemas.chart import BandSeries, IndicatorSeries, PricePoint
from chartcore.services.base import UnknownIndicatorError
from chartcore.services.indicators.calculations import bollinger_bands, ema, sma

IndicatorResult = Union[IndicatorSeries, BandSeries]


class IndicatorKind(str, Enum):
    SMA_20 = "sma_20"
    SMA_50 = "sma_50"
    SMA_200 = "sma_200"
    EMA_12 = "ema_12"
    EMA_26 = "ema_26"
    BOLLINGER = "bollinger"


@dataclass(frozen=True)
class IndicatorDescriptor:
    """Static metadata plus the compute function for one indicator."""

    kind: IndicatorKind
    name: str
    color: str
    compute: Callable[[Sequence[PricePoint]], IndicatorResult]
    is_band: bool = False

    @property
    def id(self) -> str:
        return self.kind.value


_DESCRIPTORS = (
    IndicatorDescriptor(
        kind=IndicatorKind.SMA_20,
        name="SMA (20)",
        color="#2196F3",
        compute=lambda data: sma(data, 20),
    ),
    IndicatorDescriptor(
        kind=IndicatorKind.SMA_50,
        name="SMA (50)",
        color="#FF9800",
        compute=lambda data: sma(data, 50),
    ),
    IndicatorDescriptor(
        kind=IndicatorKind.SMA_200,
        name="SMA (200)",
        color="#9C27B0",
        compute=lambda data: sma(data, 200),
    ),
    IndicatorDescriptor(
        kind=IndicatorKind.EMA_12,
        name="EMA (12)",
        color="#00BCD4",
        compute=lambda data: ema(data, 12),
    ),
    IndicatorDescriptor(
        kind=IndicatorKind.EMA_26,
        name="EMA (26)",
        color="#FF5722",
        compute=lambda data: ema(data, 26),
    ),
    IndicatorDescriptor(
        kind=IndicatorKind.BOLLINGER,
        name="Bollinger Bands",
        color="#673AB7",
        compute=lambda data: bollinger_bands(data, 20, 2.0),
        is_band=True,
    ),
)

INDICATOR_REGISTRY: dict[IndicatorKind, IndicatorDescriptor] = {
    d.kind: d for d in _DESCRIPTORS
}


def get_available_indicators() -> list[IndicatorDescriptor]:
    """All registered indicators in display order."""
    return list(_DESCRIPTORS)


def parse_indicator_kind(indicator_id: Union[str, IndicatorKind]) -> IndicatorKind:
    """Validate an indicator id. Raises UnknownIndicatorError."""
    if isinstance(indicator_id, IndicatorKind):
        return indicator_id
    try:
        return IndicatorKind(str(indicator_id).strip().lower())
    except ValueError:
        raise UnknownIndicatorError(
            f"Unknown indicator: {indicator_id}",
            details={"available": [k.value for k in IndicatorKind]},
        ) from None


def get_indicator(indicator_id: Union[str, IndicatorKind]) -> IndicatorDescriptor:
    """Look up a descriptor by id. Raises UnknownIndicatorError."""
    return INDICATOR_REGISTRY[parse_indicator_kind(indicator_id)]
