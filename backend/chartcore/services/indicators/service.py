"""
Indicator Engine Service Implementation

Computes registry indicators over the full Series and filters them down
to the visible slice. Pure Python/NumPy calculations.
"""

import logging
from typing import Iterable, Optional

from chartcore.schemas.chart import BandSeries, IndicatorOverlay, Series
from chartcore.services.base import IndicatorComputeError
from chartcore.services.indicators.interface import (
    IndicatorServiceInterface,
    OverlayRequest,
)
from chartcore.services.indicators.registry import (
    IndicatorKind,
    IndicatorResult,
    get_indicator,
    parse_indicator_kind,
)

logger = logging.getLogger(__name__)


def filter_to_timestamps(
    result: IndicatorResult, timestamps: Optional[set[int]]
) -> IndicatorResult:
    """Keep only points whose timestamp is in the visible slice."""
    if timestamps is None:
        return result
    if isinstance(result, BandSeries):
        return BandSeries(
            upper=[p for p in result.upper if p.timestamp in timestamps],
            middle=[p for p in result.middle if p.timestamp in timestamps],
            lower=[p for p in result.lower if p.timestamp in timestamps],
        )
    return [p for p in result if p.timestamp in timestamps]


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Indicator math always sees the full history, so values near the left
    edge of a zoomed view match the unzoomed chart.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    def compute(self, indicator_id: str, series: Series) -> IndicatorResult:
        """
        Compute one indicator over the full series.

        Raises:
            UnknownIndicatorError: id is not registered
            IndicatorComputeError: series too short for the indicator
        """
        descriptor = get_indicator(indicator_id)
        result = descriptor.compute(series)

        empty = result.is_empty() if isinstance(result, BandSeries) else not result
        if empty:
            raise IndicatorComputeError(
                f"Insufficient data for {descriptor.name} ({len(series)} points)",
                details={"indicator": descriptor.id, "points": len(series)},
            )
        return result

    def compute_all(
        self, series: Series, indicator_ids: Iterable[str]
    ) -> dict[IndicatorKind, IndicatorResult]:
        """Compute a batch; indicators without enough data are left out."""
        results: dict[IndicatorKind, IndicatorResult] = {}

        for indicator_id in indicator_ids:
            kind = parse_indicator_kind(indicator_id)
            if kind in results:
                continue
            try:
                results[kind] = self.compute(kind, series)
            except IndicatorComputeError as e:
                logger.debug(f"Skipping overlay {kind.value}: {e.message}")

        return results

    def build_overlays(
        self,
        series: Series,
        indicator_ids: Iterable[str],
        visible_timestamps: Optional[set[int]] = None,
        computed: Optional[dict[IndicatorKind, IndicatorResult]] = None,
    ) -> list[IndicatorOverlay]:
        """
        Build drawable overlays for the visible slice.

        Args:
            series: full Series
            indicator_ids: ids in display order
            visible_timestamps: timestamps of the visible slice (None = all)
            computed: results already computed for this series, reused as-is
        """
        ids = [parse_indicator_kind(i) for i in indicator_ids]
        if computed is None:
            computed = self.compute_all(series, ids)

        overlays = []
        for kind in ids:
            result = computed.get(kind)
            if result is None:
                continue
            descriptor = get_indicator(kind)
            overlays.append(
                IndicatorOverlay(
                    id=descriptor.id,
                    name=descriptor.name,
                    color=descriptor.color,
                    data=filter_to_timestamps(result, visible_timestamps),
                )
            )
        return overlays

    async def execute(self, request: OverlayRequest) -> list[IndicatorOverlay]:
        """Compute and filter overlays for one render pass."""
        return self.build_overlays(
            request.series,
            request.indicator_ids,
            request.visible_timestamps,
        )

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
