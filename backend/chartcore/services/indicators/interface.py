"""
Indicator Engine Service Interface

Defines the contract for the indicator overlay layer.
"""

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, Optional

from chartcore.services.base import BaseService
from chartcore.schemas.chart import IndicatorOverlay, Series


@dataclass
class OverlayRequest:
    """Indicators to draw over one chart render pass."""

    series: Series
    indicator_ids: list[str]
    visible_timestamps: Optional[set[int]] = field(default=None)


class IndicatorServiceInterface(BaseService[OverlayRequest, list[IndicatorOverlay]]):
    """
    Indicator Engine Service Contract.

    INPUT: OverlayRequest
        - series: full sanitized Series (never the zoomed slice)
        - indicator_ids: registry ids to compute
        - visible_timestamps: timestamps of the visible slice (None = all)

    OUTPUT: list[IndicatorOverlay]
        - One overlay per indicator that had enough data, in request order
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, request: OverlayRequest) -> list[IndicatorOverlay]:
        """Compute and filter overlays for one render pass."""
        pass

    @abstractmethod
    def build_overlays(
        self,
        series: Series,
        indicator_ids: Iterable[str],
        visible_timestamps: Optional[set[int]] = None,
    ) -> list[IndicatorOverlay]:
        """Synchronous variant used by gesture handlers."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
