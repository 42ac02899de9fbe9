"""
Indicator Engine Service

CONTRACT:
    Input:  OverlayRequest (full Series + indicator ids + visible timestamps)
    Output: list[IndicatorOverlay]

RESPONSIBILITIES:
    - Calculate SMA, EMA, RSI, MACD and Bollinger Bands
    - Expose the closed registry of chart overlay indicators
    - Filter indicator output to the visible slice

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from chartcore.services.indicators.interface import (
    IndicatorServiceInterface,
    OverlayRequest,
)
from chartcore.services.indicators.registry import (
    IndicatorKind,
    IndicatorDescriptor,
    get_available_indicators,
    get_indicator,
)
from chartcore.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "IndicatorServiceInterface",
    "OverlayRequest",
    "IndicatorKind",
    "IndicatorDescriptor",
    "get_available_indicators",
    "get_indicator",
    "IndicatorService",
    "get_indicator_service",
]
