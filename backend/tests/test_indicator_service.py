"""Indicator registry lookup and overlay building."""

import pytest

from chartcore.schemas.chart import BandSeries
from chartcore.services.base import IndicatorComputeError, UnknownIndicatorError
from chartcore.services.indicators import (
    IndicatorKind,
    IndicatorService,
    OverlayRequest,
    get_available_indicators,
    get_indicator,
)
from chartcore.services.indicators.calculations import sma
from tests.helpers import make_series, wave


def test_registry_lists_fixed_descriptors_in_order():
    descriptors = get_available_indicators()

    assert [d.id for d in descriptors] == [
        "sma_20",
        "sma_50",
        "sma_200",
        "ema_12",
        "ema_26",
        "bollinger",
    ]
    assert [d.is_band for d in descriptors] == [False] * 5 + [True]
    assert get_indicator("sma_20").color == "#2196F3"
    assert get_indicator("bollinger").name == "Bollinger Bands"


def test_lookup_accepts_kind_and_normalizes_case():
    assert get_indicator(IndicatorKind.EMA_26) is get_indicator(" EMA_26 ")


def test_unknown_indicator_is_explicit():
    with pytest.raises(UnknownIndicatorError) as exc:
        get_indicator("vwap")
    assert "vwap" in exc.value.message
    assert "sma_20" in exc.value.details["available"]


def test_descriptor_compute_matches_engine(series_100):
    assert get_indicator("sma_50").compute(series_100) == sma(series_100, 50)
    assert isinstance(get_indicator("bollinger").compute(series_100), BandSeries)


def test_compute_raises_on_insufficient_data(series_50):
    service = IndicatorService()
    with pytest.raises(IndicatorComputeError):
        service.compute("sma_200", series_50)
    with pytest.raises(IndicatorComputeError):
        service.compute("bollinger", series_50[:10])


def test_compute_all_skips_indicators_without_data(series_50):
    results = IndicatorService().compute_all(series_50, ["sma_20", "sma_200", "sma_20", "ema_26"])
    assert list(results) == [IndicatorKind.SMA_20, IndicatorKind.EMA_26]


def test_overlays_filtered_to_visible_timestamps(series_100):
    visible = {p.timestamp for p in series_100[60:80]}
    overlays = IndicatorService().build_overlays(
        series_100, ["bollinger", "sma_200", "sma_20"], visible
    )

    assert [o.id for o in overlays] == ["bollinger", "sma_20"]
    bands, sma20 = overlays
    assert bands.is_band and not sma20.is_band
    for points in (bands.data.upper, bands.data.middle, bands.data.lower, sma20.data):
        assert len(points) == 20
        assert {p.timestamp for p in points} <= visible


def test_overlay_values_come_from_full_history(series_100):
    visible = {p.timestamp for p in series_100[:25]}
    overlay = IndicatorService().build_overlays(series_100, ["sma_20"], visible)[0]
    full = {p.timestamp: p.value for p in sma(series_100, 20)}

    # only points 19..24 have a value; they match the unzoomed series
    assert len(overlay.data) == 6
    assert all(p.value == full[p.timestamp] for p in overlay.data)


async def test_execute_and_health():
    service = IndicatorService()
    series = make_series(wave(30))
    overlays = await service.execute(OverlayRequest(series=series, indicator_ids=["ema_12"]))

    assert len(overlays) == 1
    assert len(overlays[0].data) == 19
    assert await service.health_check() is True
