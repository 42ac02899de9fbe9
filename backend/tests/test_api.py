"""HTTP surface: chart snapshot, indicator registry, momentum, health."""

import pytest
from fastapi.testclient import TestClient

from chartcore.main import app
from chartcore.services.base import FetchError
from chartcore.services.data_ingestion import get_data_source
from tests.helpers import FakeDataSource, make_raw_points, wave


@pytest.fixture
def source():
    return FakeDataSource(
        {
            "AAPL": make_raw_points(wave(100)),
            "DOWN": FetchError("Polygon.io API error: 503 Service Unavailable"),
        }
    )


@pytest.fixture
def client(source):
    app.dependency_overrides[get_data_source] = lambda: source
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_indicators(client):
    response = client.get("/api/v1/indicators")

    assert response.status_code == 200
    body = response.json()
    assert [i["id"] for i in body] == ["sma_20", "sma_50", "sma_200", "ema_12", "ema_26", "bollinger"]
    assert body[-1] == {
        "id": "bollinger",
        "name": "Bollinger Bands",
        "color": "#673AB7",
        "is_band": True,
    }


def test_chart_zoomed_with_overlays(client, source):
    response = client.get(
        "/api/v1/chart/aapl",
        params={"range": "1M", "zoom_from": 95, "zoom_to": 100, "indicators": "sma_20, bollinger"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["symbol"] == "AAPL"
    assert body["state"] == "ready"
    assert body["total_points"] == 100
    assert len(body["points"]) == 10
    assert body["window"] == {"from": 90.0, "to": 100.0}
    assert [o["id"] for o in body["overlays"]] == ["sma_20", "bollinger"]
    assert len(body["overlays"][0]["data"]) == 10
    assert set(body["overlays"][1]["data"]) == {"upper", "middle", "lower"}
    assert body["domain"]["min"] <= body["domain"]["max"]
    assert source.calls[0][0] == "AAPL"


def test_chart_defaults_to_full_window(client):
    body = client.get("/api/v1/chart/AAPL").json()
    assert body["time_range"] == "1M"
    assert len(body["points"]) == 100
    assert body["overlays"] == []


def test_chart_fetch_error_is_404(client):
    response = client.get("/api/v1/chart/DOWN")
    assert response.status_code == 404
    assert response.json()["detail"] == "Polygon.io API error: 503 Service Unavailable"


def test_chart_without_data_is_404(client):
    response = client.get("/api/v1/chart/EMPTY")
    assert response.status_code == 404
    assert response.json()["detail"] == "No chart data available"


def test_chart_unknown_indicator_is_400(client):
    response = client.get("/api/v1/chart/AAPL", params={"indicators": "sma_20,vwap"})
    assert response.status_code == 400
    assert "vwap" in response.json()["detail"]


def test_chart_rejects_out_of_range_zoom(client):
    assert client.get("/api/v1/chart/AAPL", params={"zoom_to": 150}).status_code == 422


def test_momentum(client):
    response = client.get("/api/v1/indicators/AAPL/momentum", params={"rsi_period": 14})

    assert response.status_code == 200
    body = response.json()
    assert body["points"] == 100
    assert body["time_range"] == "3M"
    assert len(body["rsi"]) == 86
    assert len(body["macd"]["macd"]) == 75
    assert len(body["macd"]["signal"]) == 67
    assert len(body["macd"]["histogram"]) == 67
