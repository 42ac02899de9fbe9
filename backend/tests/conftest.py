"""Shared fixtures."""

import pytest

from tests.helpers import make_series, wave


@pytest.fixture
def fifty_closes() -> list[float]:
    return [100.0 + i + (i % 3) for i in range(50)]


@pytest.fixture
def series_50(fifty_closes):
    return make_series(fifty_closes)


@pytest.fixture
def series_100():
    return make_series(wave(100))
