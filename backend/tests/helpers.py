"""Raw point factories and a scriptable data source for tests."""

import asyncio
import math
from typing import Optional, Union

from chartcore.schemas.chart import TimeRange
from chartcore.services.chart.sanitize import ingest
from chartcore.services.data_ingestion.interface import DataSourceInterface

START_TS = 1_700_000_000_000
DAY_MS = 86_400_000


def make_raw_points(closes, start_ts: int = START_TS, step: int = DAY_MS) -> list[dict]:
    """Valid daily points with a 1% high/low envelope around each close."""
    points = []
    for i, close in enumerate(closes):
        points.append(
            {
                "timestamp": start_ts + i * step,
                "value": close,
                "open": close,
                "high": close * 1.01,
                "low": close * 0.99,
                "close": close,
                "volume": 1000 + i,
            }
        )
    return points


def wave(n: int, base: float = 100.0, amplitude: float = 5.0) -> list[float]:
    """Deterministic up-and-down closes."""
    return [base + amplitude * math.sin(i / 3) + i * 0.1 for i in range(n)]


def make_series(closes):
    return ingest(make_raw_points(closes))


class FakeDataSource(DataSourceInterface):
    """
    Returns canned responses per symbol. A response may be an exception to
    raise. Symbols with a gate block until the gate is set.
    """

    def __init__(
        self,
        responses: dict[str, Union[list, Exception]],
        gates: Optional[dict[str, asyncio.Event]] = None,
        default: Union[list, Exception, None] = None,
    ):
        self.responses = {k.upper(): v for k, v in responses.items()}
        self.gates = {k.upper(): v for k, v in (gates or {}).items()}
        self.default = default if default is not None else []
        self.calls: list[tuple[str, TimeRange]] = []

    @property
    def name(self) -> str:
        return "Fake"

    async def fetch_series(self, symbol: str, time_range: TimeRange) -> list[dict]:
        self.calls.append((symbol, time_range))
        gate = self.gates.get(symbol)
        if gate is not None:
            await gate.wait()
        response = self.responses.get(symbol, self.default)
        if isinstance(response, Exception):
            raise response
        return list(response)
