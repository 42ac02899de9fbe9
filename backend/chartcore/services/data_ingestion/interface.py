"""
Data Source Interface

Defines the contract for chart data providers.
"""

from abc import ABC, abstractmethod

from chartcore.schemas.chart import TimeRange

RawPoint = dict


class DataSourceInterface(ABC):
    """
    Chart Data Source Contract.

    INPUT: symbol + TimeRange
    OUTPUT: list of raw points
        - {timestamp, open, high, low, close, value?, volume?}
        - Values are NOT validated; the chart pipeline sanitizes them.
        - Empty list when the provider has no data for the request.

    Raises FetchError (or any exception) on upstream failure.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name for logging."""
        pass

    @abstractmethod
    async def fetch_series(self, symbol: str, time_range: TimeRange) -> list[RawPoint]:
        """Fetch raw OHLC points for a symbol and range."""
        pass

    async def health_check(self) -> bool:
        """Check connectivity to the source."""
        return True

    async def close(self) -> None:
        """Release network resources."""
        return None
