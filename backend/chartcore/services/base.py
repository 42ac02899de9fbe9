"""
Service Contracts and Errors

Chart services (indicator engine, data sources) implement BaseService;
every failure they surface is a ServiceError carrying the service name.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

RequestT = TypeVar("RequestT")
ResultT = TypeVar("ResultT")


class BaseService(ABC, Generic[RequestT, ResultT]):
    """
    Async service with one entry point and a liveness probe.

    Subclasses are stateless apart from injected collaborators, so a single
    module-level instance can be shared across chart sessions.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier used in log lines and ServiceError."""

    @abstractmethod
    async def execute(self, request: RequestT) -> ResultT:
        """
        Run the service for one request.

        Raises:
            ServiceError: the request could not be served
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """True when the service can take requests."""


class ServiceError(Exception):
    """Failure raised by a service; ``message`` is safe to show to users."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class ChartError(ServiceError):
    """Base for chart pipeline errors."""

    default_message = "Unable to load chart data"

    def __init__(self, message: str = None, details: dict = None):
        super().__init__("ChartSeries", message or self.default_message, details)


class InvalidPointError(ChartError):
    """A raw point has a non-finite required field. Dropped during sanitize."""

    default_message = "Invalid chart point"


class EmptySeriesError(ChartError):
    """No usable points after sanitize (or the source returned none)."""

    default_message = "No chart data available"


class FetchError(ChartError):
    """Upstream data source failed."""

    default_message = "Unable to load chart data"


class IndicatorComputeError(ChartError):
    """Not enough data for one indicator. Never surfaced at session level."""

    default_message = "Insufficient data for indicator"


class UnknownIndicatorError(ChartError):
    """Requested indicator id is not in the registry."""

    default_message = "Unknown indicator"
