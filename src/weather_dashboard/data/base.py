"""Data source capability and its errors."""

from typing import List, Protocol, runtime_checkable

from ..models.reading import ForecastReading, Reading


class WeatherSourceError(Exception):
    """A reading could not be fetched or decoded."""
    pass


class UnsupportedOperation(WeatherSourceError):
    """The data source variant does not serve this operation."""
    pass


@runtime_checkable
class WeatherDataSource(Protocol):
    """Anything that can answer the three dashboard queries.

    Mock and real variants are interchangeable behind this interface.
    """

    async def get_current_weather(self) -> Reading:
        ...

    async def get_historical_data(self, days: int) -> List[Reading]:
        ...

    async def get_forecast(self, days: int) -> List[ForecastReading]:
        ...


def validate_days(days: int) -> int:
    """Reject a non-positive or non-integer day count."""
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        raise ValueError(f"days must be a positive integer, got {days!r}")
    return days
