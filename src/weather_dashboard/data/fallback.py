"""Fallback chain over data source variants."""

from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar
import structlog

from ..models.config import DataSourceConfig
from ..models.reading import ForecastReading, Reading
from .backend import BackendWeatherSource
from .base import WeatherDataSource, WeatherSourceError, validate_days
from .generator import CLIENT_PROFILE, ReadingGenerator
from .mock import MockWeatherSource
from .openweathermap import OpenWeatherMapSource

logger = structlog.get_logger()

T = TypeVar("T")


class FallbackWeatherSource:
    """Tries each source in order and answers from ``fallback`` last.

    Only WeatherSourceError moves the chain along; anything else is a bug
    and propagates.
    """

    def __init__(self, sources: Sequence[WeatherDataSource], fallback: WeatherDataSource):
        self.sources = list(sources)
        self.fallback = fallback

    async def _first_success(
        self,
        operation: str,
        call: Callable[[WeatherDataSource], Awaitable[T]]
    ) -> T:
        for source in self.sources:
            try:
                return await call(source)
            except WeatherSourceError as e:
                logger.warning(
                    "Data source failed, trying next",
                    operation=operation,
                    source=type(source).__name__,
                    error=str(e)
                )
        return await call(self.fallback)

    async def get_current_weather(self) -> Reading:
        return await self._first_success(
            "current", lambda source: source.get_current_weather()
        )

    async def get_historical_data(self, days: int = 7) -> List[Reading]:
        validate_days(days)
        return await self._first_success(
            "historical", lambda source: source.get_historical_data(days)
        )

    async def get_forecast(self, days: int = 3) -> List[ForecastReading]:
        validate_days(days)
        return await self._first_success(
            "forecast", lambda source: source.get_forecast(days)
        )

    async def aclose(self) -> None:
        for source in self.sources:
            close = getattr(source, "aclose", None)
            if close is not None:
                await close()


def build_source(
    config: DataSourceConfig,
    generator: Optional[ReadingGenerator] = None
) -> WeatherDataSource:
    """Build the data source variant named by ``config.kind``.

    ``auto`` chains OpenWeatherMap (when an API key is set), then the
    reference backend, then the mock.
    """
    mock = MockWeatherSource(
        generator or ReadingGenerator(CLIENT_PROFILE),
        latency=config.mock_latency
    )

    if config.kind == "mock":
        return mock
    if config.kind == "backend":
        return BackendWeatherSource(config.backend_url, timeout=config.timeout)
    if config.kind == "openweathermap":
        return OpenWeatherMapSource(
            config.api_key or "",
            latitude=config.latitude,
            longitude=config.longitude,
            base_url=config.openweathermap_url,
            timeout=config.timeout,
        )

    chain: List[WeatherDataSource] = []
    if config.api_key:
        chain.append(
            OpenWeatherMapSource(
                config.api_key,
                latitude=config.latitude,
                longitude=config.longitude,
                base_url=config.openweathermap_url,
                timeout=config.timeout,
            )
        )
    chain.append(BackendWeatherSource(config.backend_url, timeout=config.timeout))

    logger.info(
        "Data source chain built",
        sources=[type(source).__name__ for source in chain] + ["MockWeatherSource"]
    )
    return FallbackWeatherSource(chain, mock)
