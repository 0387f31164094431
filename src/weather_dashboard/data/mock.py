"""In-process mock data source."""

import asyncio
from typing import List, Optional
import structlog

from ..models.reading import ForecastReading, Reading
from .base import validate_days
from .generator import CLIENT_PROFILE, ReadingGenerator

logger = structlog.get_logger()


class MockWeatherSource:
    """Data source that fabricates readings locally and never fails."""

    def __init__(self, generator: Optional[ReadingGenerator] = None, latency: float = 0.0):
        """Initialize the mock source.

        Args:
            generator: Reading generator, defaults to the client value ranges
            latency: Seconds to wait before answering a current reading
        """
        self.generator = generator or ReadingGenerator(CLIENT_PROFILE)
        self.latency = latency

    async def get_current_weather(self) -> Reading:
        if self.latency > 0:
            await asyncio.sleep(self.latency)
        return self.generator.reading()

    async def get_historical_data(self, days: int = 7) -> List[Reading]:
        validate_days(days)
        readings = self.generator.historical(days)
        logger.debug("Generated mock history", days=days, data_points=len(readings))
        return readings

    async def get_forecast(self, days: int = 3) -> List[ForecastReading]:
        validate_days(days)
        return self.generator.forecast(days)
