"""
Pytest configuration for weather dashboard tests.

Provides a controllable clock and a scripted data source.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Union

import pytest

from weather_dashboard.data.base import WeatherSourceError
from weather_dashboard.models.reading import ForecastReading, Reading

START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_reading(
    temperature: float = 20.0,
    humidity: float = 50,
    solar_radiation: float = 300,
    wind_speed: float = 10.0,
    wind_direction: float = 180,
    pressure: float = 1000,
    timestamp: Optional[datetime] = None,
) -> Reading:
    """Build a deterministic reading."""
    return Reading(
        temperature=temperature,
        humidity=humidity,
        solar_radiation=solar_radiation,
        wind_speed=wind_speed,
        wind_direction=wind_direction,
        pressure=pressure,
        timestamp=timestamp or START,
    )


class FakeClock:
    """Clock advanced by hand."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class ScriptedSource:
    """Data source answering from a queue of readings or errors."""

    def __init__(self, script: Optional[List[Union[Reading, Exception]]] = None):
        self.script = list(script or [])
        self.history: List[Reading] = []
        self.current_calls = 0
        self.history_calls: List[int] = []

    def push(self, item: Union[Reading, Exception]) -> None:
        self.script.append(item)

    async def get_current_weather(self) -> Reading:
        self.current_calls += 1
        item = self.script.pop(0) if self.script else make_reading()
        if isinstance(item, Exception):
            raise item
        return item

    async def get_historical_data(self, days: int) -> List[Reading]:
        self.history_calls.append(days)
        return list(self.history)

    async def get_forecast(self, days: int) -> List[ForecastReading]:
        raise WeatherSourceError("no forecast")


def run(coro):
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def source():
    return ScriptedSource()
