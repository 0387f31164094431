"""Random reading generation for the mock source and the reference backend."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple
import numpy as np

from ..models.reading import ForecastReading, Reading
from .base import validate_days


@dataclass(frozen=True)
class ReadingProfile:
    """Value ranges for generated readings.

    Float ranges are half-open and rounded to one decimal; integer ranges
    are half-open like ``Generator.integers``.
    """
    temperature: Tuple[float, float]
    wind_speed: Tuple[float, float]
    humidity: Tuple[int, int] = (30, 70)
    solar_radiation: Tuple[int, int] = (200, 700)
    wind_direction: Tuple[int, int] = (0, 360)
    pressure: Tuple[int, int] = (980, 1030)


# Ranges served by the reference backend
BACKEND_PROFILE = ReadingProfile(temperature=(20.0, 35.0), wind_speed=(2.0, 17.0))

# Wider ranges used by the in-process mock
CLIENT_PROFILE = ReadingProfile(temperature=(10.0, 50.0), wind_speed=(5.0, 25.0))

CONFIDENCE_RANGE = (0.7, 1.0)


class ReadingGenerator:
    """Fabricates weather readings."""

    def __init__(
        self,
        profile: ReadingProfile = BACKEND_PROFILE,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None
    ):
        self.profile = profile
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def _uniform(self, bounds: Tuple[float, float]) -> float:
        return round(float(self.rng.uniform(*bounds)), 1)

    def _integer(self, bounds: Tuple[int, int]) -> int:
        return int(self.rng.integers(*bounds))

    def reading(self, timestamp: Optional[datetime] = None) -> Reading:
        """Generate one reading stamped with ``timestamp`` (default: now)."""
        profile = self.profile
        return Reading(
            temperature=self._uniform(profile.temperature),
            humidity=self._integer(profile.humidity),
            solar_radiation=self._integer(profile.solar_radiation),
            wind_speed=self._uniform(profile.wind_speed),
            wind_direction=self._integer(profile.wind_direction),
            pressure=self._integer(profile.pressure),
            timestamp=timestamp or datetime.now(timezone.utc),
        )

    def historical(self, days: int, now: Optional[datetime] = None) -> List[Reading]:
        """Generate ``days + 1`` daily readings from ``now - days`` to ``now``."""
        validate_days(days)
        now = now or datetime.now(timezone.utc)
        return [self.reading(now - timedelta(days=offset)) for offset in range(days, -1, -1)]

    def forecast(self, days: int, now: Optional[datetime] = None) -> List[ForecastReading]:
        """Generate one forecast point per day after ``now``."""
        validate_days(days)
        now = now or datetime.now(timezone.utc)
        points = []
        for offset in range(1, days + 1):
            base = self.reading(now + timedelta(days=offset))
            points.append(
                ForecastReading(
                    **base.model_dump(),
                    confidence=float(self.rng.uniform(*CONFIDENCE_RANGE)),
                )
            )
        return points
