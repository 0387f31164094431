"""OpenWeatherMap current conditions source."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import structlog
import httpx
import numpy as np

from ..models.reading import ForecastReading, Reading
from .base import UnsupportedOperation, WeatherSourceError

logger = structlog.get_logger()

API_BASE_URL = "https://api.openweathermap.org/data/2.5"

# Solar radiation is not part of the API response
SOLAR_RADIATION_RANGE = (200, 700)


class OpenWeatherMapSource:
    """Live current conditions for one location.

    Only current weather is available; history and forecasts raise
    UnsupportedOperation so a fallback chain can move on.
    """

    def __init__(
        self,
        api_key: str,
        latitude: float = 40.7128,
        longitude: float = -74.0060,
        base_url: str = API_BASE_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        rng: Optional[np.random.Generator] = None
    ):
        if not api_key:
            raise ValueError("OpenWeatherMap API key is required")
        self.api_key = api_key
        self.latitude = latitude
        self.longitude = longitude
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.rng = rng if rng is not None else np.random.default_rng()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def get_current_weather(self) -> Reading:
        params = {
            "lat": self.latitude,
            "lon": self.longitude,
            "appid": self.api_key,
            "units": "metric",
        }
        try:
            response = await self.client.get(f"{self.base_url}/weather", params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise WeatherSourceError(
                f"Weather API request failed: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise WeatherSourceError(f"Weather API request failed: {e}") from e
        except ValueError as e:
            raise WeatherSourceError(f"Invalid JSON from weather API: {e}") from e

        try:
            return self._to_reading(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Unexpected weather API payload", error=str(e))
            raise WeatherSourceError(f"Unexpected weather API payload: {e}") from e

    def _to_reading(self, data: Dict[str, Any]) -> Reading:
        main = data["main"]
        wind = data.get("wind") or {}
        sys_info = data.get("sys") or {}

        # m/s to km/h
        wind_speed = round(float(wind["speed"]) * 3.6, 1) if wind.get("speed") else 0.0

        if sys_info.get("sunrise"):
            solar_radiation = int(self.rng.integers(*SOLAR_RADIATION_RANGE))
        else:
            solar_radiation = 0

        location = ", ".join(part for part in (data.get("name"), sys_info.get("country")) if part)

        return Reading(
            temperature=main["temp"],
            humidity=main["humidity"],
            solar_radiation=solar_radiation,
            wind_speed=wind_speed,
            wind_direction=wind.get("deg") or 0,
            pressure=main["pressure"],
            timestamp=datetime.now(timezone.utc),
            location_name=location or None,
        )

    async def get_historical_data(self, days: int = 7) -> List[Reading]:
        raise UnsupportedOperation("OpenWeatherMap history is not available")

    async def get_forecast(self, days: int = 3) -> List[ForecastReading]:
        raise UnsupportedOperation("OpenWeatherMap forecasts are not available")
