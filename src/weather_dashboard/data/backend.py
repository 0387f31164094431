"""Client for the reference weather backend."""

from typing import Any, List, Optional
import structlog
import httpx
from pydantic import ValidationError

from ..models.reading import ForecastReading, Reading
from .base import UnsupportedOperation, WeatherSourceError, validate_days

logger = structlog.get_logger()


class BackendWeatherSource:
    """Data source backed by the ``/api`` routes of the reference backend."""

    def __init__(
        self,
        base_url: str = "http://localhost:4000",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the backend client."""
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _get_json(self, path: str, params: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self.client.get(
                url,
                params=params,
                headers={"Cache-Control": "no-store"}
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.debug(
                "HTTP error from weather backend",
                url=url,
                status_code=e.response.status_code
            )
            raise WeatherSourceError(
                f"HTTP error {e.response.status_code} from {url}"
            ) from e
        except httpx.HTTPError as e:
            raise WeatherSourceError(f"Network error connecting to {url}: {e}") from e
        except ValueError as e:
            raise WeatherSourceError(f"Invalid JSON from {url}: {e}") from e

    async def get_current_weather(self) -> Reading:
        data = await self._get_json("/api/current")
        try:
            return Reading.model_validate(data)
        except ValidationError as e:
            raise WeatherSourceError(f"Malformed current reading: {e}") from e

    async def get_historical_data(self, days: int = 7) -> List[Reading]:
        validate_days(days)
        data = await self._get_json("/api/historical", params={"days": days})
        if not isinstance(data, list):
            raise WeatherSourceError("Historical response is not a list")
        try:
            return [Reading.model_validate(item) for item in data]
        except ValidationError as e:
            raise WeatherSourceError(f"Malformed historical reading: {e}") from e

    async def get_forecast(self, days: int = 3) -> List[ForecastReading]:
        raise UnsupportedOperation("The reference backend does not serve forecasts")
