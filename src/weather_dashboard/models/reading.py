"""Weather reading models."""

from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


# Measured fields in display order
NUMERIC_FIELDS = (
    "temperature",
    "humidity",
    "solar_radiation",
    "wind_speed",
    "wind_direction",
    "pressure",
)


class Reading(BaseModel):
    """One timestamped set of weather measurements.

    Field values are not range checked; generators keep them in range but
    anything numeric is accepted. Strings holding numbers are coerced.
    """
    temperature: float = Field(description="Air temperature in °C")
    humidity: float = Field(description="Relative humidity in %")
    solar_radiation: float = Field(alias="solarRadiation", description="Solar radiation in W/m²")
    wind_speed: float = Field(alias="windSpeed", description="Wind speed in km/h")
    wind_direction: float = Field(alias="windDirection", description="Wind direction in degrees")
    pressure: float = Field(description="Barometric pressure in hPa")
    timestamp: datetime
    location_name: Optional[str] = Field(default=None, alias="locationName")

    class Config:
        """Pydantic config."""
        frozen = True
        populate_by_name = True

    def values(self) -> Dict[str, float]:
        """Numeric fields keyed by their Python name."""
        return {name: getattr(self, name) for name in NUMERIC_FIELDS}

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict using the camelCase wire names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ForecastReading(Reading):
    """Forecast point with a model confidence score."""
    confidence: float = Field(ge=0.0, le=1.0, description="Confidence in [0, 1]")
