"""Data source layer for the weather dashboard."""

from .base import WeatherDataSource, WeatherSourceError, UnsupportedOperation
from .generator import ReadingGenerator, BACKEND_PROFILE, CLIENT_PROFILE
from .mock import MockWeatherSource
from .backend import BackendWeatherSource
from .openweathermap import OpenWeatherMapSource
from .fallback import FallbackWeatherSource, build_source

__all__ = [
    "WeatherDataSource",
    "WeatherSourceError",
    "UnsupportedOperation",
    "ReadingGenerator",
    "BACKEND_PROFILE",
    "CLIENT_PROFILE",
    "MockWeatherSource",
    "BackendWeatherSource",
    "OpenWeatherMapSource",
    "FallbackWeatherSource",
    "build_source",
]
