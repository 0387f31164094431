"""Data models and types for the weather dashboard."""

from .reading import Reading, ForecastReading, NUMERIC_FIELDS
from .interval import (
    UpdateInterval,
    SamplingMode,
    DAY_MS,
    mode_for,
    poll_interval_ms,
    range_days,
    parse_interval,
)
from .config import ServiceConfig, DataSourceConfig, ServerConfig, SamplingConfig

__all__ = [
    "Reading",
    "ForecastReading",
    "NUMERIC_FIELDS",
    "UpdateInterval",
    "SamplingMode",
    "DAY_MS",
    "mode_for",
    "poll_interval_ms",
    "range_days",
    "parse_interval",
    "ServiceConfig",
    "DataSourceConfig",
    "ServerConfig",
    "SamplingConfig",
]
