"""Configuration models for the weather dashboard."""

import os
from pathlib import Path
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from .interval import DEFAULT_INTERVAL


def _load_env_file():
    """Load environment variables from .env file in common locations."""
    env_paths = [
        Path.cwd() / ".env",  # Current directory
        Path.cwd() / "config" / ".env",
        Path(__file__).parent.parent.parent.parent / "config" / ".env",  # repo config/.env
    ]

    for env_path in env_paths:
        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)
            break


SourceKind = Literal["auto", "mock", "backend", "openweathermap"]


class DataSourceConfig(BaseModel):
    """Where readings come from."""
    kind: SourceKind = Field(default="auto", description="Data source variant")
    backend_url: str = Field(default="http://localhost:4000", description="Reference backend base URL")
    api_key: Optional[str] = Field(default=None, description="OpenWeatherMap API key")
    openweathermap_url: str = Field(default="https://api.openweathermap.org/data/2.5")
    latitude: float = 40.7128
    longitude: float = -74.0060
    timeout: float = Field(default=10.0, description="HTTP timeout in seconds")
    mock_latency: float = Field(default=0.3, description="Simulated mock latency in seconds")

    @classmethod
    def from_env(cls) -> "DataSourceConfig":
        """Create from environment variables."""
        _load_env_file()
        values = {
            "kind": os.getenv("WEATHER_SOURCE", "auto"),
            "backend_url": os.getenv("WEATHER_BACKEND_URL", "http://localhost:4000"),
            "api_key": os.getenv("WEATHER_API_KEY") or None,
        }
        if os.getenv("WEATHER_DEFAULT_LAT"):
            values["latitude"] = os.getenv("WEATHER_DEFAULT_LAT")
        if os.getenv("WEATHER_DEFAULT_LON"):
            values["longitude"] = os.getenv("WEATHER_DEFAULT_LON")
        return cls(**values)


class ServerConfig(BaseModel):
    """Reference backend server configuration."""
    host: str = "0.0.0.0"
    port: int = Field(default=4000, description="Listening port")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Create from environment variables."""
        _load_env_file()
        return cls(port=os.getenv("PORT", "4000"))


class SamplingConfig(BaseModel):
    """Sampling loop configuration."""
    history_limit: int = Field(default=300, description="Maximum readings kept in history")
    default_interval_ms: int = DEFAULT_INTERVAL.ms
    state_file: Path = Field(
        default_factory=lambda: Path.home() / ".weather_dashboard" / "settings.json",
        description="File holding the persisted update interval"
    )


class ServiceConfig(BaseModel):
    """Complete service configuration."""
    source: DataSourceConfig = Field(default_factory=DataSourceConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    sampling: SamplingConfig = Field(default_factory=SamplingConfig)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Create configuration from environment variables."""
        _load_env_file()
        return cls(
            source=DataSourceConfig.from_env(),
            server=ServerConfig.from_env(),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
