"""Tests for environment-driven configuration."""

import os

import pytest
from pydantic import ValidationError

from weather_dashboard.models.config import DataSourceConfig, ServerConfig, ServiceConfig


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in (
        "WEATHER_SOURCE",
        "WEATHER_BACKEND_URL",
        "WEATHER_API_KEY",
        "WEATHER_DEFAULT_LAT",
        "WEATHER_DEFAULT_LON",
        "PORT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = ServiceConfig.from_env()

    assert config.source.kind == "auto"
    assert config.source.api_key is None
    assert config.source.latitude == 40.7128
    assert config.source.longitude == -74.006
    assert config.server.port == 4000
    assert config.sampling.history_limit == 300
    assert config.sampling.default_interval_ms == 1000
    assert config.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("WEATHER_SOURCE", "backend")
    monkeypatch.setenv("WEATHER_BACKEND_URL", "http://weather:8080")
    monkeypatch.setenv("WEATHER_API_KEY", "abc")
    monkeypatch.setenv("WEATHER_DEFAULT_LAT", "51.5")
    monkeypatch.setenv("WEATHER_DEFAULT_LON", "-0.12")
    monkeypatch.setenv("PORT", "5050")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    config = ServiceConfig.from_env()

    assert config.source.kind == "backend"
    assert config.source.backend_url == "http://weather:8080"
    assert config.source.api_key == "abc"
    assert config.source.latitude == 51.5
    assert config.source.longitude == -0.12
    assert config.server.port == 5050
    assert config.log_level == "DEBUG"


def test_dotenv_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("WEATHER_SOURCE=mock\nPORT=4100\n")

    try:
        assert DataSourceConfig.from_env().kind == "mock"
        assert ServerConfig.from_env().port == 4100
    finally:
        os.environ.pop("WEATHER_SOURCE", None)
        os.environ.pop("PORT", None)


def test_unknown_source_is_rejected(monkeypatch):
    monkeypatch.setenv("WEATHER_SOURCE", "carrier-pigeon")

    with pytest.raises(ValidationError):
        DataSourceConfig.from_env()
