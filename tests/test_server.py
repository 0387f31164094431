"""Tests for the reference backend routes."""

import pytest
from fastapi.testclient import TestClient

from weather_dashboard.api.server import create_app, parse_days
from weather_dashboard.data.generator import ReadingGenerator

WIRE_KEYS = {
    "temperature",
    "humidity",
    "solarRadiation",
    "windSpeed",
    "windDirection",
    "pressure",
    "timestamp",
}


@pytest.fixture
def client():
    return TestClient(create_app(ReadingGenerator(seed=123)))


def test_current_reading(client):
    response = client.get("/api/current")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == WIRE_KEYS
    assert 20.0 <= body["temperature"] <= 35.0
    assert 2.0 <= body["windSpeed"] <= 17.0


def test_historical_defaults_to_seven_days(client):
    body = client.get("/api/historical").json()

    assert len(body) == 8
    timestamps = [point["timestamp"] for point in body]
    assert timestamps == sorted(timestamps)
    assert all(set(point) == WIRE_KEYS for point in body)


def test_historical_days(client):
    assert len(client.get("/api/historical", params={"days": 3}).json()) == 4
    assert len(client.get("/api/historical", params={"days": 30}).json()) == 31


@pytest.mark.parametrize("days", ["0", "-2", "abc", ""])
def test_unusable_days_fall_back_to_seven(client, days):
    response = client.get("/api/historical", params={"days": days})

    assert response.status_code == 200
    assert len(response.json()) == 8


def test_cors_is_enabled(client):
    response = client.get("/api/current", headers={"Origin": "http://localhost:3000"})
    assert response.headers["access-control-allow-origin"] == "*"


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 7), ("1", 1), (" 12 ", 12), ("0", 7), ("-5", 7), ("2.5", 7), ("x", 7)],
)
def test_parse_days(raw, expected):
    assert parse_days(raw) == expected
