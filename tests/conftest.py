"""Pytest fixtures for DevClimate tests.

This module provides test fixtures that ensure:
1. No external API calls are made (OpenWeatherMap, identity providers)
2. No real database connections: each test gets a fresh in-memory SQLite
3. Isolated test environment with controlled configuration
"""

import os
from typing import Any

import httpx
import pytest

# Set test environment BEFORE importing application modules
# This ensures no real services are contacted during test collection
os.environ.setdefault("SECRET_KEY", "test-secret-key-at-least-32-characters-long")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("OPENWEATHER_API_KEY", "test-openweather-key")
os.environ.setdefault("OPENWEATHER_BASE_URL", "https://weather.test/data/2.5")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTH_STRATEGY", "token")

from fastapi.testclient import TestClient

from devclimate.api import create_app
from devclimate.config import Settings
from devclimate.database import Database
from devclimate.weather import OpenWeatherClient


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from devclimate.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def database(settings: Settings) -> Database:
    """Fresh in-memory database (tables are created by the app lifespan)."""
    return Database(settings.database_url)


# =============================================================================
# Upstream Weather API
# =============================================================================


def openweather_payload(
    name: str = "London",
    country: str = "GB",
    temp: float = 14.6,
    feels_like: float = 13.5,
    humidity: int = 72,
    pressure: int = 1012,
    wind_speed: float = 4.1,
    description: str = "light rain",
    icon: str = "10d",
) -> dict[str, Any]:
    """A realistic OpenWeatherMap `GET /weather` body (metric)."""
    return {
        "coord": {"lon": -0.1257, "lat": 51.5085},
        "weather": [{"id": 500, "main": "Rain", "description": description, "icon": icon}],
        "base": "stations",
        "main": {
            "temp": temp,
            "feels_like": feels_like,
            "temp_min": temp - 1,
            "temp_max": temp + 1,
            "pressure": pressure,
            "humidity": humidity,
        },
        "visibility": 10000,
        "wind": {"speed": wind_speed, "deg": 240},
        "clouds": {"all": 75},
        "dt": 1718445600,
        "sys": {"country": country, "sunrise": 1718423000, "sunset": 1718482000},
        "timezone": 3600,
        "id": 2643743,
        "name": name,
        "cod": 200,
    }


class FakeOpenWeather:
    """Stands in for OpenWeatherMap behind an httpx.MockTransport.

    Any city not listed in `not_found` or `failing` resolves, with the
    query echoed back as the city name.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.payloads: dict[str, dict[str, Any]] = {
            "london": openweather_payload(),
        }
        self.not_found = {"nowhereville"}
        self.failing = {"brokenville"}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        city = request.url.params.get("q", "")
        key = city.lower()

        if key in self.not_found:
            return httpx.Response(404, json={"cod": "404", "message": "city not found"})
        if key in self.failing:
            return httpx.Response(500, json={"cod": 500, "message": "internal error"})

        payload = self.payloads.get(key) or openweather_payload(name=city.title())
        return httpx.Response(200, json=payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_openweather() -> FakeOpenWeather:
    return FakeOpenWeather()


@pytest.fixture
def weather_client(settings: Settings, fake_openweather: FakeOpenWeather) -> OpenWeatherClient:
    return OpenWeatherClient(
        api_key=settings.openweather_api_key,
        base_url=settings.openweather_base_url,
        transport=fake_openweather.transport,
    )


# =============================================================================
# Application
# =============================================================================


@pytest.fixture
def app(settings: Settings, database: Database, weather_client: OpenWeatherClient):
    return create_app(settings=settings, database=database, weather_client=weather_client)


@pytest.fixture
def client(app):
    """Test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_user(client: TestClient):
    """Register a user and return the response body."""

    def _register(
        username: str = "alice",
        email: str = "a@x.com",
        password: str = "secret1",
    ) -> dict[str, Any]:
        response = client.post(
            "/api/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def alice(register_user) -> dict[str, str]:
    """Auth headers for a registered user `alice`."""
    return bearer(register_user()["token"])


@pytest.fixture
def bob(register_user) -> dict[str, str]:
    """Auth headers for a second registered user `bob`."""
    return bearer(register_user("bob", "b@x.com", "secret2")["token"])
