"""Test fixtures."""

from collections.abc import Callable
from typing import Any

import pytest
from fastapi.testclient import TestClient

from weather_facade.api.dependencies import reset_singletons
from weather_facade.config import Settings, get_settings
from weather_facade.main import create_app
from weather_facade.services.cache import CacheStoreError, ResultCache, TTLCacheStore
from weather_facade.services.openweather import OpenWeatherClient
from weather_facade.services.options import OptionResolver
from weather_facade.services.weather import WeatherFacade

BASE_URL = "https://api.openweathermap.org/data/2.5"

PayloadFactory = Callable[..., dict[str, Any]]


class RecordingStore:
    """Dict-backed cache store recording every call."""

    def __init__(self, fail: bool = False) -> None:
        self.data: dict[str, Any] = {}
        self.calls: list[tuple[str, str]] = []
        self.ttls: list[float] = []
        self.fail = fail

    def has(self, key: str) -> bool:
        self.calls.append(("has", key))
        if self.fail:
            raise CacheStoreError("store unavailable")
        return key in self.data

    def get(self, key: str) -> Any:
        self.calls.append(("get", key))
        if self.fail:
            raise CacheStoreError("store unavailable")
        return self.data.get(key)

    def put(self, key: str, value: Any, ttl: float) -> None:
        self.calls.append(("put", key))
        if self.fail:
            raise CacheStoreError("store unavailable")
        self.data[key] = value
        self.ttls.append(ttl)


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        upstream_url=BASE_URL,
        upstream_timeout_seconds=1.0,
        owm_api_key="test-key",
        default_units="imperial",
        default_days=5,
        cache_ttl_seconds=60,
        cache_max_size=1000,
        log_level="DEBUG",
        log_format="text",
    )


@pytest.fixture
def current_url() -> str:
    """Current conditions endpoint URL."""
    return f"{BASE_URL}/weather"


@pytest.fixture
def forecast_url() -> str:
    """Daily forecast endpoint URL."""
    return f"{BASE_URL}/forecast/daily"


@pytest.fixture
def current_payload() -> PayloadFactory:
    """Factory for `weather` endpoint responses."""

    def build(condition_code: int = 800, wind_degrees: float = 10) -> dict[str, Any]:
        return {
            "cod": 200,
            "name": "Paris",
            "weather": [{"id": condition_code, "main": "Clear", "description": "clear sky"}],
            "main": {"temp": 18.2},
            "wind": {"speed": 3.1, "deg": wind_degrees},
        }

    return build


@pytest.fixture
def forecast_payload() -> PayloadFactory:
    """Factory for `forecast/daily` endpoint responses with count days."""

    def build(count: int = 3) -> dict[str, Any]:
        return {
            "cod": "200",
            "cnt": count,
            "list": [
                {
                    "dt": 1700000000 + day * 86400,
                    "temp": {"day": 15.0 + day, "min": 9.0, "max": 17.0 + day},
                    "weather": [{"id": 500, "main": "Rain", "description": "light rain"}],
                    "speed": 4.2,
                    "deg": 200,
                }
                for day in range(count)
            ],
        }

    return build


@pytest.fixture
def cache_store(settings: Settings) -> TTLCacheStore:
    """Create test cache store."""
    return TTLCacheStore(settings)


@pytest.fixture
def recording_store() -> RecordingStore:
    """Create a call-recording cache store."""
    return RecordingStore()


@pytest.fixture
def failing_store() -> RecordingStore:
    """Create a cache store that raises on every call."""
    return RecordingStore(fail=True)


@pytest.fixture
def open_weather_client(settings: Settings) -> OpenWeatherClient:
    """Create test OpenWeatherMap client."""
    return OpenWeatherClient(settings)


@pytest.fixture
def resolver(settings: Settings) -> OptionResolver:
    """Create test option resolver."""
    return OptionResolver(settings)


@pytest.fixture
def facade(
    settings: Settings,
    recording_store: RecordingStore,
    open_weather_client: OpenWeatherClient,
    resolver: OptionResolver,
) -> WeatherFacade:
    """Create facade backed by a recording store."""
    return WeatherFacade(ResultCache(recording_store, settings), open_weather_client, resolver)


@pytest.fixture
def app(monkeypatch: pytest.MonkeyPatch):
    """Create test application."""
    monkeypatch.setenv("UPSTREAM_URL", BASE_URL)
    monkeypatch.setenv("OWM_API_KEY", "test-key")
    monkeypatch.setenv("CACHE_TTL_SECONDS", "60")
    # Reset singletons before each test
    reset_singletons()
    # Clear settings cache
    get_settings.cache_clear()
    return create_app()


@pytest.fixture
def client(app) -> TestClient:
    """Create test client."""
    return TestClient(app)
