"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends

from weather_facade.config import Settings, get_settings
from weather_facade.services.cache import ResultCache, TTLCacheStore
from weather_facade.services.openweather import OpenWeatherClient
from weather_facade.services.options import OptionResolver
from weather_facade.services.weather import WeatherFacade

# Singleton instances for services
_cache_store: TTLCacheStore | None = None
_open_weather_client: OpenWeatherClient | None = None


def get_cache_store(settings: Annotated[Settings, Depends(get_settings)]) -> TTLCacheStore:
    """Get cache store instance (singleton)."""
    global _cache_store
    if _cache_store is None:
        _cache_store = TTLCacheStore(settings)
    return _cache_store


def get_result_cache(
    store: Annotated[TTLCacheStore, Depends(get_cache_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ResultCache:
    """Get result cache policy."""
    return ResultCache(store, settings)


def get_open_weather_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> OpenWeatherClient:
    """Get OpenWeatherMap client instance (singleton)."""
    global _open_weather_client
    if _open_weather_client is None:
        _open_weather_client = OpenWeatherClient(settings)
    return _open_weather_client


def get_weather_facade(
    cache: Annotated[ResultCache, Depends(get_result_cache)],
    client: Annotated[OpenWeatherClient, Depends(get_open_weather_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> WeatherFacade:
    """Get weather facade instance."""
    return WeatherFacade(cache, client, OptionResolver(settings))


# Type aliases for dependency injection
CacheDep = Annotated[ResultCache, Depends(get_result_cache)]
WeatherFacadeDep = Annotated[WeatherFacade, Depends(get_weather_facade)]


def reset_singletons() -> None:
    """Reset singleton instances (for testing)."""
    global _cache_store, _open_weather_client
    _cache_store = None
    _open_weather_client = None
