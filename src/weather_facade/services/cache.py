"""Cache store and result caching policy for weather data."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

import structlog
from cachetools import TLRUCache
from prometheus_client import Counter, Gauge

from weather_facade.config import Settings

if TYPE_CHECKING:
    from weather_facade.api.schemas import WeatherResult

logger = structlog.get_logger()

# Metrics
cache_hits = Counter("cache_hits_total", "Total cache hits")
cache_misses = Counter("cache_misses_total", "Total cache misses")
cache_errors = Counter("cache_errors_total", "Total cache store errors", ["operation"])
cache_size_gauge = Gauge("cache_size", "Current number of cache entries")

HEALTH_CHECK_KEY = "weather:health-check"


class CacheStoreError(Exception):
    """Raised by a cache store that cannot serve a request."""


class CacheStore(Protocol):
    """Key-value store with per-entry time-to-live."""

    def has(self, key: str) -> bool: ...

    def get(self, key: str) -> Any: ...

    def put(self, key: str, value: Any, ttl: float) -> None: ...


@dataclass
class _Entry:
    value: Any
    ttl: float


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class TTLCacheStore:
    """In-process store with a TTL per entry and LRU eviction."""

    def __init__(self, settings: Settings, timer: Callable[[], float] = time.monotonic) -> None:
        """Initialize store with settings."""
        self._cache: TLRUCache[str, _Entry] = TLRUCache(
            maxsize=settings.cache_max_size,
            ttu=_time_to_use,
            timer=timer,
        )

    def has(self, key: str) -> bool:
        """Check if key holds an unexpired entry."""
        return key in self._cache

    def get(self, key: str) -> Any:
        """Get the value stored under key, None if absent or expired."""
        entry = self._cache.get(key)
        return entry.value if entry is not None else None

    def put(self, key: str, value: Any, ttl: float) -> None:
        """Store value under key for ttl seconds."""
        self._cache[key] = _Entry(value, ttl)
        cache_size_gauge.set(len(self._cache))

    def clear(self) -> None:
        """Clear all cache entries."""
        self._cache.clear()
        cache_size_gauge.set(0)

    @property
    def size(self) -> int:
        """Return current cache size."""
        return len(self._cache)


class ResultCache:
    """TTL policy around a cache store.

    Caching is enabled only when the configured TTL is positive. When it is
    disabled the store is never consulted or written.
    """

    def __init__(self, store: CacheStore, settings: Settings) -> None:
        """Initialize policy with a store and settings."""
        self._store = store
        self._ttl = settings.cache_ttl_seconds

    @property
    def enabled(self) -> bool:
        """Return whether a positive TTL is configured."""
        return self._ttl > 0

    def lookup(self, key: str) -> WeatherResult | None:
        """Return the cached result for key, or None on a miss."""
        if not self.enabled:
            return None

        try:
            if self._store.has(key):
                value: WeatherResult | None = self._store.get(key)
                if value is not None:
                    cache_hits.inc()
                    return value
        except CacheStoreError as e:
            cache_errors.labels(operation="lookup").inc()
            logger.warning("Cache lookup failed, treating as miss", cache_key=key, error=str(e))

        cache_misses.inc()
        return None

    def store(self, key: str, value: WeatherResult) -> None:
        """Cache a result under key with the configured TTL."""
        if not self.enabled:
            return

        try:
            self._store.put(key, value, self._ttl)
        except CacheStoreError as e:
            cache_errors.labels(operation="store").inc()
            logger.warning("Cache write failed, result not cached", cache_key=key, error=str(e))

    def is_healthy(self) -> bool:
        """Check if the underlying store answers reads."""
        try:
            self._store.has(HEALTH_CHECK_KEY)
        except CacheStoreError:
            return False
        return True
