"""Option resolution and cache key derivation."""

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from weather_facade.config import Settings

UNIT_SYSTEMS = ("metric", "imperial")
FALLBACK_UNITS = "imperial"
CACHE_KEY_PREFIX = "weather"


@dataclass(frozen=True)
class WeatherOptions:
    """Normalized options for a single weather lookup."""

    query: str
    units: str
    days: int
    date: Any
    lang: str
    cache_key: str


def name_query(name: str) -> str:
    """Build the query fragment for a place name.

    "Paris, France" becomes "q=paris,france".
    """
    return "q=" + name.replace(", ", ",").lower()


def point_query(lat: float, lon: float) -> str:
    """Build the query fragment for a geographic point."""
    return f"lat={lat}&lon={lon}"


def normalize_units(units: Any) -> str:
    """Lowercase units, falling back to imperial for anything unknown."""
    value = str(units).lower() if units is not None else ""
    return value if value in UNIT_SYSTEMS else FALLBACK_UNITS


def coerce_days(days: Any, default: int) -> int:
    """Coerce days to a non-negative int, using default when not numeric."""
    try:
        value = int(days)
    except (TypeError, ValueError):
        value = default
    return max(0, value)


def derive_cache_key(options: Mapping[str, Any]) -> str:
    """Derive a cache key from an option mapping.

    The mapping is serialized as JSON with sorted keys, so key order never
    affects the result.
    """
    canonical = json.dumps(options, sort_keys=True, separators=(",", ":"), default=str)
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"{CACHE_KEY_PREFIX}:{digest}"


class OptionResolver:
    """Merges caller options over configured defaults."""

    def __init__(self, settings: Settings) -> None:
        """Initialize resolver with settings."""
        self._defaults = settings.weather_defaults

    def resolve(self, raw: Mapping[str, Any]) -> WeatherOptions:
        """Resolve a partial option mapping into normalized options.

        Raises:
            ValueError: If no query fragment is present
        """
        merged: dict[str, Any] = dict(self._defaults)
        merged.update({key: value for key, value in raw.items() if value is not None})

        query = merged.get("query")
        if not query:
            raise ValueError("Weather options require a 'query' fragment")

        merged["units"] = normalize_units(merged.get("units"))
        merged["days"] = coerce_days(merged.get("days"), self._defaults["days"])

        return WeatherOptions(
            query=query,
            units=merged["units"],
            days=merged["days"],
            date=merged.get("date"),
            lang=merged.get("lang") or "en",
            cache_key=derive_cache_key(merged),
        )
