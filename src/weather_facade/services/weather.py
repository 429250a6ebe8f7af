"""Weather facade orchestrating options, cache and upstream client."""

from collections.abc import Mapping
from typing import Any

import structlog

from weather_facade.api.schemas import (
    CurrentConditions,
    ForecastEntry,
    WeatherFailure,
    WeatherResult,
)
from weather_facade.services.cache import ResultCache
from weather_facade.services.openweather import (
    OpenWeatherClient,
    OpenWeatherError,
    OpenWeatherTimeoutError,
    is_success,
    status_code_of,
)
from weather_facade.services.options import (
    OptionResolver,
    WeatherOptions,
    name_query,
    point_query,
)

logger = structlog.get_logger()

WeatherOutcome = WeatherResult | WeatherFailure


class WeatherFacade:
    """Fetches current conditions and forecast with caching."""

    def __init__(
        self,
        cache: ResultCache,
        client: OpenWeatherClient,
        resolver: OptionResolver,
    ) -> None:
        """Initialize facade with cache, client and option resolver."""
        self._cache = cache
        self._client = client
        self._resolver = resolver

    async def by_name(self, name: str, units: str | None = None, **options: Any) -> WeatherOutcome:
        """Get weather for a place name such as "Paris, France"."""
        return await self.generate({**options, "query": name_query(name), "units": units})

    async def by_point(
        self, lat: float, lon: float, units: str | None = None, **options: Any
    ) -> WeatherOutcome:
        """Get weather for a latitude/longitude pair."""
        return await self.generate({**options, "query": point_query(lat, lon), "units": units})

    async def generate(self, options: Mapping[str, Any]) -> WeatherOutcome:
        """Get weather for a raw option mapping.

        Checks cache first. On a miss fetches current conditions, then the
        forecast, and caches the combined result.

        Args:
            options: Partial options; must contain a `query` fragment

        Returns:
            Weather result, or a failure marker if current conditions could
            not be loaded
        """
        resolved = self._resolver.resolve(options)
        log = logger.bind(query=resolved.query, units=resolved.units, days=resolved.days)

        cached = self._cache.lookup(resolved.cache_key)
        if cached is not None:
            log.info("Cache hit for weather request", cache_hit=True)
            return cached

        log.info("Cache miss, fetching from upstream", cache_hit=False)

        try:
            current_payload = await self._client.fetch_current(
                resolved.query, resolved.units, resolved.lang
            )
        except OpenWeatherTimeoutError as e:
            log.error("Upstream timeout fetching current conditions", error=str(e))
            return WeatherFailure(reason="timeout", detail=str(e))
        except OpenWeatherError as e:
            log.error("Upstream request failed fetching current conditions", error=str(e))
            return WeatherFailure(reason="transport", detail=str(e))

        if not is_success(current_payload):
            status = status_code_of(current_payload)
            log.warning("Upstream rejected current conditions request", status_code=status)
            return WeatherFailure(
                reason="provider",
                statusCode=status,
                detail=current_payload.get("message"),
            )

        forecast, complete = await self._fetch_forecast(resolved)

        result = WeatherResult(
            current=CurrentConditions.from_payload(current_payload),
            forecast=forecast,
            units=resolved.units,
            date=resolved.date,
        )

        if complete:
            self._cache.store(resolved.cache_key, result)
        else:
            log.warning("Forecast unavailable, returning result without caching")

        return result

    async def _fetch_forecast(self, resolved: WeatherOptions) -> tuple[list[ForecastEntry], bool]:
        """Fetch forecast entries, degrading to an empty list on failure.

        Returns:
            Forecast entries bounded by the requested days, and whether the
            fetch succeeded
        """
        try:
            payload = await self._client.fetch_forecast(
                resolved.query, resolved.units, resolved.days, resolved.lang
            )
        except OpenWeatherError as e:
            logger.error("Upstream request failed fetching forecast", error=str(e))
            return [], False

        if not is_success(payload):
            logger.warning(
                "Upstream rejected forecast request",
                status_code=status_code_of(payload),
            )
            return [], False

        entries = payload.get("list")
        if not isinstance(entries, list):
            entries = []

        forecast = [
            ForecastEntry.from_payload(entry)
            for entry in entries[: resolved.days]
            if isinstance(entry, dict)
        ]
        return forecast, True
