"""OpenWeatherMap API client."""

from typing import Any

import httpx
import structlog
from prometheus_client import Counter, Histogram

from weather_facade.config import Settings

logger = structlog.get_logger()

CURRENT_PATH = "weather"
FORECAST_PATH = "forecast/daily"
SUCCESS_CODE = "200"


class OpenWeatherError(Exception):
    """Base exception for OpenWeatherMap transport errors."""


class OpenWeatherTimeoutError(OpenWeatherError):
    """Raised when upstream request times out."""


# Metrics
upstream_requests = Counter(
    "upstream_requests_total",
    "Total upstream API requests",
    ["endpoint", "status"],
)
upstream_duration = Histogram(
    "upstream_request_duration_seconds",
    "Upstream request duration in seconds",
    ["endpoint"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0],
)


def status_code_of(payload: dict[str, Any]) -> int | str | None:
    """Return the provider status (`cod`) of a decoded response."""
    return payload.get("cod")


def is_success(payload: dict[str, Any]) -> bool:
    """Check whether a decoded response reports success.

    The current weather endpoint sends `cod` as an integer, the daily
    forecast endpoint as a string.
    """
    return str(status_code_of(payload)) == SUCCESS_CODE


class OpenWeatherClient:
    """HTTP client for the OpenWeatherMap current and daily forecast APIs.

    Holds configuration only; every call opens its own connection pool, so a
    single instance is safe to share between concurrent requests.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize client with settings."""
        self._settings = settings
        self._base_url = settings.upstream_url.rstrip("/")
        self._timeout = settings.upstream_timeout_seconds

    async def fetch_current(self, query: str, units: str, lang: str) -> dict[str, Any]:
        """Fetch current conditions for a query fragment.

        Args:
            query: Location fragment, e.g. "q=paris,france" or "lat=1.2&lon=3.4"
            units: Unit system
            lang: Description language

        Returns:
            Decoded response body, empty if the body was not a JSON object

        Raises:
            OpenWeatherTimeoutError: If request times out
            OpenWeatherError: If the request could not be completed
        """
        return await self._request(CURRENT_PATH, query, cnt=1, units=units, lang=lang)

    async def fetch_forecast(
        self, query: str, units: str, days: int, lang: str
    ) -> dict[str, Any]:
        """Fetch the daily forecast for a query fragment.

        Returns:
            Decoded response body, empty if the body was not a JSON object

        Raises:
            OpenWeatherTimeoutError: If request times out
            OpenWeatherError: If the request could not be completed
        """
        return await self._request(FORECAST_PATH, query, cnt=days, units=units, lang=lang)

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=True,
            max_redirects=self._settings.upstream_max_redirects,
            limits=httpx.Limits(max_connections=self._settings.upstream_max_connections),
            headers={"User-Agent": self._settings.upstream_user_agent},
        )

    async def _request(
        self, path: str, query: str, *, cnt: int, units: str, lang: str
    ) -> dict[str, Any]:
        url = f"{self._base_url}/{path}"
        params = httpx.QueryParams(query).merge(
            {
                "cnt": cnt,
                "units": units,
                "mode": "json",
                "lang": lang,
                "appid": self._settings.owm_api_key,
            }
        )

        logger.debug("Requesting upstream", endpoint=path, query=query, units=units, cnt=cnt)

        with upstream_duration.labels(endpoint=path).time():
            try:
                async with self._http_client() as client:
                    response = await client.get(url, params=params)

            except httpx.TimeoutException as e:
                upstream_requests.labels(endpoint=path, status="timeout").inc()
                raise OpenWeatherTimeoutError(
                    f"OpenWeatherMap request timed out after {self._timeout}s"
                ) from e

            except (httpx.RequestError, httpx.InvalidURL) as e:
                upstream_requests.labels(endpoint=path, status="error").inc()
                raise OpenWeatherError(f"OpenWeatherMap request failed: {e}") from e

        payload = self._decode(response, path)
        status = "success" if is_success(payload) else "rejected"
        upstream_requests.labels(endpoint=path, status=status).inc()
        return payload

    def _decode(self, response: httpx.Response, path: str) -> dict[str, Any]:
        """Decode a response body into a mapping.

        Malformed or non-object bodies decode to an empty mapping, which
        callers see as a failed status.
        """
        try:
            data = response.json()
        except ValueError:
            logger.warning(
                "Upstream returned malformed JSON",
                endpoint=path,
                http_status=response.status_code,
            )
            return {}

        if not isinstance(data, dict):
            logger.warning("Upstream returned non-object JSON", endpoint=path)
            return {}

        return data
