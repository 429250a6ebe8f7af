"""Tests for OpenWeatherMap client."""

from typing import Any

import httpx
import pytest
import respx
from httpx import Response

from weather_facade.config import LEGACY_USER_AGENT, Settings
from weather_facade.services.openweather import (
    OpenWeatherClient,
    OpenWeatherError,
    OpenWeatherTimeoutError,
    is_success,
    status_code_of,
)


class TestStatusHelpers:
    """Tests for status helpers."""

    def test_is_success_accepts_int_and_string(self) -> None:
        """Test both status encodings count as success."""
        assert is_success({"cod": 200}) is True
        assert is_success({"cod": "200"}) is True

    def test_is_success_rejects_failures(self) -> None:
        """Test failure and empty payloads."""
        assert is_success({"cod": "404", "message": "city not found"}) is False
        assert is_success({"cod": 401}) is False
        assert is_success({}) is False

    def test_status_code_of(self) -> None:
        """Test status extraction."""
        assert status_code_of({"cod": "404"}) == "404"
        assert status_code_of({}) is None


class TestOpenWeatherClient:
    """Tests for OpenWeatherClient."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetch_current_success(
        self,
        open_weather_client: OpenWeatherClient,
        current_url: str,
        current_payload: Any,
    ) -> None:
        """Test successful current conditions fetch."""
        route = respx.get(current_url).mock(return_value=Response(200, json=current_payload()))

        result = await open_weather_client.fetch_current("q=paris,france", "metric", "en")

        assert result["cod"] == 200
        assert result["weather"][0]["id"] == 800

        params = route.calls.last.request.url.params
        assert params["q"] == "paris,france"
        assert params["cnt"] == "1"
        assert params["units"] == "metric"
        assert params["mode"] == "json"
        assert params["lang"] == "en"
        assert params["appid"] == "test-key"

    @respx.mock
    @pytest.mark.asyncio
    async def test_location_fragment_sent_with_request_params(
        self,
        open_weather_client: OpenWeatherClient,
        current_url: str,
        current_payload: Any,
    ) -> None:
        """Test the location fragment is merged with the fixed parameters."""
        route = respx.get(current_url).mock(return_value=Response(200, json=current_payload()))

        await open_weather_client.fetch_current("q=new york,us", "imperial", "fr")

        params = route.calls.last.request.url.params
        assert sorted(params.keys()) == ["appid", "cnt", "lang", "mode", "q", "units"]
        assert params["q"] == "new york,us"
        assert params["lang"] == "fr"

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetch_forecast_sends_days(
        self,
        open_weather_client: OpenWeatherClient,
        forecast_url: str,
        forecast_payload: Any,
    ) -> None:
        """Test forecast request uses the daily path and count."""
        route = respx.get(forecast_url).mock(return_value=Response(200, json=forecast_payload(3)))

        result = await open_weather_client.fetch_forecast("lat=1.2&lon=3.4", "imperial", 3, "en")

        assert len(result["list"]) == 3
        params = route.calls.last.request.url.params
        assert params["lat"] == "1.2"
        assert params["lon"] == "3.4"
        assert params["cnt"] == "3"
        assert params["units"] == "imperial"

    @respx.mock
    @pytest.mark.asyncio
    async def test_sends_legacy_user_agent(
        self,
        open_weather_client: OpenWeatherClient,
        current_url: str,
        current_payload: Any,
    ) -> None:
        """Test the client identifies with the configured user agent."""
        route = respx.get(current_url).mock(return_value=Response(200, json=current_payload()))

        await open_weather_client.fetch_current("q=paris", "metric", "en")

        assert route.calls.last.request.headers["User-Agent"] == LEGACY_USER_AGENT

    @respx.mock
    @pytest.mark.asyncio
    async def test_network_policy_from_settings(
        self,
        monkeypatch: pytest.MonkeyPatch,
        settings: Settings,
        open_weather_client: OpenWeatherClient,
        current_url: str,
        current_payload: Any,
    ) -> None:
        """Test timeout, redirect and connection caps come from settings."""
        captured: dict[str, Any] = {}

        class RecordingAsyncClient(httpx.AsyncClient):
            def __init__(self, **kwargs: Any) -> None:
                captured.update(kwargs)
                super().__init__(**kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", RecordingAsyncClient)
        respx.get(current_url).mock(return_value=Response(200, json=current_payload()))

        await open_weather_client.fetch_current("q=paris", "metric", "en")

        assert captured["timeout"] == settings.upstream_timeout_seconds
        assert captured["follow_redirects"] is True
        assert captured["max_redirects"] == 2
        assert captured["limits"].max_connections == 2

    @respx.mock
    @pytest.mark.asyncio
    async def test_follows_redirect(
        self,
        open_weather_client: OpenWeatherClient,
        current_url: str,
        current_payload: Any,
    ) -> None:
        """Test a single redirect is followed."""
        moved_url = current_url.replace("/weather", "/moved")
        respx.get(current_url).mock(return_value=Response(302, headers={"Location": moved_url}))
        respx.get(moved_url).mock(return_value=Response(200, json=current_payload()))

        result = await open_weather_client.fetch_current("q=paris", "metric", "en")

        assert is_success(result)

    @respx.mock
    @pytest.mark.asyncio
    async def test_too_many_redirects(
        self, open_weather_client: OpenWeatherClient, current_url: str
    ) -> None:
        """Test a redirect loop stops at the cap."""
        route = respx.get(current_url).mock(
            return_value=Response(302, headers={"Location": f"{current_url}?loop=1"})
        )

        with pytest.raises(OpenWeatherError, match="request failed"):
            await open_weather_client.fetch_current("q=paris", "metric", "en")

        assert route.call_count == 3

    @respx.mock
    @pytest.mark.asyncio
    async def test_provider_error_body_is_returned(
        self, open_weather_client: OpenWeatherClient, current_url: str
    ) -> None:
        """Test error statuses are decoded, not raised."""
        respx.get(current_url).mock(
            return_value=Response(401, json={"cod": 401, "message": "Invalid API key"})
        )

        result = await open_weather_client.fetch_current("q=paris", "metric", "en")

        assert result == {"cod": 401, "message": "Invalid API key"}
        assert is_success(result) is False

    @respx.mock
    @pytest.mark.asyncio
    async def test_malformed_json_decodes_to_empty(
        self, open_weather_client: OpenWeatherClient, current_url: str
    ) -> None:
        """Test malformed bodies become an empty mapping."""
        respx.get(current_url).mock(return_value=Response(200, text="<html>oops</html>"))

        assert await open_weather_client.fetch_current("q=paris", "metric", "en") == {}

    @respx.mock
    @pytest.mark.asyncio
    async def test_non_object_json_decodes_to_empty(
        self, open_weather_client: OpenWeatherClient, current_url: str
    ) -> None:
        """Test JSON arrays become an empty mapping."""
        respx.get(current_url).mock(return_value=Response(200, json=[1, 2, 3]))

        assert await open_weather_client.fetch_current("q=paris", "metric", "en") == {}

    @respx.mock
    @pytest.mark.asyncio
    async def test_timeout(self, open_weather_client: OpenWeatherClient, current_url: str) -> None:
        """Test timeout handling."""
        respx.get(current_url).mock(side_effect=httpx.TimeoutException("timeout"))

        with pytest.raises(OpenWeatherTimeoutError):
            await open_weather_client.fetch_current("q=paris", "metric", "en")

    @respx.mock
    @pytest.mark.asyncio
    async def test_connection_error(
        self, open_weather_client: OpenWeatherClient, forecast_url: str
    ) -> None:
        """Test transport errors are wrapped."""
        respx.get(forecast_url).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(OpenWeatherError, match="request failed"):
            await open_weather_client.fetch_forecast("q=paris", "metric", 3, "en")

    @respx.mock
    @pytest.mark.asyncio
    async def test_invalid_url_is_wrapped(
        self, open_weather_client: OpenWeatherClient, current_url: str
    ) -> None:
        """Test invalid URLs surface as client errors."""
        respx.get(current_url).mock(side_effect=httpx.InvalidURL("Invalid non-printable character"))

        with pytest.raises(OpenWeatherError, match="non-printable"):
            await open_weather_client.fetch_current("q=paris", "metric", "en")

    @pytest.mark.asyncio
    async def test_invalid_base_url_is_wrapped(self) -> None:
        """Test a malformed upstream URL does not escape as an httpx error."""
        client = OpenWeatherClient(Settings(upstream_url="https://example\x00.org"))

        with pytest.raises(OpenWeatherError):
            await client.fetch_current("q=paris", "metric", "en")
