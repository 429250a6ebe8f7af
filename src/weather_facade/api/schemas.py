"""API request and response schemas."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

Units = Literal["metric", "imperial"]
FailureReason = Literal["provider", "timeout", "transport"]

FAILURE_MESSAGE = "Unable to load weather"


def _first_condition(payload: dict[str, Any]) -> dict[str, Any]:
    weather = payload.get("weather")
    if isinstance(weather, list) and weather and isinstance(weather[0], dict):
        return weather[0]
    return {}


class CurrentConditions(BaseModel):
    """Current conditions for a single location."""

    statusCode: int | None = Field(default=None, description="Provider status code")  # noqa: N815
    conditionCode: int | None = Field(default=None, description="Provider condition code")  # noqa: N815
    windDegrees: float | None = Field(default=None, description="Wind direction in degrees")  # noqa: N815
    description: str | None = Field(default=None, description="Condition description")
    temperature: float | None = Field(default=None, description="Temperature in requested units")
    locationName: str | None = Field(default=None, description="Resolved location name")  # noqa: N815
    provider: dict[str, Any] = Field(default_factory=dict, description="Raw provider payload")

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> CurrentConditions:
        """Build from a decoded `weather` endpoint response."""
        condition = _first_condition(payload)
        wind = payload.get("wind")
        if not isinstance(wind, dict):
            wind = {}
        main = payload.get("main")
        if not isinstance(main, dict):
            main = {}
        cod = payload.get("cod")
        return cls(
            statusCode=int(cod) if cod is not None and str(cod).isdigit() else None,
            conditionCode=condition.get("id"),
            windDegrees=wind.get("deg"),
            description=condition.get("description"),
            temperature=main.get("temp"),
            locationName=payload.get("name"),
            provider=payload,
        )


class ForecastEntry(BaseModel):
    """Forecast snapshot for one day."""

    timestamp: int | None = Field(default=None, description="Unix timestamp of the day")
    conditionCode: int | None = Field(default=None, description="Provider condition code")  # noqa: N815
    windDegrees: float | None = Field(default=None, description="Wind direction in degrees")  # noqa: N815
    description: str | None = Field(default=None, description="Condition description")
    temperatureDay: float | None = Field(default=None, description="Day temperature")  # noqa: N815
    temperatureMin: float | None = Field(default=None, description="Minimum temperature")  # noqa: N815
    temperatureMax: float | None = Field(default=None, description="Maximum temperature")  # noqa: N815
    provider: dict[str, Any] = Field(default_factory=dict, description="Raw provider entry")

    @classmethod
    def from_payload(cls, entry: dict[str, Any]) -> ForecastEntry:
        """Build from one item of a `forecast/daily` response list."""
        condition = _first_condition(entry)
        temp = entry.get("temp")
        if not isinstance(temp, dict):
            temp = {}
        return cls(
            timestamp=entry.get("dt"),
            conditionCode=condition.get("id"),
            windDegrees=entry.get("deg"),
            description=condition.get("description"),
            temperatureDay=temp.get("day"),
            temperatureMin=temp.get("min"),
            temperatureMax=temp.get("max"),
            provider=entry,
        )


class WeatherResult(BaseModel):
    """Combined current conditions and forecast, as cached."""

    current: CurrentConditions
    forecast: list[ForecastEntry] = Field(default_factory=list)
    units: Units
    date: Any = Field(default=None, description="Passthrough date option")


class WeatherFailure(BaseModel):
    """Marker returned when weather could not be loaded."""

    message: str = Field(default=FAILURE_MESSAGE, description="Human readable message")
    reason: FailureReason = Field(..., description="Failure category")
    statusCode: int | str | None = Field(default=None, description="Provider status code")  # noqa: N815
    detail: str | None = Field(default=None, description="Provider or transport detail")


class ConditionDisplay(BaseModel):
    """Display attributes for a set of conditions."""

    icon: str | None = Field(default=None, description="Icon class")
    windDirection: str | None = Field(default=None, description="Compass label")  # noqa: N815
    label: str | None = Field(default=None, description="Formatted date label")


class WeatherDisplay(BaseModel):
    """Display attributes derived from a weather result."""

    current: ConditionDisplay
    forecast: list[ConditionDisplay] = Field(default_factory=list)


class WeatherResponse(BaseModel):
    """Weather API response."""

    result: WeatherResult
    display: WeatherDisplay


class ErrorDetail(BaseModel):
    """Error detail."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Error response."""

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Health status")


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: str = Field(..., description="Readiness status")
    checks: dict[str, str] = Field(default_factory=dict, description="Component checks")
