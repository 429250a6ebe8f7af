"""Mapping of provider values to display attributes."""

from datetime import UTC, datetime
from enum import StrEnum

from weather_facade.api.schemas import ConditionDisplay, WeatherDisplay, WeatherResult


class WeatherIcon(StrEnum):
    """Icon classes used by weather widgets."""

    LIGHTNING = "icon-weather-lightning"
    POURING = "icon-weather-pouring"
    RAINY = "icon-weather-rainy"
    SNOWY = "icon-weather-snowy"
    FOG = "icon-weather-fog"
    SUNNY = "icon-weather-sunny"
    PARTLY_CLOUDY = "icon-weather-partlycloudy"
    CLOUDY = "icon-weather-cloudy"


# OpenWeatherMap condition codes grouped by icon
ICON_CODES: dict[WeatherIcon, tuple[int, ...]] = {
    WeatherIcon.LIGHTNING: (200, 201, 202, 210, 211, 212, 221, 230, 231, 232),
    WeatherIcon.POURING: (300, 301, 302, 310, 311, 312, 313, 314, 321, 511, 520, 521, 522, 531),
    WeatherIcon.RAINY: (500, 501, 502, 503, 504),
    WeatherIcon.SNOWY: (600, 601, 602, 611, 612, 615, 616, 620, 621, 622),
    WeatherIcon.FOG: (701, 711, 721, 731, 741, 751, 761, 762, 771, 781),
    WeatherIcon.SUNNY: (800,),
    WeatherIcon.PARTLY_CLOUDY: (801,),
    WeatherIcon.CLOUDY: (802, 803, 804),
}

_ICON_BY_CODE = {code: icon for icon, codes in ICON_CODES.items() for code in codes}

# (label, lower bound inclusive, upper bound exclusive), first match wins.
# "E" historically extends to 122.5, shadowing the lower part of "ESE".
WIND_SECTORS: tuple[tuple[str, float, float], ...] = (
    ("N", 0, 22.5),
    ("NNE", 22.5, 45),
    ("NE", 45, 67.5),
    ("ENE", 67.5, 90),
    ("E", 90, 122.5),
    ("ESE", 112.5, 135),
    ("SE", 135, 157.5),
    ("SSE", 157.5, 180),
    ("S", 180, 202.5),
    ("SSW", 202.5, 225),
    ("SW", 225, 247.5),
    ("WSW", 247.5, 270),
    ("W", 270, 292.5),
    ("WNW", 292.5, 315),
    ("NW", 315, 337.5),
    ("NNW", 337.5, 360),
)


def icon_for(code: int | None) -> WeatherIcon | None:
    """Return the icon class for a condition code, None if unmapped."""
    if code is None:
        return None
    return _ICON_BY_CODE.get(code)


def wind_direction_for(degrees: float | None) -> str | None:
    """Return the 16-point compass label for a bearing in [0, 360)."""
    if degrees is None:
        return None
    for label, lower, upper in WIND_SECTORS:
        if lower <= degrees < upper:
            return label
    return None


def format_day(timestamp: int | None, pattern: object) -> str | None:
    """Format a Unix timestamp as a UTC date with a strftime pattern."""
    if timestamp is None or not isinstance(pattern, str):
        return None
    return datetime.fromtimestamp(timestamp, UTC).strftime(pattern)


def build_display(result: WeatherResult) -> WeatherDisplay:
    """Derive icons, wind labels and day labels for a weather result."""
    current = ConditionDisplay(
        icon=icon_for(result.current.conditionCode),
        windDirection=wind_direction_for(result.current.windDegrees),
    )
    forecast = [
        ConditionDisplay(
            icon=icon_for(entry.conditionCode),
            windDirection=wind_direction_for(entry.windDegrees),
            label=format_day(entry.timestamp, result.date),
        )
        for entry in result.forecast
    ]
    return WeatherDisplay(current=current, forecast=forecast)
