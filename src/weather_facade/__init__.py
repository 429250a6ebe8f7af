"""Weather lookup facade over the OpenWeatherMap API."""

__version__ = "0.1.0"
