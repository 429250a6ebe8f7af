"""Application configuration management."""

from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LEGACY_USER_AGENT = (
    "Mozilla/5.0 (Windows; U; Windows NT 5.1; en-US; rv:1.8.1.1) Gecko/20061204 Firefox/2.0.0.1"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Server settings
    app_host: str = Field(default="0.0.0.0", description="Server bind host")
    app_port: int = Field(default=8080, description="Server bind port")

    # Upstream API settings
    upstream_url: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        description="OpenWeatherMap API base URL",
    )
    upstream_timeout_seconds: float = Field(
        default=20.0,
        description="Upstream request timeout in seconds",
        ge=0.1,
        le=60.0,
    )
    upstream_max_redirects: int = Field(
        default=2,
        description="Maximum redirects followed per upstream request",
        ge=0,
        le=10,
    )
    upstream_max_connections: int = Field(
        default=2,
        description="Maximum simultaneous upstream connections",
        ge=1,
        le=100,
    )
    upstream_user_agent: str = Field(
        default=LEGACY_USER_AGENT,
        description="User-Agent sent to the upstream API",
    )
    upstream_lang: str = Field(default="en", description="Language for condition descriptions")
    owm_api_key: str = Field(default="", description="OpenWeatherMap API key")

    # Weather defaults
    default_units: str = Field(default="imperial", description="Unit system (metric or imperial)")
    default_days: int = Field(
        default=5,
        description="Number of forecast days",
        ge=0,
        le=16,
    )
    default_date_format: str = Field(
        default="%A, %B %d",
        description="strftime pattern handed to the rendering layer",
    )

    # Cache settings
    cache_ttl_seconds: int = Field(
        default=600,
        description="Cache TTL in seconds, 0 disables caching",
        ge=0,
        le=86400,
    )
    cache_max_size: int = Field(
        default=10000,
        description="Maximum cache entries",
        ge=1,
        le=1000000,
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: str = Field(
        default="json",
        description="Log format (json or text)",
    )

    @property
    def weather_defaults(self) -> dict[str, Any]:
        """Option defaults merged under every weather request."""
        return {
            "units": self.default_units,
            "days": self.default_days,
            "date": self.default_date_format,
            "lang": self.upstream_lang,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
