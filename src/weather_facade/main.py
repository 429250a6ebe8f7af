"""Application entry point."""

import structlog
import uvicorn
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from weather_facade import __version__
from weather_facade.api.routes import api_router, health_router
from weather_facade.config import get_settings
from weather_facade.middleware.logging import LoggingMiddleware, configure_logging


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    # Configure logging
    configure_logging(settings)

    # Create FastAPI app
    app = FastAPI(
        title="Weather Facade API",
        description="Current conditions and daily forecast from OpenWeatherMap",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware
    app.add_middleware(LoggingMiddleware)

    # Include routers
    app.include_router(api_router)
    app.include_router(health_router)

    # Mount Prometheus metrics endpoint
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    structlog.get_logger().info(
        "Application configured",
        version=__version__,
        upstream_url=settings.upstream_url,
        cache_enabled=settings.cache_ttl_seconds > 0,
        cache_ttl_seconds=settings.cache_ttl_seconds,
        default_units=settings.default_units,
        default_days=settings.default_days,
        api_key_configured=bool(settings.owm_api_key),
    )

    return app


# Create app instance for ASGI servers
app = create_app()


def run() -> None:
    """Run the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "weather_facade.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
