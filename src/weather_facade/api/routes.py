"""API route definitions."""

from typing import Annotated

import structlog
from fastapi import APIRouter, HTTPException, Query, status

from weather_facade.api.dependencies import CacheDep, WeatherFacadeDep
from weather_facade.api.schemas import (
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ReadinessResponse,
    WeatherFailure,
    WeatherResponse,
)
from weather_facade.services.presentation import build_display

logger = structlog.get_logger()

# API router for weather endpoints
api_router = APIRouter(prefix="/api/v1", tags=["weather"])

# Health router for health checks
health_router = APIRouter(prefix="/health", tags=["health"])


def _failure_to_http(failure: WeatherFailure) -> HTTPException:
    if failure.reason == "timeout":
        status_code = status.HTTP_504_GATEWAY_TIMEOUT
        code = "UPSTREAM_TIMEOUT"
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
        code = "UPSTREAM_ERROR"

    message = failure.message if failure.detail is None else f"{failure.message}: {failure.detail}"
    return HTTPException(
        status_code=status_code,
        detail=ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump(),
    )


@api_router.get(
    "/weather",
    response_model=WeatherResponse,
    responses={
        422: {"description": "Missing or invalid location"},
        502: {"model": ErrorResponse, "description": "Upstream API error"},
        504: {"model": ErrorResponse, "description": "Upstream timeout"},
    },
)
async def get_weather(
    facade: WeatherFacadeDep,
    name: Annotated[str | None, Query(min_length=1, description="Place name")] = None,
    lat: Annotated[float | None, Query(ge=-90, le=90, description="Latitude")] = None,
    lon: Annotated[float | None, Query(ge=-180, le=180, description="Longitude")] = None,
    units: Annotated[str | None, Query(description="metric or imperial")] = None,
    days: Annotated[int | None, Query(ge=0, le=16, description="Forecast days")] = None,
) -> WeatherResponse:
    """Get current conditions and daily forecast by place name or point.

    Unknown units fall back to imperial; check `result.units` in the response.
    """
    if name is not None:
        outcome = await facade.by_name(name, units, days=days)
    elif lat is not None and lon is not None:
        outcome = await facade.by_point(lat, lon, units, days=days)
    else:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=ErrorResponse(
                error=ErrorDetail(
                    code="INVALID_LOCATION",
                    message="Provide either 'name' or both 'lat' and 'lon'",
                )
            ).model_dump(),
        )

    if isinstance(outcome, WeatherFailure):
        logger.error(
            "Weather lookup failed",
            reason=outcome.reason,
            status_code=outcome.statusCode,
            detail=outcome.detail,
        )
        raise _failure_to_http(outcome)

    return WeatherResponse(result=outcome, display=build_display(outcome))


@health_router.get("/live", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    """Liveness check - reports if the service is running."""
    return HealthResponse(status="ok")


@health_router.get("/ready", response_model=ReadinessResponse)
async def readiness(cache: CacheDep) -> ReadinessResponse:
    """Readiness check - reports if the service is ready to accept traffic."""
    cache_status = "ok" if cache.is_healthy() else "unhealthy"

    overall_status = "ok" if cache_status == "ok" else "unhealthy"

    response = ReadinessResponse(
        status=overall_status,
        checks={"cache": cache_status},
    )

    if overall_status != "ok":
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=response.model_dump(),
        )

    return response
