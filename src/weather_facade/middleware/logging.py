"""Logging middleware and configuration."""

import logging
import re
import time
import uuid
from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

import structlog
from fastapi import Request, Response
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

from weather_facade.config import Settings

# Map log level names to logging module constants
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

REDACTED = "[REDACTED]"
_SENSITIVE_KEY_RE = re.compile(r"(appid|api[_-]?key|token|secret)", re.IGNORECASE)
_SENSITIVE_PARAM_RE = re.compile(r"(?i)\b(appid|api[_-]?key)=([^&\s]+)")


# Metrics
http_requests = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
http_duration = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 20.0],
)


def redact_secrets(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Structlog processor masking API keys in event fields."""
    for key, value in event_dict.items():
        if _SENSITIVE_KEY_RE.search(key):
            event_dict[key] = REDACTED
        elif isinstance(value, str):
            event_dict[key] = _SENSITIVE_PARAM_RE.sub(rf"\1={REDACTED}", value)
    return event_dict


def configure_logging(settings: Settings) -> None:
    """Configure structlog based on settings."""
    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        redact_secrets,
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    log_level = LOG_LEVELS.get(settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging and metrics."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request with logging and metrics."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        if request.url.query:
            structlog.contextvars.bind_contextvars(query_string=request.url.query)

        logger = structlog.get_logger()
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error("Request failed with exception", duration_ms=round(duration_ms, 2))
            http_requests.labels(
                method=request.method,
                path=request.url.path,
                status="500",
            ).inc()
            raise

        duration = time.perf_counter() - start_time

        http_requests.labels(
            method=request.method,
            path=request.url.path,
            status=str(response.status_code),
        ).inc()
        http_duration.labels(
            method=request.method,
            path=request.url.path,
        ).observe(duration)

        logger.info(
            "Request completed",
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )

        response.headers["X-Request-ID"] = request_id

        return response
