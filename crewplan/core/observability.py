"""
Observability Infrastructure

Structured logging and metrics for the placement engine and its HTTP surface.
Logging is configured through structlog; counters and histograms are exposed
through prometheus_client.
"""

import contextvars
import functools
import logging
import sys
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from prometheus_client import Counter, Histogram

from .config import settings

# Context variables for correlation tracking
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)

F = TypeVar("F", bound=Callable[..., Any])

# Prometheus metrics
REQUEST_COUNT = Counter(
    "crewplan_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

REQUEST_DURATION = Histogram(
    "crewplan_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "endpoint"],
)

PLACEMENT_OPERATIONS = Counter(
    "crewplan_placement_operations_total",
    "Total placement engine operations",
    ["operation_type", "status"],
)

PLACEMENT_DURATION = Histogram(
    "crewplan_placement_operation_duration_seconds",
    "Placement engine operation duration",
    ["operation_type"],
)

PLACEMENT_WINDOWS = Histogram(
    "crewplan_placement_windows_returned",
    "Number of placement windows returned per request",
    buckets=(0, 1, 2, 3, 5, 8, 13, 21),
)


class CorrelationIdProcessor:
    """Structlog processor to add correlation ID to all log entries."""

    def __call__(
        self, logger: Any, name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        correlation_id = correlation_id_var.get("")
        if correlation_id:
            event_dict["correlation_id"] = correlation_id
        return event_dict


def setup_structured_logging() -> None:
    """Configure structured logging with JSON or console output."""

    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        CorrelationIdProcessor(),
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=settings.ENVIRONMENT == "local")
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set correlation ID for request tracking."""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    correlation_id_var.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str:
    """Get current correlation ID."""
    return correlation_id_var.get("")


def log_error_with_context(
    error: Exception,
    operation: str,
    context: dict[str, Any] | None = None,
    severity: str = "error",
) -> None:
    """Log an error together with its domain details and request context."""
    logger = get_logger("error_tracking")

    error_data = {
        "operation": operation,
        "error_type": type(error).__name__,
        "error_message": str(error),
        "severity": severity,
    }

    if getattr(error, "details", None):
        error_data["error_details"] = error.details

    if context:
        error_data.update(context)

    if severity == "warning":
        logger.warning("Warning occurred", **error_data)
    else:
        logger.error("Error occurred", **error_data)


def monitor_performance(operation_type: str):
    """Decorator recording duration and outcome of a synchronous operation."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)
            start_time = time.perf_counter()

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = time.perf_counter() - start_time
                if settings.ENABLE_METRICS:
                    PLACEMENT_OPERATIONS.labels(
                        operation_type=operation_type, status="error"
                    ).inc()
                logger.error(
                    "Operation failed",
                    operation=operation_type,
                    function=func.__name__,
                    duration_seconds=duration,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

            duration = time.perf_counter() - start_time
            if settings.ENABLE_METRICS:
                PLACEMENT_OPERATIONS.labels(
                    operation_type=operation_type, status="success"
                ).inc()
                PLACEMENT_DURATION.labels(operation_type=operation_type).observe(
                    duration
                )
            logger.debug(
                "Operation completed",
                operation=operation_type,
                function=func.__name__,
                duration_seconds=duration,
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def initialize_observability() -> None:
    """Initialize logging and announce the active configuration."""
    setup_structured_logging()

    logger = get_logger("observability")
    logger.info(
        "Observability system initialized",
        log_format=settings.LOG_FORMAT,
        metrics_enabled=settings.ENABLE_METRICS,
    )
