import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.middleware.base import BaseHTTPMiddleware

from crewplan.api.main import api_router
from crewplan.core.config import settings
from crewplan.core.observability import (
    REQUEST_COUNT,
    REQUEST_DURATION,
    get_logger,
    initialize_observability,
    log_error_with_context,
    set_correlation_id,
)
from crewplan.domain.shared.exceptions import DomainError

# Initialize structured logger
logger = get_logger(__name__)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Middleware for request observability and metrics collection."""

    async def dispatch(self, request: Request, call_next):
        # Generate correlation ID for request tracing
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        start_time = time.time()
        method = request.method
        path = request.url.path

        logger.info(
            "Request started",
            method=method,
            path=path,
            correlation_id=correlation_id,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time

            if settings.ENABLE_METRICS:
                REQUEST_COUNT.labels(method=method, endpoint=path, status="500").inc()
                REQUEST_DURATION.labels(method=method, endpoint=path).observe(
                    duration
                )

            logger.error(
                "Request failed",
                method=method,
                path=path,
                duration_seconds=duration,
                correlation_id=correlation_id,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            raise

        duration = time.time() - start_time
        status_code = response.status_code

        if settings.ENABLE_METRICS:
            REQUEST_COUNT.labels(
                method=method, endpoint=path, status=str(status_code)
            ).inc()
            REQUEST_DURATION.labels(method=method, endpoint=path).observe(duration)

        # Add correlation ID to response headers
        response.headers["X-Correlation-ID"] = correlation_id

        logger.info(
            "Request completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_seconds=duration,
            correlation_id=correlation_id,
        )
        return response


def custom_generate_unique_id(route: APIRoute) -> str:
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging on startup and announce the active workday settings."""
    initialize_observability()
    logger.info(
        "Application started",
        project_name=settings.PROJECT_NAME,
        environment=settings.ENVIRONMENT,
        api_version=settings.API_V1_STR,
        org_timezone=settings.ORG_TIMEZONE,
        workday_minutes=settings.WORKDAY_LENGTH_MINUTES,
        grid_minutes=settings.GRID_MINUTES,
    )
    yield
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    Crew timeline and placement engine.

    Given a crew-day's assignments and drive times between job sites, computes
    the occupied timeline (jobs plus travel buffers) and the grid-aligned
    windows into which a new job can be placed. Stateless: every request
    carries its own snapshot.
    """,
    version="1.0.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Add observability middleware
app.add_middleware(ObservabilityMiddleware)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    """Return domain errors as structured 400 responses."""
    log_error_with_context(
        exc,
        operation=f"{request.method} {request.url.path}",
        severity="warning",
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.to_dict()}
    )


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok", "service": settings.PROJECT_NAME}


app.include_router(api_router, prefix=settings.API_V1_STR)
