"""
FastAPI Application Setup

Main entry point for the captioning API.

Responsibility:
    - FastAPI app initialization
    - Router registration (tasks)
    - CORS middleware configuration
    - Global exception handlers
    - Request logging middleware
    - Health check endpoint
    - Closing Redis and broker pools on shutdown

Architecture Notes:
    - Part of API Layer (Presentation)
    - Entry point for HTTP server (uvicorn)
    - Centralizes cross-cutting concerns (logging, CORS, error handling)
    - No business logic - pure HTTP orchestration

Contains:
    - create_app() factory function
    - Global exception handlers
    - Request logging middleware
    - Health check endpoint: GET /health
"""

import logging
import re
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from caption_service import __version__
from caption_service.api.dependencies import get_settings, get_task_queue
from caption_service.api.routers import tasks_router
from caption_service.api.schemas.common import ErrorResponse
from caption_service.config import Settings
from caption_service.domain.shared.exceptions import (
    DomainException,
    ImageTooLargeError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from caption_service.infrastructure.persistence.redis import (
    close_connections,
    health_check as redis_health_check,
)

# Configure logger
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {"Cache-Control": "no-cache"}


# ============================================================================
# RESPONSE MODELS
# ============================================================================


class HealthCheckResponse(BaseModel):
    """
    Health check response model.

    Attributes:
        status: "ok" if Redis answers PING, "degraded" otherwise
        version: API version
        timestamp: Unix timestamp of health check
        redis: Whether the status store is reachable
    """

    status: str = "ok"
    version: str = __version__
    timestamp: float
    redis: bool = True


# ============================================================================
# MIDDLEWARE
# ============================================================================


async def request_logging_middleware(request: Request, call_next):
    """
    Request logging middleware.

    Logs all incoming requests with method, path, status code, and duration.

    Logging Format:
        INFO: "Incoming request: POST /api/upload"
        INFO: "Request completed: POST /api/upload - 201 - 0.123s"
    """
    logger.info(f"Incoming request: {request.method} {request.url.path}")

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} - "
        f"{response.status_code} - {duration:.3f}s"
    )

    return response


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================


def _error_code(exc: Exception) -> str:
    """
    Machine-readable code from the exception class name.

    Examples:
        >>> _error_code(TaskNotFoundError("abc"))
        'TASK_NOT_FOUND'
    """
    name = exc.__class__.__name__
    if name.endswith("Error"):
        name = name[: -len("Error")]
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).upper()


async def domain_exception_handler(request: Request, exc: DomainException):
    """
    Global exception handler for domain layer exceptions.

    Mapping:
        - ImageTooLargeError -> 413 Payload Too Large
        - ValidationError (UnsupportedExtension, EmptyImage) -> 400 Bad Request
        - NotFoundError (TaskNotFound, ResultNotAvailable, ErrorNotAvailable) -> 404
        - InfrastructureError -> 503 Service Unavailable
        - Other DomainException -> 500 Internal Server Error

    Examples:
        >>> # UnsupportedExtensionError
        >>> # Returns: 400 {"code": "UNSUPPORTED_EXTENSION", "message": "...", "details": {...}}

        >>> # TaskNotFoundError
        >>> # Returns: 404 {"code": "TASK_NOT_FOUND", "message": "...", "details": {"task_id": "..."}}
    """
    details = {"exception_type": exc.__class__.__name__}

    if isinstance(exc, ImageTooLargeError):
        status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        details["max_size_bytes"] = exc.max_size_bytes
    elif isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
        details["task_id"] = exc.task_id
    elif isinstance(exc, InfrastructureError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    error_response = ErrorResponse(
        code=_error_code(exc),
        message=exc.message,
        details=details,
    )

    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"Domain exception: {exc.__class__.__name__} - {str(exc)} - "
        f"Request: {request.method} {request.url.path}"
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(),
        headers=NO_CACHE_HEADERS,
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unexpected exceptions.

    Catches all unhandled exceptions and converts to 500 Internal Server Error.
    Logs full stack trace for debugging.
    """
    error_response = ErrorResponse(
        code="INTERNAL_SERVER_ERROR",
        message="An unexpected error occurred",
        details={"type": exc.__class__.__name__},
    )

    logger.error(
        f"Unexpected error: {exc.__class__.__name__} - {str(exc)} - "
        f"Request: {request.method} {request.url.path}",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(),
        headers=NO_CACHE_HEADERS,
    )


# ============================================================================
# LIFESPAN
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Captioning API starting")
    yield
    logger.info("Captioning API shutting down")
    if get_task_queue.cache_info().currsize:
        get_task_queue().close()
    close_connections()


# ============================================================================
# APP FACTORY
# ============================================================================


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    FastAPI application factory.

    Creates and configures FastAPI app with all middleware, routers,
    and exception handlers.

    Args:
        settings: Settings used by the health check (default: process settings)

    Returns:
        Configured FastAPI application instance

    Usage:
        >>> app = create_app()
        >>> # Run with uvicorn:
        >>> # uvicorn caption_service.api.main:app --reload
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Caption Service API",
        version=__version__,
        description=(
            "Asynchronous image captioning. Upload an image, poll the task "
            "status, then fetch the caption or the failure diagnostic."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(request_logging_middleware)

    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(tasks_router, prefix="/api")

    @app.get(
        "/health",
        response_model=HealthCheckResponse,
        status_code=status.HTTP_200_OK,
        summary="Health check endpoint",
        tags=["health"],
    )
    async def health() -> HealthCheckResponse:
        """
        Health check endpoint.

        Examples:
            >>> curl http://localhost:8000/health
            {"status": "ok", "version": "0.1.0", "timestamp": 1704976800.123, "redis": true}
        """
        redis_ok = redis_health_check(settings)
        return HealthCheckResponse(
            status="ok" if redis_ok else "degraded",
            timestamp=time.time(),
            redis=redis_ok,
        )

    logger.info("FastAPI application created successfully")
    logger.info("Registered routers: /api/upload, /api/{task_id}/status|result|error")

    return app


# ============================================================================
# APP INSTANCE (for uvicorn)
# ============================================================================

# Usage: uvicorn caption_service.api.main:app --reload
app = create_app()
