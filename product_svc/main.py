"""Product service main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_svc.api.health import router as health_router
from product_svc.api.middleware import setup_middleware
from product_svc.api.products import router as products_router
from product_svc.api.schemas import ErrorResponse
from product_svc.domain.exceptions import (
    ConflictError,
    DomainError,
    ExecutionFailureError,
    InsufficientStockError,
    InvalidColumnError,
    InvalidFilterValueError,
    InvalidOperatorError,
    ProductNotFoundError,
    ValidationError,
)
from product_svc.infrastructure.config import settings
from product_svc.infrastructure.database import create_tables, engine
from product_svc.infrastructure.logging import configure_logging

configure_logging(settings)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    logger.info(
        "Starting product service",
        version=settings.api_version,
        debug=settings.debug,
    )

    if settings.auto_create_tables:
        await create_tables()
        logger.info("Database tables ensured")

    yield

    # Shutdown
    logger.info("Shutting down product service")
    await engine.dispose()


app = FastAPI(
    title="Product Service",
    description="Product catalog with stock adjustments and filterable listings",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================

# Most specific first; the first isinstance match wins
DOMAIN_ERROR_STATUS: list[tuple[type[DomainError], int, str]] = [
    (InvalidColumnError, status.HTTP_400_BAD_REQUEST, "INVALID_COLUMN"),
    (InvalidOperatorError, status.HTTP_400_BAD_REQUEST, "INVALID_OPERATOR"),
    (InvalidFilterValueError, status.HTTP_400_BAD_REQUEST, "INVALID_FILTER_VALUE"),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR"),
    (ProductNotFoundError, status.HTTP_404_NOT_FOUND, "PRODUCT_NOT_FOUND"),
    (ConflictError, status.HTTP_409_CONFLICT, "CONFLICT"),
    (InsufficientStockError, status.HTTP_409_CONFLICT, "INSUFFICIENT_STOCK"),
    (ExecutionFailureError, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR"),
]


def resolve_domain_error(exc: DomainError) -> tuple[int, str]:
    """Map a domain error to its HTTP status and error code."""
    for error_type, status_code, error_code in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code, error_code
    return status.HTTP_400_BAD_REQUEST, "BAD_REQUEST"


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Translate domain errors into the standard error envelope.

    Caller errors name the offending input; infrastructure errors stay
    opaque and their cause is only logged where they were raised.
    """
    request_id = getattr(request.state, "request_id", None)
    status_code, error_code = resolve_domain_error(exc)

    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        details = []
    else:
        details = ErrorResponse.details_from_dict(exc.details)
        logger.info(
            "Request rejected",
            path=request.url.path,
            error_code=error_code,
            message=exc.message,
        )

    body = ErrorResponse(
        error_code=error_code,
        message=exc.message,
        details=details,
        request_id=request_id,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    body = ErrorResponse(error_code="ERROR", message=str(exc.detail), request_id=request_id)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())
