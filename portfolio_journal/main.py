# portfolio_journal/main.py
"""
FastAPI application entry point.

This file:
- Configures application-wide logging
- Creates the FastAPI application and its analytics cache
- Registers global exception handlers
- Registers all routers
- Defines global endpoints (health checks)
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_journal.config import settings
from portfolio_journal.database import check_database_health, get_db
from portfolio_journal.middleware import (
    CorrelationIdMiddleware,
    limiter,
    rate_limit_exceeded_handler,
    SlowAPIMiddleware,
    RATE_LIMIT_HEALTH,
)
from portfolio_journal.routers import (
    analytics_router,
    dashboard_router,
    investment_types_router,
    investments_router,
    journal_router,
    transactions_router,
)
from portfolio_journal.schemas.errors import ErrorDetail, ValidationErrorDetail
from portfolio_journal.services.analytics import AnalyticsCache
from portfolio_journal.services.exceptions import (
    ServiceError,
    ValidationError,
    NotFoundError,
    RecordStoreError,
    # Authentication exceptions
    AuthenticationError,
    TokenExpiredError,
    # Authorization exceptions
    AuthorizationError,
    PermissionDeniedError,
)
from portfolio_journal.utils import get_correlation_id, setup_logging

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP (must be before app creation)
# =============================================================================

setup_logging()


# =============================================================================
# APPLICATION SETUP
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create per-application state; the analytics cache dies with the app."""
    app.state.analytics_cache = AnalyticsCache(ttl_seconds=settings.analytics_cache_ttl_seconds)
    logger.info(
        f"{settings.app_name} started (environment={settings.environment}, "
        f"analytics cache TTL={settings.analytics_cache_ttl_seconds}s)"
    )
    yield
    app.state.analytics_cache.clear()
    logger.info(f"{settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    description="Personal investment journal with portfolio analytics",
    version="0.1.0",
    lifespan=lifespan,
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================
# Origins are configured via CORS_ORIGINS environment variable

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


# =============================================================================
# MIDDLEWARE (order matters: last added = first executed)
# =============================================================================

# Attach limiter to app state (required by slowapi)
app.state.limiter = limiter

app.add_middleware(SlowAPIMiddleware)

# Outermost, so every log line of the request carries the correlation ID
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================
# Service-layer exceptions carry no HTTP knowledge; these handlers map them to
# consistent ErrorDetail responses. Starlette picks the handler of the most
# specific class in the exception's MRO.
# =============================================================================

app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


def _correlation_id(request: Request) -> str | None:
    return get_correlation_id() or getattr(request.state, "correlation_id", None)


def _error_response(
        request: Request,
        status_code: int,
        error: str,
        message: str,
        details: dict | None = None,
        headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorDetail(
            error=error,
            message=message,
            details=details,
            correlation_id=_correlation_id(request),
        ).model_dump(),
        headers=headers,
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle validation errors (400)."""
    logger.warning(f"Validation error: {exc}")
    return _error_response(
        request,
        400,
        "ValidationError",
        str(exc),
        details={"field": exc.field} if exc.field else None,
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle missing investments, investment types and journal entries (404)."""
    logger.warning(f"Not found: {exc}")
    return _error_response(
        request,
        404,
        type(exc).__name__,
        str(exc),
        details={
            "resource_type": exc.resource_type,
            "resource_id": exc.resource_id,
        },
    )


@app.exception_handler(RecordStoreError)
async def record_store_error_handler(request: Request, exc: RecordStoreError) -> JSONResponse:
    """Handle an unreachable record store (503)."""
    logger.error(f"Record store error: {exc}")
    return _error_response(
        request,
        503,
        "RecordStoreError",
        "The record store is temporarily unavailable",
        details={"operation": exc.operation},
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle generic service errors (500)."""
    logger.error(f"Service error: {exc}")
    return _error_response(request, 500, "ServiceError", str(exc))


# =============================================================================
# AUTHENTICATION EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(TokenExpiredError)
async def token_expired_handler(request: Request, exc: TokenExpiredError) -> JSONResponse:
    """Handle token expired errors (401)."""
    logger.warning(f"Expired token used: {exc.token_type}")
    return _error_response(
        request,
        401,
        "TokenExpiredError",
        str(exc),
        details={"token_type": exc.token_type},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """Handle missing or invalid credentials (401)."""
    logger.warning(f"Authentication error: {exc}")
    return _error_response(
        request,
        401,
        type(exc).__name__,
        str(exc),
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(PermissionDeniedError)
async def permission_denied_handler(request: Request, exc: PermissionDeniedError) -> JSONResponse:
    """Handle permission denied errors (403)."""
    logger.warning(f"Permission denied: {exc.resource_type} {exc.resource_id}")
    return _error_response(
        request,
        403,
        "PermissionDeniedError",
        str(exc),
        details={
            "resource_type": exc.resource_type,
            "resource_id": exc.resource_id,
        },
    )


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
    """Handle generic authorization errors (403)."""
    logger.warning(f"Authorization error: {exc}")
    return _error_response(request, 403, "AuthorizationError", str(exc))


# =============================================================================
# FRAMEWORK EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle all HTTPExceptions with consistent error format.

    Converts FastAPI's default {"detail": "..."} format (including unknown
    routes) to our standard ErrorDetail format.
    """
    error_types = {
        400: "BadRequestError",
        401: "UnauthorizedError",
        403: "ForbiddenError",
        404: "NotFoundError",
        405: "MethodNotAllowedError",
        409: "ConflictError",
        429: "RateLimitError",
        500: "InternalServerError",
        503: "ServiceUnavailableError",
    }
    error_type = error_types.get(exc.status_code, "HTTPError")

    return _error_response(
        request,
        exc.status_code,
        error_type,
        str(exc.detail) if exc.detail else "An error occurred",
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors with consistent format.

    Converts the default 422 validation error to our ValidationErrorDetail format.
    """
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    return JSONResponse(
        status_code=422,
        content=ValidationErrorDetail(
            details=errors,
            correlation_id=_correlation_id(request),
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort (500); the traceback goes to the log, never to the client."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(
        request,
        500,
        "InternalServerError",
        "An unexpected error occurred",
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

app.include_router(investment_types_router)  # /investment-types
app.include_router(investments_router)  # /investments/*
app.include_router(transactions_router)  # /investments/{id}/transactions
app.include_router(journal_router)  # /investments/{id}/journal, /journal/*
app.include_router(analytics_router)  # /analytics/*
app.include_router(dashboard_router)  # /dashboard


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

@app.get("/", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def root(request: Request):
    """
    API root - returns basic application info.
    """
    return {
        "message": f"Welcome to {settings.app_name}!",
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def health_check(request: Request, db: Annotated[Session, Depends(get_db)]):
    """
    Health check endpoint.

    **Response Status Codes:**
    - 200: Database reachable
    - 503: Database unreachable - do not route traffic here
    """
    database = check_database_health(db)
    cache = getattr(request.app.state, "analytics_cache", None)

    response_data = {
        "status": database["status"],
        "checks": {
            "database": {**database, "critical": True},
            "analytics_cache": {
                "status": "healthy",
                "critical": False,
                "entries": cache.size() if cache is not None else 0,
            },
        },
    }

    if database["status"] != "healthy":
        return JSONResponse(status_code=503, content=response_data)

    return response_data


@app.get("/health/live", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def liveness_check(request: Request):
    """
    Liveness probe endpoint.

    Returns HTTP 200 if the application is running. Does NOT check
    dependencies - use /health/ready for that.
    """
    return {"status": "alive"}


@app.get("/health/ready", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def readiness_check(request: Request, db: Annotated[Session, Depends(get_db)]):
    """
    Readiness probe endpoint.

    Returns HTTP 503 while the database is unreachable.
    """
    database = check_database_health(db)
    if database["status"] != "healthy":
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "error": "Database unavailable",
            },
        )
    return {"status": "ready"}
