# portfolio_journal/middleware/rate_limit.py
"""
Rate limiting with slowapi.

Limits are keyed by client IP and defined in services/constants.py:
reads, writes, analytics (full recompute on a cache miss) and health checks
each get their own budget. RATE_LIMIT_ENABLED=false turns limiting off
(tests, local tooling).

Storage is in-memory, so limits apply per worker process.

Usage:
    from portfolio_journal.middleware.rate_limit import limiter, RATE_LIMIT_WRITE

    @router.post("/investments")
    @limiter.limit(RATE_LIMIT_WRITE)
    def create_investment(request: Request, ...):
        ...
"""

import logging

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from portfolio_journal.config import settings
from portfolio_journal.services.constants import (
    RATE_LIMIT_ANALYTICS,
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_HEALTH,
    RATE_LIMIT_WRITE,
)

logger = logging.getLogger(__name__)

# Seconds advertised in Retry-After; all limits are per minute
RETRY_AFTER_SECONDS = 60


def _get_client_ip(request: Request) -> str:
    """
    Client IP used as the rate limit key.

    Forwarded headers are only honoured when the direct peer is a trusted
    proxy, otherwise clients could pick their own key.
    """
    direct_ip = get_remote_address(request)

    if settings.trust_proxy_headers or direct_ip in settings.trusted_proxy_ips:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # First entry is the original client
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

    return direct_ip


# =============================================================================
# LIMITER INSTANCE
# =============================================================================

limiter = Limiter(
    key_func=_get_client_ip,
    default_limits=[RATE_LIMIT_DEFAULT],
    enabled=settings.rate_limit_enabled,
)


# =============================================================================
# RATE LIMIT EXCEEDED HANDLER
# =============================================================================

async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """429 response in the common ErrorDetail shape, with Retry-After."""
    limit_info = str(exc.detail) if exc.detail else "Rate limit exceeded"

    logger.warning(f"Rate limit exceeded for {_get_client_ip(request)}: {limit_info}")

    return JSONResponse(
        status_code=429,
        content={
            "error": "RateLimitError",
            "message": f"Too many requests. {limit_info}",
            "details": {"retry_after": RETRY_AFTER_SECONDS},
        },
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


__all__ = [
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_WRITE",
    "RATE_LIMIT_HEALTH",
    "RATE_LIMIT_ANALYTICS",
]
