# portfolio_journal/dependencies.py
"""
Dependency injection module for FastAPI routes.

- Stateless services are lazily created singletons (@lru_cache)
- The analytics cache lives on app.state (created in the lifespan), so every
  application instance, including each test app, owns its cache
- The record store is request-scoped, bound to the request's Session

Usage in routers:
    from portfolio_journal.dependencies import (
        get_current_user,
        get_record_store,
        get_analytics_service,
    )

    @router.get("/analytics")
    def get_analytics(
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[AnalyticsService, Depends(get_analytics_service)],
    ):
        ...
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from portfolio_journal.config import settings
from portfolio_journal.database import get_db
from portfolio_journal.models import User
from portfolio_journal.services.analytics import AnalyticsCache, AnalyticsService
from portfolio_journal.services.auth.jwt_handler import JWTHandler
from portfolio_journal.services.exceptions import (
    InvalidCredentialsError,
    NotAuthenticatedError,
)
from portfolio_journal.services.investment_service import InvestmentService
from portfolio_journal.services.record_store import SqlAlchemyRecordStore
from portfolio_journal.utils.context import set_current_user_id

logger = logging.getLogger(__name__)

# HTTP Bearer scheme; auto_error=False so a missing token goes through our
# own NotAuthenticatedError handler and error format
_bearer_scheme = HTTPBearer(auto_error=False)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================

@lru_cache(maxsize=1)
def get_investment_service() -> InvestmentService:
    logger.debug("Initializing singleton InvestmentService")
    return InvestmentService()


# =============================================================================
# REQUEST-SCOPED DEPENDENCIES
# =============================================================================

def get_record_store(db: Annotated[Session, Depends(get_db)]) -> SqlAlchemyRecordStore:
    """Record store bound to this request's database session."""
    return SqlAlchemyRecordStore(db)


def get_analytics_cache(request: Request) -> AnalyticsCache:
    """
    The application's analytics cache.

    Created by the lifespan handler; an app started without it (e.g. a bare
    router in a test) gets one lazily.
    """
    cache = getattr(request.app.state, "analytics_cache", None)
    if cache is None:
        cache = AnalyticsCache(ttl_seconds=settings.analytics_cache_ttl_seconds)
        request.app.state.analytics_cache = cache
    return cache


def get_analytics_service(
    cache: Annotated[AnalyticsCache, Depends(get_analytics_cache)],
) -> AnalyticsService:
    return AnalyticsService(
        cache=cache,
        timeline_months=settings.timeline_months,
        top_performers_limit=settings.top_performers_limit,
    )


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================

async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """
    Extract and validate the current user from the Bearer token.

    Async so the user ID it stores in the request context is visible to the
    endpoint and its log records.

    Usage:
        @router.get("/protected")
        def protected_endpoint(current_user: User = Depends(get_current_user)):
            return {"user_id": current_user.id}

    Raises:
        NotAuthenticatedError: No token provided (401)
        TokenExpiredError: Token expired (401)
        InvalidCredentialsError: Token invalid, user unknown or inactive (401)
    """
    if credentials is None:
        raise NotAuthenticatedError()

    user_id = JWTHandler.get_user_id(credentials.credentials)

    # Session I/O stays off the event loop
    user = await run_in_threadpool(db.get, User, user_id)
    if user is None:
        logger.warning(f"Token for unknown user {user_id} rejected")
        raise InvalidCredentialsError("User not found")

    if not user.is_active:
        logger.warning(f"Token for inactive user {user_id} rejected")
        raise InvalidCredentialsError("User account is inactive")

    set_current_user_id(user.id)
    return user


# =============================================================================
# CACHE MANAGEMENT
# =============================================================================

def clear_service_caches() -> None:
    """Reset singleton services (used by tests)."""
    get_investment_service.cache_clear()
    logger.info("Cleared all service singleton caches")
