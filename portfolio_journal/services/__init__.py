# portfolio_journal/services/__init__.py
"""
Service layer for business logic.

This package contains the service layer which encapsulates business logic
separate from the API (router) layer. Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions
- Receive the request's record store as a parameter (not via Depends)
- Are easily testable with fake stores

Usage:
    from portfolio_journal.services import AnalyticsService, InvestmentService
    from portfolio_journal.services import (
        InvestmentNotFoundError,
        PermissionDeniedError,
        RecordStoreError,
    )

Architecture:
    services/
    ├── __init__.py                  # This file - main exports
    ├── exceptions.py                # Domain exceptions
    ├── constants.py                 # Business constants and limits
    ├── protocols.py                 # Record store interfaces (Protocol classes)
    ├── record_store.py              # SQLAlchemy record store
    ├── investment_service.py        # Investment/transaction/journal writes
    ├── auth/                        # Access token verification
    │   └── jwt_handler.py
    └── analytics/                   # Analytics engine
        ├── service.py               # Main analytics orchestrator
        ├── types.py                 # Records and result types
        ├── calculators.py           # Point-in-time calculations
        ├── timeline.py              # Month-end value series
        └── cache.py                 # Per-user result cache
"""

from portfolio_journal.services.analytics import AnalyticsCache, AnalyticsService
from portfolio_journal.services.exceptions import (
    AuthenticationError,
    AuthorizationError,
    InvalidCredentialsError,
    InvestmentNotFoundError,
    InvestmentTypeNotFoundError,
    JournalEntryNotFoundError,
    NotAuthenticatedError,
    NotFoundError,
    PermissionDeniedError,
    RecordStoreError,
    ServiceError,
    TokenExpiredError,
    ValidationError,
)
from portfolio_journal.services.investment_service import InvestmentService
from portfolio_journal.services.record_store import SqlAlchemyRecordStore

__all__ = [
    # ==========================================================================
    # Services
    # ==========================================================================
    "AnalyticsService",
    "AnalyticsCache",
    "InvestmentService",
    "SqlAlchemyRecordStore",

    # ==========================================================================
    # Exceptions
    # ==========================================================================
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "InvestmentNotFoundError",
    "InvestmentTypeNotFoundError",
    "JournalEntryNotFoundError",
    "RecordStoreError",
    "AuthenticationError",
    "NotAuthenticatedError",
    "InvalidCredentialsError",
    "TokenExpiredError",
    "AuthorizationError",
    "PermissionDeniedError",
]
