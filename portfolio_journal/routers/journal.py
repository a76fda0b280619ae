# portfolio_journal/routers/journal.py
"""
Price journal endpoints.

- POST   /investments/{id}/journal - Record an observed price
- GET    /investments/{id}/journal - Price history, oldest first
- GET    /journal                  - All entries of the caller, newest first
- DELETE /journal/{entry_id}       - Delete an owned entry

The latest entry (by date) sets an investment's current price in analytics
when its price is positive.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from portfolio_journal.dependencies import (
    get_analytics_cache,
    get_current_user,
    get_investment_service,
    get_record_store,
)
from portfolio_journal.middleware.rate_limit import limiter, RATE_LIMIT_DEFAULT, RATE_LIMIT_WRITE
from portfolio_journal.models import User
from portfolio_journal.schemas.journal import (
    JournalEntryCreate,
    JournalEntryResponse,
    JournalFeedEntryResponse,
)
from portfolio_journal.services.analytics import AnalyticsCache
from portfolio_journal.services.investment_service import InvestmentService
from portfolio_journal.services.record_store import SqlAlchemyRecordStore

router = APIRouter(tags=["Journal"])


# =============================================================================
# PER-INVESTMENT ENDPOINTS
# =============================================================================

@router.post(
    "/investments/{investment_id}/journal",
    response_model=JournalEntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a journal entry",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_journal_entry(
        request: Request,  # Required for rate limiting
        investment_id: int,
        entry: JournalEntryCreate,
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[InvestmentService, Depends(get_investment_service)],
        cache: Annotated[AnalyticsCache, Depends(get_analytics_cache)],
) -> JournalEntryResponse:
    """Record the observed price of an owned investment. 0 is accepted."""
    record = service.record_journal_entry(
        store,
        user_id=current_user.id,
        investment_id=investment_id,
        entry_date=entry.entry_date,
        current_price=entry.current_price,
        notes=entry.notes,
    )
    cache.invalidate(current_user.id)

    return JournalEntryResponse.model_validate(record)


@router.get(
    "/investments/{investment_id}/journal",
    response_model=list[JournalEntryResponse],
    summary="Price history of an investment",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def list_investment_journal(
        request: Request,  # Required for rate limiting
        investment_id: int,
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[InvestmentService, Depends(get_investment_service)],
) -> list[JournalEntryResponse]:
    records = service.list_journal_entries(store, current_user.id, investment_id)
    return [JournalEntryResponse.model_validate(r) for r in records]


# =============================================================================
# CROSS-INVESTMENT ENDPOINTS
# =============================================================================

@router.get(
    "/journal",
    response_model=list[JournalFeedEntryResponse],
    summary="All journal entries",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def list_journal(
        request: Request,  # Required for rate limiting
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[InvestmentService, Depends(get_investment_service)],
) -> list[JournalFeedEntryResponse]:
    """Every journal entry of the caller, newest first, with its investment."""
    pairs = service.list_all_journal_entries(store, current_user.id)
    return [
        JournalFeedEntryResponse(
            id=entry.id,
            investment_id=entry.investment_id,
            entry_date=entry.entry_date,
            current_price=entry.current_price,
            notes=entry.notes,
            created_at=entry.created_at,
            investment_name=investment.name,
            investment_symbol=investment.symbol,
            currency=investment.currency,
        )
        for entry, investment in pairs
    ]


@router.delete(
    "/journal/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a journal entry",
)
@limiter.limit(RATE_LIMIT_WRITE)
def delete_journal_entry(
        request: Request,  # Required for rate limiting
        entry_id: int,
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[InvestmentService, Depends(get_investment_service)],
        cache: Annotated[AnalyticsCache, Depends(get_analytics_cache)],
) -> Response:
    service.delete_journal_entry(store, current_user.id, entry_id)
    cache.invalidate(current_user.id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
