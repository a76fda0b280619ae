# portfolio_journal/routers/investments.py
"""
Investment endpoints.

- POST   /investments          - Record an investment (+ initial BUY)
- GET    /investments          - The caller's investments, newest first
- GET    /investments/{id}     - One owned investment
- DELETE /investments/{id}     - Delete with transactions and journal entries

Investments are immutable once recorded; corrections are a delete and a
new record. Every write invalidates the caller's cached analytics.
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
from portfolio_journal.schemas.investments import InvestmentCreate, InvestmentResponse
from portfolio_journal.services.analytics import AnalyticsCache
from portfolio_journal.services.investment_service import InvestmentService
from portfolio_journal.services.record_store import SqlAlchemyRecordStore

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/investments",
    tags=["Investments"],
)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post(
    "",
    response_model=InvestmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record an investment",
    response_description="The recorded investment",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_investment(
        request: Request,  # Required for rate limiting
        investment: InvestmentCreate,
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[InvestmentService, Depends(get_investment_service)],
        cache: Annotated[AnalyticsCache, Depends(get_analytics_cache)],
) -> InvestmentResponse:
    """
    Record a new investment.

    The initial purchase is also stored as a BUY transaction with the note
    "Initial purchase", at price initial_amount / initial_quantity.
    """
    record = service.record_investment(
        store,
        user_id=current_user.id,
        name=investment.name,
        symbol=investment.symbol,
        currency=investment.currency,
        investment_type_id=investment.investment_type_id,
        initial_quantity=investment.initial_quantity,
        initial_amount=investment.initial_amount,
        purchase_date=investment.purchase_date,
    )
    cache.invalidate(current_user.id)

    return InvestmentResponse.model_validate(record)


@router.get(
    "",
    response_model=list[InvestmentResponse],
    summary="List investments",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def list_investments(
        request: Request,  # Required for rate limiting
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[InvestmentService, Depends(get_investment_service)],
) -> list[InvestmentResponse]:
    """The caller's investments, newest first."""
    records = service.list_investments(store, current_user.id)
    return [InvestmentResponse.model_validate(r) for r in records]


@router.get(
    "/{investment_id}",
    response_model=InvestmentResponse,
    summary="Get an investment",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_investment(
        request: Request,  # Required for rate limiting
        investment_id: int,
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[InvestmentService, Depends(get_investment_service)],
) -> InvestmentResponse:
    record = service.get_owned_investment(store, current_user.id, investment_id)
    return InvestmentResponse.model_validate(record)


@router.delete(
    "/{investment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an investment",
)
@limiter.limit(RATE_LIMIT_WRITE)
def delete_investment(
        request: Request,  # Required for rate limiting
        investment_id: int,
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[InvestmentService, Depends(get_investment_service)],
        cache: Annotated[AnalyticsCache, Depends(get_analytics_cache)],
) -> Response:
    """
    Delete an investment together with all of its transactions and
    journal entries.
    """
    service.delete_investment(store, current_user.id, investment_id)
    cache.invalidate(current_user.id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
