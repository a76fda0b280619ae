# portfolio_journal/routers/transactions.py
"""
Transaction endpoints, nested under their investment.

- POST /investments/{id}/transactions - Record a buy or sell
- GET  /investments/{id}/transactions - List, newest first

Transactions are append-only: there is no update or delete.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from portfolio_journal.dependencies import (
    get_analytics_cache,
    get_current_user,
    get_investment_service,
    get_record_store,
)
from portfolio_journal.middleware.rate_limit import limiter, RATE_LIMIT_DEFAULT, RATE_LIMIT_WRITE
from portfolio_journal.models import User
from portfolio_journal.schemas.transactions import TransactionCreate, TransactionResponse
from portfolio_journal.services.analytics import AnalyticsCache
from portfolio_journal.services.investment_service import InvestmentService
from portfolio_journal.services.record_store import SqlAlchemyRecordStore

router = APIRouter(
    prefix="/investments/{investment_id}/transactions",
    tags=["Transactions"],
)


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a transaction",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_transaction(
        request: Request,  # Required for rate limiting
        investment_id: int,
        transaction: TransactionCreate,
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[InvestmentService, Depends(get_investment_service)],
        cache: Annotated[AnalyticsCache, Depends(get_analytics_cache)],
) -> TransactionResponse:
    """
    Record a buy or sell on an owned investment.

    total_amount is computed as quantity × price_per_unit. Selling more
    than is held is accepted.
    """
    record = service.record_transaction(
        store,
        user_id=current_user.id,
        investment_id=investment_id,
        transaction_type=transaction.transaction_type,
        quantity=transaction.quantity,
        price_per_unit=transaction.price_per_unit,
        transaction_date=transaction.transaction_date,
        notes=transaction.notes,
    )
    cache.invalidate(current_user.id)

    return TransactionResponse.model_validate(record)


@router.get(
    "",
    response_model=list[TransactionResponse],
    summary="List transactions",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def list_transactions(
        request: Request,  # Required for rate limiting
        investment_id: int,
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[InvestmentService, Depends(get_investment_service)],
) -> list[TransactionResponse]:
    """Transactions of an owned investment, newest first."""
    records = service.list_transactions(store, current_user.id, investment_id)
    return [TransactionResponse.model_validate(r) for r in records]
