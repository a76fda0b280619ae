# portfolio_journal/routers/investment_types.py
"""
Investment type reference data.

- GET /investment-types - All types, grouped by category then name
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from portfolio_journal.dependencies import get_current_user, get_investment_service, get_record_store
from portfolio_journal.middleware.rate_limit import limiter, RATE_LIMIT_DEFAULT
from portfolio_journal.models import User
from portfolio_journal.schemas.investments import InvestmentTypeResponse
from portfolio_journal.services.investment_service import InvestmentService
from portfolio_journal.services.record_store import SqlAlchemyRecordStore

router = APIRouter(
    prefix="/investment-types",
    tags=["Investment Types"],
)


@router.get(
    "",
    response_model=list[InvestmentTypeResponse],
    summary="List investment types",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def list_investment_types(
        request: Request,  # Required for rate limiting
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[InvestmentService, Depends(get_investment_service)],
) -> list[InvestmentTypeResponse]:
    return [InvestmentTypeResponse.model_validate(t) for t in service.list_investment_types(store)]
