# portfolio_journal/routers/dashboard.py
"""
Dashboard endpoint.

- GET /dashboard - Summary, holdings, chart data and analytics in one payload

The display currency is the user's default_currency, falling back to the
DEFAULT_CURRENCY setting. It only labels amounts; nothing is converted.
User rows, default_currency included, are provisioned outside this API.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from portfolio_journal.config import settings
from portfolio_journal.dependencies import get_analytics_service, get_current_user, get_record_store
from portfolio_journal.middleware.rate_limit import limiter, RATE_LIMIT_ANALYTICS
from portfolio_journal.models import User
from portfolio_journal.routers.analytics import map_analytics, map_holding
from portfolio_journal.schemas.analytics import DashboardResponse
from portfolio_journal.services.analytics import AnalyticsService
from portfolio_journal.services.record_store import SqlAlchemyRecordStore
from portfolio_journal.utils.currency import get_currency_symbol

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


@router.get(
    "",
    response_model=DashboardResponse,
    summary="Dashboard data",
)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_dashboard(
        request: Request,  # Required for rate limiting
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[AnalyticsService, Depends(get_analytics_service)],
) -> DashboardResponse:
    """
    Everything the dashboard renders.

    summary and chart_data are taken from the (cached) analytics; the
    holdings list is recomputed so it keeps the newest-first order.
    """
    analytics = map_analytics(service.get_portfolio_analytics(store, current_user.id))
    holdings = service.compute_holdings_with_value(store, current_user.id)

    currency = (current_user.default_currency or settings.default_currency).upper()

    return DashboardResponse(
        currency=currency,
        currency_symbol=get_currency_symbol(currency),
        summary={
            "total_value": analytics.total_value,
            "total_invested": analytics.total_invested,
            "total_gain": analytics.total_gain,
            "total_gain_percent": analytics.total_gain_percent,
        },
        investments=[map_holding(v) for v in holdings],
        chart_data=analytics.performance_data,
        analytics=analytics,
    )
