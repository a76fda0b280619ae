# portfolio_journal/routers/analytics.py
"""
Portfolio analytics endpoints.

- GET /analytics          - Full analytics (cached per user)
- GET /analytics/summary  - Totals only
- GET /analytics/holdings - Per-investment valuations

Analytics are always computed over the authenticated user's whole
portfolio. Amounts are summed without currency conversion.
"""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from portfolio_journal.dependencies import get_analytics_service, get_current_user, get_record_store
from portfolio_journal.middleware.rate_limit import limiter, RATE_LIMIT_ANALYTICS
from portfolio_journal.models import User
from portfolio_journal.schemas.analytics import (
    AllocationResponse,
    AnalyticsResponse,
    HoldingResponse,
    PerformancePointResponse,
    PortfolioSummaryResponse,
    TopPerformerResponse,
)
from portfolio_journal.services.analytics import (
    AllocationSlice,
    AnalyticsService,
    InvestmentValuation,
    PerformancePoint,
    PortfolioAnalytics,
    PortfolioSummary,
    TopPerformer,
)
from portfolio_journal.services.record_store import SqlAlchemyRecordStore
from portfolio_journal.utils.currency import get_currency_symbol

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _decimal_to_str(value: Decimal | None) -> str | None:
    """Convert Decimal to string for JSON response, preserving precision."""
    if value is None:
        return None
    # Convert int to Decimal if needed (safety net)
    if isinstance(value, int):
        value = Decimal(value)
    # Fixed-point so normalize() never yields exponent form ("1.2E+3")
    return format(value.normalize(), "f")


def map_summary(summary: PortfolioSummary | PortfolioAnalytics) -> PortfolioSummaryResponse:
    return PortfolioSummaryResponse(
        total_value=_decimal_to_str(summary.total_value),
        total_invested=_decimal_to_str(summary.total_invested),
        total_gain=_decimal_to_str(summary.total_gain),
        total_gain_percent=_decimal_to_str(summary.total_gain_percent),
    )


def map_holding(valuation: InvestmentValuation) -> HoldingResponse:
    investment = valuation.investment
    totals = valuation.totals
    return HoldingResponse(
        investment_id=investment.id,
        name=investment.name,
        symbol=investment.symbol,
        category=investment.category_key,
        type_name=investment.type_name,
        unit_type=investment.unit_type,
        currency=investment.currency,
        currency_symbol=get_currency_symbol(investment.currency),
        purchase_date=investment.purchase_date,
        total_quantity=_decimal_to_str(totals.total_quantity),
        net_invested=_decimal_to_str(totals.net_invested),
        avg_cost_per_unit=_decimal_to_str(totals.avg_cost_per_unit),
        last_transaction_date=totals.last_transaction_date,
        current_price=_decimal_to_str(valuation.current_price),
        price_source=valuation.price_source.value,
        current_value=_decimal_to_str(valuation.current_value),
        gain=_decimal_to_str(valuation.gain),
        gain_percent=_decimal_to_str(valuation.gain_percent),
    )


def _map_allocation(slice_: AllocationSlice) -> AllocationResponse:
    return AllocationResponse(
        category=slice_.category,
        value=_decimal_to_str(slice_.value),
        percentage=_decimal_to_str(slice_.percentage),
        count=slice_.count,
    )


def map_performance_point(point: PerformancePoint) -> PerformancePointResponse:
    return PerformancePointResponse(
        month=point.label,
        month_end=point.month_end,
        value=_decimal_to_str(point.value),
    )


def _map_top_performer(performer: TopPerformer) -> TopPerformerResponse:
    return TopPerformerResponse(
        name=performer.name,
        symbol=performer.symbol,
        gain_percent=_decimal_to_str(performer.gain_percent),
        current_value=_decimal_to_str(performer.current_value),
    )


def map_analytics(analytics: PortfolioAnalytics) -> AnalyticsResponse:
    """Map the service result to the API schema (shared with the dashboard)."""
    summary = map_summary(analytics)
    return AnalyticsResponse(
        **summary.model_dump(),
        asset_allocation=[_map_allocation(s) for s in analytics.asset_allocation],
        performance_data=[map_performance_point(p) for p in analytics.performance_data],
        top_performers=[_map_top_performer(p) for p in analytics.top_performers],
        investments_by_category={
            category: [map_holding(v) for v in valuations]
            for category, valuations in analytics.investments_by_category.items()
        },
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "",
    response_model=AnalyticsResponse,
    summary="Portfolio analytics",
    response_description="Totals, allocation, 12-month performance and top performers",
)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_analytics(
        request: Request,  # Required for rate limiting
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[AnalyticsService, Depends(get_analytics_service)],
) -> AnalyticsResponse:
    """
    Full analytics for the caller's portfolio.

    Results are cached per user for a few minutes; any write by the user
    invalidates the cache.

    **Valuation:**
    - current price: latest journal price > 0, else average cost, else the
      initial price per unit
    - current value: max(0, quantity) × current price
    - gains use max(0, net invested) as the cost basis

    **Performance data:** one point per month end over the last 12 months
    (the last point is the end of the current month), in whole currency
    units.
    """
    analytics = service.get_portfolio_analytics(store, current_user.id)
    return map_analytics(analytics)


@router.get(
    "/summary",
    response_model=PortfolioSummaryResponse,
    summary="Portfolio totals",
)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_summary(
        request: Request,  # Required for rate limiting
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[AnalyticsService, Depends(get_analytics_service)],
) -> PortfolioSummaryResponse:
    summary = service.compute_portfolio_summary(store, current_user.id)
    return map_summary(summary)


@router.get(
    "/holdings",
    response_model=list[HoldingResponse],
    summary="Holdings with current value",
)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_holdings(
        request: Request,  # Required for rate limiting
        current_user: Annotated[User, Depends(get_current_user)],
        store: Annotated[SqlAlchemyRecordStore, Depends(get_record_store)],
        service: Annotated[AnalyticsService, Depends(get_analytics_service)],
) -> list[HoldingResponse]:
    """Every investment with its derived holding and valuation, newest first."""
    valuations = service.compute_holdings_with_value(store, current_user.id)
    return [map_holding(v) for v in valuations]

