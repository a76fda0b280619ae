# portfolio_journal/schemas/analytics.py
"""
Pydantic schemas for the Analytics and Dashboard API.

Design decisions:
- All numeric values are serialized as STRINGS to preserve Decimal precision
- Percentages are in percent form ("20" = 20%), unlike fractions
- Performance values are whole currency units
- Amounts carry no currency conversion; the holding's currency is a label
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# SUMMARY
# =============================================================================

class PortfolioSummaryResponse(BaseModel):
    """
    Portfolio totals.

    total_invested may be negative after net selling; gains use
    max(0, total_invested) as the basis.
    """

    model_config = ConfigDict(from_attributes=True)

    total_value: str = Field(..., description="Sum of current values")
    total_invested: str = Field(..., description="Sum of net invested (unclamped)")
    total_gain: str = Field(..., description="total_value - max(0, total_invested)")
    total_gain_percent: str = Field(..., description="Gain in percent of the clamped basis")


# =============================================================================
# HOLDINGS
# =============================================================================

class HoldingResponse(BaseModel):
    """One investment with its derived holding and valuation."""

    investment_id: int
    name: str
    symbol: str | None
    category: str = Field(..., description="Allocation category ('uncategorized' if untyped)")
    type_name: str | None
    unit_type: str | None
    currency: str
    currency_symbol: str
    purchase_date: date | None

    total_quantity: str = Field(..., description="Bought minus sold (may be negative)")
    net_invested: str = Field(..., description="Buy amounts minus sell amounts")
    avg_cost_per_unit: str
    last_transaction_date: date | None

    current_price: str
    price_source: str = Field(
        ...,
        description="Pricing tier used",
        examples=["journal", "average_cost", "initial_price"],
    )
    current_value: str = Field(..., description="max(0, quantity) × current_price")
    gain: str
    gain_percent: str


# =============================================================================
# ANALYTICS
# =============================================================================

class AllocationResponse(BaseModel):
    category: str
    value: str
    percentage: str = Field(..., description="Share of total value in percent")
    count: int = Field(..., description="Number of investments in the category")


class PerformancePointResponse(BaseModel):
    month: str = Field(..., description="Month label", examples=["Oct 2026"])
    month_end: date = Field(..., description="Month-end checkpoint")
    value: str = Field(..., description="Portfolio value, whole currency units")


class TopPerformerResponse(BaseModel):
    name: str
    symbol: str | None
    gain_percent: str
    current_value: str


class AnalyticsResponse(PortfolioSummaryResponse):
    """Complete portfolio analytics."""

    asset_allocation: list[AllocationResponse] = Field(default_factory=list)
    performance_data: list[PerformancePointResponse] = Field(
        default_factory=list,
        description="Month-end values, oldest first",
    )
    top_performers: list[TopPerformerResponse] = Field(
        default_factory=list,
        description="Best gain percentages among held investments",
    )
    investments_by_category: dict[str, list[HoldingResponse]] = Field(default_factory=dict)


# =============================================================================
# DASHBOARD
# =============================================================================

class DashboardResponse(BaseModel):
    """Everything the dashboard page renders, in one round trip."""

    currency: str = Field(..., description="Display currency")
    currency_symbol: str
    summary: PortfolioSummaryResponse
    investments: list[HoldingResponse]
    chart_data: list[PerformancePointResponse]
    analytics: AnalyticsResponse
