# portfolio_journal/services/analytics/types.py
"""
Data types for the portfolio analytics engine.

These dataclasses are plain values, NOT ORM models and NOT Pydantic schemas.
The record store converts database rows into the INPUT types; the
calculators produce the RESULT types; routers map results to the Pydantic
schemas in portfolio_journal/schemas/analytics.py.

Design Principles:
- Frozen value objects (a cached result can never be mutated)
- Decimal for all financial values
- Input numeric fields are typed loosely (stored data may be missing or
  malformed); calculators coerce them to Decimal("0")

Type Hierarchy:
    InvestmentRecord      - One investment as read from the store
    TransactionRecord     - One buy/sell event
    JournalEntryRecord    - One manual price observation
    HoldingTotals         - Aggregated transaction state of one investment
    ResolvedPrice         - Current price and the policy tier that produced it
    InvestmentValuation   - Complete snapshot valuation of one investment
    AllocationSlice       - Share of the portfolio held in one category
    PerformancePoint      - One month-end point of the value timeline
    TopPerformer          - Projection used by the top performers list
    PortfolioSummary      - Portfolio totals
    PortfolioAnalytics    - Everything above for one user
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from portfolio_journal.services.constants import UNCATEGORIZED


# =============================================================================
# INPUT TYPES
# =============================================================================

@dataclass(frozen=True)
class InvestmentRecord:
    """
    An investment with its type information flattened in.

    Attributes:
        category: Allocation key from the investment type (None if untyped)
        initial_price_per_unit: initial_amount / initial_quantity as stored
    """
    id: int
    user_id: int
    name: str
    symbol: str | None = None
    currency: str = "USD"
    investment_type_id: int | None = None
    type_name: str | None = None
    category: str | None = None
    unit_type: str | None = None
    initial_quantity: Any = None
    initial_amount: Any = None
    initial_price_per_unit: Any = None
    purchase_date: date | None = None
    created_at: datetime | None = None

    @property
    def category_key(self) -> str:
        """Category used for grouping; untyped investments share one bucket."""
        return self.category or UNCATEGORIZED


@dataclass(frozen=True)
class TransactionRecord:
    """
    A buy or sell event.

    transaction_type is the raw stored value ("buy"/"sell"); anything else is
    ignored by the calculators.
    """
    id: int
    investment_id: int
    transaction_type: str
    quantity: Any
    price_per_unit: Any
    total_amount: Any
    transaction_date: date | datetime | str | None
    notes: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class JournalEntryRecord:
    """A manual price observation. A price <= 0 carries no information."""
    id: int
    investment_id: int
    entry_date: date | datetime | str | None
    current_price: Any
    notes: str | None = None
    created_at: datetime | None = None


# =============================================================================
# CALCULATION RESULTS
# =============================================================================

@dataclass(frozen=True)
class HoldingTotals:
    """
    Result of replaying one investment's transactions.

    Attributes:
        total_quantity: Bought minus sold; may be negative after over-selling
        net_invested: Buy amounts minus sell amounts; may be negative
        avg_cost_per_unit: net_invested / total_quantity, or the initial
                           price-per-unit when total_quantity is zero
        last_transaction_date: Latest transaction date seen (None if none)
    """
    investment_id: int
    total_quantity: Decimal
    net_invested: Decimal
    avg_cost_per_unit: Decimal
    last_transaction_date: date | None = None


class PriceSource(str, Enum):
    """Which tier of the pricing policy produced the current price."""
    JOURNAL = "journal"
    AVERAGE_COST = "average_cost"
    INITIAL_PRICE = "initial_price"


@dataclass(frozen=True)
class ResolvedPrice:
    price: Decimal
    source: PriceSource


@dataclass(frozen=True)
class InvestmentValuation:
    """
    Snapshot valuation of one investment.

    current_value uses max(0, quantity); gain and gain_percent use
    max(0, net_invested) as the cost basis.
    """
    investment: InvestmentRecord
    totals: HoldingTotals
    current_price: Decimal
    price_source: PriceSource
    current_value: Decimal
    gain: Decimal
    gain_percent: Decimal

    @property
    def investment_id(self) -> int:
        return self.investment.id

    @property
    def name(self) -> str:
        return self.investment.name

    @property
    def symbol(self) -> str | None:
        return self.investment.symbol

    @property
    def category(self) -> str:
        return self.investment.category_key


@dataclass(frozen=True)
class AllocationSlice:
    category: str
    value: Decimal
    percentage: Decimal
    count: int


@dataclass(frozen=True)
class PerformancePoint:
    """
    Portfolio value at one month-end checkpoint.

    Attributes:
        month_end: The checkpoint date
        label: Display label, e.g. "Oct 2026"
        value: Total value rounded to whole currency units
    """
    month_end: date
    label: str
    value: Decimal


@dataclass(frozen=True)
class TopPerformer:
    name: str
    symbol: str | None
    gain_percent: Decimal
    current_value: Decimal


@dataclass(frozen=True)
class PortfolioSummary:
    """
    Portfolio totals.

    total_invested is the raw sum of net_invested (may be negative);
    total_gain and total_gain_percent use max(0, total_invested).
    """
    total_value: Decimal
    total_invested: Decimal
    total_gain: Decimal
    total_gain_percent: Decimal

    @classmethod
    def empty(cls) -> PortfolioSummary:
        zero = Decimal("0")
        return cls(
            total_value=zero,
            total_invested=zero,
            total_gain=zero,
            total_gain_percent=zero,
        )


@dataclass(frozen=True)
class PortfolioAnalytics:
    """
    Complete analytics for one user.

    A user without investments gets zero totals and empty collections
    (see PortfolioAnalytics.empty()).
    """
    total_value: Decimal
    total_invested: Decimal
    total_gain: Decimal
    total_gain_percent: Decimal
    asset_allocation: list[AllocationSlice] = field(default_factory=list)
    performance_data: list[PerformancePoint] = field(default_factory=list)
    top_performers: list[TopPerformer] = field(default_factory=list)
    investments_by_category: dict[str, list[InvestmentValuation]] = field(default_factory=dict)

    @property
    def summary(self) -> PortfolioSummary:
        return PortfolioSummary(
            total_value=self.total_value,
            total_invested=self.total_invested,
            total_gain=self.total_gain,
            total_gain_percent=self.total_gain_percent,
        )

    @classmethod
    def empty(cls) -> PortfolioAnalytics:
        summary = PortfolioSummary.empty()
        return cls(
            total_value=summary.total_value,
            total_invested=summary.total_invested,
            total_gain=summary.total_gain,
            total_gain_percent=summary.total_gain_percent,
        )
