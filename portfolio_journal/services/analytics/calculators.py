# portfolio_journal/services/analytics/calculators.py
"""
Point-in-time calculators for portfolio analytics.

Each calculator is a small, stateless class with one job. None of them
touch the database: they receive plain records and return frozen results,
which keeps them trivially unit-testable.

Data Flow:
    Transactions           → HoldingsAggregator  → HoldingTotals
    Latest journal + totals → PricingResolver    → ResolvedPrice
    Totals + price          → ValuationEngine    → InvestmentValuation
    All valuations          → PortfolioSummarizer → totals, allocation,
                                                    top performers

Numeric Policy:
    Stored numbers may be missing or malformed. Every numeric field passes
    through to_decimal(), which maps None, NaN, infinities and unparseable
    values to Decimal("0"). The calculators never raise on bad data.
"""

import decimal
import logging
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from typing import Any

from portfolio_journal.models import TransactionType
from portfolio_journal.services.constants import PERCENT, ZERO
from portfolio_journal.services.analytics.types import (
    AllocationSlice,
    HoldingTotals,
    InvestmentRecord,
    InvestmentValuation,
    JournalEntryRecord,
    PortfolioSummary,
    PriceSource,
    ResolvedPrice,
    TopPerformer,
    TransactionRecord,
)
from portfolio_journal.utils.date_utils import as_date

logger = logging.getLogger(__name__)


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a stored numeric value to a finite Decimal, or zero.

    Floats go through str() so 0.1 becomes Decimal("0.1") rather than its
    binary expansion.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, float):
            result = Decimal(str(value))
        else:
            result = Decimal(str(value).strip())
    except (decimal.InvalidOperation, ValueError, TypeError):
        return ZERO
    if not result.is_finite():
        return ZERO
    return result


def normalize_transaction_type(value: Any) -> TransactionType | None:
    """Map a stored transaction kind ("buy", "BUY", enum) to TransactionType."""
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(str(value).strip().lower())
    except ValueError:
        return None


# =============================================================================
# HOLDINGS AGGREGATOR
# =============================================================================

class HoldingsAggregator:
    """
    Reduces one investment's transactions to its current holding.

    Algorithm:
        BUY:  quantity += qty, net_invested += total_amount
        SELL: quantity -= qty, net_invested -= total_amount

    The reduction is order-independent. Over-selling is permitted: the
    running quantity may go negative and is clamped only at valuation time.
    """

    def aggregate(
            self,
            investment_id: int,
            transactions: Iterable[TransactionRecord],
            initial_price_per_unit: Any = None,
    ) -> HoldingTotals:
        """
        Aggregate transactions into HoldingTotals.

        Args:
            investment_id: Investment the transactions belong to
            transactions: The investment's transactions, in any order
            initial_price_per_unit: Fallback average cost when the net
                                    quantity is zero

        Returns:
            HoldingTotals for the investment
        """
        quantity = ZERO
        net_invested = ZERO
        last_date: date | None = None

        for txn in transactions:
            txn_type = normalize_transaction_type(txn.transaction_type)
            qty = to_decimal(txn.quantity)
            amount = to_decimal(txn.total_amount)

            if txn_type == TransactionType.BUY:
                quantity += qty
                net_invested += amount
            elif txn_type == TransactionType.SELL:
                quantity -= qty
                net_invested -= amount
            else:
                logger.debug(
                    f"Ignoring transaction {txn.id} with unknown type "
                    f"{txn.transaction_type!r}"
                )

            # >= so that the last of several equal dates wins
            txn_date = as_date(txn.transaction_date)
            if txn_date is not None and (last_date is None or txn_date >= last_date):
                last_date = txn_date

        if quantity != ZERO:
            avg_cost = net_invested / quantity
        else:
            avg_cost = to_decimal(initial_price_per_unit)

        return HoldingTotals(
            investment_id=investment_id,
            total_quantity=quantity,
            net_invested=net_invested,
            avg_cost_per_unit=avg_cost,
            last_transaction_date=last_date,
        )


# =============================================================================
# PRICING RESOLVER
# =============================================================================

class PricingResolver:
    """
    Picks the current price of an investment.

    Priority:
        1. Latest journal price, if > 0
        2. Average cost per unit, if > 0
        3. Initial price-per-unit (0 if absent)

    Users do not journal every investment, so the policy always yields a
    plausible price instead of failing.
    """

    def resolve(
            self,
            latest_entry: JournalEntryRecord | None,
            totals: HoldingTotals,
            initial_price_per_unit: Any = None,
    ) -> ResolvedPrice:
        """
        Resolve the current price.

        Args:
            latest_entry: Most recent journal entry by date (None if never journaled)
            totals: Aggregated holding of the investment
            initial_price_per_unit: The investment's recorded initial price

        Returns:
            ResolvedPrice with the price and the tier that produced it
        """
        if latest_entry is not None:
            journal_price = to_decimal(latest_entry.current_price)
            if journal_price > ZERO:
                return ResolvedPrice(price=journal_price, source=PriceSource.JOURNAL)

        avg_cost = to_decimal(totals.avg_cost_per_unit)
        if avg_cost > ZERO:
            return ResolvedPrice(price=avg_cost, source=PriceSource.AVERAGE_COST)

        return ResolvedPrice(
            price=to_decimal(initial_price_per_unit),
            source=PriceSource.INITIAL_PRICE,
        )


# =============================================================================
# VALUATION ENGINE
# =============================================================================

class ValuationEngine:
    """
    Combines a holding and its price into value and gain.

    Formulas:
        current_value = max(0, quantity) × price
        gain          = current_value − max(0, net_invested)
        gain_percent  = gain / max(0, net_invested) × 100   (0 if basis is 0)
    """

    def calculate(
            self,
            investment: InvestmentRecord,
            totals: HoldingTotals,
            resolved: ResolvedPrice,
    ) -> InvestmentValuation:
        held_quantity = max(ZERO, totals.total_quantity)
        cost_basis = max(ZERO, totals.net_invested)

        current_value = held_quantity * resolved.price
        gain = current_value - cost_basis
        gain_percent = percentage_of(gain, cost_basis)

        return InvestmentValuation(
            investment=investment,
            totals=totals,
            current_price=resolved.price,
            price_source=resolved.source,
            current_value=current_value,
            gain=gain,
            gain_percent=gain_percent,
        )


def percentage_of(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole × 100, or 0 when whole is not positive."""
    if whole <= ZERO:
        return ZERO
    return part / whole * PERCENT


# =============================================================================
# PORTFOLIO SUMMARIZER
# =============================================================================

class PortfolioSummarizer:
    """
    Aggregates per-investment valuations into portfolio-level views.

    Attributes:
        _top_limit: Number of entries in the top performers list
    """

    def __init__(self, top_performers_limit: int = 5) -> None:
        self._top_limit = top_performers_limit

    def summarize(self, valuations: Sequence[InvestmentValuation]) -> PortfolioSummary:
        """
        Portfolio totals.

        total_invested is NOT clamped: net selling across the portfolio
        shows up as a negative figure. Gain uses the clamped basis.
        """
        total_value = sum((v.current_value for v in valuations), ZERO)
        total_invested = sum((v.totals.net_invested for v in valuations), ZERO)
        cost_basis = max(ZERO, total_invested)
        total_gain = total_value - cost_basis

        return PortfolioSummary(
            total_value=total_value,
            total_invested=total_invested,
            total_gain=total_gain,
            total_gain_percent=percentage_of(total_gain, cost_basis),
        )

    def allocate(
            self,
            valuations: Sequence[InvestmentValuation],
            total_value: Decimal,
    ) -> list[AllocationSlice]:
        """
        Allocation by category, in first-seen category order.

        Percentages are relative to total_value and are all 0 when the
        portfolio is worth nothing.
        """
        values: dict[str, Decimal] = {}
        counts: dict[str, int] = {}

        for valuation in valuations:
            category = valuation.category
            values[category] = values.get(category, ZERO) + valuation.current_value
            counts[category] = counts.get(category, 0) + 1

        return [
            AllocationSlice(
                category=category,
                value=value,
                percentage=percentage_of(value, total_value),
                count=counts[category],
            )
            for category, value in values.items()
        ]

    def group_by_category(
            self,
            valuations: Sequence[InvestmentValuation],
    ) -> dict[str, list[InvestmentValuation]]:
        grouped: dict[str, list[InvestmentValuation]] = {}
        for valuation in valuations:
            grouped.setdefault(valuation.category, []).append(valuation)
        return grouped

    def top_performers(self, valuations: Sequence[InvestmentValuation]) -> list[TopPerformer]:
        """
        Best gain percentages among investments still held.

        Fully sold investments (quantity <= 0) are excluded. The sort is
        stable, so ties keep the input order.
        """
        held = [v for v in valuations if v.totals.total_quantity > ZERO]
        ranked = sorted(held, key=lambda v: v.gain_percent, reverse=True)

        return [
            TopPerformer(
                name=v.name,
                symbol=v.symbol,
                gain_percent=v.gain_percent,
                current_value=v.current_value,
            )
            for v in ranked[:self._top_limit]
        ]
