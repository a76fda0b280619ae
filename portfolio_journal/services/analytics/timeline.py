# portfolio_journal/services/analytics/timeline.py
"""
Timeline Reconstructor for the monthly portfolio value series.

Replays each investment's transactions and journal entries against a list of
month-end checkpoints, producing the portfolio value at every checkpoint.

Rolling State:
    Holdings CHANGE over time, so today's quantity cannot simply be priced
    at historical dates. Instead of filtering all events for every checkpoint
    (O(C × T)), events are sorted once and two cursors move forward only:

        for each checkpoint (ascending):
            apply transactions with date <= checkpoint   (quantity cursor)
            apply journal entries with date <= checkpoint (price cursor)
            value += max(0, quantity) × price

    Complexity: O(C + T + J) per investment.

Pricing (LOCF):
    The running price is the last journal price > 0 seen so far. Before the
    first such observation the investment's initial price-per-unit is used.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from portfolio_journal.models import TransactionType
from portfolio_journal.services.analytics.calculators import (
    normalize_transaction_type,
    to_decimal,
)
from portfolio_journal.services.analytics.types import (
    InvestmentRecord,
    JournalEntryRecord,
    PerformancePoint,
    TransactionRecord,
)
from portfolio_journal.services.constants import (
    MONTH_LABEL_FORMAT,
    TIMELINE_VALUE_QUANTUM,
    ZERO,
)
from portfolio_journal.utils.date_utils import as_date, month_end_checkpoints

logger = logging.getLogger(__name__)


def _event_date(value) -> date:
    # Undated events sort first and are therefore applied from the first checkpoint
    return as_date(value) or date.min


class TimelineReconstructor:
    """
    Rebuilds the month-end portfolio value series.

    Attributes:
        _months: Number of full months before the current one
    """

    def __init__(self, months: int = 12) -> None:
        self._months = months

    def reconstruct(
            self,
            investments: Sequence[InvestmentRecord],
            transactions_by_investment: Mapping[int, Sequence[TransactionRecord]],
            journal_by_investment: Mapping[int, Sequence[JournalEntryRecord]],
            as_of: date,
    ) -> list[PerformancePoint]:
        """
        Calculate the portfolio value at each month-end checkpoint.

        Args:
            investments: All investments of the user
            transactions_by_investment: investment_id -> transactions (any order)
            journal_by_investment: investment_id -> journal entries (any order)
            as_of: Anchor date; its month is the last checkpoint

        Returns:
            PerformancePoint list in ascending checkpoint order
        """
        checkpoints = month_end_checkpoints(as_of, self._months)
        totals = [ZERO] * len(checkpoints)

        for investment in investments:
            contributions = self._replay_investment(
                investment,
                transactions_by_investment.get(investment.id, ()),
                journal_by_investment.get(investment.id, ()),
                checkpoints,
            )
            totals = [total + value for total, value in zip(totals, contributions)]

        return [
            PerformancePoint(
                month_end=checkpoint,
                label=checkpoint.strftime(MONTH_LABEL_FORMAT),
                value=total.quantize(TIMELINE_VALUE_QUANTUM, rounding=ROUND_HALF_UP),
            )
            for checkpoint, total in zip(checkpoints, totals)
        ]

    def _replay_investment(
            self,
            investment: InvestmentRecord,
            transactions: Sequence[TransactionRecord],
            journal_entries: Sequence[JournalEntryRecord],
            checkpoints: list[date],
    ) -> list[Decimal]:
        """Value of a single investment at every checkpoint."""
        if not transactions and not journal_entries:
            return [ZERO] * len(checkpoints)

        sorted_txns = sorted(
            transactions, key=lambda t: (_event_date(t.transaction_date), t.id)
        )
        sorted_entries = sorted(
            journal_entries, key=lambda e: (_event_date(e.entry_date), e.id)
        )
        fallback_price = to_decimal(investment.initial_price_per_unit)

        # Rolling state
        quantity = ZERO
        running_price: Decimal | None = None
        txn_index = 0
        entry_index = 0

        values: list[Decimal] = []
        for checkpoint in checkpoints:
            while (
                    txn_index < len(sorted_txns)
                    and _event_date(sorted_txns[txn_index].transaction_date) <= checkpoint
            ):
                txn = sorted_txns[txn_index]
                txn_type = normalize_transaction_type(txn.transaction_type)
                if txn_type == TransactionType.BUY:
                    quantity += to_decimal(txn.quantity)
                elif txn_type == TransactionType.SELL:
                    quantity -= to_decimal(txn.quantity)
                txn_index += 1

            while (
                    entry_index < len(sorted_entries)
                    and _event_date(sorted_entries[entry_index].entry_date) <= checkpoint
            ):
                observed = to_decimal(sorted_entries[entry_index].current_price)
                if observed > ZERO:
                    running_price = observed
                entry_index += 1

            price = running_price if running_price is not None else fallback_price
            if price <= ZERO:
                price = ZERO

            values.append(max(ZERO, quantity) * price)

        return values
