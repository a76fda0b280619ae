# portfolio_journal/services/analytics/service.py
"""
Analytics Service - orchestrator of the portfolio analytics engine.

Reads a user's records through the record store in three batched reads,
then hands them to the pure calculators:

    RecordStore.list_investments(user_id)
        ↓
    list_transactions(ids) + list_journal_entries(ids)
        ↓
    ┌────────────────────────────────────────────────┐
    │               AnalyticsService                 │
    │  HoldingsAggregator → PricingResolver          │
    │          ↓                                     │
    │  ValuationEngine → PortfolioSummarizer         │
    │                                                │
    │  TimelineReconstructor (same raw input)        │
    └────────────────────────────────────────────────┘
        ↓
    PortfolioAnalytics

Failure Policy:
    - No authenticated user: NotAuthenticatedError (fail closed)
    - Investments read fails: RecordStoreError propagates
    - Transactions or journal read fails: logged, treated as empty; the
      result degrades to initial prices instead of failing the request

The compute_* methods are idempotent and side-effect free.
get_portfolio_analytics() adds read-through caching on top.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from portfolio_journal.services.analytics.cache import AnalyticsCache
from portfolio_journal.services.analytics.calculators import (
    HoldingsAggregator,
    PortfolioSummarizer,
    PricingResolver,
    ValuationEngine,
)
from portfolio_journal.services.analytics.timeline import TimelineReconstructor
from portfolio_journal.services.analytics.types import (
    InvestmentRecord,
    InvestmentValuation,
    JournalEntryRecord,
    PortfolioAnalytics,
    PortfolioSummary,
    TransactionRecord,
)
from portfolio_journal.services.exceptions import NotAuthenticatedError, RecordStoreError
from portfolio_journal.utils.date_utils import as_date

if TYPE_CHECKING:
    from portfolio_journal.services.protocols import RecordStoreReader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _PortfolioInput:
    """Everything read from the store for one computation."""
    investments: list[InvestmentRecord]
    transactions_by_investment: dict[int, list[TransactionRecord]]
    journal_by_investment: dict[int, list[JournalEntryRecord]]


class AnalyticsService:
    """
    Computes portfolio analytics for one user.

    Attributes:
        _aggregator: Transactions -> HoldingTotals
        _pricing: Current price policy
        _valuation: Value and gain per investment
        _summarizer: Portfolio totals, allocation, top performers
        _timeline: Month-end value series
        _cache: Optional AnalyticsCache for get_portfolio_analytics()
    """

    def __init__(
            self,
            cache: AnalyticsCache | None = None,
            timeline_months: int = 12,
            top_performers_limit: int = 5,
    ):
        self._aggregator = HoldingsAggregator()
        self._pricing = PricingResolver()
        self._valuation = ValuationEngine()
        self._summarizer = PortfolioSummarizer(top_performers_limit)
        self._timeline = TimelineReconstructor(timeline_months)
        self._cache = cache

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def compute_portfolio_analytics(
            self,
            store: RecordStoreReader,
            user_id: int | None,
            as_of: date | None = None,
    ) -> PortfolioAnalytics:
        """
        Calculate complete analytics for a user's portfolio.

        Args:
            store: Record store bound to the current request
            user_id: Authenticated user
            as_of: Anchor date of the timeline (default: today)

        Returns:
            PortfolioAnalytics; zero totals and empty collections when the
            user has no investments

        Raises:
            NotAuthenticatedError: If user_id is missing
            RecordStoreError: If the investments cannot be read
        """
        self._require_user(user_id)
        as_of = as_of or date.today()

        data = self._load(store, user_id)
        if not data.investments:
            return PortfolioAnalytics.empty()

        valuations = self._value_investments(data)
        summary = self._summarizer.summarize(valuations)

        performance_data = self._timeline.reconstruct(
            data.investments,
            data.transactions_by_investment,
            data.journal_by_investment,
            as_of,
        )

        logger.info(
            f"Computed analytics for user {user_id}: "
            f"{len(valuations)} investments, total value {summary.total_value}"
        )

        return PortfolioAnalytics(
            total_value=summary.total_value,
            total_invested=summary.total_invested,
            total_gain=summary.total_gain,
            total_gain_percent=summary.total_gain_percent,
            asset_allocation=self._summarizer.allocate(valuations, summary.total_value),
            performance_data=performance_data,
            top_performers=self._summarizer.top_performers(valuations),
            investments_by_category=self._summarizer.group_by_category(valuations),
        )

    def compute_portfolio_summary(
            self,
            store: RecordStoreReader,
            user_id: int | None,
    ) -> PortfolioSummary:
        """Portfolio totals only; skips allocation and the timeline."""
        self._require_user(user_id)

        data = self._load(store, user_id)
        if not data.investments:
            return PortfolioSummary.empty()

        return self._summarizer.summarize(self._value_investments(data))

    def compute_holdings_with_value(
            self,
            store: RecordStoreReader,
            user_id: int | None,
    ) -> list[InvestmentValuation]:
        """
        Per-investment valuations, in the store's order (newest first).
        """
        self._require_user(user_id)

        data = self._load(store, user_id)
        if not data.investments:
            return []

        return self._value_investments(data)

    def get_portfolio_analytics(
            self,
            store: RecordStoreReader,
            user_id: int | None,
    ) -> PortfolioAnalytics:
        """
        Read-through cached variant of compute_portfolio_analytics().

        Without a cache this is a plain recompute.
        """
        self._require_user(user_id)

        generation = None
        if self._cache is not None:
            cached = self._cache.get(user_id)
            if cached is not None:
                return cached
            generation = self._cache.generation(user_id)

        result = self.compute_portfolio_analytics(store, user_id)

        if self._cache is not None:
            self._cache.set(user_id, result, generation=generation)

        return result

    # =========================================================================
    # INTERNALS
    # =========================================================================

    @staticmethod
    def _require_user(user_id: int | None) -> None:
        if not user_id:
            raise NotAuthenticatedError()

    def _load(
            self,
            store: RecordStoreReader,
            user_id: int,
    ) -> _PortfolioInput:
        """Batched read of everything the calculators need."""
        investments = store.list_investments(user_id)
        if not investments:
            return _PortfolioInput(investments=[], transactions_by_investment={}, journal_by_investment={})

        ids = [inv.id for inv in investments]

        transactions_by_investment: dict[int, list[TransactionRecord]] = {i: [] for i in ids}
        try:
            for txn in store.list_transactions(ids):
                transactions_by_investment.setdefault(txn.investment_id, []).append(txn)
        except RecordStoreError as e:
            logger.warning(f"Transactions unavailable for user {user_id}, treating as empty: {e}")
            transactions_by_investment = {i: [] for i in ids}

        journal_by_investment: dict[int, list[JournalEntryRecord]] = {i: [] for i in ids}
        try:
            for entry in store.list_journal_entries(ids, order="asc"):
                journal_by_investment.setdefault(entry.investment_id, []).append(entry)
        except RecordStoreError as e:
            logger.warning(f"Journal entries unavailable for user {user_id}, treating as empty: {e}")
            journal_by_investment = {i: [] for i in ids}

        return _PortfolioInput(
            investments=investments,
            transactions_by_investment=transactions_by_investment,
            journal_by_investment=journal_by_investment,
        )

    def _value_investments(self, data: _PortfolioInput) -> list[InvestmentValuation]:
        valuations: list[InvestmentValuation] = []

        for investment in data.investments:
            totals = self._aggregator.aggregate(
                investment.id,
                data.transactions_by_investment.get(investment.id, []),
                investment.initial_price_per_unit,
            )
            resolved = self._pricing.resolve(
                _latest_entry(data.journal_by_investment.get(investment.id, [])),
                totals,
                investment.initial_price_per_unit,
            )
            valuations.append(self._valuation.calculate(investment, totals, resolved))

        return valuations


def _latest_entry(entries: Sequence[JournalEntryRecord]) -> JournalEntryRecord | None:
    """Most recent journal entry by (entry_date, id), or None."""
    if not entries:
        return None
    return max(entries, key=lambda e: (as_date(e.entry_date) or date.min, e.id))
