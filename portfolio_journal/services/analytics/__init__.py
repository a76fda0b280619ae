# portfolio_journal/services/analytics/__init__.py
"""
Analytics Service Package.

Turns a user's investments, transactions and journal entries into
valuations, portfolio totals, category allocation, top performers and a
month-end performance series.

Architecture:
    analytics/
    ├── __init__.py              # This file - package exports
    ├── types.py                 # Input records and result dataclasses
    ├── calculators.py           # Aggregation, pricing, valuation, summary
    ├── timeline.py              # Month-end value series (rolling state)
    ├── cache.py                 # Per-user LRU + TTL result cache
    └── service.py               # AnalyticsService (orchestrator)

Usage:
    from portfolio_journal.services.analytics import AnalyticsService
    from portfolio_journal.services.record_store import SqlAlchemyRecordStore

    service = AnalyticsService()
    result = service.compute_portfolio_analytics(SqlAlchemyRecordStore(db), user_id=1)

    print(f"Value: {result.total_value}")
    print(f"Gain:  {result.total_gain_percent}%")
"""

from portfolio_journal.services.analytics.cache import AnalyticsCache
from portfolio_journal.services.analytics.calculators import (
    HoldingsAggregator,
    PortfolioSummarizer,
    PricingResolver,
    ValuationEngine,
    to_decimal,
)
from portfolio_journal.services.analytics.service import AnalyticsService
from portfolio_journal.services.analytics.timeline import TimelineReconstructor
from portfolio_journal.services.analytics.types import (
    AllocationSlice,
    HoldingTotals,
    InvestmentRecord,
    InvestmentValuation,
    JournalEntryRecord,
    PerformancePoint,
    PortfolioAnalytics,
    PortfolioSummary,
    PriceSource,
    ResolvedPrice,
    TopPerformer,
    TransactionRecord,
)

__all__ = [
    # Service
    "AnalyticsService",
    "AnalyticsCache",
    # Calculators
    "HoldingsAggregator",
    "PricingResolver",
    "ValuationEngine",
    "PortfolioSummarizer",
    "TimelineReconstructor",
    "to_decimal",
    # Types
    "InvestmentRecord",
    "TransactionRecord",
    "JournalEntryRecord",
    "HoldingTotals",
    "PriceSource",
    "ResolvedPrice",
    "InvestmentValuation",
    "AllocationSlice",
    "PerformancePoint",
    "TopPerformer",
    "PortfolioSummary",
    "PortfolioAnalytics",
]
