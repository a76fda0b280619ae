# portfolio_journal/routers/__init__.py
"""
API routers for Portfolio Journal.

Each router handles a specific domain:
- investment_types: Reference data (Stock, Gold, Mutual Fund, ...)
- investments: Recording and deleting investments
- transactions: Buy/sell records of an investment
- journal: Manual price observations
- analytics: Portfolio totals, allocation, performance, top performers
- dashboard: Everything the dashboard renders in one payload
"""

from portfolio_journal.routers.analytics import router as analytics_router
from portfolio_journal.routers.dashboard import router as dashboard_router
from portfolio_journal.routers.investment_types import router as investment_types_router
from portfolio_journal.routers.investments import router as investments_router
from portfolio_journal.routers.journal import router as journal_router
from portfolio_journal.routers.transactions import router as transactions_router

__all__ = [
    "analytics_router",
    "dashboard_router",
    "investment_types_router",
    "investments_router",
    "journal_router",
    "transactions_router",
]
