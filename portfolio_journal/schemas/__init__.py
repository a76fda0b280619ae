# portfolio_journal/schemas/__init__.py
"""
Pydantic schemas for API request/response validation.

Organized by domain:
- analytics: Portfolio analytics, holdings and dashboard
- errors: Error response formats
- investments: Investment create/response, investment types
- journal: Journal entry create/response
- transactions: Transaction create/response
- validators: Reusable validation functions (name, symbol, currency, dates)

Usage:
    from portfolio_journal.schemas import InvestmentCreate, InvestmentResponse
    from portfolio_journal.schemas import AnalyticsResponse, DashboardResponse
"""

from portfolio_journal.schemas.analytics import (
    AllocationResponse,
    AnalyticsResponse,
    DashboardResponse,
    HoldingResponse,
    PerformancePointResponse,
    PortfolioSummaryResponse,
    TopPerformerResponse,
)
from portfolio_journal.schemas.errors import ErrorDetail, ValidationErrorDetail
from portfolio_journal.schemas.investments import (
    InvestmentCreate,
    InvestmentResponse,
    InvestmentTypeResponse,
)
from portfolio_journal.schemas.journal import (
    JournalEntryCreate,
    JournalEntryResponse,
    JournalFeedEntryResponse,
)
from portfolio_journal.schemas.transactions import TransactionCreate, TransactionResponse

__all__ = [
    # Analytics
    "PortfolioSummaryResponse",
    "HoldingResponse",
    "AllocationResponse",
    "PerformancePointResponse",
    "TopPerformerResponse",
    "AnalyticsResponse",
    "DashboardResponse",
    # Errors
    "ErrorDetail",
    "ValidationErrorDetail",
    # Investments
    "InvestmentCreate",
    "InvestmentResponse",
    "InvestmentTypeResponse",
    # Journal
    "JournalEntryCreate",
    "JournalEntryResponse",
    "JournalFeedEntryResponse",
    # Transactions
    "TransactionCreate",
    "TransactionResponse",
]
