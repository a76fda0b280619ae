# portfolio_journal/utils/__init__.py
"""
Cross-cutting utilities for Portfolio Journal.

- logging: Logging setup with correlation ID support
- context: Request context (correlation ID, authenticated user)
- date_utils: Month-end checkpoint helpers
- currency: Currency display symbols

Usage:
    from portfolio_journal.utils import setup_logging
    from portfolio_journal.utils import get_correlation_id, set_correlation_id
    from portfolio_journal.utils.date_utils import month_end_checkpoints
"""

from portfolio_journal.utils.context import (
    clear_correlation_id,
    clear_request_context,
    get_correlation_id,
    get_current_user_id,
    set_correlation_id,
    set_current_user_id,
)
from portfolio_journal.utils.currency import get_currency_symbol
from portfolio_journal.utils.logging import setup_logging

__all__ = [
    # Logging
    "setup_logging",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "get_current_user_id",
    "set_current_user_id",
    "clear_request_context",
    # Display
    "get_currency_symbol",
]
