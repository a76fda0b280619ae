# portfolio_journal/services/constants.py
"""
Centralized constants for the Portfolio Journal services.

Tunable values that operators may want to change per deployment (cache TTL,
timeline length, top performers size) live in config.Settings instead.

Usage:
    from portfolio_journal.services.constants import (
        PERCENT,
        UNCATEGORIZED,
        RATE_LIMIT_ANALYTICS,
    )
"""

from decimal import Decimal


# =============================================================================
# NUMERIC CONSTANTS
# =============================================================================

ZERO: Decimal = Decimal("0")

# Multiplier turning a ratio into a percentage
PERCENT: Decimal = Decimal("100")

# Performance series values are reported in whole currency units
TIMELINE_VALUE_QUANTUM: Decimal = Decimal("1")

# Stored amounts are Numeric(18, 8): at most 10 integer digits, 8 fractional
AMOUNT_QUANTUM: Decimal = Decimal("0.00000001")
MAX_AMOUNT: Decimal = Decimal("10000000000")


# =============================================================================
# ANALYTICS
# =============================================================================

# Allocation key for investments without an investment type
UNCATEGORIZED: str = "uncategorized"

# Label format of performance series points, e.g. "Oct 2026"
MONTH_LABEL_FORMAT: str = "%b %Y"

# Maximum number of users whose analytics are cached at once
ANALYTICS_CACHE_MAX_SIZE: int = 1000

# Notes attached to the BUY transaction created with a new investment
INITIAL_PURCHASE_NOTE: str = "Initial purchase"


# =============================================================================
# REFERENCE DATA
# =============================================================================

# Investment types created by init_db.py: (name, category, unit_type)
DEFAULT_INVESTMENT_TYPES: list[tuple[str, str, str]] = [
    ("Stocks", "stock", "shares"),
    ("ETF", "stock", "shares"),
    ("Gold", "commodity", "grams"),
    ("Silver", "commodity", "grams"),
    ("Bitcoin", "crypto", "coins"),
    ("Ethereum", "crypto", "coins"),
]


# =============================================================================
# RATE LIMITS
# =============================================================================
# Format: "<count>/<period>" as understood by slowapi

# Default for read endpoints
RATE_LIMIT_DEFAULT: str = "100/minute"

# Write endpoints (POST, DELETE)
RATE_LIMIT_WRITE: str = "30/minute"

# Analytics endpoints (full recompute on cache miss)
RATE_LIMIT_ANALYTICS: str = "30/minute"

# Health check endpoints
RATE_LIMIT_HEALTH: str = "300/minute"
