# portfolio_journal/schemas/validators.py
"""
Reusable validation functions for Pydantic schemas.

- Name trimming
- Symbol normalization
- Currency code validation
- Event date sanity checks

Validators raise ValueError; Pydantic turns it into a 422 response.
"""

import re
from datetime import date, timedelta

# =============================================================================
# CONSTANTS
# =============================================================================

NAME_MAX_LENGTH = 100

# Symbol: 1-20 chars, alphanumerics plus . - ^ (BRK.B, BTC-USD, ^SPX)
SYMBOL_PATTERN = re.compile(r'^[\^]?[A-Z0-9][A-Z0-9.\-]{0,19}$')

# ISO 4217 format
CURRENCY_PATTERN = re.compile(r'^[A-Z]{3}$')

MIN_VALID_DATE = date(1970, 1, 1)

# Journal and transaction dates may run slightly ahead of the server's
# clock for users in later time zones
MAX_FUTURE_DAYS = 1


# =============================================================================
# TEXT
# =============================================================================

def validate_name(value: str) -> str:
    """
    Trim a display name and reject blank ones.

    Raises:
        ValueError: If the name is empty after trimming or too long
    """
    normalized = value.strip() if value else ""
    if not normalized:
        raise ValueError("Name cannot be empty")
    if len(normalized) > NAME_MAX_LENGTH:
        raise ValueError(f"Name cannot exceed {NAME_MAX_LENGTH} characters")
    return normalized


def normalize_symbol(value: str | None) -> str | None:
    """
    Upper-case and trim a symbol. Blank symbols become None.

    Raises:
        ValueError: If the symbol has an invalid format
    """
    if value is None:
        return None

    normalized = value.strip().upper()
    if not normalized:
        return None

    if not SYMBOL_PATTERN.match(normalized):
        raise ValueError(
            f"Invalid symbol format: '{normalized}'. "
            "Symbol must be alphanumeric and may include dots, dashes or a leading caret"
        )
    return normalized


def normalize_notes(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


# =============================================================================
# CURRENCY VALIDATION
# =============================================================================

def validate_currency(value: str) -> str:
    """
    Validate and normalize a currency code.

    Args:
        value: Raw currency input (e.g., "usd", "EUR")

    Returns:
        Normalized currency (uppercase, trimmed)

    Raises:
        ValueError: If currency format is invalid
    """
    if not value:
        raise ValueError("Currency cannot be empty")

    normalized = value.strip().upper()

    if not CURRENCY_PATTERN.match(normalized):
        raise ValueError(
            f"Invalid currency format: '{normalized}'. "
            "Currency must be a 3-letter ISO code (e.g., USD, EUR)"
        )

    return normalized


# =============================================================================
# DATE VALIDATION
# =============================================================================

def validate_event_date(value: date, field_name: str = "Date") -> date:
    """
    Reject dates before 1970 or in the future.

    Raises:
        ValueError: If the date is out of range
    """
    if value < MIN_VALID_DATE:
        raise ValueError(f"{field_name} cannot be before {MIN_VALID_DATE}")
    if value > date.today() + timedelta(days=MAX_FUTURE_DAYS):
        raise ValueError(f"{field_name} cannot be in the future")
    return value
