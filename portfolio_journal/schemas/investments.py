# portfolio_journal/schemas/investments.py
"""
Pydantic schemas for Investment validation.

- InvestmentCreate: what clients send to record an investment
- InvestmentResponse: what the API returns
- InvestmentTypeResponse: reference data

Investments are immutable after creation, so there is no Update schema.

IMPORTANT: All financial values use Decimal for precision and are
serialized as strings.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from portfolio_journal.schemas.validators import (
    normalize_symbol,
    validate_currency,
    validate_event_date,
    validate_name,
)
from portfolio_journal.utils.currency import get_currency_symbol


# =============================================================================
# INVESTMENT TYPES
# =============================================================================

class InvestmentTypeResponse(BaseModel):
    """An investment type; category is the allocation key."""

    id: int
    name: str = Field(..., examples=["Stocks", "Gold", "Bitcoin"])
    category: str = Field(..., examples=["stock", "commodity", "crypto"])
    unit_type: str = Field(..., examples=["shares", "grams", "coins"])

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# CREATE SCHEMA
# =============================================================================

class InvestmentCreate(BaseModel):
    """
    Schema for recording a new investment.

    The initial purchase is also stored as a BUY transaction; the
    price-per-unit is derived as initial_amount / initial_quantity.
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name",
        examples=["Apple Inc.", "Antam Gold"],
    )

    symbol: str | None = Field(
        default=None,
        max_length=20,
        description="Optional ticker or code (upper-cased)",
        examples=["AAPL", "BTC"],
    )

    investment_type_id: int | None = Field(
        default=None,
        gt=0,
        description="Investment type; determines the allocation category",
    )

    currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="Display currency (ISO 4217); amounts are never converted",
        examples=["USD", "EUR", "IDR"],
    )

    initial_quantity: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=8,
        description="Units bought (must be positive)",
        examples=["10", "0.5"],
    )

    initial_amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=8,
        description="Total paid for the initial purchase (must be positive)",
        examples=["1500", "30000.50"],
    )

    purchase_date: date = Field(..., description="Date of the initial purchase")

    # =========================================================================
    # FIELD VALIDATORS (Normalization)
    # =========================================================================

    @field_validator('name')
    @classmethod
    def trim_name(cls, v: str) -> str:
        return validate_name(v)

    @field_validator('symbol')
    @classmethod
    def normalize_symbol_field(cls, v: str | None) -> str | None:
        return normalize_symbol(v)

    @field_validator('currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return validate_currency(v)

    @field_validator('purchase_date')
    @classmethod
    def validate_purchase_date(cls, v: date) -> date:
        return validate_event_date(v, "Purchase date")


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class InvestmentResponse(BaseModel):
    """An investment as stored, with its type flattened in."""

    id: int
    name: str
    symbol: str | None
    currency: str
    investment_type_id: int | None
    type_name: str | None = Field(None, description="Investment type name")
    category: str | None = Field(None, description="Allocation category")
    unit_type: str | None = Field(None, description="Unit label, e.g. 'shares'")
    initial_quantity: Decimal
    initial_amount: Decimal
    initial_price_per_unit: Decimal
    purchase_date: date
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def currency_symbol(self) -> str:
        return get_currency_symbol(self.currency)
