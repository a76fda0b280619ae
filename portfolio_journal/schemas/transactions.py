# portfolio_journal/schemas/transactions.py
"""
Pydantic schemas for Transaction validation.

Transactions are append-only: clients create them and list them, nothing
else. total_amount is computed by the service (quantity × price_per_unit),
never sent by the client.

Validation layers:
- Field constraints: type, numeric limits
- Field validators: date range, notes trimming
- Service: ownership verification

IMPORTANT: All financial values use Decimal for precision.
Never use float for money!
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portfolio_journal.models import TransactionType
from portfolio_journal.schemas.validators import normalize_notes, validate_event_date


# =============================================================================
# CREATE SCHEMA
# =============================================================================

class TransactionCreate(BaseModel):
    """
    Schema for recording a buy or sell.

    Selling more units than are held is accepted; the holding is clamped
    to zero when valued.
    """

    transaction_type: TransactionType = Field(
        ...,
        description="Type of transaction",
        examples=[TransactionType.BUY, TransactionType.SELL],
    )

    quantity: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=8,
        description="Number of units traded (must be positive)",
        examples=["10", "0.5", "100.12345678"],
    )

    price_per_unit: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=8,
        description="Price per unit at time of trade (must be positive)",
        examples=["150.50", "0.00001234"],
    )

    transaction_date: date = Field(..., description="Trade date")

    notes: str | None = Field(default=None, max_length=500)

    @field_validator('transaction_date')
    @classmethod
    def validate_transaction_date(cls, v: date) -> date:
        return validate_event_date(v, "Transaction date")

    @field_validator('notes')
    @classmethod
    def trim_notes(cls, v: str | None) -> str | None:
        return normalize_notes(v)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class TransactionResponse(BaseModel):
    """A stored transaction."""

    id: int = Field(..., description="Unique identifier")
    investment_id: int = Field(..., description="ID of the investment")
    transaction_type: TransactionType
    quantity: Decimal
    price_per_unit: Decimal
    total_amount: Decimal = Field(..., description="quantity × price_per_unit")
    transaction_date: date
    notes: str | None = None
    created_at: datetime | None = Field(None, description="When the transaction was recorded")

    model_config = ConfigDict(from_attributes=True)
