# portfolio_journal/schemas/journal.py
"""
Pydantic schemas for journal entries (manual price observations).

A price of 0 is accepted and stored; it means "no usable observation" and
never replaces an earlier positive price in analytics.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portfolio_journal.schemas.validators import normalize_notes, validate_event_date


class JournalEntryCreate(BaseModel):
    """Schema for recording an observed price of an investment."""

    entry_date: date = Field(..., description="Date of the observation")

    current_price: Decimal = Field(
        ...,
        ge=0,
        max_digits=18,
        decimal_places=8,
        description="Observed price per unit (0 allowed)",
        examples=["182.50", "0"],
    )

    notes: str | None = Field(default=None, max_length=1000)

    @field_validator('entry_date')
    @classmethod
    def validate_entry_date(cls, v: date) -> date:
        return validate_event_date(v, "Entry date")

    @field_validator('notes')
    @classmethod
    def trim_notes(cls, v: str | None) -> str | None:
        return normalize_notes(v)


class JournalEntryResponse(BaseModel):
    id: int
    investment_id: int
    entry_date: date
    current_price: Decimal
    notes: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class JournalFeedEntryResponse(JournalEntryResponse):
    """Journal entry in the cross-investment feed, labelled with its investment."""

    investment_name: str
    investment_symbol: str | None = None
    currency: str
