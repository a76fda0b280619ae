# portfolio_journal/services/protocols.py
"""
Protocol interfaces for service dependency injection.

Using typing.Protocol enables structural subtyping:
- SqlAlchemyRecordStore satisfies RecordStoreProtocol without inheriting it
- Test fakes work without explicit inheritance
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import Literal, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from portfolio_journal.models import InvestmentType, TransactionType
    from portfolio_journal.services.analytics.types import (
        InvestmentRecord,
        JournalEntryRecord,
        TransactionRecord,
    )


class RecordStoreReader(Protocol):
    """Read interface required by AnalyticsService."""

    def list_investments(self, user_id: int) -> list[InvestmentRecord]:
        ...

    def list_transactions(self, investment_ids: Iterable[int]) -> list[TransactionRecord]:
        ...

    def list_journal_entries(
        self,
        investment_ids: Iterable[int],
        order: Literal["asc", "desc"] = "asc",
    ) -> list[JournalEntryRecord]:
        ...


class RecordStoreProtocol(RecordStoreReader, Protocol):
    """Full interface required by InvestmentService."""

    def get_investment(self, investment_id: int) -> InvestmentRecord | None:
        ...

    def get_journal_entry(self, entry_id: int) -> JournalEntryRecord | None:
        ...

    def get_investment_type(self, investment_type_id: int) -> InvestmentType | None:
        ...

    def list_investment_types(self) -> list[InvestmentType]:
        ...

    def add_investment(
        self,
        user_id: int,
        name: str,
        symbol: str | None,
        currency: str,
        investment_type_id: int | None,
        initial_quantity: Decimal,
        initial_amount: Decimal,
        initial_price_per_unit: Decimal,
        purchase_date: date,
    ) -> InvestmentRecord:
        ...

    def add_transaction(
        self,
        investment_id: int,
        transaction_type: TransactionType,
        quantity: Decimal,
        price_per_unit: Decimal,
        total_amount: Decimal,
        transaction_date: date,
        notes: str | None = None,
    ) -> TransactionRecord:
        ...

    def add_journal_entry(
        self,
        investment_id: int,
        entry_date: date,
        current_price: Decimal,
        notes: str | None = None,
    ) -> JournalEntryRecord:
        ...

    def delete_investment(self, investment_id: int) -> None:
        ...

    def delete_journal_entry(self, entry_id: int) -> None:
        ...

    def commit(self) -> None:
        ...
