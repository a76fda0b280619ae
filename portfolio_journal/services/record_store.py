# portfolio_journal/services/record_store.py
"""
SQLAlchemy-backed record store.

The only place that queries investments, transactions and journal entries.
Rows are converted to the frozen record types of the analytics engine so no
ORM object (and no lazy load) escapes a request's session.

Reads are batched by investment-id set: one query per table regardless of
how many investments a user holds.

Error Handling:
    Every SQLAlchemyError is logged, the session rolled back, and a
    RecordStoreError raised. Callers decide whether the failure is fatal
    (investments) or degradable (transactions, journal entries).

Usage:
    store = SqlAlchemyRecordStore(db)
    investments = store.list_investments(user_id=1)
    transactions = store.list_transactions([inv.id for inv in investments])
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import Literal

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from portfolio_journal.models import (
    Investment,
    InvestmentType,
    JournalEntry,
    Transaction,
    TransactionType,
)
from portfolio_journal.services.analytics.types import (
    InvestmentRecord,
    JournalEntryRecord,
    TransactionRecord,
)
from portfolio_journal.services.exceptions import RecordStoreError

logger = logging.getLogger(__name__)


# =============================================================================
# ROW -> RECORD CONVERSION
# =============================================================================

def investment_to_record(investment: Investment) -> InvestmentRecord:
    investment_type = investment.investment_type
    return InvestmentRecord(
        id=investment.id,
        user_id=investment.user_id,
        name=investment.name,
        symbol=investment.symbol,
        currency=investment.currency,
        investment_type_id=investment.investment_type_id,
        type_name=investment_type.name if investment_type else None,
        category=investment_type.category if investment_type else None,
        unit_type=investment_type.unit_type if investment_type else None,
        initial_quantity=investment.initial_quantity,
        initial_amount=investment.initial_amount,
        initial_price_per_unit=investment.initial_price_per_unit,
        purchase_date=investment.purchase_date,
        created_at=investment.created_at,
    )


def transaction_to_record(txn: Transaction) -> TransactionRecord:
    txn_type = txn.transaction_type
    return TransactionRecord(
        id=txn.id,
        investment_id=txn.investment_id,
        transaction_type=txn_type.value if isinstance(txn_type, TransactionType) else str(txn_type),
        quantity=txn.quantity,
        price_per_unit=txn.price_per_unit,
        total_amount=txn.total_amount,
        transaction_date=txn.transaction_date,
        notes=txn.notes,
        created_at=txn.created_at,
    )


def journal_entry_to_record(entry: JournalEntry) -> JournalEntryRecord:
    return JournalEntryRecord(
        id=entry.id,
        investment_id=entry.investment_id,
        entry_date=entry.entry_date,
        current_price=entry.current_price,
        notes=entry.notes,
        created_at=entry.created_at,
    )


# =============================================================================
# RECORD STORE
# =============================================================================

class SqlAlchemyRecordStore:
    """
    Record store bound to one request-scoped Session.

    Write methods flush but do not commit; InvestmentService commits once
    per operation so an investment and its initial transaction land
    together.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def _fail(self, operation: str, error: SQLAlchemyError) -> RecordStoreError:
        logger.error(f"Record store operation '{operation}' failed: {error}")
        self._db.rollback()
        return RecordStoreError(operation, reason=error.__class__.__name__)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_investments(self, user_id: int) -> list[InvestmentRecord]:
        """All investments of a user, newest first."""
        stmt = (
            select(Investment)
            .options(joinedload(Investment.investment_type))
            .where(Investment.user_id == user_id)
            .order_by(Investment.created_at.desc(), Investment.id.desc())
        )
        try:
            rows = self._db.scalars(stmt).all()
        except SQLAlchemyError as e:
            raise self._fail("list_investments", e) from e
        return [investment_to_record(row) for row in rows]

    def list_transactions(self, investment_ids: Iterable[int]) -> list[TransactionRecord]:
        """Transactions of the given investments, ascending by date."""
        ids = list(investment_ids)
        if not ids:
            return []
        stmt = (
            select(Transaction)
            .where(Transaction.investment_id.in_(ids))
            .order_by(Transaction.transaction_date.asc(), Transaction.id.asc())
        )
        try:
            rows = self._db.scalars(stmt).all()
        except SQLAlchemyError as e:
            raise self._fail("list_transactions", e) from e
        return [transaction_to_record(row) for row in rows]

    def list_journal_entries(
            self,
            investment_ids: Iterable[int],
            order: Literal["asc", "desc"] = "asc",
    ) -> list[JournalEntryRecord]:
        """Journal entries of the given investments ordered by entry date."""
        ids = list(investment_ids)
        if not ids:
            return []
        if order == "desc":
            ordering = (JournalEntry.entry_date.desc(), JournalEntry.id.desc())
        else:
            ordering = (JournalEntry.entry_date.asc(), JournalEntry.id.asc())
        stmt = (
            select(JournalEntry)
            .where(JournalEntry.investment_id.in_(ids))
            .order_by(*ordering)
        )
        try:
            rows = self._db.scalars(stmt).all()
        except SQLAlchemyError as e:
            raise self._fail("list_journal_entries", e) from e
        return [journal_entry_to_record(row) for row in rows]

    def get_investment(self, investment_id: int) -> InvestmentRecord | None:
        try:
            investment = self._db.get(
                Investment, investment_id, options=[joinedload(Investment.investment_type)]
            )
        except SQLAlchemyError as e:
            raise self._fail("get_investment", e) from e
        return investment_to_record(investment) if investment else None

    def get_journal_entry(self, entry_id: int) -> JournalEntryRecord | None:
        try:
            entry = self._db.get(JournalEntry, entry_id)
        except SQLAlchemyError as e:
            raise self._fail("get_journal_entry", e) from e
        return journal_entry_to_record(entry) if entry else None

    def get_investment_type(self, investment_type_id: int) -> InvestmentType | None:
        try:
            return self._db.get(InvestmentType, investment_type_id)
        except SQLAlchemyError as e:
            raise self._fail("get_investment_type", e) from e

    def list_investment_types(self) -> list[InvestmentType]:
        stmt = select(InvestmentType).order_by(InvestmentType.category, InvestmentType.name)
        try:
            return list(self._db.scalars(stmt).all())
        except SQLAlchemyError as e:
            raise self._fail("list_investment_types", e) from e

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

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
        investment = Investment(
            user_id=user_id,
            name=name,
            symbol=symbol,
            currency=currency,
            investment_type_id=investment_type_id,
            initial_quantity=initial_quantity,
            initial_amount=initial_amount,
            initial_price_per_unit=initial_price_per_unit,
            purchase_date=purchase_date,
        )
        try:
            self._db.add(investment)
            self._db.flush()
            self._db.refresh(investment)
        except SQLAlchemyError as e:
            raise self._fail("add_investment", e) from e
        return investment_to_record(investment)

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
        txn = Transaction(
            investment_id=investment_id,
            transaction_type=transaction_type,
            quantity=quantity,
            price_per_unit=price_per_unit,
            total_amount=total_amount,
            transaction_date=transaction_date,
            notes=notes,
        )
        try:
            self._db.add(txn)
            self._db.flush()
        except SQLAlchemyError as e:
            raise self._fail("add_transaction", e) from e
        return transaction_to_record(txn)

    def add_journal_entry(
            self,
            investment_id: int,
            entry_date: date,
            current_price: Decimal,
            notes: str | None = None,
    ) -> JournalEntryRecord:
        entry = JournalEntry(
            investment_id=investment_id,
            entry_date=entry_date,
            current_price=current_price,
            notes=notes,
        )
        try:
            self._db.add(entry)
            self._db.flush()
        except SQLAlchemyError as e:
            raise self._fail("add_journal_entry", e) from e
        return journal_entry_to_record(entry)

    def delete_investment(self, investment_id: int) -> None:
        """Delete an investment after its transactions and journal entries."""
        try:
            self._db.execute(delete(Transaction).where(Transaction.investment_id == investment_id))
            self._db.execute(delete(JournalEntry).where(JournalEntry.investment_id == investment_id))
            self._db.execute(delete(Investment).where(Investment.id == investment_id))
            self._db.flush()
        except SQLAlchemyError as e:
            raise self._fail("delete_investment", e) from e

    def delete_journal_entry(self, entry_id: int) -> None:
        try:
            self._db.execute(delete(JournalEntry).where(JournalEntry.id == entry_id))
            self._db.flush()
        except SQLAlchemyError as e:
            raise self._fail("delete_journal_entry", e) from e

    def commit(self) -> None:
        try:
            self._db.commit()
        except SQLAlchemyError as e:
            raise self._fail("commit", e) from e
