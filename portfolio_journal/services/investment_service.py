# portfolio_journal/services/investment_service.py
"""
Investment Service - writes and ownership-checked reads of user records.

This service handles:
- Recording investments (with their initial BUY transaction)
- Recording buy/sell transactions
- Recording and deleting journal entries
- Deleting investments together with their children

Design Principles:
- No HTTP Knowledge: raises domain exceptions, not HTTPException
- Ownership first: every operation on an existing investment checks it
  belongs to the caller before reading or writing anything else
- One commit per operation: an investment and its initial transaction are
  stored together or not at all

Ownership failures:
    Missing investment          -> InvestmentNotFoundError (404)
    Investment of another user  -> PermissionDeniedError (403)

Usage:
    from portfolio_journal.services.investment_service import InvestmentService

    service = InvestmentService()
    investment = service.record_investment(
        store, user_id=1, name="Apple", investment_type_id=1,
        initial_quantity=Decimal("10"), initial_amount=Decimal("1500"),
        purchase_date=date(2024, 1, 15),
    )
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from portfolio_journal.models import InvestmentType, TransactionType
from portfolio_journal.services.analytics.types import (
    InvestmentRecord,
    JournalEntryRecord,
    TransactionRecord,
)
from portfolio_journal.services.constants import (
    AMOUNT_QUANTUM,
    INITIAL_PURCHASE_NOTE,
    MAX_AMOUNT,
    ZERO,
)
from portfolio_journal.services.exceptions import (
    InvestmentNotFoundError,
    InvestmentTypeNotFoundError,
    JournalEntryNotFoundError,
    NotAuthenticatedError,
    PermissionDeniedError,
    ValidationError,
)

if TYPE_CHECKING:
    from portfolio_journal.services.protocols import RecordStoreProtocol

logger = logging.getLogger(__name__)


class InvestmentService:
    """
    Service for user-owned investment records.

    Stateless; the record store passed to each method carries the session.
    """

    # =========================================================================
    # READS
    # =========================================================================

    def list_investment_types(self, store: RecordStoreProtocol) -> list[InvestmentType]:
        return store.list_investment_types()

    def list_investments(self, store: RecordStoreProtocol, user_id: int | None) -> list[InvestmentRecord]:
        """The caller's investments, newest first."""
        _require_user(user_id)
        return store.list_investments(user_id)

    def get_owned_investment(
            self,
            store: RecordStoreProtocol,
            user_id: int | None,
            investment_id: int,
    ) -> InvestmentRecord:
        """
        Fetch an investment and verify ownership.

        Raises:
            NotAuthenticatedError: If user_id is missing
            InvestmentNotFoundError: If the investment doesn't exist
            PermissionDeniedError: If it belongs to another user
        """
        _require_user(user_id)

        investment = store.get_investment(investment_id)
        if investment is None:
            raise InvestmentNotFoundError(investment_id)

        if investment.user_id != user_id:
            logger.warning(
                f"User {user_id} attempted to access investment {investment_id} "
                f"owned by user {investment.user_id}"
            )
            raise PermissionDeniedError("Investment", investment_id)

        return investment

    def list_transactions(
            self,
            store: RecordStoreProtocol,
            user_id: int | None,
            investment_id: int,
    ) -> list[TransactionRecord]:
        """Transactions of an owned investment, newest first."""
        self.get_owned_investment(store, user_id, investment_id)
        transactions = store.list_transactions([investment_id])
        return sorted(
            transactions,
            key=lambda t: (t.transaction_date or date.min, t.id),
            reverse=True,
        )

    def list_journal_entries(
            self,
            store: RecordStoreProtocol,
            user_id: int | None,
            investment_id: int,
    ) -> list[JournalEntryRecord]:
        """Price history of an owned investment, ascending by date."""
        self.get_owned_investment(store, user_id, investment_id)
        return store.list_journal_entries([investment_id], order="asc")

    def list_all_journal_entries(
            self,
            store: RecordStoreProtocol,
            user_id: int | None,
    ) -> list[tuple[JournalEntryRecord, InvestmentRecord]]:
        """
        All of the caller's journal entries, newest first, each paired with
        its investment.
        """
        investments = {inv.id: inv for inv in self.list_investments(store, user_id)}
        if not investments:
            return []
        entries = store.list_journal_entries(list(investments), order="desc")
        return [(entry, investments[entry.investment_id]) for entry in entries]

    # =========================================================================
    # WRITES
    # =========================================================================

    def record_investment(
            self,
            store: RecordStoreProtocol,
            user_id: int | None,
            name: str,
            investment_type_id: int | None,
            initial_quantity: Decimal,
            initial_amount: Decimal,
            purchase_date: date,
            symbol: str | None = None,
            currency: str = "USD",
    ) -> InvestmentRecord:
        """
        Create an investment and its initial BUY transaction.

        The initial price-per-unit is derived as amount / quantity.

        Raises:
            NotAuthenticatedError: If user_id is missing
            ValidationError: If quantity or amount is not positive, or the
                amount is too large to store
            InvestmentTypeNotFoundError: If the investment type doesn't exist
        """
        _require_user(user_id)

        if initial_quantity <= ZERO:
            raise ValidationError("Initial quantity must be greater than zero", field="initial_quantity")
        if initial_amount <= ZERO:
            raise ValidationError("Initial amount must be greater than zero", field="initial_amount")
        if not _fits_amount(initial_amount):
            raise ValidationError(f"Initial amount must be less than {MAX_AMOUNT}", field="initial_amount")

        if investment_type_id is not None and store.get_investment_type(investment_type_id) is None:
            raise InvestmentTypeNotFoundError(investment_type_id)

        price_per_unit = initial_amount / initial_quantity

        investment = store.add_investment(
            user_id=user_id,
            name=name,
            symbol=symbol,
            currency=currency,
            investment_type_id=investment_type_id,
            initial_quantity=initial_quantity,
            initial_amount=initial_amount,
            initial_price_per_unit=price_per_unit,
            purchase_date=purchase_date,
        )
        store.add_transaction(
            investment_id=investment.id,
            transaction_type=TransactionType.BUY,
            quantity=initial_quantity,
            price_per_unit=price_per_unit,
            total_amount=initial_amount,
            transaction_date=purchase_date,
            notes=INITIAL_PURCHASE_NOTE,
        )
        store.commit()

        logger.info(f"User {user_id} recorded investment {investment.id} ({name})")
        return investment

    def record_transaction(
            self,
            store: RecordStoreProtocol,
            user_id: int | None,
            investment_id: int,
            transaction_type: TransactionType,
            quantity: Decimal,
            price_per_unit: Decimal,
            transaction_date: date,
            notes: str | None = None,
    ) -> TransactionRecord:
        """
        Record a buy or sell. total_amount = quantity × price_per_unit.

        Selling more than is held is allowed; valuation clamps the quantity.
        """
        self.get_owned_investment(store, user_id, investment_id)

        if quantity <= ZERO:
            raise ValidationError("Quantity must be greater than zero", field="quantity")
        if price_per_unit <= ZERO:
            raise ValidationError("Price per unit must be greater than zero", field="price_per_unit")

        total_amount = quantity * price_per_unit
        if not _fits_amount(total_amount):
            raise ValidationError(
                f"Total amount (quantity × price per unit) must be less than {MAX_AMOUNT}",
                field="quantity",
            )

        txn = store.add_transaction(
            investment_id=investment_id,
            transaction_type=transaction_type,
            quantity=quantity,
            price_per_unit=price_per_unit,
            total_amount=total_amount,
            transaction_date=transaction_date,
            notes=notes,
        )
        store.commit()

        logger.info(
            f"User {user_id} recorded {transaction_type.value} of {quantity} "
            f"on investment {investment_id}"
        )
        return txn

    def record_journal_entry(
            self,
            store: RecordStoreProtocol,
            user_id: int | None,
            investment_id: int,
            entry_date: date,
            current_price: Decimal,
            notes: str | None = None,
    ) -> JournalEntryRecord:
        """Record a manual price observation. A zero price is stored as given."""
        self.get_owned_investment(store, user_id, investment_id)

        if current_price < ZERO:
            raise ValidationError("Current price cannot be negative", field="current_price")

        entry = store.add_journal_entry(
            investment_id=investment_id,
            entry_date=entry_date,
            current_price=current_price,
            notes=notes,
        )
        store.commit()

        logger.info(f"User {user_id} recorded journal entry {entry.id} on investment {investment_id}")
        return entry

    def delete_investment(
            self,
            store: RecordStoreProtocol,
            user_id: int | None,
            investment_id: int,
    ) -> None:
        """Delete an owned investment with its transactions and journal entries."""
        self.get_owned_investment(store, user_id, investment_id)

        store.delete_investment(investment_id)
        store.commit()

        logger.info(f"User {user_id} deleted investment {investment_id}")

    def delete_journal_entry(
            self,
            store: RecordStoreProtocol,
            user_id: int | None,
            entry_id: int,
    ) -> None:
        """
        Delete a journal entry of an owned investment.

        Raises:
            JournalEntryNotFoundError: If the entry doesn't exist
            PermissionDeniedError: If its investment belongs to another user
        """
        _require_user(user_id)

        entry = store.get_journal_entry(entry_id)
        if entry is None:
            raise JournalEntryNotFoundError(entry_id)

        investment = store.get_investment(entry.investment_id)
        if investment is None or investment.user_id != user_id:
            raise PermissionDeniedError("JournalEntry", entry_id)

        store.delete_journal_entry(entry_id)
        store.commit()

        logger.info(f"User {user_id} deleted journal entry {entry_id}")


def _require_user(user_id: int | None) -> None:
    if not user_id:
        raise NotAuthenticatedError()


def _fits_amount(value: Decimal) -> bool:
    """True if value, rounded to the stored scale, fits an amount column."""
    return value < MAX_AMOUNT and value.quantize(AMOUNT_QUANTUM) < MAX_AMOUNT
