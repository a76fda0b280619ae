# tests/services/test_investment_service.py
"""
Tests for InvestmentService.

Covers:
- Recording an investment with its initial BUY transaction
- Transaction and journal entry validation, including stored amount bounds
- Ownership checks (404 vs 403 conditions)
- Listing order of transactions and journal entries
- Cascading delete
"""

from datetime import date
from decimal import Decimal

import pytest

from portfolio_journal.models import TransactionType
from portfolio_journal.services.exceptions import (
    InvestmentNotFoundError,
    InvestmentTypeNotFoundError,
    JournalEntryNotFoundError,
    NotAuthenticatedError,
    PermissionDeniedError,
    ValidationError,
)
from portfolio_journal.services.investment_service import InvestmentService
from portfolio_journal.services.record_store import SqlAlchemyRecordStore
from tests.conftest import create_investment, create_journal_entry, create_transaction


@pytest.fixture
def service() -> InvestmentService:
    return InvestmentService()


@pytest.fixture
def store(db) -> SqlAlchemyRecordStore:
    return SqlAlchemyRecordStore(db)


def _record(service, store, user, investment_type=None, **overrides):
    params = dict(
        user_id=user.id,
        name="Apple Inc.",
        symbol="AAPL",
        investment_type_id=investment_type.id if investment_type else None,
        initial_quantity=Decimal("10"),
        initial_amount=Decimal("1500"),
        purchase_date=date(2024, 1, 15),
    )
    params.update(overrides)
    return service.record_investment(store, **params)


# =============================================================================
# RECORD INVESTMENT
# =============================================================================

class TestRecordInvestment:

    def test_creates_investment_and_initial_buy(self, service, store, sample_user, stock_type):
        investment = _record(service, store, sample_user, stock_type)

        assert investment.initial_price_per_unit == Decimal("150")
        assert investment.category == "stock"

        transactions = service.list_transactions(store, sample_user.id, investment.id)
        assert len(transactions) == 1
        initial = transactions[0]
        assert initial.transaction_type == "buy"
        assert initial.quantity == Decimal("10")
        assert initial.price_per_unit == Decimal("150")
        assert initial.total_amount == Decimal("1500")
        assert initial.transaction_date == date(2024, 1, 15)
        assert initial.notes == "Initial purchase"

    def test_untyped_investment(self, service, store, sample_user):
        investment = _record(service, store, sample_user)

        assert investment.investment_type_id is None
        assert investment.category_key == "uncategorized"

    def test_unknown_type(self, service, store, sample_user):
        with pytest.raises(InvestmentTypeNotFoundError):
            _record(service, store, sample_user, investment_type_id=999)

        assert service.list_investments(store, sample_user.id) == []

    @pytest.mark.parametrize("field", ["initial_quantity", "initial_amount"])
    @pytest.mark.parametrize("value", [Decimal("0"), Decimal("-1")])
    def test_non_positive_amounts(self, service, store, sample_user, field, value):
        with pytest.raises(ValidationError) as exc_info:
            _record(service, store, sample_user, **{field: value})

        assert exc_info.value.field == field

    def test_amount_too_large_to_store(self, service, store, sample_user):
        with pytest.raises(ValidationError) as exc_info:
            _record(service, store, sample_user, initial_amount=Decimal("10000000000"))

        assert exc_info.value.field == "initial_amount"
        assert service.list_investments(store, sample_user.id) == []

    def test_requires_user(self, service, store):
        with pytest.raises(NotAuthenticatedError):
            service.record_investment(
                store,
                user_id=None,
                name="X",
                investment_type_id=None,
                initial_quantity=Decimal("1"),
                initial_amount=Decimal("1"),
                purchase_date=date(2024, 1, 1),
            )


# =============================================================================
# OWNERSHIP
# =============================================================================

class TestOwnership:

    def test_missing_investment(self, service, store, sample_user):
        with pytest.raises(InvestmentNotFoundError):
            service.get_owned_investment(store, sample_user.id, 999)

    def test_foreign_investment(self, service, store, db, sample_user, other_user):
        foreign = create_investment(db, other_user)

        with pytest.raises(PermissionDeniedError):
            service.get_owned_investment(store, sample_user.id, foreign.id)

    def test_foreign_investment_cannot_be_written(self, service, store, db, sample_user, other_user):
        foreign = create_investment(db, other_user)

        with pytest.raises(PermissionDeniedError):
            service.record_transaction(
                store, sample_user.id, foreign.id, TransactionType.SELL,
                Decimal("1"), Decimal("1"), date(2024, 2, 1),
            )
        with pytest.raises(PermissionDeniedError):
            service.record_journal_entry(store, sample_user.id, foreign.id, date(2024, 2, 1), Decimal("1"))
        with pytest.raises(PermissionDeniedError):
            service.delete_investment(store, sample_user.id, foreign.id)

        # Nothing was written
        assert len(service.list_transactions(store, other_user.id, foreign.id)) == 1
        assert service.list_journal_entries(store, other_user.id, foreign.id) == []


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TestRecordTransaction:

    def test_total_is_quantity_times_price(self, service, store, db, sample_user):
        investment = create_investment(db, sample_user)

        txn = service.record_transaction(
            store, sample_user.id, investment.id, TransactionType.SELL,
            quantity=Decimal("2.5"), price_per_unit=Decimal("40"),
            transaction_date=date(2024, 6, 1), notes="Trim",
        )

        assert txn.total_amount == Decimal("100")
        assert txn.transaction_type == "sell"
        assert txn.notes == "Trim"

    def test_oversell_is_accepted(self, service, store, db, sample_user):
        investment = create_investment(db, sample_user, quantity=Decimal("1"), amount=Decimal("100"))

        txn = service.record_transaction(
            store, sample_user.id, investment.id, TransactionType.SELL,
            Decimal("5"), Decimal("100"), date(2024, 6, 1),
        )

        assert txn.id is not None

    @pytest.mark.parametrize("quantity, price", [
        (Decimal("0"), Decimal("10")),
        (Decimal("1"), Decimal("0")),
    ])
    def test_non_positive_values(self, service, store, db, sample_user, quantity, price):
        investment = create_investment(db, sample_user)

        with pytest.raises(ValidationError):
            service.record_transaction(
                store, sample_user.id, investment.id, TransactionType.BUY,
                quantity, price, date(2024, 6, 1),
            )

    @pytest.mark.parametrize("quantity, price", [
        (Decimal("1000000"), Decimal("100000")),
        (Decimal("100000"), Decimal("100000")),
        (Decimal("99999.99999999"), Decimal("100000.00000001")),
    ])
    def test_total_too_large_to_store(self, service, store, db, sample_user, quantity, price):
        investment = create_investment(db, sample_user)

        with pytest.raises(ValidationError) as exc_info:
            service.record_transaction(
                store, sample_user.id, investment.id, TransactionType.BUY,
                quantity, price, date(2024, 6, 1),
            )

        assert exc_info.value.field == "quantity"
        assert len(service.list_transactions(store, sample_user.id, investment.id)) == 1

    def test_total_just_below_limit_is_stored(self, service, store, db, sample_user):
        investment = create_investment(db, sample_user)

        txn = service.record_transaction(
            store, sample_user.id, investment.id, TransactionType.BUY,
            Decimal("99999"), Decimal("100000"), date(2024, 6, 1),
        )

        assert txn.total_amount == Decimal("9999900000")

    def test_listed_newest_first(self, service, store, db, sample_user):
        investment = create_investment(db, sample_user, purchase_date=date(2024, 1, 1))
        create_transaction(db, investment, transaction_date=date(2024, 9, 1))
        create_transaction(db, investment, transaction_date=date(2024, 4, 1))

        dates = [t.transaction_date for t in service.list_transactions(store, sample_user.id, investment.id)]

        assert dates == [date(2024, 9, 1), date(2024, 4, 1), date(2024, 1, 1)]


# =============================================================================
# JOURNAL
# =============================================================================

class TestJournal:

    def test_zero_price_is_stored(self, service, store, db, sample_user):
        investment = create_investment(db, sample_user)

        entry = service.record_journal_entry(
            store, sample_user.id, investment.id, date(2024, 3, 1), Decimal("0"), notes="Delisted?",
        )

        assert entry.current_price == Decimal("0")

    def test_negative_price_rejected(self, service, store, db, sample_user):
        investment = create_investment(db, sample_user)

        with pytest.raises(ValidationError):
            service.record_journal_entry(store, sample_user.id, investment.id, date(2024, 3, 1), Decimal("-1"))

    def test_history_ascending(self, service, store, db, sample_user):
        investment = create_investment(db, sample_user)
        create_journal_entry(db, investment, entry_date=date(2024, 6, 1))
        create_journal_entry(db, investment, entry_date=date(2024, 2, 1))

        dates = [e.entry_date for e in service.list_journal_entries(store, sample_user.id, investment.id)]

        assert dates == [date(2024, 2, 1), date(2024, 6, 1)]

    def test_feed_newest_first_with_investment(self, service, store, db, sample_user, other_user):
        apple = create_investment(db, sample_user, name="Apple")
        gold = create_investment(db, sample_user, name="Gold", symbol=None)
        foreign = create_investment(db, other_user)
        create_journal_entry(db, apple, entry_date=date(2024, 2, 1))
        create_journal_entry(db, gold, entry_date=date(2024, 7, 1))
        create_journal_entry(db, foreign, entry_date=date(2024, 9, 1))

        feed = service.list_all_journal_entries(store, sample_user.id)

        assert [(e.entry_date, inv.name) for e, inv in feed] == [
            (date(2024, 7, 1), "Gold"),
            (date(2024, 2, 1), "Apple"),
        ]

    def test_feed_of_user_without_investments(self, service, store, sample_user):
        assert service.list_all_journal_entries(store, sample_user.id) == []

    def test_delete_entry(self, service, store, db, sample_user):
        investment = create_investment(db, sample_user)
        entry = create_journal_entry(db, investment)

        service.delete_journal_entry(store, sample_user.id, entry.id)

        assert service.list_journal_entries(store, sample_user.id, investment.id) == []

    def test_delete_missing_entry(self, service, store, sample_user):
        with pytest.raises(JournalEntryNotFoundError):
            service.delete_journal_entry(store, sample_user.id, 999)

    def test_delete_foreign_entry(self, service, store, db, sample_user, other_user):
        entry = create_journal_entry(db, create_investment(db, other_user))

        with pytest.raises(PermissionDeniedError):
            service.delete_journal_entry(store, sample_user.id, entry.id)


# =============================================================================
# DELETE INVESTMENT
# =============================================================================

class TestDeleteInvestment:

    def test_cascading_delete(self, service, store, db, sample_user):
        investment = create_investment(db, sample_user)
        create_transaction(db, investment)
        create_journal_entry(db, investment)

        service.delete_investment(store, sample_user.id, investment.id)

        assert service.list_investments(store, sample_user.id) == []
        assert store.list_transactions([investment.id]) == []
        assert store.list_journal_entries([investment.id]) == []

    def test_delete_missing(self, service, store, sample_user):
        with pytest.raises(InvestmentNotFoundError):
            service.delete_investment(store, sample_user.id, 999)
