# tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Database session fixtures (in-memory SQLite)
- A TestClient wired to the test session
- Sample data factories and auth header helpers
- Plain record factories for the pure analytics calculators
"""

import os

# Must be set before portfolio_journal.config is imported
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from datetime import date
from decimal import Decimal
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio_journal.database import get_db
from portfolio_journal.dependencies import clear_service_caches
from portfolio_journal.main import app
from portfolio_journal.models import (
    Base,
    Investment,
    InvestmentType,
    JournalEntry,
    Transaction,
    TransactionType,
    User,
)
from portfolio_journal.services.analytics.types import (
    InvestmentRecord,
    JournalEntryRecord,
    TransactionRecord,
)
from portfolio_journal.services.auth.jwt_handler import JWTHandler


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def db(db_engine) -> Iterator[Session]:
    """Create a database session for testing."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db: Session) -> Iterator[TestClient]:
    """
    TestClient with the database dependency overridden.

    Entering the client runs the lifespan, so every test gets a fresh
    analytics cache on app.state.
    """

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    clear_service_caches()

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FACTORIES
# =============================================================================

def create_user(
        db: Session,
        email: str = "test@example.com",
        is_active: bool = True,
        default_currency: str | None = None,
) -> User:
    """Factory function for creating User entities in the database."""
    user = User(email=email, is_active=is_active, default_currency=default_currency)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_investment_type(
        db: Session,
        name: str = "Stocks",
        category: str = "stock",
        unit_type: str = "shares",
) -> InvestmentType:
    investment_type = InvestmentType(name=name, category=category, unit_type=unit_type)
    db.add(investment_type)
    db.commit()
    db.refresh(investment_type)
    return investment_type


def create_investment(
        db: Session,
        user: User,
        investment_type: InvestmentType | None = None,
        name: str = "Apple Inc.",
        symbol: str | None = "AAPL",
        currency: str = "USD",
        quantity: Decimal = Decimal("10"),
        amount: Decimal = Decimal("1000"),
        purchase_date: date = date(2024, 1, 15),
        with_initial_buy: bool = True,
) -> Investment:
    """
    Factory function for creating an Investment directly in the database.

    Mirrors what the service does: the initial purchase is also stored as a
    BUY transaction unless with_initial_buy is False.
    """
    investment = Investment(
        user_id=user.id,
        investment_type_id=investment_type.id if investment_type else None,
        name=name,
        symbol=symbol,
        currency=currency,
        initial_quantity=quantity,
        initial_amount=amount,
        initial_price_per_unit=amount / quantity,
        purchase_date=purchase_date,
    )
    db.add(investment)
    db.flush()

    if with_initial_buy:
        db.add(Transaction(
            investment_id=investment.id,
            transaction_type=TransactionType.BUY,
            quantity=quantity,
            price_per_unit=amount / quantity,
            total_amount=amount,
            transaction_date=purchase_date,
            notes="Initial purchase",
        ))

    db.commit()
    db.refresh(investment)
    return investment


def create_transaction(
        db: Session,
        investment: Investment,
        transaction_type: TransactionType = TransactionType.BUY,
        quantity: Decimal = Decimal("1"),
        price_per_unit: Decimal = Decimal("100"),
        transaction_date: date = date(2024, 2, 1),
) -> Transaction:
    txn = Transaction(
        investment_id=investment.id,
        transaction_type=transaction_type,
        quantity=quantity,
        price_per_unit=price_per_unit,
        total_amount=quantity * price_per_unit,
        transaction_date=transaction_date,
    )
    db.add(txn)
    db.commit()
    db.refresh(txn)
    return txn


def create_journal_entry(
        db: Session,
        investment: Investment,
        current_price: Decimal = Decimal("120"),
        entry_date: date = date(2024, 3, 1),
        notes: str | None = None,
) -> JournalEntry:
    entry = JournalEntry(
        investment_id=investment.id,
        entry_date=entry_date,
        current_price=current_price,
        notes=notes,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def get_auth_headers(user: User) -> dict[str, str]:
    """Get authorization headers with JWT token for a user."""
    token = JWTHandler.create_access_token(user_id=user.id, email=user.email)
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# RECORD FACTORIES (pure calculator tests)
# =============================================================================

def make_investment(
        id: int = 1,
        user_id: int = 1,
        name: str = "Apple Inc.",
        symbol: str | None = "AAPL",
        category: str | None = "stock",
        initial_quantity="10",
        initial_amount="1000",
        initial_price_per_unit="100",
        purchase_date: date | None = date(2024, 1, 15),
) -> InvestmentRecord:
    return InvestmentRecord(
        id=id,
        user_id=user_id,
        name=name,
        symbol=symbol,
        category=category,
        type_name=category.title() if category else None,
        initial_quantity=initial_quantity,
        initial_amount=initial_amount,
        initial_price_per_unit=initial_price_per_unit,
        purchase_date=purchase_date,
    )


def make_txn(
        id: int,
        transaction_type: str = "buy",
        quantity="10",
        total_amount="1000",
        transaction_date=date(2024, 1, 15),
        investment_id: int = 1,
        price_per_unit=None,
) -> TransactionRecord:
    return TransactionRecord(
        id=id,
        investment_id=investment_id,
        transaction_type=transaction_type,
        quantity=quantity,
        price_per_unit=price_per_unit,
        total_amount=total_amount,
        transaction_date=transaction_date,
    )


def make_entry(
        id: int,
        current_price="120",
        entry_date=date(2024, 3, 1),
        investment_id: int = 1,
) -> JournalEntryRecord:
    return JournalEntryRecord(
        id=id,
        investment_id=investment_id,
        entry_date=entry_date,
        current_price=current_price,
    )


# =============================================================================
# FIXTURE EXPORTS (for convenience imports in tests)
# =============================================================================

@pytest.fixture
def sample_user(db: Session) -> User:
    """Provide a sample User for tests."""
    return create_user(db)


@pytest.fixture
def other_user(db: Session) -> User:
    return create_user(db, email="other@example.com")


@pytest.fixture
def stock_type(db: Session) -> InvestmentType:
    return create_investment_type(db)


@pytest.fixture
def gold_type(db: Session) -> InvestmentType:
    return create_investment_type(db, name="Gold", category="commodity", unit_type="grams")


@pytest.fixture
def auth_headers(sample_user: User) -> dict[str, str]:
    return get_auth_headers(sample_user)
