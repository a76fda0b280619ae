#!/usr/bin/env python3
# scripts/seed_sample_data.py
"""
Seed a demo user with a small portfolio and print an access token for it.

Run init_db.py first so the investment types exist.

    python scripts/seed_sample_data.py
"""
import logging
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Setup path to import portfolio_journal modules
project_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_dir))

from sqlalchemy import select

from portfolio_journal.database import SessionLocal
from portfolio_journal.models import InvestmentType, TransactionType, User
from portfolio_journal.services.auth.jwt_handler import JWTHandler
from portfolio_journal.services.investment_service import InvestmentService
from portfolio_journal.services.record_store import SqlAlchemyRecordStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@example.com"


def _type_id(db, name: str) -> int | None:
    return db.scalar(select(InvestmentType.id).where(InvestmentType.name == name))


def seed() -> None:
    db = SessionLocal()
    try:
        logger.info("Starting database seeding...")

        # 1. Demo user
        user = db.scalar(select(User).where(User.email == DEMO_EMAIL))
        if user is None:
            user = User(email=DEMO_EMAIL, default_currency="USD")
            db.add(user)
            db.commit()
            db.refresh(user)
            logger.info(f"Created user: {user.email}")
        else:
            logger.info(f"User exists: {user.email}")

        store = SqlAlchemyRecordStore(db)
        service = InvestmentService()

        if service.list_investments(store, user.id):
            logger.info("Demo portfolio already seeded")
        else:
            today = date.today()

            # 2. Investments (each also records its initial BUY)
            apple = service.record_investment(
                store,
                user_id=user.id,
                name="Apple Inc.",
                symbol="AAPL",
                investment_type_id=_type_id(db, "Stocks"),
                initial_quantity=Decimal("10"),
                initial_amount=Decimal("1500"),
                purchase_date=today - timedelta(days=300),
            )
            gold = service.record_investment(
                store,
                user_id=user.id,
                name="Gold bar",
                investment_type_id=_type_id(db, "Gold"),
                initial_quantity=Decimal("50"),
                initial_amount=Decimal("3000"),
                purchase_date=today - timedelta(days=200),
            )
            bitcoin = service.record_investment(
                store,
                user_id=user.id,
                name="Bitcoin",
                symbol="BTC",
                investment_type_id=_type_id(db, "Bitcoin"),
                initial_quantity=Decimal("0.05"),
                initial_amount=Decimal("2500"),
                purchase_date=today - timedelta(days=120),
            )

            # 3. Later trades
            service.record_transaction(
                store,
                user_id=user.id,
                investment_id=apple.id,
                transaction_type=TransactionType.BUY,
                quantity=Decimal("5"),
                price_per_unit=Decimal("170"),
                transaction_date=today - timedelta(days=90),
            )
            service.record_transaction(
                store,
                user_id=user.id,
                investment_id=gold.id,
                transaction_type=TransactionType.SELL,
                quantity=Decimal("10"),
                price_per_unit=Decimal("65"),
                transaction_date=today - timedelta(days=30),
                notes="Partial profit taking",
            )

            # 4. Price journal
            for investment, days_ago, price in (
                    (apple, 60, Decimal("180")),
                    (apple, 5, Decimal("195.5")),
                    (gold, 10, Decimal("68")),
                    (bitcoin, 3, Decimal("61000")),
            ):
                service.record_journal_entry(
                    store,
                    user_id=user.id,
                    investment_id=investment.id,
                    entry_date=today - timedelta(days=days_ago),
                    current_price=price,
                )
            logger.info("Seeded demo investments, transactions and journal entries")

        token = JWTHandler.create_access_token(user.id, user.email, expires_delta=timedelta(days=7))
        print(f"\nAccess token for {user.email} (valid 7 days):\n{token}\n")
    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
