#!/usr/bin/env python3
# init_db.py
"""
Database initialization script.

Creates all tables and seeds the default investment types. Safe to run more
than once: existing types are left untouched.

    python init_db.py
"""
import sys
from pathlib import Path

# Add the project root to Python path so 'portfolio_journal' is importable
project_dir = Path(__file__).parent
sys.path.insert(0, str(project_dir))

from sqlalchemy import select

from portfolio_journal.database import SessionLocal, engine
from portfolio_journal.models import Base, InvestmentType
from portfolio_journal.services.constants import DEFAULT_INVESTMENT_TYPES


def seed_investment_types() -> int:
    """Insert missing default investment types. Returns how many were added."""
    db = SessionLocal()
    try:
        existing = set(db.scalars(select(InvestmentType.name)).all())
        added = 0
        for name, category, unit_type in DEFAULT_INVESTMENT_TYPES:
            if name in existing:
                continue
            db.add(InvestmentType(name=name, category=category, unit_type=unit_type))
            added += 1
        db.commit()
        return added
    finally:
        db.close()


def init_db() -> None:
    """Create all database tables defined in models."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created successfully!")

    added = seed_investment_types()
    print(f"Seeded {added} investment type(s)")


if __name__ == "__main__":
    init_db()
