# portfolio_journal/models.py
import enum
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, ForeignKey, Enum, Numeric, Boolean, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TransactionType(str, enum.Enum):
    BUY = "buy"
    SELL = "sell"


class User(Base):
    """
    Identity of an investor.

    Credentials live with the identity provider that issues access tokens;
    this table only anchors ownership of investments.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # Dashboard display currency, written by whoever provisions the user row
    # (the identity provider's sync or scripts/seed_sample_data.py); the API
    # never changes it. NULL falls back to settings.default_currency
    default_currency: Mapped[str | None] = mapped_column(String(3), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    investments: Mapped[list["Investment"]] = relationship(back_populates="owner")


class InvestmentType(Base):
    """
    Reference data describing what kind of thing an investment is.

    The category is the key used for asset allocation ("stock", "commodity",
    "crypto"); unit_type is a display label ("shares", "grams", "coins").
    """
    __tablename__ = "investment_types"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String, unique=True)
    category: Mapped[str] = mapped_column(String, index=True)
    unit_type: Mapped[str] = mapped_column(String)

    investments: Mapped[list["Investment"]] = relationship(back_populates="investment_type")


class Investment(Base):
    """
    A holding the user tracks.

    Created once and never edited. The initial purchase is also recorded as a
    BUY transaction, so holdings are always derived from transactions.
    Child transactions and journal entries are deleted explicitly by the
    record store before the investment itself (no database-level cascade).
    """
    __tablename__ = "investments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    investment_type_id: Mapped[int | None] = mapped_column(ForeignKey("investment_types.id"), nullable=True)
    name: Mapped[str] = mapped_column(String)
    symbol: Mapped[str | None] = mapped_column(String, nullable=True)
    currency: Mapped[str] = mapped_column(String, default="USD")  # Display label only, never converted

    # Numeric(18, 8) keeps crypto quantities exact
    initial_quantity: Mapped[Decimal] = mapped_column(Numeric(18, 8))
    initial_amount: Mapped[Decimal] = mapped_column(Numeric(18, 8))
    initial_price_per_unit: Mapped[Decimal] = mapped_column(Numeric(18, 8))
    purchase_date: Mapped[date] = mapped_column(Date)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    owner: Mapped["User"] = relationship(back_populates="investments")
    investment_type: Mapped["InvestmentType | None"] = relationship(back_populates="investments")
    transactions: Mapped[list["Transaction"]] = relationship(back_populates="investment")
    journal_entries: Mapped[list["JournalEntry"]] = relationship(back_populates="investment")


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        # "All transactions of investments X, Y, Z ordered by date"
        Index('ix_transaction_investment_date', 'investment_id', 'transaction_date'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    investment_id: Mapped[int] = mapped_column(ForeignKey("investments.id"), index=True)
    transaction_type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, values_callable=lambda e: [m.value for m in e])
    )
    quantity: Mapped[Decimal] = mapped_column(Numeric(18, 8))
    price_per_unit: Mapped[Decimal] = mapped_column(Numeric(18, 8))
    total_amount: Mapped[Decimal] = mapped_column(Numeric(18, 8))  # Trusted as stored, never recomputed on read
    transaction_date: Mapped[date] = mapped_column(Date, index=True)
    notes: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    investment: Mapped["Investment"] = relationship(back_populates="transactions")


class JournalEntry(Base):
    """
    A manual observation of an investment's market price on a date.

    A zero price is stored as given; the analytics engine ignores it when
    resolving prices.
    """
    __tablename__ = "journal_entries"
    __table_args__ = (
        Index('ix_journal_investment_date', 'investment_id', 'entry_date'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    investment_id: Mapped[int] = mapped_column(ForeignKey("investments.id"), index=True)
    entry_date: Mapped[date] = mapped_column(Date, index=True)
    current_price: Mapped[Decimal] = mapped_column(Numeric(18, 8))
    notes: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    investment: Mapped["Investment"] = relationship(back_populates="journal_entries")
