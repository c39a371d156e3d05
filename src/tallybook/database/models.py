"""SQLAlchemy models for tallybook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(18, 2)


class Account(Base):
    """Chart of accounts model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    balance = Column(MONEY, default=0, nullable=False)
    description = Column(String, default="", nullable=False)
    is_contra_asset = Column(Boolean, default=False, nullable=False)
    is_cash_equivalent = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Transaction(Base):
    """Journal transaction header model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    description = Column(String, default="", nullable=False)
    ref = Column(String, default="", nullable=False)
    fixed_asset_id = Column(Integer, ForeignKey("fixed_assets.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    entries = relationship(
        "JournalEntry",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="JournalEntry.id",
    )


class JournalEntry(Base):
    """Journal entry model.

    ``account_code`` is deliberately not a foreign key: entries keep their
    code after an account with a zero balance has been removed.
    """

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False)
    account_code = Column(String, nullable=False, index=True)
    debit = Column(MONEY, default=0, nullable=False)
    credit = Column(MONEY, default=0, nullable=False)

    # Relationships
    transaction = relationship("Transaction", back_populates="entries")


class FixedAsset(Base):
    """Fixed asset register model."""

    __tablename__ = "fixed_assets"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    category = Column(String, default="", nullable=False)
    cost = Column(MONEY, nullable=False)
    acquired_on = Column(Date, nullable=False)
    life_years = Column(Integer, nullable=True)
    residual_value = Column(MONEY, default=0, nullable=False)
    method = Column(String, nullable=True)
    is_depreciable = Column(Boolean, default=False, nullable=False)
    accumulated_depreciation = Column(MONEY, default=0, nullable=False)
    asset_account_code = Column(String, nullable=True)
    accumulated_depreciation_account_code = Column(String, nullable=True)
    depreciation_expense_account_code = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
