"""SQLAlchemy models for ledgerbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    CheckConstraint,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def case_key(text: str) -> str:
    """Return the key names and slip numbers are compared by, ignoring case."""
    return text.casefold()


class Account(Base):
    """Ledger account model."""

    __tablename__ = "accounts"

    # IDs come from LedgerCounter, never from the database
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, unique=True, nullable=False)
    # casefold()ed name; SQLite lower() only folds ASCII
    name_key = Column(String, unique=True, nullable=False)
    balance = Column(Numeric(14, 2), default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Transaction(Base):
    """One leg of a double-entry transaction."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    linked_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    number = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=False, default="")
    slip_number = Column(String, nullable=False)
    slip_key = Column(String, nullable=False, index=True)
    entry_type = Column(String(6), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        UniqueConstraint("account_id", "number", name="uq_account_number"),
        CheckConstraint("entry_type IN ('debit', 'credit')", name="ck_entry_type"),
        CheckConstraint("amount > 0", name="ck_positive_amount"),
    )

    # Relationships
    account = relationship("Account", foreign_keys=[account_id])
    linked_account = relationship("Account", foreign_keys=[linked_account_id])


class LedgerCounter(Base):
    """Single-row table holding the next account and transaction IDs."""

    __tablename__ = "ledger_counters"

    id = Column(Integer, primary_key=True)
    next_account_id = Column(Integer, nullable=False, default=1)
    next_transaction_id = Column(Integer, nullable=False, default=1)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
