"""Shared pytest fixtures for ledgerbook tests."""

import tempfile
import os
from datetime import date
import pytest

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.balance import BalanceService
from ledgerbook.domain.snapshot import SnapshotService
from ledgerbook.domain.statement import StatementService
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.logging_config import configure_logging


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Keep info-level ledger events out of test output."""
    configure_logging("WARNING")


def _make_db():
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()
    return db


def _drop_db(db):
    db.disconnect()
    if os.path.exists(db.database_path):
        os.unlink(db.database_path)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    db = _make_db()
    yield db
    _drop_db(db)


@pytest.fixture
def other_db():
    """A second, independent temporary database."""
    db = _make_db()
    yield db
    _drop_db(db)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def account_service(temp_db, balance_service):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db, balance_service=balance_service)


@pytest.fixture
def transaction_service(temp_db, balance_service):
    """Create a TransactionService that rejects self-links."""
    return TransactionService(temp_db, balance_service=balance_service)


@pytest.fixture
def self_link_transaction_service(temp_db, balance_service):
    """Create a TransactionService that accepts self-links."""
    return TransactionService(temp_db, allow_self_link=True, balance_service=balance_service)


@pytest.fixture
def statement_service(temp_db, balance_service):
    """Create a StatementService with a temporary database."""
    return StatementService(temp_db, balance_service=balance_service)


@pytest.fixture
def snapshot_service(temp_db, balance_service):
    """Create a SnapshotService with a temporary database."""
    return SnapshotService(temp_db, balance_service=balance_service)


@pytest.fixture
def accounts(account_service):
    """Create Cash, Rent and Utilities accounts and return their IDs by name."""
    return {
        name: account_service.create_account(name)
        for name in ("Cash", "Rent", "Utilities")
    }


@pytest.fixture
def rent_payment(transaction_service, accounts):
    """Record the S005 rent payment: Cash debit 800, Rent credit 800."""
    return transaction_service.create_transaction(
        current_account_id=accounts["Cash"],
        linked_account_id=accounts["Rent"],
        date=date(2024, 7, 23),
        description="Rent Payment",
        slip_number="S005",
        entry_type="debit",
        amount="800",
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
