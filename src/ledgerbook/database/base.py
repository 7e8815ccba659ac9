"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Iterable
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerbook.domain.entities import (
    Account,
    Entry,
    LedgerState,
    Transaction,
)


class Database(ABC):
    """Abstract ledger store for ledgerbook.

    Mutating methods persist before returning. Inside ``atomic()`` they are
    staged instead, and the whole unit of work is committed or rolled back
    together.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Run the enclosed operations as one serialized unit of work."""
        pass

    # Identifier generators
    @abstractmethod
    def next_account_id(self) -> int:
        """Reserve the next account ID. IDs are never reused."""
        pass

    @abstractmethod
    def next_transaction_id(self) -> int:
        """Reserve the next transaction ID. IDs are never reused."""
        pass

    @abstractmethod
    def next_transaction_number(self, account_id: int) -> int:
        """Return the next sequence number for a transaction in an account."""
        pass

    # Account operations
    @abstractmethod
    def create_account(self, name: str) -> int:
        """Create a new account with a zero balance. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by name, ignoring case."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    @abstractmethod
    def update_account_name(self, account_id: int, name: str) -> None:
        """Rename an account."""
        pass

    @abstractmethod
    def update_account_balance(self, account_id: int, balance: Decimal) -> None:
        """Store the recomputed balance of an account."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account. Its transactions must already be gone."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        account_id: int,
        linked_account_id: int,
        number: int,
        date: date,
        description: str,
        slip_number: str,
        entry: Entry,
    ) -> int:
        """Create one transaction leg. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(self, account_id: Optional[int] = None) -> list[Transaction]:
        """List transactions ordered by date, number and ID.

        Args:
            account_id: Optional account ID filter
        """
        pass

    @abstractmethod
    def find_transactions_by_slip(self, slip_number: str) -> list[Transaction]:
        """Find every leg carrying the slip number, ignoring case."""
        pass

    @abstractmethod
    def find_transactions_linked_to(self, account_id: int) -> list[Transaction]:
        """Find every leg whose counter-account is the given account."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        account_id: int,
        linked_account_id: int,
        number: int,
        date: date,
        description: str,
        slip_number: str,
        entry: Entry,
    ) -> None:
        """Overwrite every mutable field of a transaction leg."""
        pass

    @abstractmethod
    def delete_transactions(self, transaction_ids: Iterable[int]) -> int:
        """Delete transaction legs by ID. Returns the number removed."""
        pass

    # Whole-ledger operations
    @abstractmethod
    def export_state(self) -> LedgerState:
        """Return every account, transaction and both ID counters."""
        pass

    @abstractmethod
    def replace_state(self, state: LedgerState) -> None:
        """Replace the whole ledger with the given state."""
        pass
