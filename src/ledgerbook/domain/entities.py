"""Domain model entities for ledgerbook.

These are pure data classes representing business concepts, independent of
database schema. A transaction leg references its counter-account by ID; the
``code`` shown to users is that account's current name, resolved on read.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from ledgerbook.domain.errors import InvalidAmount, invalid_amount


class EntryType(str, Enum):
    """Side of a ledger entry."""

    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def opposite(self) -> "EntryType":
        return EntryType.CREDIT if self is EntryType.DEBIT else EntryType.DEBIT


class BalanceOrdering(str, Enum):
    """Ordering used when walking an account's transactions.

    DATE sorts by date, then number. NUMBER sorts by number only, which is
    what some older statement views did; it diverges from DATE once an edit
    moves a transaction to an earlier or later date.
    """

    DATE = "date"
    NUMBER = "number"


@dataclass(frozen=True)
class Entry:
    """Exactly one of debit or credit, always with a positive amount."""

    type: EntryType
    amount: Decimal

    def __post_init__(self):
        if not isinstance(self.amount, Decimal) or not self.amount.is_finite() or self.amount <= 0:
            raise InvalidAmount(invalid_amount(self.amount))

    @classmethod
    def debit(cls, amount: Decimal) -> "Entry":
        return cls(EntryType.DEBIT, amount)

    @classmethod
    def credit(cls, amount: Decimal) -> "Entry":
        return cls(EntryType.CREDIT, amount)

    def opposite(self) -> "Entry":
        """Return the counter-entry for the other leg of a double entry."""
        return Entry(self.type.opposite, self.amount)

    @property
    def signed_amount(self) -> Decimal:
        """Effect on a running balance: credits add, debits subtract."""
        return self.amount if self.type is EntryType.CREDIT else -self.amount


@dataclass(frozen=True)
class Account:
    """Ledger account domain entity."""

    id: int
    name: str
    balance: Decimal
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """One leg of a double-entry transaction."""

    id: int
    account_id: int
    number: int
    date: date
    description: str
    slip_number: str
    entry: Entry
    code: str
    linked_account_id: Optional[int]
    created_at: datetime

    @property
    def debit(self) -> Optional[Decimal]:
        return self.entry.amount if self.entry.type is EntryType.DEBIT else None

    @property
    def credit(self) -> Optional[Decimal]:
        return self.entry.amount if self.entry.type is EntryType.CREDIT else None


@dataclass(frozen=True)
class TransactionPair:
    """Both legs of a double entry, as created or edited."""

    leg: Transaction
    counter_leg: Transaction


@dataclass(frozen=True)
class SlipCheck:
    """Result of a global slip number lookup."""

    exists: bool
    conflicting_transaction: Optional[Transaction] = None
    conflicting_account_name: Optional[str] = None


@dataclass(frozen=True)
class TransactionWithBalance:
    """A transaction annotated with the running balance after it."""

    transaction: Transaction
    balance: Decimal


@dataclass(frozen=True)
class RunningBalance:
    """Ordered, balance-annotated view of one account."""

    account_id: int
    transactions: tuple[TransactionWithBalance, ...]
    final_balance: Decimal


@dataclass(frozen=True)
class AccountDeletion:
    """Outcome of deleting an account and its linked transactions."""

    account: Account
    removed_transactions: tuple[Transaction, ...]
    unpaired_slips: tuple[str, ...] = ()


@dataclass(frozen=True)
class PairingIssue:
    """A slip number whose legs do not form a valid double entry."""

    slip_number: str
    reason: str
    transactions: tuple[Transaction, ...]


@dataclass(frozen=True)
class StatementLine:
    """One row of an account statement."""

    number: int
    date: date
    description: str
    slip_number: str
    debit: Optional[Decimal]
    credit: Optional[Decimal]
    balance: Decimal
    code: str

    @property
    def balance_status(self) -> str:
        return "CR" if self.balance >= 0 else "DR"


@dataclass(frozen=True)
class Statement:
    """Statement data handed to a document renderer."""

    account_id: int
    account_name: str
    lines: tuple[StatementLine, ...]
    final_balance: Decimal
    generated_on: date

    @property
    def final_balance_status(self) -> str:
        return "CR" if self.final_balance >= 0 else "DR"


@dataclass(frozen=True)
class LedgerState:
    """Whole-ledger contents plus the identifier counters."""

    accounts: tuple[Account, ...]
    transactions: tuple[Transaction, ...]
    next_account_id: int
    next_transaction_id: int
