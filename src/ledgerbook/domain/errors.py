"""Shared domain error messages and error types."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from ledgerbook.domain.entities import Transaction


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class InvalidAmount(ValidationError):
    """Amount is not a positive number."""


class SelfLinkError(ValidationError):
    """Transaction would link an account to itself."""


class AccountNotFound(NotFoundError):
    """No account with the given ID or name."""


class TransactionNotFound(NotFoundError):
    """No transaction leg matches the requested slip number or account."""


class LinkedTransactionNotFound(NotFoundError):
    """The counter-leg of a double entry is missing."""


class DuplicateNameError(ConflictError):
    """Another account already uses the name (case-insensitive)."""


class DuplicateSlipError(ConflictError):
    """Slip number is already used by another transaction."""

    def __init__(self, slip_number: str, transaction: "Transaction", account_name: str):
        super().__init__(duplicate_slip(slip_number, transaction.number, account_name))
        self.slip_number = slip_number
        self.conflicting_transaction = transaction
        self.conflicting_account_name = account_name


class PartialLedgerError(DomainError):
    """Ledger data was already inconsistent before the operation.

    The operation went as far as it safely could; ``transactions`` holds the
    legs it actually touched.
    """

    def __init__(self, slip_number: str, transactions: Sequence["Transaction"]):
        super().__init__(partial_pair(slip_number, len(transactions)))
        self.slip_number = slip_number
        self.transactions = tuple(transactions)


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_name_not_found(name: str) -> str:
    """Return message for missing account looked up by name."""
    return f"Account '{name}' not found"


def duplicate_account_name(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"


def duplicate_slip(slip_number: str, transaction_number: int, account_name: str) -> str:
    """Return message for a slip number already in use."""
    return (
        f'Slip number "{slip_number}" already exists in transaction '
        f'(No. {transaction_number}) of account "{account_name}". '
        "Please use a unique one."
    )


def invalid_amount(amount: object) -> str:
    """Return message for a non-positive or non-numeric amount."""
    return f"Amount must be a positive number, got '{amount}'"


def self_link(account_name: str) -> str:
    """Return message when a transaction would link an account to itself."""
    return f"Account '{account_name}' cannot be linked to itself"


def slip_not_found(slip_number: str) -> str:
    """Return message when no leg carries the slip number."""
    return f"No transaction with slip number '{slip_number}' found"


def leg_not_found(slip_number: str, account_name: str) -> str:
    """Return message when the leg of a slip is missing in an account."""
    return f"Transaction with slip number '{slip_number}' not found in account '{account_name}'"


def linked_leg_not_found(slip_number: str, account_name: str) -> str:
    """Return message when the counter-leg of a slip is missing."""
    return (
        f"Linked transaction for slip number '{slip_number}' not found in account "
        f"'{account_name}'. The ledger is inconsistent; delete and re-enter the transaction."
    )


def partial_pair(slip_number: str, found: int) -> str:
    """Return message when a slip does not have exactly two legs."""
    return (
        f"Slip number '{slip_number}' had {found} "
        f"leg{'s' if found != 1 else ''} instead of 2; removed what was found"
    )


def transaction_number_not_found(number: int, account_name: str) -> str:
    """Return message when a transaction number is absent from an account."""
    return f"Transaction number {number} not found in account '{account_name}'"
