"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the storage representation of
entries (a type column plus an amount) never leaks into the domain.
"""

from decimal import Decimal

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    Account as ORMAccount,
    Transaction as ORMTransaction,
)

_CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    """Normalize a stored numeric value to a two-place Decimal."""
    return Decimal(value).quantize(_CENTS)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        balance=to_money(orm_account.balance or 0),
        created_at=orm_account.created_at,
    )


def entry_to_domain(entry_type: str, amount) -> domain.Entry:
    """Build the domain Entry variant from its stored columns."""
    return domain.Entry(domain.EntryType(entry_type), to_money(amount))


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    linked = orm_transaction.linked_account
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        number=orm_transaction.number,
        date=orm_transaction.date,
        description=orm_transaction.description or "",
        slip_number=orm_transaction.slip_number,
        entry=entry_to_domain(orm_transaction.entry_type, orm_transaction.amount),
        code=linked.name if linked is not None else "",
        linked_account_id=orm_transaction.linked_account_id,
        created_at=orm_transaction.created_at,
    )
