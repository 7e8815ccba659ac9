"""Domain layer for ledgerbook application.

Services are imported from their own modules (``ledgerbook.domain.transaction``
and friends) so that the database layer can depend on the entities here
without a circular import.
"""

from ledgerbook.domain.entities import (
    Account,
    BalanceOrdering,
    Entry,
    EntryType,
    Transaction,
)
from ledgerbook.domain.errors import DomainError

__all__ = [
    "Account",
    "BalanceOrdering",
    "DomainError",
    "Entry",
    "EntryType",
    "Transaction",
]
