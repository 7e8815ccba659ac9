"""Running balance calculation."""

from decimal import Decimal
from typing import Iterable, Optional

import structlog

from ledgerbook.database.base import Database
from ledgerbook.domain import errors
from ledgerbook.domain.entities import (
    BalanceOrdering,
    RunningBalance,
    Transaction,
    TransactionWithBalance,
)

logger = structlog.get_logger(__name__)

ZERO = Decimal("0.00")


def ledger_sort_key(ordering: BalanceOrdering):
    """Return the sort key for walking an account's transactions.

    The transaction ID is the last key so equal dates and numbers (which only
    corrupted data can produce) still yield a total order.
    """
    if ordering is BalanceOrdering.NUMBER:
        return lambda txn: (txn.number, txn.date, txn.id)
    return lambda txn: (txn.date, txn.number, txn.id)


def calculate_running_balance(
    account_id: int,
    transactions: Iterable[Transaction],
    ordering: BalanceOrdering = BalanceOrdering.DATE,
) -> RunningBalance:
    """Annotate an account's transactions with running balances.

    Transactions of other accounts are ignored. Each row carries the balance
    after applying itself (credits add, debits subtract). The final balance
    is the last row's balance, or zero for an empty account.

    This is a pure function: same input, same output, no side effects.
    """
    own = sorted(
        (txn for txn in transactions if txn.account_id == account_id),
        key=ledger_sort_key(ordering),
    )

    balance = ZERO
    rows = []
    for txn in own:
        balance += txn.entry.signed_amount
        rows.append(TransactionWithBalance(transaction=txn, balance=balance))

    return RunningBalance(account_id=account_id, transactions=tuple(rows), final_balance=balance)


class BalanceService:
    """Service for reading and refreshing account balances."""

    def __init__(self, db: Database, ordering: BalanceOrdering = BalanceOrdering.DATE):
        """Initialize balance service.

        Args:
            db: Database instance
            ordering: Ordering used to walk transactions
        """
        self.db = db
        self.ordering = ordering

    def running_balance(self, account_id: int) -> RunningBalance:
        """Get the ordered, balance-annotated transactions of an account.

        Raises:
            AccountNotFound: If the account doesn't exist
        """
        with self.db.atomic():
            if self.db.get_account(account_id) is None:
                raise errors.AccountNotFound(errors.account_not_found(account_id))
            transactions = self.db.list_transactions(account_id=account_id)
        return calculate_running_balance(account_id, transactions, self.ordering)

    def refresh_balances(self, account_ids: Optional[Iterable[int]] = None) -> None:
        """Recompute and store cached balances.

        Args:
            account_ids: Accounts to refresh; every account when None.
                Unknown IDs are skipped.
        """
        with self.db.atomic():
            if account_ids is None:
                ids = [acc.id for acc in self.db.list_accounts()]
            else:
                ids = list(dict.fromkeys(account_ids))

            for account_id in ids:
                account = self.db.get_account(account_id)
                if account is None:
                    continue
                transactions = self.db.list_transactions(account_id=account_id)
                final_balance = calculate_running_balance(
                    account_id, transactions, self.ordering
                ).final_balance
                if final_balance != account.balance:
                    logger.debug(
                        "balance_refreshed",
                        account_id=account_id,
                        old_balance=str(account.balance),
                        new_balance=str(final_balance),
                    )
                self.db.update_account_balance(account_id, final_balance)
