"""Account domain service."""

from collections import deque
from typing import Optional

import structlog

from ledgerbook.database.base import Database
from ledgerbook.domain import errors
from ledgerbook.domain.balance import BalanceService
from ledgerbook.domain.entities import Account as AccountEntity, AccountDeletion, Transaction

logger = structlog.get_logger(__name__)

DEFAULT_ACCOUNTS = [
    "Cash",
    "Accounts Receivable",
    "Office Supplies",
    "Rent Expense",
]


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database, balance_service: Optional[BalanceService] = None):
        """Initialize account service.

        Args:
            db: Database instance
            balance_service: Balance service used to refresh cached balances
        """
        self.db = db
        self.balance_service = balance_service or BalanceService(db)

    def _clean_name(self, name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise errors.ValidationError("Account name is required")
        return cleaned

    def create_account(self, name: str) -> int:
        """Create a new account with a zero balance.

        Args:
            name: Account name

        Returns:
            Account ID

        Raises:
            DuplicateNameError: If an account with the same name exists (ignoring case)
        """
        name = self._clean_name(name)
        with self.db.atomic():
            if self.db.get_account_by_name(name) is not None:
                raise errors.DuplicateNameError(errors.duplicate_account_name(name))
            account_id = self.db.create_account(name=name)

        logger.info("account_created", account_id=account_id, name=name)
        return account_id

    def create_default_accounts(self) -> list[int]:
        """Create the default chart of accounts, skipping names already in use.

        Returns:
            IDs of the accounts that were created
        """
        created = []
        with self.db.atomic():
            for name in DEFAULT_ACCOUNTS:
                if self.db.get_account_by_name(name) is None:
                    created.append(self.db.create_account(name=name))
        return created

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def get_account_by_name(self, name: str) -> Optional[AccountEntity]:
        """Get account by name, ignoring case."""
        return self.db.get_account_by_name(name)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()

    def rename_account(self, account_id: int, name: str) -> None:
        """Rename an account.

        Transactions reference their counter-account by ID, so every ``code``
        that showed the old name shows the new one from now on.

        Args:
            account_id: Account ID to rename
            name: New account name

        Raises:
            AccountNotFound: If account not found
            DuplicateNameError: If another account already uses the name
        """
        name = self._clean_name(name)
        with self.db.atomic():
            account = self.db.get_account(account_id)
            if account is None:
                raise errors.AccountNotFound(errors.account_not_found(account_id))

            existing = self.db.get_account_by_name(name)
            if existing is not None and existing.id != account_id:
                raise errors.DuplicateNameError(errors.duplicate_account_name(name))

            self.db.update_account_name(account_id=account_id, name=name)

        logger.info("account_renamed", account_id=account_id, old_name=account.name, name=name)

    def delete_account(self, account_id: int) -> AccountDeletion:
        """Delete an account together with every transaction tied to it.

        Removes the account's own legs, every leg elsewhere whose counter-account
        is this account, and the slip-mates of all of those, following shared
        slip numbers until nothing new is found. Then every surviving balance
        is recomputed.

        A slip that did not lose exactly two legs means the ledger was already
        inconsistent; it is logged and reported in ``unpaired_slips`` rather
        than raised.

        Raises:
            AccountNotFound: If account not found
        """
        with self.db.atomic():
            account = self.db.get_account(account_id)
            if account is None:
                raise errors.AccountNotFound(errors.account_not_found(account_id))

            removed = self._collect_cascade(account_id)
            self.db.delete_transactions(removed)
            self.db.delete_account(account_id)
            self.balance_service.refresh_balances()

        removed_legs = tuple(sorted(removed.values(), key=lambda txn: txn.id))
        unpaired = self._unpaired_slips(removed_legs)
        for slip in unpaired:
            logger.warning("unpaired_slip_removed", account_id=account_id, slip_number=slip)

        logger.info(
            "account_deleted",
            account_id=account_id,
            name=account.name,
            removed_transactions=len(removed_legs),
        )
        return AccountDeletion(
            account=account,
            removed_transactions=removed_legs,
            unpaired_slips=unpaired,
        )

    def _collect_cascade(self, account_id: int) -> dict[int, Transaction]:
        """Collect the legs to remove, keyed by transaction ID."""
        removed: dict[int, Transaction] = {}
        queue = deque(self.db.list_transactions(account_id=account_id))
        queue.extend(self.db.find_transactions_linked_to(account_id))
        seen_slips: set[str] = set()

        while queue:
            txn = queue.popleft()
            if txn.id in removed:
                continue
            removed[txn.id] = txn
            slip_key = txn.slip_number.casefold()
            if slip_key in seen_slips:
                continue
            seen_slips.add(slip_key)
            queue.extend(self.db.find_transactions_by_slip(txn.slip_number))

        return removed

    def _unpaired_slips(self, legs: tuple[Transaction, ...]) -> tuple[str, ...]:
        counts: dict[str, int] = {}
        names: dict[str, str] = {}
        for txn in legs:
            key = txn.slip_number.casefold()
            counts[key] = counts.get(key, 0) + 1
            names.setdefault(key, txn.slip_number)
        return tuple(names[key] for key, count in counts.items() if count != 2)
