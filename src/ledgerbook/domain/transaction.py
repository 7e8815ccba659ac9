"""Double-entry transaction domain service.

Every transaction is stored as two legs that share a slip number: one in the
account the user is working in and one in the linked (counter) account, with
opposite entry types and the same amount, date and description. The service
only ever creates, edits and deletes the two legs together.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional, Iterable, Sequence

import structlog

from ledgerbook.database.base import Database
from ledgerbook.domain import errors
from ledgerbook.domain.balance import BalanceService
from ledgerbook.domain.entities import (
    Account,
    Entry,
    EntryType,
    PairingIssue,
    SlipCheck,
    Transaction,
    TransactionPair,
)
from ledgerbook.utils.amount_parser import parse_amount

logger = structlog.get_logger(__name__)


class TransactionService:
    """Service for managing double-entry transactions."""

    def __init__(
        self,
        db: Database,
        allow_self_link: bool = False,
        balance_service: Optional[BalanceService] = None,
    ):
        """Initialize transaction service.

        Args:
            db: Database instance
            allow_self_link: Allow both legs of a transaction to live in the
                same account
            balance_service: Balance service used to refresh cached balances
        """
        self.db = db
        self.allow_self_link = allow_self_link
        self.balance_service = balance_service or BalanceService(db)

    # Validation helpers
    def _require_account(self, account_id: int) -> Account:
        account = self.db.get_account(account_id)
        if account is None:
            raise errors.AccountNotFound(errors.account_not_found(account_id))
        return account

    def _build_entry(self, entry_type: EntryType | str, amount) -> Entry:
        try:
            kind = EntryType(entry_type)
        except ValueError:
            raise errors.ValidationError(
                f"Entry type must be 'debit' or 'credit', got '{entry_type}'"
            )
        return Entry(kind, parse_amount(amount))

    def _check_link(self, current: Account, linked: Account) -> None:
        if current.id == linked.id and not self.allow_self_link:
            raise errors.SelfLinkError(errors.self_link(current.name))

    def _clean_slip(self, slip_number: str) -> str:
        slip = (slip_number or "").strip()
        if not slip:
            raise errors.ValidationError("Slip number is required")
        return slip

    def _require_slip_free(self, slip_number: str, ignore_ids: Iterable[int] = ()) -> None:
        ignored = set(ignore_ids)
        for txn in self.db.find_transactions_by_slip(slip_number):
            if txn.id in ignored:
                continue
            owner = self.db.get_account(txn.account_id)
            raise errors.DuplicateSlipError(
                slip_number, txn, owner.name if owner is not None else "Unknown Account"
            )

    # Queries
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(self, account_id: Optional[int] = None) -> list[Transaction]:
        """List transactions, optionally for one account."""
        return self.db.list_transactions(account_id=account_id)

    def get_leg(self, slip_number: str, account_id: int) -> Transaction:
        """Get the leg of a slip that lives in the given account.

        Raises:
            AccountNotFound: If the account doesn't exist
            TransactionNotFound: If the account has no leg with that slip
        """
        account = self._require_account(account_id)
        for txn in self.db.find_transactions_by_slip(slip_number):
            if txn.account_id == account_id:
                return txn
        raise errors.TransactionNotFound(errors.leg_not_found(slip_number, account.name))

    def slip_number_exists(self, slip_number: str) -> SlipCheck:
        """Check whether a slip number is used anywhere, ignoring case.

        Returns:
            SlipCheck naming the first conflicting transaction and its account
        """
        with self.db.atomic():
            matches = self.db.find_transactions_by_slip(slip_number.strip())
            if not matches:
                return SlipCheck(exists=False)
            conflict = matches[0]
            owner = self.db.get_account(conflict.account_id)
        return SlipCheck(
            exists=True,
            conflicting_transaction=conflict,
            conflicting_account_name=owner.name if owner is not None else "Unknown Account",
        )

    # Mutations
    def create_transaction(
        self,
        current_account_id: int,
        linked_account_id: int,
        date: date,
        description: str,
        slip_number: str,
        entry_type: EntryType | str,
        amount: Decimal | str,
    ) -> TransactionPair:
        """Create both legs of a double-entry transaction.

        Args:
            current_account_id: Account receiving the requested entry
            linked_account_id: Counter-account receiving the opposite entry
            date: Transaction date
            description: Free text shared by both legs
            slip_number: Slip number shared by both legs, unique in the ledger
            entry_type: 'debit' or 'credit' for the current account
            amount: Positive amount

        Returns:
            TransactionPair with the current account's leg first

        Raises:
            AccountNotFound: If either account doesn't exist
            InvalidAmount: If amount is not a positive number
            SelfLinkError: If both accounts are the same and self-links are off
            DuplicateSlipError: If the slip number is already used
        """
        with self.db.atomic():
            current = self._require_account(current_account_id)
            linked = self._require_account(linked_account_id)
            entry = self._build_entry(entry_type, amount)
            self._check_link(current, linked)
            slip = self._clean_slip(slip_number)
            self._require_slip_free(slip)
            description = (description or "").strip()

            leg_id = self.db.create_transaction(
                account_id=current.id,
                linked_account_id=linked.id,
                number=self.db.next_transaction_number(current.id),
                date=date,
                description=description,
                slip_number=slip,
                entry=entry,
            )
            counter_id = self.db.create_transaction(
                account_id=linked.id,
                linked_account_id=current.id,
                number=self.db.next_transaction_number(linked.id),
                date=date,
                description=description,
                slip_number=slip,
                entry=entry.opposite(),
            )
            self.balance_service.refresh_balances([current.id, linked.id])
            pair = TransactionPair(
                leg=self.db.get_transaction(leg_id),
                counter_leg=self.db.get_transaction(counter_id),
            )

        logger.info(
            "transaction_created",
            slip_number=slip,
            account_id=current.id,
            linked_account_id=linked.id,
            entry_type=entry.type.value,
            amount=str(entry.amount),
        )
        return pair

    def edit_transaction(
        self,
        original_slip_number: str,
        current_account_id: int,
        old_linked_account_name: str,
        new_linked_account_id: int,
        date: date,
        description: str,
        slip_number: str,
        entry_type: EntryType | str,
        amount: Decimal | str,
    ) -> TransactionPair:
        """Edit both legs of a double-entry transaction.

        The leg in the current account is updated in place. The counter-leg,
        found in the account named ``old_linked_account_name``, moves to the
        new linked account when it differs; it then takes the next number in
        that account so numbers stay unique per account.

        Returns:
            TransactionPair with the current account's leg first

        Raises:
            AccountNotFound: If any of the three accounts doesn't exist
            InvalidAmount: If amount is not a positive number
            SelfLinkError: If the new link is a self-link and those are off
            TransactionNotFound: If the current account has no leg for the slip
            LinkedTransactionNotFound: If the counter-leg is missing
            DuplicateSlipError: If the new slip number belongs to another transaction
        """
        original_slip_number = (original_slip_number or "").strip()
        with self.db.atomic():
            current = self._require_account(current_account_id)
            old_linked = self.db.get_account_by_name(old_linked_account_name)
            if old_linked is None:
                raise errors.AccountNotFound(errors.account_name_not_found(old_linked_account_name))
            new_linked = self._require_account(new_linked_account_id)
            entry = self._build_entry(entry_type, amount)
            self._check_link(current, new_linked)
            slip = self._clean_slip(slip_number)
            description = (description or "").strip()

            legs = self.db.find_transactions_by_slip(original_slip_number)
            leg = next((txn for txn in legs if txn.account_id == current.id), None)
            if leg is None:
                raise errors.TransactionNotFound(
                    errors.leg_not_found(original_slip_number, current.name)
                )
            counter_leg = next(
                (txn for txn in legs if txn.account_id == old_linked.id and txn.id != leg.id),
                None,
            )
            if counter_leg is None:
                raise errors.LinkedTransactionNotFound(
                    errors.linked_leg_not_found(original_slip_number, old_linked.name)
                )

            # Reusing the pair's own slip number is not a collision
            self._require_slip_free(slip, ignore_ids={leg.id, counter_leg.id})

            if counter_leg.account_id == new_linked.id:
                counter_number = counter_leg.number
            else:
                counter_number = self.db.next_transaction_number(new_linked.id)

            self.db.update_transaction(
                transaction_id=leg.id,
                account_id=current.id,
                linked_account_id=new_linked.id,
                number=leg.number,
                date=date,
                description=description,
                slip_number=slip,
                entry=entry,
            )
            self.db.update_transaction(
                transaction_id=counter_leg.id,
                account_id=new_linked.id,
                linked_account_id=current.id,
                number=counter_number,
                date=date,
                description=description,
                slip_number=slip,
                entry=entry.opposite(),
            )
            self.balance_service.refresh_balances([current.id, old_linked.id, new_linked.id])
            pair = TransactionPair(
                leg=self.db.get_transaction(leg.id),
                counter_leg=self.db.get_transaction(counter_leg.id),
            )

        logger.info(
            "transaction_edited",
            original_slip_number=original_slip_number,
            slip_number=slip,
            account_id=current.id,
            old_linked_account_id=old_linked.id,
            new_linked_account_id=new_linked.id,
        )
        return pair

    def delete_transaction(self, slip_number: str) -> tuple[Transaction, ...]:
        """Delete every leg sharing a slip number.

        Returns:
            The removed legs

        Raises:
            TransactionNotFound: If no leg carries the slip number
            PartialLedgerError: If the slip did not have exactly two legs. The
                legs that were found have still been removed.
        """
        slip_number = (slip_number or "").strip()
        with self.db.atomic():
            legs = tuple(self.db.find_transactions_by_slip(slip_number))
            if not legs:
                raise errors.TransactionNotFound(errors.slip_not_found(slip_number))
            self.db.delete_transactions(txn.id for txn in legs)
            self.balance_service.refresh_balances(txn.account_id for txn in legs)

        if len(legs) != 2:
            logger.warning("partial_pair_deleted", slip_number=slip_number, legs=len(legs))
            raise errors.PartialLedgerError(slip_number, legs)

        logger.info("transaction_deleted", slip_number=slip_number)
        return legs

    # Integrity
    def find_pairing_issues(self) -> list[PairingIssue]:
        """Report slip numbers whose legs do not form a valid double entry."""
        groups: dict[str, list[Transaction]] = defaultdict(list)
        for txn in self.db.list_transactions():
            groups[txn.slip_number.casefold()].append(txn)

        issues = []
        for legs in groups.values():
            reasons = pair_problems(legs, self.allow_self_link)
            if reasons:
                issues.append(
                    PairingIssue(
                        slip_number=legs[0].slip_number,
                        reason="; ".join(reasons),
                        transactions=tuple(legs),
                    )
                )
        return issues


def pair_problems(legs: Sequence[Transaction], allow_self_link: bool = False) -> list[str]:
    """Describe why the legs of one slip do not form a valid double entry.

    Returns an empty list for a well-formed pair.
    """
    if len(legs) != 2:
        return [f"expected 2 legs, found {len(legs)}"]

    first, second = legs
    problems = []
    if first.account_id == second.account_id and not allow_self_link:
        problems.append("both legs are in the same account")
    if first.entry.type is second.entry.type:
        problems.append(f"both legs are {first.entry.type.value} entries")
    if first.entry.amount != second.entry.amount:
        problems.append("amounts differ")
    if first.date != second.date:
        problems.append("dates differ")
    if first.description != second.description:
        problems.append("descriptions differ")
    if first.slip_number != second.slip_number:
        problems.append("slip numbers differ in case")
    if first.linked_account_id != second.account_id or second.linked_account_id != first.account_id:
        problems.append("linked accounts do not point at each other")
    return problems
