"""Whole-ledger snapshot export and import.

A snapshot is a plain dictionary with the accounts, the transaction legs and
the two identifier counters, ready for ``json.dump``. Amounts are written as
strings so no precision is lost; each leg carries exactly one of ``debit`` or
``credit`` and names its counter-account in ``code``.
"""

from datetime import datetime, date, UTC
from decimal import Decimal
from typing import Any, Optional

import structlog

from ledgerbook.database.base import Database
from ledgerbook.domain import errors
from ledgerbook.domain.balance import BalanceService
from ledgerbook.domain.entities import Account, Entry, EntryType, LedgerState, Transaction
from ledgerbook.domain.transaction import pair_problems
from ledgerbook.utils.amount_parser import parse_amount

logger = structlog.get_logger(__name__)


class SnapshotService:
    """Service for exporting and importing the persisted ledger state."""

    def __init__(
        self,
        db: Database,
        balance_service: Optional[BalanceService] = None,
        allow_self_link: bool = False,
    ):
        self.db = db
        self.allow_self_link = allow_self_link
        self.balance_service = balance_service or BalanceService(db)

    def export_snapshot(self) -> dict[str, Any]:
        """Export the whole ledger as a JSON-ready dictionary."""
        state = self.db.export_state()
        names = {acc.id: acc.name for acc in state.accounts}
        return {
            "accounts": [
                {
                    "id": acc.id,
                    "name": acc.name,
                    "balance": str(acc.balance),
                    "createdAt": acc.created_at.isoformat(),
                }
                for acc in state.accounts
            ],
            "transactions": [
                _transaction_to_dict(txn, names) for txn in state.transactions
            ],
            "nextAccountId": state.next_account_id,
            "nextTransactionId": state.next_transaction_id,
        }

    def import_snapshot(self, data: dict[str, Any]) -> LedgerState:
        """Replace the whole ledger with a snapshot.

        The document is validated completely before anything is written.
        Stored balances are ignored and recomputed from the transactions.

        Returns:
            The imported state as read back from the store

        Raises:
            ValidationError: If the snapshot is malformed
        """
        state = parse_snapshot(data, allow_self_link=self.allow_self_link)
        with self.db.atomic():
            self.db.replace_state(state)
            self.balance_service.refresh_balances()
            imported = self.db.export_state()

        logger.info(
            "snapshot_imported",
            accounts=len(imported.accounts),
            transactions=len(imported.transactions),
        )
        return imported


def _transaction_to_dict(txn: Transaction, names: dict[int, str]) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": txn.id,
        "accountId": txn.account_id,
        "number": txn.number,
        "date": txn.date.isoformat(),
        "description": txn.description,
        "slipNumber": txn.slip_number,
        "code": names.get(txn.linked_account_id, txn.code),
        "createdAt": txn.created_at.isoformat(),
    }
    record[txn.entry.type.value] = str(txn.entry.amount)
    return record


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise errors.ValidationError(f"Invalid {what}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise errors.ValidationError(f"Invalid {what}: {value!r}")


def _as_datetime(value: Any) -> datetime:
    if value is None:
        return datetime.now(UTC)
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise errors.ValidationError(f"Invalid timestamp: {value!r}")


def _parse_entry(record: dict[str, Any], transaction_id: int) -> Entry:
    sides = [
        kind for kind in EntryType if record.get(kind.value) not in (None, "")
    ]
    if len(sides) != 1:
        raise errors.ValidationError(
            f"Transaction {transaction_id} must have exactly one of debit or credit"
        )
    kind = sides[0]
    return Entry(kind, parse_amount(record[kind.value]))


def _records(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    records = data.get(key)
    if records is None:
        return []
    if not isinstance(records, list):
        raise errors.ValidationError(f"Snapshot field '{key}' must be a list")
    for position, record in enumerate(records):
        if not isinstance(record, dict):
            raise errors.ValidationError(
                f"Snapshot field '{key}' item {position} must be an object"
            )
    return records


def _check_pairs(transactions: list[Transaction], allow_self_link: bool) -> None:
    slips: dict[str, list[Transaction]] = {}
    for txn in transactions:
        slips.setdefault(txn.slip_number.casefold(), []).append(txn)
    for legs in slips.values():
        problems = pair_problems(legs, allow_self_link)
        if problems:
            raise errors.ValidationError(
                f"Slip number '{legs[0].slip_number}' is not a valid double entry: "
                + "; ".join(problems)
            )


def parse_snapshot(data: dict[str, Any], allow_self_link: bool = False) -> LedgerState:
    """Validate a snapshot dictionary and convert it into a LedgerState.

    Every slip number must hold exactly two mirrored legs whose codes point
    at each other's accounts.

    Raises:
        ValidationError: If the snapshot is malformed
    """
    if not isinstance(data, dict):
        raise errors.ValidationError("Snapshot must be a JSON object")

    accounts: list[Account] = []
    ids_by_name: dict[str, int] = {}
    for record in _records(data, "accounts"):
        account_id = _as_int(record.get("id"), "account id")
        name = str(record.get("name") or "").strip()
        if not name:
            raise errors.ValidationError(f"Account {account_id} has no name")
        if name.casefold() in ids_by_name:
            raise errors.DuplicateNameError(errors.duplicate_account_name(name))
        if any(acc.id == account_id for acc in accounts):
            raise errors.ValidationError(f"Duplicate account id {account_id}")
        ids_by_name[name.casefold()] = account_id
        accounts.append(
            Account(
                id=account_id,
                name=name,
                balance=Decimal("0.00"),
                created_at=_as_datetime(record.get("createdAt")),
            )
        )
    account_ids = {acc.id for acc in accounts}

    transactions: list[Transaction] = []
    seen_ids: set[int] = set()
    seen_numbers: set[tuple[int, int]] = set()
    for record in _records(data, "transactions"):
        transaction_id = _as_int(record.get("id"), "transaction id")
        if transaction_id in seen_ids:
            raise errors.ValidationError(f"Duplicate transaction id {transaction_id}")
        seen_ids.add(transaction_id)

        account_id = _as_int(record.get("accountId"), "account id")
        if account_id not in account_ids:
            raise errors.AccountNotFound(errors.account_not_found(account_id))

        code = str(record.get("code") or "").strip()
        linked_id = ids_by_name.get(code.casefold())
        if linked_id is None:
            raise errors.ValidationError(
                f"Transaction {transaction_id} links to unknown account '{code}'"
            )

        number = _as_int(record.get("number"), "transaction number")
        if number <= 0 or (account_id, number) in seen_numbers:
            raise errors.ValidationError(
                f"Transaction {transaction_id} has an invalid or repeated number {number}"
            )
        seen_numbers.add((account_id, number))

        slip = str(record.get("slipNumber") or "").strip()
        if not slip:
            raise errors.ValidationError(f"Transaction {transaction_id} has no slip number")

        try:
            txn_date = date.fromisoformat(str(record.get("date")))
        except ValueError:
            raise errors.ValidationError(
                f"Transaction {transaction_id} has an invalid date {record.get('date')!r}"
            )

        transactions.append(
            Transaction(
                id=transaction_id,
                account_id=account_id,
                number=number,
                date=txn_date,
                description=str(record.get("description") or ""),
                slip_number=slip,
                entry=_parse_entry(record, transaction_id),
                code=code,
                linked_account_id=linked_id,
                created_at=_as_datetime(record.get("createdAt")),
            )
        )
    _check_pairs(transactions, allow_self_link)

    next_account_id = _as_int(
        data.get("nextAccountId", max(account_ids, default=0) + 1), "nextAccountId"
    )
    next_transaction_id = _as_int(
        data.get("nextTransactionId", max(seen_ids, default=0) + 1), "nextTransactionId"
    )
    if next_account_id <= max(account_ids, default=0):
        raise errors.ValidationError("nextAccountId must be greater than every account id")
    if next_transaction_id <= max(seen_ids, default=0):
        raise errors.ValidationError(
            "nextTransactionId must be greater than every transaction id"
        )

    return LedgerState(
        accounts=tuple(accounts),
        transactions=tuple(transactions),
        next_account_id=next_account_id,
        next_transaction_id=next_transaction_id,
    )
