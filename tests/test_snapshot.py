"""Tests for snapshot export and import."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerbook.domain.account import AccountService
from ledgerbook.domain.errors import AccountNotFound, DuplicateNameError, ValidationError
from ledgerbook.domain.snapshot import SnapshotService
from ledgerbook.domain.transaction import TransactionService


def test_export_snapshot(snapshot_service, accounts, rent_payment):
    data = snapshot_service.export_snapshot()

    assert [acc["name"] for acc in data["accounts"]] == ["Cash", "Rent", "Utilities"]
    assert data["accounts"][0]["balance"] == "-800.00"
    assert data["nextAccountId"] == 4
    assert data["nextTransactionId"] == 3

    cash_leg, rent_leg = data["transactions"]
    assert cash_leg["accountId"] == accounts["Cash"]
    assert cash_leg["debit"] == "800.00"
    assert "credit" not in cash_leg
    assert cash_leg["code"] == "Rent"
    assert cash_leg["date"] == "2024-07-23"
    assert cash_leg["slipNumber"] == "S005"
    assert rent_leg["credit"] == "800.00"
    assert rent_leg["code"] == "Cash"


def test_round_trip_into_another_ledger(snapshot_service, accounts, rent_payment, other_db):
    data = snapshot_service.export_snapshot()
    target = SnapshotService(other_db)

    state = target.import_snapshot(data)

    assert [acc.name for acc in state.accounts] == ["Cash", "Rent", "Utilities"]
    assert [acc.balance for acc in state.accounts] == [
        Decimal("-800"),
        Decimal("800"),
        Decimal("0"),
    ]
    assert state.next_transaction_id == 3
    assert target.export_snapshot()["transactions"] == data["transactions"]


def test_import_continues_counters(snapshot_service, accounts, rent_payment, other_db):
    SnapshotService(other_db).import_snapshot(snapshot_service.export_snapshot())

    new_id = AccountService(other_db).create_account("Savings")
    pair = TransactionService(other_db).create_transaction(
        current_account_id=new_id,
        linked_account_id=1,
        date=date(2024, 8, 1),
        description="Transfer",
        slip_number="T1",
        entry_type="credit",
        amount="5",
    )

    assert new_id == 4
    assert pair.leg.id == 3
    assert pair.counter_leg.number == 2


def test_import_recomputes_balances(snapshot_service, accounts, rent_payment, other_db):
    data = snapshot_service.export_snapshot()
    data["accounts"][0]["balance"] = "999.99"

    state = SnapshotService(other_db).import_snapshot(data)

    assert state.accounts[0].balance == Decimal("-800")


def test_import_replaces_existing_ledger(snapshot_service, accounts, rent_payment, other_db):
    AccountService(other_db).create_account("Old Account")

    state = SnapshotService(other_db).import_snapshot(snapshot_service.export_snapshot())

    assert "Old Account" not in [acc.name for acc in state.accounts]


def test_import_empty_snapshot(snapshot_service, accounts):
    state = snapshot_service.import_snapshot({"accounts": [], "transactions": []})

    assert state.accounts == ()
    assert state.transactions == ()


def _broken(data, mutate):
    mutate(data)
    return data


@pytest.mark.parametrize(
    "mutate, error",
    [
        (lambda d: d["transactions"][0].update(code="Nowhere"), ValidationError),
        (lambda d: d["transactions"][0].update(accountId=42), AccountNotFound),
        (lambda d: d["transactions"][0].update(credit="800.00"), ValidationError),
        (lambda d: d["transactions"][0].pop("debit"), ValidationError),
        (lambda d: d["transactions"][0].update(debit="-1"), ValidationError),
        (lambda d: d["transactions"][0].update(slipNumber=" "), ValidationError),
        (lambda d: d["transactions"][0].update(date="not a date"), ValidationError),
        (lambda d: d["transactions"][0].update(number=0), ValidationError),
        (lambda d: d["transactions"][1].update(id=1), ValidationError),
        (lambda d: d["accounts"][1].update(name="cash"), DuplicateNameError),
        (lambda d: d.update(nextAccountId=2), ValidationError),
        (lambda d: d.update(nextTransactionId=1), ValidationError),
        (lambda d: d["transactions"].pop(), ValidationError),
        (lambda d: d["transactions"][1].update(code="Utilities"), ValidationError),
        (lambda d: d["transactions"][1].update(credit=None, debit="800.00"), ValidationError),
        (lambda d: d["transactions"][1].update(credit="80.00"), ValidationError),
        (lambda d: d.update(accounts="Cash"), ValidationError),
        (lambda d: d["accounts"].append("Savings"), ValidationError),
        (lambda d: d["transactions"].append(7), ValidationError),
    ],
)
def test_invalid_snapshot_leaves_ledger_untouched(snapshot_service, accounts, rent_payment, other_db, mutate, error):
    target_accounts = AccountService(other_db)
    target_accounts.create_account("Keep Me")
    data = _broken(snapshot_service.export_snapshot(), mutate)

    with pytest.raises(error):
        SnapshotService(other_db).import_snapshot(data)

    assert [acc.name for acc in target_accounts.list_accounts()] == ["Keep Me"]


def test_import_rejects_non_object(snapshot_service):
    with pytest.raises(ValidationError):
        snapshot_service.import_snapshot(["not", "a", "dict"])


def test_import_rejects_slip_shared_by_two_pairs(snapshot_service, transaction_service, accounts, rent_payment, other_db):
    transaction_service.create_transaction(
        current_account_id=accounts["Utilities"],
        linked_account_id=accounts["Rent"],
        date=date(2024, 7, 24),
        description="Power",
        slip_number="U1",
        entry_type="debit",
        amount="60",
    )
    data = snapshot_service.export_snapshot()
    for record in data["transactions"][2:]:
        record["slipNumber"] = "s005"

    with pytest.raises(ValidationError, match="S005"):
        SnapshotService(other_db).import_snapshot(data)

    assert AccountService(other_db).list_accounts() == []


def test_import_non_ascii_slips_compare_ignoring_case(snapshot_service, transaction_service, accounts, other_db):
    for slip, current in (("Ä1", "Cash"), ("X1", "Utilities")):
        transaction_service.create_transaction(
            current_account_id=accounts[current],
            linked_account_id=accounts["Rent"],
            date=date(2024, 7, 24),
            description="Transfer",
            slip_number=slip,
            entry_type="debit",
            amount="5",
        )
    data = snapshot_service.export_snapshot()
    for record in data["transactions"]:
        if record["slipNumber"] == "X1":
            record["slipNumber"] = "ä1"

    with pytest.raises(ValidationError, match="expected 2 legs, found 4"):
        SnapshotService(other_db).import_snapshot(data)


def test_import_self_linked_pair_follows_policy(temp_db, other_db):
    cash = AccountService(temp_db).create_account("Cash")
    TransactionService(temp_db, allow_self_link=True).create_transaction(
        current_account_id=cash,
        linked_account_id=cash,
        date=date(2024, 7, 1),
        description="Move",
        slip_number="M1",
        entry_type="debit",
        amount="5",
    )
    data = SnapshotService(temp_db).export_snapshot()

    with pytest.raises(ValidationError):
        SnapshotService(other_db).import_snapshot(data)

    state = SnapshotService(other_db, allow_self_link=True).import_snapshot(data)
    assert len(state.transactions) == 2
