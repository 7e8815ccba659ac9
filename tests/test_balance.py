"""Tests for running balance calculation."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledgerbook.domain.balance import BalanceService, calculate_running_balance
from ledgerbook.domain.entities import BalanceOrdering, Entry, Transaction
from ledgerbook.domain.errors import AccountNotFound


def _txn(txn_id, number, when, entry, account_id=1):
    return Transaction(
        id=txn_id,
        account_id=account_id,
        number=number,
        date=when,
        description=f"Transaction {txn_id}",
        slip_number=f"S{txn_id}",
        entry=entry,
        code="Other",
        linked_account_id=2,
        created_at=datetime(2024, 1, 1),
    )


def test_credits_add_debits_subtract():
    transactions = [
        _txn(1, 1, date(2024, 1, 1), Entry.credit(Decimal("100"))),
        _txn(2, 2, date(2024, 1, 2), Entry.debit(Decimal("30"))),
        _txn(3, 3, date(2024, 1, 3), Entry.debit(Decimal("90"))),
    ]

    result = calculate_running_balance(1, transactions)

    assert [row.balance for row in result.transactions] == [
        Decimal("100"),
        Decimal("70"),
        Decimal("-20"),
    ]
    assert result.final_balance == Decimal("-20")


def test_empty_account_has_zero_balance():
    result = calculate_running_balance(1, [])

    assert result.transactions == ()
    assert result.final_balance == Decimal("0")


def test_other_accounts_are_ignored():
    transactions = [
        _txn(1, 1, date(2024, 1, 1), Entry.credit(Decimal("10"))),
        _txn(2, 1, date(2024, 1, 1), Entry.debit(Decimal("10")), account_id=2),
    ]

    result = calculate_running_balance(1, transactions)

    assert [row.transaction.id for row in result.transactions] == [1]


def test_date_ordering_sorts_by_date_then_number():
    transactions = [
        _txn(1, 1, date(2024, 3, 1), Entry.credit(Decimal("10"))),
        _txn(2, 2, date(2024, 1, 1), Entry.debit(Decimal("5"))),
        _txn(3, 3, date(2024, 1, 1), Entry.credit(Decimal("1"))),
    ]

    result = calculate_running_balance(1, transactions, BalanceOrdering.DATE)

    assert [row.transaction.id for row in result.transactions] == [2, 3, 1]
    assert [row.balance for row in result.transactions] == [
        Decimal("-5"),
        Decimal("-4"),
        Decimal("6"),
    ]


def test_number_ordering_ignores_date():
    transactions = [
        _txn(1, 1, date(2024, 3, 1), Entry.credit(Decimal("10"))),
        _txn(2, 2, date(2024, 1, 1), Entry.debit(Decimal("5"))),
    ]

    result = calculate_running_balance(1, transactions, BalanceOrdering.NUMBER)

    assert [row.transaction.id for row in result.transactions] == [1, 2]
    assert [row.balance for row in result.transactions] == [Decimal("10"), Decimal("5")]


def test_id_breaks_remaining_ties():
    transactions = [
        _txn(7, 1, date(2024, 1, 1), Entry.credit(Decimal("1"))),
        _txn(3, 1, date(2024, 1, 1), Entry.credit(Decimal("2"))),
    ]

    result = calculate_running_balance(1, transactions)

    assert [row.transaction.id for row in result.transactions] == [3, 7]


@pytest.mark.parametrize("ordering", list(BalanceOrdering))
def test_final_balance_is_credits_minus_debits(ordering):
    transactions = [
        _txn(1, 4, date(2024, 5, 1), Entry.credit(Decimal("12.50"))),
        _txn(2, 1, date(2024, 2, 1), Entry.debit(Decimal("3.25"))),
        _txn(3, 3, date(2024, 9, 1), Entry.debit(Decimal("100"))),
        _txn(4, 2, date(2024, 1, 1), Entry.credit(Decimal("40"))),
    ]

    result = calculate_running_balance(1, transactions, ordering)

    assert result.final_balance == Decimal("12.50") + Decimal("40") - Decimal("3.25") - Decimal("100")


def test_calculation_is_repeatable():
    transactions = [
        _txn(1, 1, date(2024, 1, 1), Entry.credit(Decimal("10"))),
        _txn(2, 2, date(2024, 1, 2), Entry.debit(Decimal("4"))),
    ]

    assert calculate_running_balance(1, transactions) == calculate_running_balance(1, transactions)


def test_running_balance_from_database(balance_service, transaction_service, accounts, rent_payment):
    transaction_service.create_transaction(
        current_account_id=accounts["Rent"],
        linked_account_id=accounts["Utilities"],
        date=date(2024, 7, 1),
        description="Deposit",
        slip_number="D1",
        entry_type="debit",
        amount="100",
    )

    result = balance_service.running_balance(accounts["Rent"])

    assert [row.transaction.slip_number for row in result.transactions] == ["D1", "S005"]
    assert [row.balance for row in result.transactions] == [Decimal("-100"), Decimal("700")]
    assert result.final_balance == Decimal("700")


def test_running_balance_unknown_account(balance_service):
    with pytest.raises(AccountNotFound):
        balance_service.running_balance(999)


def test_refresh_balances_repairs_cached_value(balance_service, account_service, temp_db, accounts, rent_payment):
    temp_db.update_account_balance(accounts["Cash"], Decimal("12345"))

    balance_service.refresh_balances()

    assert account_service.get_account(accounts["Cash"]).balance == Decimal("-800")


def test_refresh_balances_skips_unknown_ids(balance_service, account_service, accounts):
    balance_service.refresh_balances([accounts["Cash"], 999, accounts["Cash"]])

    assert account_service.get_account(accounts["Cash"]).balance == Decimal("0")


def test_number_ordering_service(temp_db, transaction_service, accounts):
    service = BalanceService(temp_db, ordering=BalanceOrdering.NUMBER)
    transaction_service.create_transaction(
        current_account_id=accounts["Cash"],
        linked_account_id=accounts["Rent"],
        date=date(2024, 8, 1),
        description="Later",
        slip_number="L1",
        entry_type="credit",
        amount="10",
    )
    transaction_service.create_transaction(
        current_account_id=accounts["Cash"],
        linked_account_id=accounts["Rent"],
        date=date(2024, 6, 1),
        description="Earlier",
        slip_number="E1",
        entry_type="credit",
        amount="5",
    )

    result = service.running_balance(accounts["Cash"])

    assert [row.transaction.slip_number for row in result.transactions] == ["L1", "E1"]
