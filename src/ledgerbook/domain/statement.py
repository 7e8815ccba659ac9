"""Account statement data for document renderers."""

from datetime import date
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain import errors
from ledgerbook.domain.balance import BalanceService
from ledgerbook.domain.entities import Statement, StatementLine


class StatementService:
    """Builds the rows a statement (HTML, PDF, text) is rendered from."""

    def __init__(self, db: Database, balance_service: Optional[BalanceService] = None):
        """Initialize statement service.

        Args:
            db: Database instance
            balance_service: Balance service providing running balances
        """
        self.db = db
        self.balance_service = balance_service or BalanceService(db)

    def build_statement(
        self,
        account_id: int,
        up_to_number: Optional[int] = None,
        generated_on: Optional[date] = None,
    ) -> Statement:
        """Build the statement of an account.

        Args:
            account_id: Account ID
            up_to_number: Stop after the transaction with this number, in
                ledger order. None includes every transaction.
            generated_on: Statement date, defaults to today

        Raises:
            AccountNotFound: If the account doesn't exist
            ValidationError: If up_to_number is not positive
            TransactionNotFound: If no transaction has that number
        """
        if up_to_number is not None and up_to_number <= 0:
            raise errors.ValidationError(
                f"Transaction number must be a positive integer, got {up_to_number}"
            )

        with self.db.atomic():
            account = self.db.get_account(account_id)
            if account is None:
                raise errors.AccountNotFound(errors.account_not_found(account_id))
            running = self.balance_service.running_balance(account_id)

        rows = list(running.transactions)
        if up_to_number is not None:
            cut = next(
                (i for i, row in enumerate(rows) if row.transaction.number == up_to_number),
                None,
            )
            if cut is None:
                raise errors.TransactionNotFound(
                    errors.transaction_number_not_found(up_to_number, account.name)
                )
            rows = rows[: cut + 1]

        lines = tuple(
            StatementLine(
                number=row.transaction.number,
                date=row.transaction.date,
                description=row.transaction.description,
                slip_number=row.transaction.slip_number,
                debit=row.transaction.debit,
                credit=row.transaction.credit,
                balance=row.balance,
                code=row.transaction.code,
            )
            for row in rows
        )
        final_balance = lines[-1].balance if lines else running.final_balance
        return Statement(
            account_id=account.id,
            account_name=account.name,
            lines=lines,
            final_balance=final_balance,
            generated_on=generated_on or date.today(),
        )
