"""Build domain services from the CLI context."""

import click

from ledgerbook.config import LedgerSettings
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.balance import BalanceService
from ledgerbook.domain.snapshot import SnapshotService
from ledgerbook.domain.statement import StatementService
from ledgerbook.domain.transaction import TransactionService


def _settings(ctx: click.Context) -> LedgerSettings:
    return ctx.obj.get("settings") or LedgerSettings()


def balance_service(ctx: click.Context) -> BalanceService:
    return BalanceService(ctx.obj["db"], ordering=_settings(ctx).balance_ordering)


def account_service(ctx: click.Context) -> AccountService:
    return AccountService(ctx.obj["db"], balance_service=balance_service(ctx))


def transaction_service(ctx: click.Context) -> TransactionService:
    return TransactionService(
        ctx.obj["db"],
        allow_self_link=_settings(ctx).allow_self_link,
        balance_service=balance_service(ctx),
    )


def statement_service(ctx: click.Context) -> StatementService:
    return StatementService(ctx.obj["db"], balance_service=balance_service(ctx))


def snapshot_service(ctx: click.Context) -> SnapshotService:
    return SnapshotService(
        ctx.obj["db"],
        balance_service=balance_service(ctx),
        allow_self_link=_settings(ctx).allow_self_link,
    )
