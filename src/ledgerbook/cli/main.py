"""Main CLI entry point."""

import click
from ledgerbook.config import load_settings, parse_ordering, LedgerSettings
from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.logging_config import configure_logging

# Import and register all commands at module level
from ledgerbook.cli.commands import (
    account,
    init_accounts,
    add,
    transaction,
    statement,
    snapshot,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar="LEDGERBOOK_DB_PATH",
)
@click.option(
    "--allow-self-link/--no-allow-self-link",
    default=None,
    help="Allow a transaction to link an account to itself",
)
@click.option(
    "--balance-order",
    type=click.Choice(["date", "number"], case_sensitive=False),
    help="Order used for running balances (default: date, then number)",
)
@click.option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.pass_context
def cli(
    ctx,
    db_path: str | None,
    allow_self_link: bool | None,
    balance_order: str | None,
    log_level: str | None,
):
    """Ledgerbook - double-entry bookkeeping ledger.

    Keep named accounts and paired debit/credit transactions linked by slip
    number, with running balances and account statements.
    """
    ctx.ensure_object(dict)

    try:
        env_settings = load_settings()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    settings = LedgerSettings(
        database_path=db_path or env_settings.database_path,
        allow_self_link=(
            env_settings.allow_self_link if allow_self_link is None else allow_self_link
        ),
        balance_ordering=(
            env_settings.balance_ordering if balance_order is None else parse_ordering(balance_order)
        ),
        log_level=(log_level or env_settings.log_level).upper(),
    )
    configure_logging(settings.log_level)
    ctx.obj["settings"] = settings

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=settings.database_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
init_accounts.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
statement.register_commands(cli)
snapshot.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
