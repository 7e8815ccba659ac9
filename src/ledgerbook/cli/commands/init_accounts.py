"""Initialize the default chart of accounts."""

import click
from ledgerbook.cli.services import account_service
from ledgerbook.domain.account import DEFAULT_ACCOUNTS


@click.command("init-accounts")
@click.pass_context
def init_accounts(ctx):
    """Create the default accounts (Cash, Accounts Receivable, ...).

    Accounts whose names already exist are left alone.
    """
    service = account_service(ctx)

    created = service.create_default_accounts()
    skipped = len(DEFAULT_ACCOUNTS) - len(created)

    if skipped == 0:
        click.echo(f"Successfully created {len(created)} accounts.")
    else:
        click.echo(f"Created {len(created)} accounts, {skipped} already existed.")


def register_commands(cli):
    """Register init-accounts command with main CLI."""
    cli.add_command(init_accounts)
