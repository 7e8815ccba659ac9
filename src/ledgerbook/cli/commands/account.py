"""Account management commands."""

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.formatting import format_balance
from ledgerbook.cli.services import account_service


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.pass_context
def create_account(ctx, name: str):
    """Create a new account with a zero balance.

    Examples:
        ledgerbook account create "Cash"
        ledgerbook account create "Rent Expense"
    """
    service = account_service(ctx)

    try:
        account_id = service.create_account(name=name)
        click.echo(f"Created account '{name.strip()}' (ID: {account_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their current balances."""
    service = account_service(ctx)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"ID: {acc.id:3d} | {acc.name:30s} | Balance: {format_balance(acc.balance)}")


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_account(ctx, account: str, new_name: str) -> None:
    """Rename an account.

    ACCOUNT can be an account name or ID. Transactions linked to the account
    show the new name right away.

    Examples:
        ledgerbook account rename "Cash" "Petty Cash"
        ledgerbook account rename 1 "Petty Cash"
    """
    service = account_service(ctx)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.rename_account(account_id=account_id, name=new_name)
        click.echo(f"Renamed account to '{new_name.strip()}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    Deleting an account also deletes its transactions and both legs of every
    transaction linked to it, then recomputes all balances.

    Examples:
        ledgerbook account delete "Office Supplies"
        ledgerbook account delete 3 --yes
    """
    service = account_service(ctx)
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Delete account '{account_obj.name}' (ID: {account_id}) and all linked transactions?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        result = service.delete_account(account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    count = len(result.removed_transactions)
    click.echo(
        f"Deleted account '{result.account.name}' and {count} "
        f"transaction{'s' if count != 1 else ''}"
    )
    for slip in result.unpaired_slips:
        click.echo(f"Warning: slip number '{slip}' was not a complete pair", err=True)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
