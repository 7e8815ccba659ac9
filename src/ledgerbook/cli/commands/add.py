"""Add transaction command."""

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.formatting import format_amount, format_balance
from ledgerbook.cli.services import account_service, transaction_service
from ledgerbook.utils.date_parser import parse_date


@click.command("add")
@click.option("--account", required=True, help="Account the entry is recorded in (name or ID)")
@click.option("--linked", required=True, help="Counter-account receiving the opposite entry (name or ID)")
@click.option(
    "--date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--description", default="", help="Transaction description")
@click.option("--slip", required=True, help="Slip number, unique across the ledger")
@click.option(
    "--type",
    "entry_type",
    type=click.Choice(["debit", "credit"], case_sensitive=False),
    required=True,
    help="Entry type for ACCOUNT; LINKED receives the opposite",
)
@click.option("--amount", required=True, help="Positive amount (e.g., 800 or 1,250.50)")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    linked: str,
    date: str,
    description: str,
    slip: str,
    entry_type: str,
    amount: str,
):
    """Add a double-entry transaction.

    Records the entry in ACCOUNT and the opposite entry in the linked
    account, both under the same slip number.

    Examples:
        ledgerbook add --account Cash --linked "Rent Expense" --date 2024-07-23 \\
            --description "Rent Payment" --slip S005 --type debit --amount 800
    """
    accounts = account_service(ctx)
    service = transaction_service(ctx)

    account_id = resolve_account_or_exit(ctx, accounts, account)
    linked_id = resolve_account_or_exit(ctx, accounts, linked)

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        pair = service.create_transaction(
            current_account_id=account_id,
            linked_account_id=linked_id,
            date=txn_date,
            description=description,
            slip_number=slip,
            entry_type=entry_type.lower(),
            amount=amount,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    leg, counter = pair.leg, pair.counter_leg
    click.echo(f"Created transaction with slip number '{leg.slip_number}'")
    click.echo(f"  Date: {leg.date}")
    if leg.description:
        click.echo(f"  Description: {leg.description}")
    for txn in (leg, counter):
        owner = accounts.get_account(txn.account_id)
        click.echo(
            f"  {owner.name} No. {txn.number}: debit {format_amount(txn.debit)}, "
            f"credit {format_amount(txn.credit)} -> balance {format_balance(owner.balance)}"
        )


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
