"""Transaction management commands."""

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.formatting import format_amount, format_balance
from ledgerbook.cli.services import account_service, balance_service, transaction_service
from ledgerbook.domain.errors import PartialLedgerError
from ledgerbook.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--account", required=True, help="Account name or ID")
@click.pass_context
def list_transactions(ctx, account: str):
    """List an account's transactions with running balances."""
    accounts = account_service(ctx)
    account_id = resolve_account_or_exit(ctx, accounts, account)
    account_obj = accounts.get_account(account_id)

    running = balance_service(ctx).running_balance(account_id)
    if not running.transactions:
        click.echo(f"No transactions found in account '{account_obj.name}'.")
        return

    click.echo(f"\nAccount: {account_obj.name}")
    click.echo("-" * 118)
    click.echo(
        f"{'No.':<5} {'Date':<12} {'Description':<28} {'Slip':<10} {'Code':<20} "
        f"{'Debit':>12} {'Credit':>12} {'Balance':>15}"
    )
    click.echo("-" * 118)
    for row in running.transactions:
        txn = row.transaction
        click.echo(
            f"{txn.number:<5} {str(txn.date):<12} {txn.description[:28]:<28} "
            f"{txn.slip_number[:10]:<10} {txn.code[:20]:<20} "
            f"{format_amount(txn.debit):>12} {format_amount(txn.credit):>12} "
            f"{format_balance(row.balance):>15}"
        )
    click.echo("-" * 118)
    click.echo(f"Final balance: {format_balance(running.final_balance)}")


@transaction_group.command("edit")
@click.argument("slip_number")
@click.option("--account", required=True, help="Account holding the leg being edited (name or ID)")
@click.option("--linked", help="New counter-account (name or ID); defaults to the current one")
@click.option("--date", help="New date (YYYY-MM-DD or relative like 'today')")
@click.option("--description", help="New description")
@click.option("--slip", "new_slip", help="New slip number")
@click.option(
    "--type",
    "entry_type",
    type=click.Choice(["debit", "credit"], case_sensitive=False),
    help="New entry type for ACCOUNT",
)
@click.option("--amount", help="New positive amount")
@click.pass_context
def edit_transaction(
    ctx,
    slip_number: str,
    account: str,
    linked: str | None,
    date: str | None,
    description: str | None,
    new_slip: str | None,
    entry_type: str | None,
    amount: str | None,
) -> None:
    """Edit both legs of a transaction.

    Options that are not given keep their current values.

    Examples:
        ledgerbook transaction edit S005 --account Cash --linked Utilities
        ledgerbook transaction edit S005 --account Cash --amount 850 --slip S005A
    """
    accounts = account_service(ctx)
    service = transaction_service(ctx)
    account_id = resolve_account_or_exit(ctx, accounts, account)

    try:
        leg = service.get_leg(slip_number, account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    linked_id = leg.linked_account_id
    if linked is not None:
        linked_id = resolve_account_or_exit(ctx, accounts, linked)

    txn_date = leg.date
    if date is not None:
        try:
            txn_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        pair = service.edit_transaction(
            original_slip_number=leg.slip_number,
            current_account_id=account_id,
            old_linked_account_name=leg.code,
            new_linked_account_id=linked_id,
            date=txn_date,
            description=leg.description if description is None else description,
            slip_number=new_slip or leg.slip_number,
            entry_type=entry_type.lower() if entry_type else leg.entry.type,
            amount=leg.entry.amount if amount is None else amount,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Updated transaction '{pair.leg.slip_number}' "
        f"({pair.leg.code} <-> {pair.counter_leg.code})"
    )


@transaction_group.command("delete")
@click.argument("slip_number")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, slip_number: str, yes: bool) -> None:
    """Delete both legs of a transaction by slip number.

    Examples:
        ledgerbook transaction delete S005
    """
    service = transaction_service(ctx)

    check = service.slip_number_exists(slip_number)
    if not check.exists:
        click.echo(f"Error: No transaction with slip number '{slip_number}' found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete transaction '{slip_number}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        removed = service.delete_transaction(slip_number)
        click.echo(f"Deleted transaction '{slip_number}' ({len(removed)} legs)")
    except PartialLedgerError as e:
        click.echo(f"Warning: {e}", err=True)
        ctx.exit(1)
    except ValueError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("find-slip")
@click.argument("slip_number")
@click.pass_context
def find_slip(ctx, slip_number: str) -> None:
    """Show where a slip number is used (ignoring case)."""
    check = transaction_service(ctx).slip_number_exists(slip_number)
    if not check.exists:
        click.echo(f"Slip number '{slip_number}' is not used.")
        return

    txn = check.conflicting_transaction
    click.echo(
        f"Slip number '{txn.slip_number}' is used by transaction No. {txn.number} "
        f"in account '{check.conflicting_account_name}'"
    )


@transaction_group.command("check")
@click.pass_context
def check_ledger(ctx) -> None:
    """Report transactions whose legs do not pair up."""
    issues = transaction_service(ctx).find_pairing_issues()
    if not issues:
        click.echo("All transactions are paired.")
        return

    click.echo(f"Found {len(issues)} inconsistent slip number(s):")
    for issue in issues:
        click.echo(f"  {issue.slip_number}: {issue.reason}")
    ctx.exit(1)


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
