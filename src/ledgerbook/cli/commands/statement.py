"""Account statement command."""

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.formatting import format_amount, format_balance
from ledgerbook.cli.services import account_service, statement_service


@click.command("statement")
@click.argument("account", metavar="ACCOUNT")
@click.option("--up-to", "up_to", type=int, help="Stop after this transaction number")
@click.pass_context
def show_statement(ctx, account: str, up_to: int | None):
    """Print the statement of an account.

    ACCOUNT can be an account name or ID.

    Examples:
        ledgerbook statement Cash
        ledgerbook statement Cash --up-to 3
    """
    account_id = resolve_account_or_exit(ctx, account_service(ctx), account)

    try:
        statement = statement_service(ctx).build_statement(account_id, up_to_number=up_to)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Account Statement: {statement.account_name}")
    click.echo(f"Generated on: {statement.generated_on}")
    if up_to is not None:
        click.echo(f"Up to transaction No. {up_to}")

    if not statement.lines:
        click.echo("No transactions to display.")
        return

    click.echo("-" * 110)
    click.echo(
        f"{'No.':>5} {'Date':<12} {'Description':<30} {'Slip No.':<10} "
        f"{'Debit':>13} {'Credit':>13} {'Balance':>13} {'Status':<6}"
    )
    click.echo("-" * 110)
    for line in statement.lines:
        click.echo(
            f"{line.number:>5} {str(line.date):<12} {line.description[:30]:<30} "
            f"{line.slip_number[:10]:<10} {format_amount(line.debit):>13} "
            f"{format_amount(line.credit):>13} {format_amount(abs(line.balance)):>13} "
            f"{line.balance_status:<6}"
        )
    click.echo("-" * 110)
    click.echo(f"Final Balance: {format_balance(statement.final_balance)}")


def register_commands(cli):
    """Register statement command with main CLI."""
    cli.add_command(show_statement)
