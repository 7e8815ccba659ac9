"""Ledger export and import commands."""

import json

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.services import snapshot_service


@click.command("export")
@click.argument("path", type=click.Path(dir_okay=False, writable=True))
@click.pass_context
def export_ledger(ctx, path: str):
    """Write the whole ledger to a JSON file."""
    data = snapshot_service(ctx).export_snapshot()
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    click.echo(
        f"Exported {len(data['accounts'])} accounts and "
        f"{len(data['transactions'])} transactions to {path}"
    )


@click.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def import_ledger(ctx, path: str, yes: bool):
    """Replace the whole ledger with the contents of a JSON file."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        click.echo(f"Error: Invalid JSON in {path}: {e}", err=True)
        ctx.exit(1)

    if not yes and not click.confirm("This replaces every account and transaction. Continue?"):
        click.echo("Import cancelled.")
        return

    try:
        state = snapshot_service(ctx).import_snapshot(data)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Imported {len(state.accounts)} accounts and {len(state.transactions)} transactions"
    )


def register_commands(cli):
    """Register export and import commands with main CLI."""
    cli.add_command(export_ledger)
    cli.add_command(import_ledger)
