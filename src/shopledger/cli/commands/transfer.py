"""Export, import and reset commands."""

from datetime import date
from pathlib import Path

import click
from shopledger.cli.error_handling import exit_with_error, handle_outcome
from shopledger.domain.transfer import TransferService


@click.command("export")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: shopledger_YYYY-MM-DD.json)",
)
@click.pass_context
def export_data(ctx, output: Path | None):
    """Export stock and entries to a JSON file."""
    if output is None:
        output = Path(f"shopledger_{date.today().isoformat()}.json")

    outcome = TransferService(ctx.obj["store"]).write_export(output)
    handle_outcome(ctx, outcome)
    click.echo(f"Exported data to {output}")


@click.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def import_data(ctx, file: Path, yes: bool):
    """Replace stock and entries with the contents of an export FILE.

    Business settings are kept.
    """
    service = TransferService(ctx.obj["store"])
    result = service.read_import(file)
    if not result:
        exit_with_error(ctx, result.error)

    payload = result.payload
    click.echo(f"File contains {len(payload.stock)} products and {len(payload.entries)} entries.")
    if not yes:
        click.confirm("Replace all current stock and entries?", abort=True)

    handle_outcome(ctx, service.apply_import(payload))
    click.echo("Import complete")


@click.command("reset")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset_data(ctx, yes: bool):
    """Delete all business data, settings included."""
    if not yes:
        click.confirm("Delete ALL business data? This cannot be undone", abort=True)
    if not ctx.obj["store"].clear():
        exit_with_error(ctx, "Could not delete business data")
    click.echo("All business data deleted")


def register_commands(cli):
    """Register transfer commands with main CLI."""
    cli.add_command(export_data)
    cli.add_command(import_data)
    cli.add_command(reset_data)
