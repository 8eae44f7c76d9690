"""Main CLI entry point."""

import click
from shopledger.database.factories import create_sqlite_store
from shopledger.logging_config import configure_logging

# Import and register all commands at module level
from shopledger.cli.commands import entry, report, settings, stock, transfer


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SHOPLEDGER_DB_PATH environment variable)",
    envvar="SHOPLEDGER_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (overrides SHOPLEDGER_LOG_LEVEL environment variable)",
    envvar="SHOPLEDGER_LOG_LEVEL",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every operation (same as --log-level DEBUG)")
@click.option("--json-logs", is_flag=True, help="Write log events as JSON lines")
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None, verbose: bool, json_logs: bool):
    """Shopledger - Bookkeeping for small shops.

    Record sales and expenses, keep stock levels consistent with them, and
    follow profit, expenses and the health of the business.
    """
    ctx.ensure_object(dict)
    configure_logging("DEBUG" if verbose else log_level, json_output=json_logs)

    # Open the store only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path)
        ctx.obj["store"] = store
        ctx.call_on_close(store.slot.disconnect)


# Register all commands
settings.register_commands(cli)
stock.register_commands(cli)
entry.register_commands(cli)
report.register_commands(cli)
transfer.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
