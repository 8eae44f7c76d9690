"""CLI error handling helpers."""

import click

from shopledger.domain.entities import Outcome


def exit_with_error(ctx: click.Context, message: str) -> None:
    """Render an error message and exit with failure."""
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)


def handle_outcome(ctx: click.Context, outcome: Outcome) -> None:
    """Exit with failure if a service operation did not succeed."""
    if not outcome:
        exit_with_error(ctx, outcome.error or "Operation failed")
