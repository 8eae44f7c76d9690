"""CLI helpers for parsing option values."""

from datetime import date
from decimal import Decimal

import click

from shopledger.cli.error_handling import exit_with_error
from shopledger.utils.amount_parser import parse_amount
from shopledger.utils.date_parser import parse_date


def parse_date_or_exit(ctx: click.Context, value: str | None) -> date:
    """Parse a --date option, defaulting to today."""
    if value is None:
        return date.today()
    try:
        return parse_date(value)
    except ValueError as e:
        exit_with_error(ctx, f"Invalid date format: {e}")


def parse_amount_or_exit(ctx: click.Context, value: str) -> Decimal:
    """Parse an --amount option."""
    try:
        return parse_amount(value)
    except ValueError as e:
        exit_with_error(ctx, f"Invalid amount format: {e}")


def format_amount(amount: Decimal) -> str:
    """Render an amount with thousands separators."""
    return f"{amount:,}"
