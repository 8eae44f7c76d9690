"""CLI helpers for product resolution."""

from __future__ import annotations

import click
from shopledger.domain.entities import StockItem
from shopledger.domain.inventory import StockService
from shopledger.utils.product_resolver import resolve_product


def resolve_product_or_exit(
    ctx: click.Context, stock_service: StockService, product: str
) -> StockItem:
    """Resolve product name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_product(stock_service, product)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
