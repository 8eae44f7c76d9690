"""Stock management commands."""

import click
from shopledger.cli.error_handling import handle_outcome
from shopledger.cli.parsing import format_amount, parse_amount_or_exit, parse_date_or_exit
from shopledger.cli.product_resolution import resolve_product_or_exit
from shopledger.domain.inventory import StockService
from shopledger.domain.stock import is_low_stock, low_stock_report, top_sellers


@click.group()
def stock_group():
    """Manage stock items."""
    pass


@stock_group.command("add")
@click.argument("name")
@click.option("--quantity", type=click.IntRange(min=0), default=0, help="Units on hand")
@click.option("--threshold", type=click.IntRange(min=0), default=0, help="Low-stock alert level")
@click.pass_context
def add_item(ctx, name: str, quantity: int, threshold: int):
    """Create a new stock item."""
    service = StockService(ctx.obj["store"])
    outcome = service.create_item(name=name, quantity=quantity, threshold=threshold)
    handle_outcome(ctx, outcome)
    click.echo(f"Created product '{outcome.value.name}' (ID: {outcome.value.id})")


@stock_group.command("list")
@click.option("--search", help="Only show products whose name contains this text")
@click.pass_context
def list_items(ctx, search: str | None):
    """List stock items."""
    items = StockService(ctx.obj["store"]).list_items(search=search)
    if not items:
        click.echo("No products found.")
        return

    click.echo(f"\n{'ID':<20} {'Name':<24} {'Qty':>6} {'Alert':>6} {'Sold':>6} {'Unit price':>12}")
    click.echo("-" * 80)
    for item in items:
        price = format_amount(item.unit_price) if item.unit_price is not None else "-"
        marker = " LOW" if is_low_stock(item) else ""
        click.echo(
            f"{item.id:<20} {item.name:<24} {item.quantity:>6} {item.threshold:>6} "
            f"{item.total_sold:>6} {price:>12}{marker}"
        )


@stock_group.command("edit")
@click.argument("product")
@click.option("--name", help="New product name")
@click.option("--quantity", type=click.IntRange(min=0), help="Set units on hand")
@click.option("--threshold", type=click.IntRange(min=0), help="Set low-stock alert level")
@click.pass_context
def edit_item(ctx, product: str, name: str | None, quantity: int | None, threshold: int | None):
    """Edit a stock item (PRODUCT is a name or ID)."""
    service = StockService(ctx.obj["store"])
    item = resolve_product_or_exit(ctx, service, product)
    outcome = service.update_item(item.id, name=name, quantity=quantity, threshold=threshold)
    handle_outcome(ctx, outcome)
    click.echo(f"Updated product '{outcome.value.name}'")


@stock_group.command("delete")
@click.argument("product")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_item(ctx, product: str, yes: bool):
    """Delete a stock item. Its recorded entries are kept."""
    service = StockService(ctx.obj["store"])
    item = resolve_product_or_exit(ctx, service, product)
    if not yes:
        click.confirm(f"Delete product '{item.name}'?", abort=True)
    handle_outcome(ctx, service.delete_item(item.id))
    click.echo(f"Deleted product '{item.name}'")


@stock_group.command("initial")
@click.argument("product")
@click.option("--quantity", type=click.IntRange(min=1), required=True, help="Units purchased")
@click.option("--amount", required=True, help="Purchase cost")
@click.option("--date", "date_str", help="Purchase date (default: today)")
@click.pass_context
def initial_stock(ctx, product: str, quantity: int, amount: str, date_str: str | None):
    """Record the initial stocking purchase of a product."""
    service = StockService(ctx.obj["store"])
    item = resolve_product_or_exit(ctx, service, product)
    cost = parse_amount_or_exit(ctx, amount)
    day = parse_date_or_exit(ctx, date_str)

    outcome = service.record_initial_stock(item.id, quantity, cost, day)
    handle_outcome(ctx, outcome)
    click.echo(
        f"Recorded initial stock of {quantity} x '{item.name}' for {format_amount(cost)} "
        f"(entry ID: {outcome.value})"
    )


@stock_group.command("low")
@click.pass_context
def low_stock(ctx):
    """Show products at or below their alert level."""
    report = low_stock_report(StockService(ctx.obj["store"]).list_items())
    if not report:
        click.echo("No products are low on stock.")
        return

    for low in report:
        click.echo(
            f"{low.item.name}: {low.item.quantity} left "
            f"(alert at {low.item.threshold}, {low.remaining_percentage:.0f}%)"
        )


@stock_group.command("top")
@click.option("--limit", type=click.IntRange(min=1), default=5, help="Number of products")
@click.pass_context
def top_products(ctx, limit: int):
    """Show the best-selling products by units sold."""
    sellers = top_sellers(StockService(ctx.obj["store"]).list_items(), limit=limit)
    if not sellers:
        click.echo("No sales recorded yet.")
        return

    for rank, seller in enumerate(sellers, start=1):
        click.echo(
            f"{rank}. {seller.item.name}: {seller.total_sold} sold, "
            f"{seller.current_stock} in stock"
        )


def register_commands(cli):
    """Register stock commands with main CLI."""
    cli.add_command(stock_group, name="stock")
