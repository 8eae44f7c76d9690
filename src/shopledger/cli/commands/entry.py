"""Sale and expense entry commands."""

from dataclasses import replace

import click
from shopledger.cli.error_handling import exit_with_error, handle_outcome
from shopledger.cli.parsing import format_amount, parse_amount_or_exit, parse_date_or_exit
from shopledger.cli.product_resolution import resolve_product_or_exit
from shopledger.domain.entities import EXPENSE_CATEGORIES, Entry, ExpenseCategory, StockItem
from shopledger.domain.inventory import StockService
from shopledger.domain.ledger import EntryLedgerService, make_expense, make_sale
from shopledger.domain.stock import round_half_up
from shopledger.utils.date_parser import parse_year_month

CATEGORY_CHOICE = click.Choice([c.value for c in EXPENSE_CATEGORIES], case_sensitive=False)


def describe_entry(entry: Entry, products: dict[str, StockItem]) -> str:
    """One-line description of an entry for listings."""
    if entry.product_id is not None:
        item = products.get(entry.product_id)
        product = item.name if item is not None else f"{entry.product_id} (deleted)"
    else:
        product = None

    if entry.is_sale:
        return f"Sale of {entry.quantity} x {product}"
    if product is not None:
        return f"{entry.category.value}: {entry.quantity} x {product}"
    return entry.category.value


def print_entries(entries: list[Entry], products: dict[str, StockItem]) -> None:
    """Print entries as a table."""
    click.echo(f"\n{'Date':<12} {'ID':<40} {'Amount':>14}  Description")
    click.echo("-" * 100)
    for entry in entries:
        sign = "+" if entry.is_sale else "-"
        click.echo(
            f"{entry.date.isoformat():<12} {entry.id:<40} "
            f"{sign + format_amount(entry.amount):>14}  {describe_entry(entry, products)}"
        )


@click.group()
def entry_group():
    """Record, edit and list sales and expenses."""
    pass


@entry_group.command("sale")
@click.argument("product")
@click.option("--quantity", type=click.IntRange(min=1), required=True, help="Units sold")
@click.option("--amount", help="Total sale amount (default: quantity x average unit price)")
@click.option("--date", "date_str", help="Sale date (default: today)")
@click.pass_context
def record_sale(ctx, product: str, quantity: int, amount: str | None, date_str: str | None):
    """Record a sale of PRODUCT (a name or ID)."""
    store = ctx.obj["store"]
    item = resolve_product_or_exit(ctx, StockService(store), product)
    day = parse_date_or_exit(ctx, date_str)

    if amount is not None:
        total = parse_amount_or_exit(ctx, amount)
    elif item.unit_price is not None:
        total = round_half_up(item.unit_price * quantity)
        click.echo(f"Using average unit price {format_amount(item.unit_price)}")
    else:
        exit_with_error(ctx, f"No sales recorded yet for '{item.name}'; --amount is required")

    if quantity > item.quantity:
        click.echo(
            f"Warning: only {item.quantity} '{item.name}' in stock; stock will be set to 0",
            err=True,
        )

    entry = make_sale(day, item.id, quantity, total)
    handle_outcome(ctx, EntryLedgerService(store).add(entry))
    click.echo(
        f"Recorded sale of {quantity} x '{item.name}' for {format_amount(total)} "
        f"(ID: {entry.id})"
    )


@entry_group.command("expense")
@click.argument("category", type=CATEGORY_CHOICE)
@click.option("--amount", required=True, help="Expense amount")
@click.option("--product", help="Product restocked (Stock expenses only)")
@click.option("--quantity", type=click.IntRange(min=1), help="Units restocked (Stock expenses only)")
@click.option("--date", "date_str", help="Expense date (default: today)")
@click.pass_context
def record_expense(
    ctx,
    category: str,
    amount: str,
    product: str | None,
    quantity: int | None,
    date_str: str | None,
):
    """Record an expense in CATEGORY.

    Stock expenses need --product and --quantity and add the units to stock.
    """
    store = ctx.obj["store"]
    expense_category = ExpenseCategory(category)
    total = parse_amount_or_exit(ctx, amount)
    day = parse_date_or_exit(ctx, date_str)

    product_id = None
    if product is not None:
        product_id = resolve_product_or_exit(ctx, StockService(store), product).id

    entry = make_expense(day, expense_category, total, product_id=product_id, quantity=quantity)
    handle_outcome(ctx, EntryLedgerService(store).add(entry))
    click.echo(
        f"Recorded {expense_category.value} expense of {format_amount(total)} (ID: {entry.id})"
    )


@entry_group.command("edit")
@click.argument("entry_id")
@click.option("--amount", help="New amount")
@click.option("--quantity", type=click.IntRange(min=1), help="New quantity")
@click.option("--product", help="New product (name or ID)")
@click.option("--category", type=CATEGORY_CHOICE, help="New expense category")
@click.option("--date", "date_str", help="New date")
@click.pass_context
def edit_entry(
    ctx,
    entry_id: str,
    amount: str | None,
    quantity: int | None,
    product: str | None,
    category: str | None,
    date_str: str | None,
):
    """Edit an entry. Its stock effect is recomputed."""
    store = ctx.obj["store"]
    ledger = EntryLedgerService(store)
    current = ledger.by_id(entry_id)
    if current is None:
        exit_with_error(ctx, f"Entry '{entry_id}' not found")

    changes = {}
    if amount is not None:
        changes["amount"] = parse_amount_or_exit(ctx, amount)
    if quantity is not None:
        changes["quantity"] = quantity
    if product is not None:
        changes["product_id"] = resolve_product_or_exit(ctx, StockService(store), product).id
    if date_str is not None:
        changes["date"] = parse_date_or_exit(ctx, date_str)
    if category is not None:
        if current.is_sale:
            exit_with_error(ctx, "Sales have no category")
        changes["category"] = ExpenseCategory(category)
        if changes["category"] != ExpenseCategory.STOCK:
            changes["product_id"] = None
            changes["quantity"] = None

    if not changes:
        exit_with_error(ctx, "Nothing to change")

    handle_outcome(ctx, ledger.update(replace(current, **changes)))
    click.echo(f"Updated entry {entry_id}")


@entry_group.command("delete")
@click.argument("entry_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: str, yes: bool):
    """Delete an entry and undo its stock effect."""
    if not yes:
        click.confirm(f"Delete entry {entry_id}?", abort=True)
    handle_outcome(ctx, EntryLedgerService(ctx.obj["store"]).delete(entry_id))
    click.echo(f"Deleted entry {entry_id}")


@entry_group.command("list")
@click.option("--date", "date_str", help="Only entries of this day")
@click.option("--month", help="Only entries created in this month (YYYY-MM, 'this month', 'last month')")
@click.pass_context
def list_entries(ctx, date_str: str | None, month: str | None):
    """List entries."""
    store = ctx.obj["store"]
    ledger = EntryLedgerService(store)
    if date_str is not None and month is not None:
        exit_with_error(ctx, "Use either --date or --month, not both")

    if date_str is not None:
        entries = ledger.entries_for_date(parse_date_or_exit(ctx, date_str))
    elif month is not None:
        try:
            year_month = parse_year_month(month)
        except ValueError as e:
            exit_with_error(ctx, str(e))
        entries = ledger.entries_for_month(year_month)
    else:
        entries = list(ledger.all_entries())

    if not entries:
        click.echo("No entries found.")
        return

    products = {item.id: item for item in StockService(store).list_items()}
    print_entries(entries, products)


@entry_group.command("day")
@click.argument("day", required=False)
@click.pass_context
def day_summary(ctx, day: str | None):
    """Show sales, expenses and profit of DAY (default: today)."""
    target = parse_date_or_exit(ctx, day)
    totals = EntryLedgerService(ctx.obj["store"]).day_totals(target)
    click.echo(f"{target.isoformat()}")
    click.echo(f"  Sales:    {format_amount(totals.sales)}")
    click.echo(f"  Expenses: {format_amount(totals.expenses)}")
    click.echo(f"  Profit:   {format_amount(totals.profit)}")


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
