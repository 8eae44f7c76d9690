"""Analytics and health report commands."""

import click
from shopledger.cli.parsing import format_amount
from shopledger.domain import analytics
from shopledger.domain.health import health_score, score_indicator
from shopledger.domain.stock import (
    inventory_turnover,
    inventory_value,
    low_stock_report,
    stock_health_status,
    top_by_revenue,
    top_sellers,
)

TREND_LABELS = {1: "rising", 0: "stable", -1: "falling"}

BREAKDOWNS = {
    "today": analytics.today_expense_breakdown,
    "week": analytics.weekly_expense_breakdown,
    "month": analytics.monthly_expense_breakdown,
}


@click.group()
def report_group():
    """Business reports."""
    pass


@report_group.command("health")
@click.pass_context
def health_report(ctx):
    """Show the business health score (0-10)."""
    data = ctx.obj["store"].load()
    result = health_score(data.entries, daily_target=data.settings.daily_target)
    click.echo(f"Health score: {result.score:.1f}/10 [{score_indicator(result.score)}]")
    click.echo(result.message)


@report_group.command("profit")
@click.pass_context
def profit_report(ctx):
    """Show profit figures and trends."""
    data = ctx.obj["store"].load()
    entries = data.entries

    today_value = analytics.today_profit(entries)
    click.echo(f"Today's profit:       {format_amount(today_value)}")
    if data.settings.daily_target is not None:
        click.echo(f"Daily target:         {format_amount(data.settings.daily_target)}")
    click.echo(f"This month's profit:  {format_amount(analytics.monthly_profit(entries))}")
    click.echo(f"7-day average:        {format_amount(analytics.average_daily_profit(entries))}")
    click.echo(f"7-day trend:          {TREND_LABELS[analytics.trend_7_day(entries)]}")
    click.echo(f"Weekly growth:        {analytics.weekly_growth(entries):+.1f}%")
    click.echo(f"Expense ratio (7d):   {analytics.expense_ratio(entries) * 100:.0f}%")
    click.echo(f"Days without entries: {analytics.missing_entry_count(entries)} of last 7")


@report_group.command("expenses")
@click.option(
    "--period",
    type=click.Choice(["today", "week", "month", "all"], case_sensitive=False),
    default="month",
    help="Period to break down (default: month)",
)
@click.pass_context
def expenses_report(ctx, period: str):
    """Show expenses by category."""
    entries = ctx.obj["store"].load().entries
    period = period.lower()
    if period == "all":
        breakdown = analytics.expense_breakdown(entries)
    else:
        breakdown = BREAKDOWNS[period](entries)

    if not breakdown:
        click.echo("No expenses recorded for this period.")
        return

    for line in breakdown:
        click.echo(f"{line.category.value:<12} {format_amount(line.amount):>14} {line.percentage:>4}%")


@report_group.command("products")
@click.option("--limit", type=click.IntRange(min=1), default=5, help="Number of products per ranking")
@click.pass_context
def products_report(ctx, limit: int):
    """Show stock health and product rankings."""
    data = ctx.obj["store"].load()
    status = stock_health_status(data.stock)

    click.echo(f"Products:      {status.total_items}")
    click.echo(f"Well stocked:  {status.well_stocked_count}")
    click.echo(f"Low stock:     {status.low_stock_count}")
    click.echo(f"Out of stock:  {status.out_of_stock_count}")
    click.echo(f"Average stock: {status.average_stock}")
    click.echo(f"Stock value:   {format_amount(inventory_value(data.stock))}")
    click.echo(f"Turnover:      {inventory_turnover(data.stock):.2f} units/day")

    low = low_stock_report(data.stock)
    if low:
        click.echo("\nLow stock:")
        for item in low:
            click.echo(f"  {item.item.name}: {item.item.quantity} left")

    sellers = top_sellers(data.stock, limit=limit)
    if sellers:
        click.echo("\nTop sellers:")
        for seller in sellers:
            click.echo(f"  {seller.item.name}: {seller.total_sold} sold")

    earners = top_by_revenue(data.stock, data.entries, limit=limit)
    if earners:
        click.echo("\nTop revenue:")
        for product in earners:
            click.echo(
                f"  {product.item.name}: {format_amount(product.total_revenue)} "
                f"({product.units_sold} units)"
            )


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
