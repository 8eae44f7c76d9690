"""Profit and expense analytics.

All functions are pure over a sequence of entries and a reference day
``today`` (defaulting to the current local date). They hold no state and can
be called in any order.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from shopledger.domain.entities import (
    Entry,
    EntryType,
    ExpenseBreakdownItem,
    ExpenseCategory,
    EXPENSE_CATEGORIES,
)
from shopledger.domain.stock import round_half_up

ZERO = Decimal("0")

# Relative change between half-window means that counts as a trend.
TREND_THRESHOLD = Decimal("0.05")


def _today(today: Optional[date]) -> date:
    return today if today is not None else date.today()


def window_start(today: date, days: int) -> date:
    """First day of a trailing window of the given length ending today."""
    return today - timedelta(days=days - 1)


def entries_in_range(entries: Iterable[Entry], start: date, end: date) -> list[Entry]:
    """Return entries whose day falls within [start, end]."""
    return [e for e in entries if start <= e.date <= end]


def sales_total(entries: Iterable[Entry]) -> Decimal:
    return sum((e.amount for e in entries if e.type == EntryType.SALE), ZERO)


def expenses_total(entries: Iterable[Entry]) -> Decimal:
    return sum((e.amount for e in entries if e.type == EntryType.EXPENSE), ZERO)


def profit(sales: Decimal, expenses: Decimal) -> Decimal:
    """Profit of a period; negative when expenses exceed sales."""
    return sales - expenses


def entries_profit(entries: Sequence[Entry]) -> Decimal:
    return profit(sales_total(entries), expenses_total(entries))


def today_profit(entries: Iterable[Entry], today: Optional[date] = None) -> Decimal:
    """Profit of all entries dated today."""
    day = _today(today)
    return entries_profit([e for e in entries if e.date == day])


def monthly_profit(entries: Iterable[Entry], today: Optional[date] = None) -> Decimal:
    """Profit of all entries dated in the current calendar month."""
    day = _today(today)
    return entries_profit(
        [e for e in entries if e.date.year == day.year and e.date.month == day.month]
    )


def daily_profits(entries: Iterable[Entry], start: date, end: date) -> list[tuple[date, Decimal]]:
    """Profit per day for the days in [start, end] that have entries, by day."""
    by_day: dict[date, list[Entry]] = {}
    for entry in entries_in_range(entries, start, end):
        by_day.setdefault(entry.date, []).append(entry)
    return [(day, entries_profit(day_entries)) for day, day_entries in sorted(by_day.items())]


def average_daily_profit(
    entries: Iterable[Entry], days: int = 7, today: Optional[date] = None
) -> Decimal:
    """Mean profit of the days with entries in the trailing window, to 2 decimals."""
    day = _today(today)
    profits = daily_profits(entries, window_start(day, days), day)
    if not profits:
        return ZERO
    mean = sum((value for _, value in profits), ZERO) / len(profits)
    return mean.quantize(Decimal("0.01"))


def trend_7_day(entries: Iterable[Entry], today: Optional[date] = None) -> int:
    """Direction of daily profit over the last 7 calendar days.

    The days with data are split by count into a first and second half and
    their mean daily profits compared.

    Returns:
        1 if the second half is more than 5% above the first, -1 if more than
        5% below, 0 otherwise or with fewer than 2 days of data
    """
    day = _today(today)
    values = [value for _, value in daily_profits(entries, window_start(day, 7), day)]
    if len(values) < 2:
        return 0

    midpoint = len(values) // 2
    first, second = values[:midpoint], values[midpoint:]
    first_mean = sum(first, ZERO) / len(first)
    second_mean = sum(second, ZERO) / len(second)
    margin = abs(first_mean) * TREND_THRESHOLD

    if second_mean > first_mean + margin:
        return 1
    if second_mean < first_mean - margin:
        return -1
    return 0


def expense_ratio(
    entries: Iterable[Entry], window_days: int = 7, today: Optional[date] = None
) -> float:
    """Expenses as a fraction of sales over the trailing window.

    A window without sales reports 0, even when it has expenses.
    """
    day = _today(today)
    window = entries_in_range(entries, window_start(day, window_days), day)
    sales = sales_total(window)
    if sales == 0:
        return 0.0
    return float(expenses_total(window) / sales)


def missing_entry_count(
    entries: Iterable[Entry], window_days: int = 7, today: Optional[date] = None
) -> int:
    """Number of days in the trailing window without any entry."""
    day = _today(today)
    start = window_start(day, window_days)
    recorded = {e.date for e in entries_in_range(entries, start, day)}
    return sum(1 for offset in range(window_days) if start + timedelta(days=offset) not in recorded)


def weekly_growth(entries: Iterable[Entry], today: Optional[date] = None) -> float:
    """Percentage change of profit between the last 7 days and the 7 before.

    Returns 0 when the previous week's profit is exactly 0.
    """
    entries = list(entries)
    day = _today(today)
    current_start = window_start(day, 7)
    previous_end = current_start - timedelta(days=1)
    previous_start = window_start(previous_end, 7)

    current = entries_profit(entries_in_range(entries, current_start, day))
    previous = entries_profit(entries_in_range(entries, previous_start, previous_end))
    if previous == 0:
        return 0.0
    return float((current - previous) / abs(previous) * 100)


def expenses_by_category(entries: Iterable[Entry]) -> dict[ExpenseCategory, Decimal]:
    """Sum expense amounts per category; every category is present."""
    breakdown = {category: ZERO for category in EXPENSE_CATEGORIES}
    for entry in entries:
        if entry.type == EntryType.EXPENSE and entry.category is not None:
            breakdown[entry.category] += entry.amount
    return breakdown


def expense_breakdown(entries: Iterable[Entry]) -> list[ExpenseBreakdownItem]:
    """Expense totals per category with their share of the total.

    Categories with no expenses are left out; the rest are sorted by amount,
    largest first. Percentages are rounded to whole numbers.
    """
    breakdown = expenses_by_category(entries)
    total = sum(breakdown.values(), ZERO)
    if total == 0:
        return []

    items = [
        ExpenseBreakdownItem(
            category=category,
            amount=amount,
            percentage=int(round_half_up(amount / total * 100)),
        )
        for category, amount in breakdown.items()
        if amount > 0
    ]
    return sorted(items, key=lambda item: item.amount, reverse=True)


def today_expense_breakdown(
    entries: Iterable[Entry], today: Optional[date] = None
) -> list[ExpenseBreakdownItem]:
    day = _today(today)
    return expense_breakdown(entries_in_range(entries, day, day))


def weekly_expense_breakdown(
    entries: Iterable[Entry], today: Optional[date] = None
) -> list[ExpenseBreakdownItem]:
    day = _today(today)
    return expense_breakdown(entries_in_range(entries, window_start(day, 7), day))


def monthly_expense_breakdown(
    entries: Iterable[Entry], today: Optional[date] = None
) -> list[ExpenseBreakdownItem]:
    day = _today(today)
    return expense_breakdown(
        e for e in entries if e.date.year == day.year and e.date.month == day.month
    )
