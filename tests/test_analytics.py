"""Tests for profit and expense analytics."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from shopledger.domain import analytics
from shopledger.domain.entities import ExpenseCategory, EXPENSE_CATEGORIES
from shopledger.domain.ledger import make_expense, make_sale


def sale(day, value):
    return make_sale(day, "p1", 1, Decimal(value))


def expense(day, value, category=ExpenseCategory.AUTRE):
    return make_expense(day, category, Decimal(value))


def daily_series(today, values):
    """One sale per day ending today, oldest first."""
    start = today - timedelta(days=len(values) - 1)
    return [sale(start + timedelta(days=i), value) for i, value in enumerate(values)]


def test_profit():
    assert analytics.profit(Decimal("100"), Decimal("30")) == Decimal("70")
    assert analytics.profit(Decimal("10"), Decimal("30")) == Decimal("-20")


def test_today_profit(today):
    entries = [
        sale(today, "5000"),
        expense(today, "1500"),
        sale(today - timedelta(days=1), "9999"),
    ]
    assert analytics.today_profit(entries, today) == Decimal("3500")


def test_monthly_profit_is_calendar_month(today):
    entries = [
        sale(date(2025, 6, 1), "100000"),
        expense(date(2025, 6, 1), "10000", ExpenseCategory.TRANSPORT),
        sale(date(2025, 5, 31), "50000"),
    ]
    assert analytics.monthly_profit(entries, today) == Decimal("90000")


def test_monthly_profit_empty():
    assert analytics.monthly_profit([], date(2025, 6, 15)) == Decimal("0")


def test_daily_profits_skips_days_without_entries(today):
    entries = [sale(today, "300"), sale(today - timedelta(days=2), "100")]

    profits = analytics.daily_profits(entries, today - timedelta(days=6), today)

    assert profits == [(today - timedelta(days=2), Decimal("100")), (today, Decimal("300"))]


def test_average_daily_profit(today):
    entries = [sale(today - timedelta(days=1), "1000"), sale(today, "2001")]
    assert analytics.average_daily_profit(entries, 7, today) == Decimal("1500.50")
    assert analytics.average_daily_profit([], 7, today) == Decimal("0")


def test_trend_increasing(today):
    entries = daily_series(today, [1000, 2000, 3000, 4000, 5000, 6000, 7000])
    assert analytics.trend_7_day(entries, today) == 1


def test_trend_decreasing(today):
    entries = daily_series(today, [7000, 6000, 5000, 4000, 3000, 2000, 1000])
    assert analytics.trend_7_day(entries, today) == -1


def test_trend_constant(today):
    entries = daily_series(today, [2500] * 7)
    assert analytics.trend_7_day(entries, today) == 0


def test_trend_within_threshold_is_flat(today):
    entries = daily_series(today, [1000, 1000, 1040, 1040])
    assert analytics.trend_7_day(entries, today) == 0


def test_trend_needs_two_days(today):
    assert analytics.trend_7_day([sale(today, "1000")], today) == 0
    assert analytics.trend_7_day([], today) == 0


def test_trend_ignores_days_outside_window(today):
    old = daily_series(today - timedelta(days=10), [9000, 9000, 9000])
    recent = daily_series(today, [100, 200])
    assert analytics.trend_7_day(old + recent, today) == 1


def test_expense_ratio(today):
    entries = [sale(today, "100000"), expense(today, "30000")]
    assert analytics.expense_ratio(entries, 7, today) == pytest.approx(0.3)


def test_expense_ratio_without_sales_is_zero(today):
    entries = [expense(today, "50000")]
    assert analytics.expense_ratio(entries, 7, today) == 0.0


def test_expense_ratio_window(today):
    entries = [sale(today, "1000"), expense(today - timedelta(days=7), "5000")]
    assert analytics.expense_ratio(entries, 7, today) == 0.0


def test_missing_entry_count(today):
    entries = [sale(today, "1"), expense(today - timedelta(days=2), "1")]
    assert analytics.missing_entry_count(entries, 7, today) == 5
    assert analytics.missing_entry_count([], 7, today) == 7
    assert analytics.missing_entry_count(daily_series(today, [1] * 7), 7, today) == 0


def test_weekly_growth(today):
    entries = [sale(today - timedelta(days=10), "1000"), sale(today, "1500")]
    assert analytics.weekly_growth(entries, today) == pytest.approx(50.0)


def test_weekly_growth_zero_previous_week(today):
    assert analytics.weekly_growth([sale(today, "1500")], today) == 0.0


def test_weekly_growth_from_loss(today):
    entries = [expense(today - timedelta(days=8), "1000")]
    # Previous week lost 1000, current week broke even
    assert analytics.weekly_growth(entries, today) == pytest.approx(100.0)


def test_expenses_by_category_has_every_category(today):
    breakdown = analytics.expenses_by_category([expense(today, "500", ExpenseCategory.LOYER)])

    assert set(breakdown) == set(EXPENSE_CATEGORIES)
    assert breakdown[ExpenseCategory.LOYER] == Decimal("500")
    assert breakdown[ExpenseCategory.STOCK] == Decimal("0")


def test_expense_breakdown(today):
    entries = [
        expense(today, "3000", ExpenseCategory.TRANSPORT),
        expense(today, "6000", ExpenseCategory.LOYER),
        expense(today, "1000", ExpenseCategory.AUTRE),
        sale(today, "99999"),
    ]

    breakdown = analytics.expense_breakdown(entries)

    assert [line.category for line in breakdown] == [
        ExpenseCategory.LOYER,
        ExpenseCategory.TRANSPORT,
        ExpenseCategory.AUTRE,
    ]
    assert [line.percentage for line in breakdown] == [60, 30, 10]
    assert breakdown[0].amount == Decimal("6000")


def test_expense_breakdown_rounds_percentages(today):
    entries = [
        expense(today, "1", ExpenseCategory.TRANSPORT),
        expense(today, "1", ExpenseCategory.LOYER),
        expense(today, "1", ExpenseCategory.INTERNET),
    ]
    assert [line.percentage for line in analytics.expense_breakdown(entries)] == [33, 33, 33]


def test_expense_breakdown_empty():
    assert analytics.expense_breakdown([]) == []


def test_breakdown_periods(today):
    entries = [
        expense(today, "100", ExpenseCategory.TRANSPORT),
        expense(today - timedelta(days=3), "200", ExpenseCategory.LOYER),
        expense(date(2025, 6, 1), "400", ExpenseCategory.SALAIRE),
        expense(date(2025, 5, 20), "800", ExpenseCategory.INTERNET),
    ]

    today_lines = analytics.today_expense_breakdown(entries, today)
    week_lines = analytics.weekly_expense_breakdown(entries, today)
    month_lines = analytics.monthly_expense_breakdown(entries, today)

    assert [line.category for line in today_lines] == [ExpenseCategory.TRANSPORT]
    assert {line.category for line in week_lines} == {
        ExpenseCategory.TRANSPORT,
        ExpenseCategory.LOYER,
    }
    assert sum(line.amount for line in month_lines) == Decimal("700")


def test_weekly_growth_smaller_loss_is_recovery(today):
    entries = [
        expense(today - timedelta(days=9), "100"),
        expense(today, "50"),
    ]
    assert analytics.weekly_growth(entries, today) == pytest.approx(50.0)
