"""Tests for the business health score."""

from datetime import timedelta
from decimal import Decimal

import pytest

from shopledger.domain.entities import ExpenseCategory
from shopledger.domain.health import (
    MESSAGES,
    compress_score,
    health_message_key,
    health_score,
    score_band,
    score_indicator,
)
from shopledger.domain.ledger import make_expense, make_sale


def sale(day, value):
    return make_sale(day, "p1", 1, Decimal(value))


def expense(day, value):
    return make_expense(day, ExpenseCategory.TRANSPORT, Decimal(value))


def last_days(today, count):
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def test_compress_score():
    assert compress_score(100) == 10.0
    assert compress_score(75) == 7.5
    assert compress_score(73) == 7.5
    assert compress_score(72) == 7.0
    assert compress_score(-20) == 0.0
    assert compress_score(150) == 10.0


@pytest.mark.parametrize(
    "score,band",
    [(10.0, "excellent"), (8.5, "excellent"), (8.0, "good"), (6.5, "good"),
     (6.0, "warning"), (4.5, "warning"), (4.0, "critical"), (0.0, "critical")],
)
def test_score_band(score, band):
    assert score_band(score) == band


def test_score_indicator():
    assert score_indicator(9.0) == "++"
    assert score_indicator(1.0) == "!!"


@pytest.mark.parametrize(
    "score,trend,ratio,missing,key",
    [
        (9.0, 1, 0.2, 0, "excellent.growing"),
        (9.0, 0, 0.2, 0, "excellent.steady"),
        (7.0, 0, 0.8, 0, "good.expenses"),
        (7.0, -1, 0.3, 2, "good.steady"),
        (5.0, 0, 0.1, 3, "warning.missing"),
        (5.0, 0, 0.85, 0, "warning.expenses"),
        (5.0, -1, 0.1, 0, "warning.declining"),
        (5.0, 1, 0.1, 0, "warning.profit"),
        (2.0, 0, 1.2, 0, "critical.expenses"),
        (2.0, -1, 0.5, 4, "critical.irregular"),
        (2.0, 0, 0.5, 0, "critical.default"),
    ],
)
def test_health_message_key(score, trend, ratio, missing, key):
    assert health_message_key(score, trend, ratio, missing) == key


def test_empty_history(today):
    result = health_score([], today=today)

    # 70 - 10 (7 missing days) + 15 (no expenses)
    assert result.score == 7.5
    assert result.band == "good"
    assert result.message_key == "good.steady"
    assert result.message == MESSAGES["good.steady"]


def test_growing_business_scores_top(today):
    entries = [sale(day, 1000 * (i + 1)) for i, day in enumerate(last_days(today, 7))]

    result = health_score(entries, today=today)

    assert result.score == 10.0
    assert result.message_key == "excellent.growing"


def test_loss_making_business_is_critical(today):
    entries = []
    for day in last_days(today, 7):
        entries.append(sale(day, "1000"))
        entries.append(expense(day, "2000"))

    result = health_score(entries, today=today)

    # 70 - 15 - 20 + 10 - 15
    assert result.score == 3.0
    assert result.band == "critical"
    assert result.message_key == "critical.expenses"


@pytest.mark.parametrize(
    "target,expected",
    [(None, 9.0), (Decimal("0"), 9.0), (Decimal("25000"), 10.0), (Decimal("40000"), 9.5),
     (Decimal("50000"), 9.0)],
)
def test_daily_target(today, target, expected):
    entries = [sale(today, "30000")]
    assert health_score(entries, daily_target=target, today=today).score == expected


def test_deterministic(today):
    entries = [sale(today, "500"), expense(today - timedelta(days=1), "800")]
    assert health_score(entries, today=today) == health_score(entries, today=today)


@pytest.mark.parametrize("target", [None, Decimal("1"), Decimal("1000000")])
@pytest.mark.parametrize(
    "values",
    [
        [],
        [("s", 0, 100)],
        [("e", 0, 100)],
        [("s", d, 1000 * d) for d in range(14)],
        [("e", d, 500) for d in range(20)] + [("s", 3, 10)],
        [("s", d, 10) for d in range(0, 14, 3)] + [("e", 1, 999999)],
    ],
)
def test_score_is_bounded_half_step(today, target, values):
    entries = [
        sale(today - timedelta(days=d), v) if kind == "s" else expense(today - timedelta(days=d), v)
        for kind, d, v in values
    ]

    score = health_score(entries, daily_target=target, today=today).score

    assert 0 <= score <= 10
    assert (score * 2) == int(score * 2)
