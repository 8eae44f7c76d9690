"""Tests for stock model functions."""

from datetime import date
from decimal import Decimal

from shopledger.domain.entities import Entry, EntryType, StockDelta, StockItem
from shopledger.domain.stock import (
    apply_quantity_and_revenue,
    apply_stock_delta,
    deduct,
    find_product,
    inventory_turnover,
    inventory_value,
    is_low_stock,
    low_stock_report,
    product_exists,
    round_half_up,
    shift_stock_item,
    stock_health_status,
    top_by_revenue,
    top_sellers,
)


def _item(item_id="p1", name="Soap", quantity=10, threshold=2, **kwargs):
    return StockItem(id=item_id, name=name, quantity=quantity, threshold=threshold, **kwargs)


def _sale(product_id, quantity, amount, entry_id="e1"):
    return Entry(
        id=entry_id,
        date=date(2025, 6, 1),
        timestamp=0,
        type=EntryType.SALE,
        amount=Decimal(amount),
        product_id=product_id,
        quantity=quantity,
    )


def test_round_half_up():
    assert round_half_up(Decimal("2.5")) == Decimal("3")
    assert round_half_up(Decimal("1333.33")) == Decimal("1333")


def test_find_product():
    items = [_item("p1"), _item("p2", name="Oil")]
    assert find_product(items, "p2").name == "Oil"
    assert find_product(items, "missing") is None
    assert find_product(items, None) is None
    assert product_exists(items, "p1")
    assert not product_exists(items, "p3")


def test_deduct_floors_at_zero():
    items = [_item(quantity=3)]
    assert deduct(items, "p1", 2) == 1
    assert deduct(items, "p1", 5) == 0
    assert deduct(items, "unknown", 1) is None


def test_first_sale_sets_unit_price():
    item = apply_quantity_and_revenue(_item(), 2, Decimal("3000"))

    assert item.quantity == 8
    assert item.total_sold == 2
    assert item.unit_price == Decimal("1500")


def test_unit_price_is_weighted_average():
    item = apply_quantity_and_revenue(_item(), 2, Decimal("3000"))
    item = apply_quantity_and_revenue(item, 1, Decimal("1000"))

    assert item.total_sold == 3
    # (2 * 1500 + 1000) / 3 rounded
    assert item.unit_price == Decimal("1333")


def test_sale_cannot_make_quantity_negative():
    item = apply_quantity_and_revenue(_item(quantity=3), 5, Decimal("5000"))
    assert item.quantity == 0
    assert item.total_sold == 5


def test_revert_restores_quantity_and_clears_price():
    delta = StockDelta(product_id="p1", quantity_change=-2, sold_change=2, revenue=Decimal("3000"))
    sold = shift_stock_item(_item(), delta, +1)
    reverted = shift_stock_item(sold, delta, -1)

    assert reverted.quantity == 10
    assert reverted.total_sold == 0
    assert reverted.unit_price is None


def test_stock_in_does_not_touch_sales():
    delta = StockDelta(product_id="p1", quantity_change=5)
    item = shift_stock_item(_item(total_sold=4, unit_price=Decimal("200")), delta, +1)

    assert item.quantity == 15
    assert item.total_sold == 4
    assert item.unit_price == Decimal("200")


def test_stock_in_revert_floors_at_zero():
    delta = StockDelta(product_id="p1", quantity_change=5)
    item = shift_stock_item(_item(quantity=2), delta, -1)
    assert item.quantity == 0


def test_apply_stock_delta_reports_missing_product():
    items = (_item(),)
    delta = StockDelta(product_id="other", quantity_change=-1, sold_change=1)

    updated, found = apply_stock_delta(items, delta, +1)

    assert not found
    assert updated == items


def test_low_stock_report_orders_by_remaining_share():
    items = [
        _item("p1", name="A", quantity=2, threshold=4),
        _item("p2", name="B", quantity=1, threshold=4),
        _item("p3", name="C", quantity=9, threshold=4),
        _item("p4", name="D", quantity=0, threshold=0),
    ]

    report = low_stock_report(items)

    assert [low.item.id for low in report] == ["p4", "p2", "p1"]
    assert report[0].remaining_percentage == 0.0
    assert report[1].remaining_percentage == 25.0
    assert is_low_stock(items[0])
    assert not is_low_stock(items[2])


def test_top_sellers():
    items = [
        _item("p1", total_sold=5),
        _item("p2", name="Oil", total_sold=12),
        _item("p3", name="Salt", total_sold=0),
    ]

    sellers = top_sellers(items)

    assert [s.item.id for s in sellers] == ["p2", "p1"]
    assert sellers[0].current_stock == 10
    assert len(top_sellers(items, limit=1)) == 1


def test_top_by_revenue_aggregates_sale_entries():
    items = [_item("p1"), _item("p2", name="Oil")]
    entries = [
        _sale("p1", 2, "2000", "e1"),
        _sale("p2", 1, "5000", "e2"),
        _sale("p1", 1, "1000", "e3"),
        _sale("gone", 1, "9000", "e4"),
    ]

    ranked = top_by_revenue(items, entries)

    assert [r.item.id for r in ranked] == ["p2", "p1"]
    assert ranked[1].total_revenue == Decimal("3000")
    assert ranked[1].units_sold == 3
    assert ranked[1].average_price == Decimal("1000")


def test_inventory_value_and_turnover():
    items = [
        _item("p1", quantity=4, unit_price=Decimal("250"), total_sold=30),
        _item("p2", name="Oil", quantity=10, total_sold=30),
    ]

    assert inventory_value(items) == Decimal("1000")
    assert inventory_turnover(items) == 2.0
    assert inventory_turnover(items, days_tracked=0) == 0.0


def test_stock_health_status():
    items = [
        _item("p1", quantity=0, threshold=2),
        _item("p2", name="B", quantity=2, threshold=2),
        _item("p3", name="C", quantity=7, threshold=2),
    ]

    status = stock_health_status(items)

    assert status.total_items == 3
    assert status.out_of_stock_count == 1
    assert status.low_stock_count == 1
    assert status.well_stocked_count == 1
    assert status.average_stock == 3.0


def test_stock_health_status_empty():
    status = stock_health_status([])
    assert status.total_items == 0
    assert status.average_stock == 0.0
