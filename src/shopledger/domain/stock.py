"""Stock model: pure operations over a list of stock items.

Nothing here touches storage. The ledger and the stock service apply the
returned values to the document and persist it.
"""

from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from shopledger.domain.entities import (
    Entry,
    EntryType,
    LowStockItem,
    StockDelta,
    StockHealthStatus,
    StockItem,
    TopRevenueProduct,
    TopSellingProduct,
)


def round_half_up(value: Decimal) -> Decimal:
    """Round to the nearest whole unit, halves away from zero."""
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def find_product(items: Iterable[StockItem], product_id: Optional[str]) -> Optional[StockItem]:
    """Return the stock item with the given id, or None."""
    if product_id is None:
        return None
    return next((item for item in items if item.id == product_id), None)


def product_exists(items: Iterable[StockItem], product_id: Optional[str]) -> bool:
    return find_product(items, product_id) is not None


def is_low_stock(item: StockItem) -> bool:
    return item.quantity <= item.threshold


def deduct(items: Iterable[StockItem], product_id: str, quantity: int) -> Optional[int]:
    """Return the stock level left after selling quantity units.

    Returns:
        New quantity floored at 0, or None if the product does not exist
    """
    item = find_product(items, product_id)
    if item is None:
        return None
    return max(0, item.quantity - quantity)


def _average_unit_price(
    item: StockItem, delta: StockDelta, sign: int, new_total_sold: int
) -> Optional[Decimal]:
    if new_total_sold <= 0:
        return None
    cumulative = item.total_sold * (item.unit_price or Decimal("0"))
    cumulative = max(Decimal("0"), cumulative + sign * delta.revenue)
    return round_half_up(cumulative / new_total_sold)


def shift_stock_item(item: StockItem, delta: StockDelta, sign: int) -> StockItem:
    """Apply (sign=+1) or revert (sign=-1) a stock delta on one item.

    Quantity and cumulative units sold are floored at 0. When units are sold
    the weighted-average unit price is recomputed from the running revenue;
    on revert this unwinds the average only approximately, since the stored
    price is rounded.
    """
    quantity = max(0, item.quantity + sign * delta.quantity_change)
    if delta.sold_change == 0:
        return replace(item, quantity=quantity)

    total_sold = max(0, item.total_sold + sign * delta.sold_change)
    return replace(
        item,
        quantity=quantity,
        total_sold=total_sold,
        unit_price=_average_unit_price(item, delta, sign, total_sold),
    )


def apply_quantity_and_revenue(item: StockItem, quantity: int, sale_amount: Decimal) -> StockItem:
    """Record a sale of quantity units for sale_amount on one item."""
    delta = StockDelta(
        product_id=item.id,
        quantity_change=-quantity,
        sold_change=quantity,
        revenue=sale_amount,
    )
    return shift_stock_item(item, delta, +1)


def apply_stock_delta(
    items: Sequence[StockItem], delta: StockDelta, sign: int
) -> tuple[tuple[StockItem, ...], bool]:
    """Apply or revert a delta on the matching item of a stock list.

    Returns:
        The new stock list and whether a matching item was found
    """
    found = False
    updated = []
    for item in items:
        if item.id == delta.product_id and not found:
            updated.append(shift_stock_item(item, delta, sign))
            found = True
        else:
            updated.append(item)
    return tuple(updated), found


def low_stock_report(items: Iterable[StockItem]) -> list[LowStockItem]:
    """Return low-stock items, most critical first.

    An item with a zero threshold is reported with 0% remaining.
    """
    report = [
        LowStockItem(
            item=item,
            remaining_percentage=(
                item.quantity / item.threshold * 100 if item.threshold > 0 else 0.0
            ),
        )
        for item in items
        if is_low_stock(item)
    ]
    return sorted(report, key=lambda low: low.remaining_percentage)


def top_sellers(items: Iterable[StockItem], limit: int = 5) -> list[TopSellingProduct]:
    """Return the best-selling products by cumulative units sold."""
    sellers = [
        TopSellingProduct(item=item, total_sold=item.total_sold, current_stock=item.quantity)
        for item in items
        if item.total_sold > 0
    ]
    sellers.sort(key=lambda seller: seller.total_sold, reverse=True)
    return sellers[:limit]


def top_by_revenue(
    items: Iterable[StockItem], entries: Iterable[Entry], limit: int = 5
) -> list[TopRevenueProduct]:
    """Return the best-performing products by revenue recorded in sale entries."""
    revenue: dict[str, Decimal] = {}
    units: dict[str, int] = {}
    for entry in entries:
        if entry.type != EntryType.SALE or entry.product_id is None:
            continue
        revenue[entry.product_id] = revenue.get(entry.product_id, Decimal("0")) + entry.amount
        units[entry.product_id] = units.get(entry.product_id, 0) + (entry.quantity or 0)

    ranked = []
    for item in items:
        total = revenue.get(item.id, Decimal("0"))
        if total <= 0:
            continue
        sold = units[item.id]
        ranked.append(
            TopRevenueProduct(
                item=item,
                total_revenue=total,
                units_sold=sold,
                average_price=total / sold if sold > 0 else Decimal("0"),
            )
        )
    ranked.sort(key=lambda product: product.total_revenue, reverse=True)
    return ranked[:limit]


def inventory_value(items: Iterable[StockItem]) -> Decimal:
    """Total value of stock on hand at the average unit prices."""
    return sum(
        (item.quantity * (item.unit_price or Decimal("0")) for item in items),
        Decimal("0"),
    )


def inventory_turnover(items: Iterable[StockItem], days_tracked: int = 30) -> float:
    """Units sold per day over the tracked period."""
    if days_tracked <= 0:
        return 0.0
    return sum(item.total_sold for item in items) / days_tracked


def stock_health_status(items: Sequence[StockItem]) -> StockHealthStatus:
    """Summarize how many items are out, low, or well stocked."""
    average = sum(item.quantity for item in items) / len(items) if items else 0.0
    return StockHealthStatus(
        total_items=len(items),
        low_stock_count=sum(1 for item in items if 0 < item.quantity <= item.threshold),
        out_of_stock_count=sum(1 for item in items if item.quantity == 0),
        well_stocked_count=sum(1 for item in items if item.quantity > item.threshold),
        average_stock=round(average, 2),
    )
