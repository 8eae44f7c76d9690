"""Mapper functions to convert between domain models and the JSON document.

The persisted document keeps the camelCase field names of the wire format.
These functions assume their input already passed validation.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional, Union

from shopledger.domain import entities as domain

Number = Union[int, float, Decimal]


def to_decimal(value: Number) -> Decimal:
    """Convert a JSON number to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_json_number(value: Decimal) -> Union[int, float]:
    """Convert a Decimal to the plainest JSON number."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _optional_decimal(value: Optional[Number]) -> Optional[Decimal]:
    return None if value is None else to_decimal(value)


def _optional_json_number(value: Optional[Decimal]) -> Optional[Union[int, float]]:
    return None if value is None else to_json_number(value)


def settings_to_domain(raw: dict[str, Any]) -> domain.BusinessSettings:
    """Convert a settings object to a BusinessSettings entity."""
    return domain.BusinessSettings(
        name=raw["name"],
        daily_target=_optional_decimal(raw.get("dailyTarget")),
    )


def settings_to_dict(settings: domain.BusinessSettings) -> dict[str, Any]:
    """Convert a BusinessSettings entity to its JSON object."""
    raw: dict[str, Any] = {"name": settings.name}
    if settings.daily_target is not None:
        raw["dailyTarget"] = to_json_number(settings.daily_target)
    return raw


def stock_item_to_domain(raw: dict[str, Any]) -> domain.StockItem:
    """Convert a stock object to a StockItem entity."""
    return domain.StockItem(
        id=raw["id"],
        name=raw["name"],
        quantity=raw["quantity"],
        threshold=raw["threshold"],
        total_sold=raw.get("totalSold", 0),
        unit_price=_optional_decimal(raw.get("unitPrice")),
        has_initial_stock_transaction=raw.get("hasInitialStockTransaction", False),
    )


def stock_item_to_dict(item: domain.StockItem) -> dict[str, Any]:
    """Convert a StockItem entity to its JSON object."""
    raw: dict[str, Any] = {
        "id": item.id,
        "name": item.name,
        "quantity": item.quantity,
        "threshold": item.threshold,
        "totalSold": item.total_sold,
        "hasInitialStockTransaction": item.has_initial_stock_transaction,
    }
    if item.unit_price is not None:
        raw["unitPrice"] = to_json_number(item.unit_price)
    return raw


def entry_to_domain(raw: dict[str, Any]) -> domain.Entry:
    """Convert an entry object to an Entry entity."""
    category = raw.get("category")
    return domain.Entry(
        id=raw["id"],
        date=date.fromisoformat(raw["date"]),
        timestamp=int(raw["timestamp"]),
        type=domain.EntryType(raw["type"]),
        amount=to_decimal(raw["amount"]),
        product_id=raw.get("productId"),
        quantity=raw.get("quantity"),
        category=domain.ExpenseCategory(category) if category is not None else None,
    )


def entry_to_dict(entry: domain.Entry) -> dict[str, Any]:
    """Convert an Entry entity to its JSON object."""
    raw: dict[str, Any] = {
        "id": entry.id,
        "date": entry.date.isoformat(),
        "timestamp": entry.timestamp,
        "type": entry.type.value,
        "amount": to_json_number(entry.amount),
    }
    if entry.product_id is not None:
        raw["productId"] = entry.product_id
    if entry.quantity is not None:
        raw["quantity"] = entry.quantity
    if entry.category is not None:
        raw["category"] = entry.category.value
    return raw


def document_to_domain(raw: dict[str, Any]) -> domain.BusinessData:
    """Convert a validated document to a BusinessData aggregate."""
    return domain.BusinessData(
        settings=settings_to_domain(raw["settings"]),
        entries=tuple(entry_to_domain(e) for e in raw["entries"]),
        stock=tuple(stock_item_to_domain(s) for s in raw["stock"]),
    )


def document_to_dict(data: domain.BusinessData, schema_version: int) -> dict[str, Any]:
    """Convert a BusinessData aggregate to its JSON document."""
    return {
        "schemaVersion": schema_version,
        "settings": settings_to_dict(data.settings),
        "entries": [entry_to_dict(e) for e in data.entries],
        "stock": [stock_item_to_dict(s) for s in data.stock],
    }
