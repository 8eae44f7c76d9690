"""Field-level validation of the persisted document and of new entries.

The ``validate_*_dict`` functions check the JSON wire shape (camelCase keys)
and raise ``ValidationError`` on the first problem found. ``validate_new_entry``
checks the stricter rules a freshly submitted entry must satisfy before the
ledger applies it.
"""

import math
import re
from datetime import date
from decimal import Decimal
from typing import Any, Mapping

from shopledger.domain.entities import (
    Entry,
    EntryType,
    ExpenseCategory,
    EXPENSE_CATEGORIES,
)
from shopledger.domain.errors import ValidationError, invalid_field

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

ENTRY_TYPES = {t.value for t in EntryType}
CATEGORY_NAMES = {c.value for c in EXPENSE_CATEGORIES}


def is_number(value: Any) -> bool:
    """Return True for finite int, float or Decimal values (bool excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, float):
        return math.isfinite(value)
    return True


def is_non_negative_number(value: Any) -> bool:
    return is_number(value) and value >= 0


def is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def is_valid_date_string(value: Any) -> bool:
    """Return True for a real calendar day written as YYYY-MM-DD."""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _require_mapping(raw: Any, owner: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise ValidationError(f"{owner} must be an object")
    return raw


def _require_id(raw: Mapping[str, Any], owner: str) -> str:
    value = raw.get("id")
    if not isinstance(value, str) or not value:
        raise ValidationError(invalid_field(owner, "id", "must be a non-empty string"))
    return value


def validate_settings_dict(raw: Any) -> None:
    """Validate the settings object."""
    settings = _require_mapping(raw, "Settings")
    if not isinstance(settings.get("name"), str):
        raise ValidationError(invalid_field("Settings", "name", "must be a string"))
    target = settings.get("dailyTarget")
    if target is not None and not is_non_negative_number(target):
        raise ValidationError(
            invalid_field("Settings", "dailyTarget", "must be a non-negative number")
        )


def validate_stock_item_dict(raw: Any) -> None:
    """Validate one stock item object."""
    item = _require_mapping(raw, "Stock item")
    item_id = _require_id(item, "Stock item")
    owner = f"Stock item '{item_id}'"

    name = item.get("name")
    if not isinstance(name, str) or not name:
        raise ValidationError(invalid_field(owner, "name", "must be a non-empty string"))

    for field_name in ("quantity", "threshold", "totalSold"):
        if not is_non_negative_int(item.get(field_name)):
            raise ValidationError(
                invalid_field(owner, field_name, "must be a non-negative integer")
            )

    unit_price = item.get("unitPrice")
    if unit_price is not None and not is_non_negative_number(unit_price):
        raise ValidationError(
            invalid_field(owner, "unitPrice", "must be a non-negative number")
        )

    flag = item.get("hasInitialStockTransaction", False)
    if not isinstance(flag, bool):
        raise ValidationError(
            invalid_field(owner, "hasInitialStockTransaction", "must be a boolean")
        )


def validate_entry_dict(raw: Any) -> None:
    """Validate one typed entry object."""
    entry = _require_mapping(raw, "Entry")
    entry_id = _require_id(entry, "Entry")
    owner = f"Entry '{entry_id}'"

    if not is_valid_date_string(entry.get("date")):
        raise ValidationError(invalid_field(owner, "date", "must be a YYYY-MM-DD date"))
    if not is_non_negative_int(entry.get("timestamp")):
        raise ValidationError(
            invalid_field(owner, "timestamp", "must be a non-negative integer")
        )

    entry_type = entry.get("type")
    if entry_type not in ENTRY_TYPES:
        raise ValidationError(invalid_field(owner, "type", f"is unknown ({entry_type!r})"))

    if not is_non_negative_number(entry.get("amount")):
        raise ValidationError(invalid_field(owner, "amount", "must be a non-negative number"))

    category = entry.get("category")
    if category is not None and category not in CATEGORY_NAMES:
        raise ValidationError(invalid_field(owner, "category", f"is unknown ({category!r})"))
    if entry_type == EntryType.EXPENSE.value and category is None:
        raise ValidationError(invalid_field(owner, "category", "is required for expenses"))

    quantity = entry.get("quantity")
    if quantity is not None and not is_non_negative_int(quantity):
        raise ValidationError(
            invalid_field(owner, "quantity", "must be a non-negative integer")
        )

    product_id = entry.get("productId")
    if product_id is not None and not isinstance(product_id, str):
        raise ValidationError(invalid_field(owner, "productId", "must be a string"))


def _require_unique_ids(items: list, owner: str) -> None:
    seen: set[str] = set()
    for item in items:
        item_id = item["id"]
        if item_id in seen:
            raise ValidationError(f"Duplicate {owner} id '{item_id}'")
        seen.add(item_id)


def validate_document_dict(raw: Any) -> None:
    """Validate the whole business document (settings, entries, stock)."""
    document = _require_mapping(raw, "Document")
    validate_settings_dict(document.get("settings"))

    entries = document.get("entries")
    if not isinstance(entries, list):
        raise ValidationError("Document: 'entries' must be a list")
    for entry in entries:
        validate_entry_dict(entry)

    stock = document.get("stock")
    if not isinstance(stock, list):
        raise ValidationError("Document: 'stock' must be a list")
    for item in stock:
        validate_stock_item_dict(item)

    _require_unique_ids(entries, "entry")
    _require_unique_ids(stock, "stock item")


def validate_new_entry(entry: Entry) -> None:
    """Validate an entry submitted to the ledger.

    Raises:
        ValidationError: If the entry breaks a SALE/EXPENSE shape rule
    """
    owner = f"Entry '{entry.id}'"
    if not entry.id:
        raise ValidationError(invalid_field("Entry", "id", "must be a non-empty string"))
    if entry.timestamp < 0:
        raise ValidationError(invalid_field(owner, "timestamp", "must be non-negative"))
    if not entry.amount.is_finite() or entry.amount < 0:
        raise ValidationError(invalid_field(owner, "amount", "must be a non-negative number"))

    if entry.type == EntryType.SALE:
        if not entry.product_id:
            raise ValidationError(invalid_field(owner, "productId", "is required for sales"))
        if entry.quantity is None or entry.quantity <= 0:
            raise ValidationError(invalid_field(owner, "quantity", "must be positive for sales"))
        if entry.category is not None:
            raise ValidationError(invalid_field(owner, "category", "is not allowed on sales"))
        return

    if entry.category is None:
        raise ValidationError(invalid_field(owner, "category", "is required for expenses"))
    if entry.category == ExpenseCategory.STOCK:
        if not entry.product_id:
            raise ValidationError(
                invalid_field(owner, "productId", "is required for stock purchases")
            )
        if entry.quantity is None or entry.quantity <= 0:
            raise ValidationError(
                invalid_field(owner, "quantity", "must be positive for stock purchases")
            )
    elif entry.product_id is not None or entry.quantity is not None:
        raise ValidationError(
            f"{owner}: only stock purchases may reference a product and quantity"
        )
