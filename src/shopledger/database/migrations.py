"""Linear migration chain for the persisted business document.

Each stored document carries a ``schemaVersion`` tag. A document without
one predates the tag and is treated as version 0. ``migrate_document`` runs
every step from the stored version up to ``CURRENT_SCHEMA_VERSION``:

- 0 -> 1: entries become typed SALE/EXPENSE records. Flat legacy entries
  (``sales``/``expenses`` numbers) and line-item entries
  (``saleItems``/``expenseItems`` lists) are split into one typed entry per
  amount; already typed entries pass through.
- 1 -> 2: stock items gain ``totalSold`` and ``hasInitialStockTransaction``
  defaults.
"""

import copy
from datetime import date, datetime, time
from typing import Any, Callable

import structlog

from shopledger.domain.entities import EntryType, ExpenseCategory
from shopledger.domain.errors import ValidationError, unsupported_schema_version
from shopledger.domain.validation import (
    is_non_negative_int,
    is_number,
    is_valid_date_string,
)

logger = structlog.get_logger(__name__)

CURRENT_SCHEMA_VERSION = 2

# Product reference carried by sales synthesized from legacy totals.
LEGACY_PRODUCT_ID = "_legacy_"

Migration = Callable[[dict[str, Any]], dict[str, Any]]


def detect_schema_version(raw: dict[str, Any]) -> int:
    """Return the schema version of a stored document.

    Raises:
        ValidationError: If the tag is malformed or newer than this release
    """
    version = raw.get("schemaVersion", 0)
    if not is_non_negative_int(version):
        raise ValidationError(f"Invalid schemaVersion {version!r}")
    if version > CURRENT_SCHEMA_VERSION:
        raise ValidationError(unsupported_schema_version(version, CURRENT_SCHEMA_VERSION))
    return version


def timestamp_from_date(value: Any) -> int:
    """Return local midnight of a YYYY-MM-DD day as epoch milliseconds."""
    if not is_valid_date_string(value):
        return 0
    midnight = datetime.combine(date.fromisoformat(value), time())
    return int(midnight.timestamp() * 1000)


def _amount(raw: dict[str, Any], key: str, owner: str) -> Any:
    value = raw.get(key)
    if value is None:
        return 0
    if not is_number(value):
        raise ValidationError(f"{owner}: '{key}' must be a number")
    return value


def _upgrade_line_items(entry: dict[str, Any], timestamp: int) -> list[dict[str, Any]]:
    entry_id = entry.get("id")
    upgraded: list[dict[str, Any]] = []
    for index, line in enumerate(entry["saleItems"]):
        if not isinstance(line, dict):
            raise ValidationError(f"Entry '{entry_id}': sale line {index} must be an object")
        upgraded.append(
            {
                "id": f"{entry_id}-sale-{index}",
                "date": entry.get("date"),
                "timestamp": timestamp,
                "type": EntryType.SALE.value,
                "productId": line.get("productId", LEGACY_PRODUCT_ID),
                "quantity": line.get("quantity", 1),
                "amount": _amount(line, "total", f"Entry '{entry_id}'"),
            }
        )
    for index, line in enumerate(entry["expenseItems"]):
        if not isinstance(line, dict):
            raise ValidationError(f"Entry '{entry_id}': expense line {index} must be an object")
        upgraded.append(
            {
                "id": f"{entry_id}-expense-{index}",
                "date": entry.get("date"),
                "timestamp": timestamp,
                "type": EntryType.EXPENSE.value,
                "category": line.get("category", ExpenseCategory.AUTRE.value),
                "amount": _amount(line, "amount", f"Entry '{entry_id}'"),
            }
        )
    return upgraded


def _upgrade_flat_totals(entry: dict[str, Any], timestamp: int) -> list[dict[str, Any]]:
    entry_id = entry.get("id")
    owner = f"Entry '{entry_id}'"
    sales = _amount(entry, "sales", owner)
    expenses = _amount(entry, "expenses", owner)

    upgraded: list[dict[str, Any]] = []
    if sales > 0:
        upgraded.append(
            {
                "id": f"{entry_id}-sale",
                "date": entry.get("date"),
                "timestamp": timestamp,
                "type": EntryType.SALE.value,
                "productId": LEGACY_PRODUCT_ID,
                "quantity": 1,
                "amount": sales,
            }
        )
    if expenses > 0:
        upgraded.append(
            {
                "id": f"{entry_id}-expense",
                "date": entry.get("date"),
                "timestamp": timestamp,
                "type": EntryType.EXPENSE.value,
                "category": ExpenseCategory.AUTRE.value,
                "amount": expenses,
            }
        )
    return upgraded


def upgrade_entry(entry: Any) -> list[dict[str, Any]]:
    """Convert one pre-version-1 entry into typed entries."""
    if not isinstance(entry, dict) or "type" in entry:
        # Typed (or malformed) entries are left for validation
        return [entry]

    timestamp = entry.get("timestamp")
    if not is_non_negative_int(timestamp):
        timestamp = timestamp_from_date(entry.get("date"))

    if isinstance(entry.get("saleItems"), list) and isinstance(entry.get("expenseItems"), list):
        return _upgrade_line_items(entry, timestamp)
    return _upgrade_flat_totals(entry, timestamp)


def migrate_v0_to_v1(raw: dict[str, Any]) -> dict[str, Any]:
    """Split untyped entries into typed SALE/EXPENSE entries."""
    entries = raw.get("entries")
    if isinstance(entries, list):
        upgraded: list[Any] = []
        for entry in entries:
            upgraded.extend(upgrade_entry(entry))
        raw["entries"] = upgraded
    return raw


def migrate_v1_to_v2(raw: dict[str, Any]) -> dict[str, Any]:
    """Default cumulative sales and the initial-stock flag on stock items."""
    stock = raw.get("stock")
    if isinstance(stock, list):
        for item in stock:
            if not isinstance(item, dict):
                continue
            if item.get("totalSold") is None:
                item["totalSold"] = 0
            if item.get("hasInitialStockTransaction") is None:
                item["hasInitialStockTransaction"] = False
    return raw


MIGRATIONS: dict[int, Migration] = {
    0: migrate_v0_to_v1,
    1: migrate_v1_to_v2,
}


def migrate_document(raw: dict[str, Any]) -> dict[str, Any]:
    """Bring a stored document up to CURRENT_SCHEMA_VERSION.

    The input is not modified.

    Args:
        raw: Parsed JSON document

    Returns:
        Migrated copy tagged with the current schema version

    Raises:
        ValidationError: If the version is unsupported or a legacy value is malformed
    """
    version = detect_schema_version(raw)
    document = copy.deepcopy(raw)
    while version < CURRENT_SCHEMA_VERSION:
        document = MIGRATIONS[version](document)
        logger.info("document.migrated", from_version=version, to_version=version + 1)
        version += 1
    document["schemaVersion"] = version
    return document
