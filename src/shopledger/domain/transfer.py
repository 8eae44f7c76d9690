"""Export and import of stock and entries as a portable JSON file.

The export payload is ``{version: 1, exportedAt: <epoch-ms>, stock, entries}``.
Imports reject any other version and check every item before anything is
written; the outcome is always returned as a value, never raised.
"""

import json
from dataclasses import replace
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import structlog

from shopledger.database.mappers import (
    entry_to_dict,
    entry_to_domain,
    stock_item_to_dict,
    stock_item_to_domain,
)
from shopledger.database.migrations import migrate_v1_to_v2
from shopledger.database.store import DocumentStore
from shopledger.domain.entities import ExportPayload, ImportResult, Outcome
from shopledger.domain.errors import (
    DomainError,
    ValidationError,
    save_failed,
    unsupported_export_version,
)
from shopledger.domain.ledger import now_timestamp, sort_entries
from shopledger.domain.validation import (
    ENTRY_TYPES,
    is_number,
    validate_entry_dict,
    validate_stock_item_dict,
)

logger = structlog.get_logger(__name__)

EXPORT_VERSION = 1


def _check_stock_item(raw: Any) -> None:
    if not isinstance(raw, dict):
        raise ValidationError("Invalid stock item")
    if not isinstance(raw.get("id"), str):
        raise ValidationError("Stock item without a valid 'id'")
    if not isinstance(raw.get("name"), str):
        raise ValidationError("Stock item without a valid 'name'")
    if not is_number(raw.get("quantity")):
        raise ValidationError(f"Stock item '{raw['id']}': 'quantity' must be a number")


def _check_entry(raw: Any) -> None:
    if not isinstance(raw, dict):
        raise ValidationError("Invalid entry")
    if not isinstance(raw.get("id"), str):
        raise ValidationError("Entry without a valid 'id'")
    if not is_number(raw.get("timestamp")):
        raise ValidationError(f"Entry '{raw['id']}': 'timestamp' must be a number")
    if raw.get("type") not in ENTRY_TYPES:
        raise ValidationError(f"Entry '{raw['id']}': unknown type {raw.get('type')!r}")
    if not is_number(raw.get("amount")):
        raise ValidationError(f"Entry '{raw['id']}': 'amount' must be a number")


def validate_payload(raw: Any) -> ExportPayload:
    """Check an export payload and convert it to domain entities.

    Raises:
        ValidationError: On an unsupported version or an invalid item
    """
    if not isinstance(raw, dict):
        raise ValidationError("Invalid file format")

    version = raw.get("version")
    if isinstance(version, bool) or version != EXPORT_VERSION:
        raise ValidationError(unsupported_export_version(version))

    stock = raw.get("stock")
    if not isinstance(stock, list):
        raise ValidationError("Missing or invalid 'stock' field")
    entries = raw.get("entries")
    if not isinstance(entries, list):
        raise ValidationError("Missing or invalid 'entries' field")

    for item in stock:
        _check_stock_item(item)
    for entry in entries:
        _check_entry(entry)

    # Files written before the initial-stock flag existed lack some stock defaults
    stock = migrate_v1_to_v2({"stock": [dict(item) for item in stock]})["stock"]
    for item in stock:
        validate_stock_item_dict(item)
    for entry in entries:
        validate_entry_dict(entry)

    exported_at = raw.get("exportedAt")
    return ExportPayload(
        version=EXPORT_VERSION,
        exported_at=int(exported_at) if is_number(exported_at) else 0,
        stock=tuple(stock_item_to_domain(item) for item in stock),
        entries=tuple(entry_to_domain(entry) for entry in entries),
    )


def parse_import(text: str) -> ImportResult:
    """Parse and validate the contents of an export file."""
    try:
        raw = json.loads(text, parse_float=Decimal)
    except ValueError:
        return ImportResult(ok=False, error="The file is not valid JSON")

    try:
        payload = validate_payload(raw)
    except DomainError as e:
        return ImportResult(ok=False, error=str(e))
    return ImportResult(ok=True, payload=payload)


class TransferService:
    """Service for exporting and importing the business data."""

    def __init__(self, store: DocumentStore):
        """Initialize transfer service.

        Args:
            store: Document store instance
        """
        self.store = store

    def export_payload(self, exported_at: Optional[int] = None) -> dict[str, Any]:
        """Build the export payload of the current stock and entries."""
        data = self.store.load()
        return {
            "version": EXPORT_VERSION,
            "exportedAt": now_timestamp() if exported_at is None else exported_at,
            "stock": [stock_item_to_dict(item) for item in data.stock],
            "entries": [entry_to_dict(entry) for entry in data.entries],
        }

    def export_json(self, exported_at: Optional[int] = None) -> str:
        """Serialize the export payload as indented JSON."""
        return json.dumps(self.export_payload(exported_at), indent=2, ensure_ascii=False)

    def write_export(self, path: Path, exported_at: Optional[int] = None) -> Outcome:
        """Write the export payload to a file.

        Returns:
            Outcome carrying the written path on success
        """
        try:
            path.write_text(self.export_json(exported_at), encoding="utf-8")
        except OSError as e:
            logger.error("transfer.export.write_failed", path=str(path), error=str(e))
            return Outcome.failure(f"Could not write export file: {e}")
        logger.info("transfer.exported", path=str(path))
        return Outcome.success(path)

    def read_import(self, path: Path) -> ImportResult:
        """Read and validate an export file."""
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return ImportResult(ok=False, error=f"Could not read file: {e}")
        return parse_import(text)

    def apply_import(self, payload: ExportPayload) -> Outcome:
        """Replace stock and entries with an imported payload.

        Settings are kept. Nothing is written unless the resulting document
        passes full validation.
        """
        data = self.store.load()
        imported = replace(data, stock=payload.stock, entries=sort_entries(payload.entries))
        if not self.store.save(imported):
            return Outcome.failure(save_failed())
        logger.info(
            "transfer.imported",
            entries=len(payload.entries),
            stock=len(payload.stock),
        )
        return Outcome.success()
