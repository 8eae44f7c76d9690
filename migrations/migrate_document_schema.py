#!/usr/bin/env python3
"""Migration script to upgrade the stored business document in place.

The application migrates older documents in memory every time it loads
them. This script runs the same migration chain once and writes the result
back, so the stored payload is tagged with the current schemaVersion:

- version 0 (no tag): legacy sales/expenses totals and line items become
  typed SALE/EXPENSE entries
- version 1: stock items gain totalSold and hasInitialStockTransaction

Usage:
    python migrations/migrate_document_schema.py [--db-path PATH]
"""

import json
import sys
from decimal import Decimal
from pathlib import Path

# Add src to path so we can import shopledger modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from shopledger.database.factories import create_sqlite_slot
from shopledger.database.mappers import document_to_domain
from shopledger.database.migrations import CURRENT_SCHEMA_VERSION, migrate_document
from shopledger.database.store import STORAGE_KEY, DocumentStore
from shopledger.domain.validation import validate_document_dict


def migrate_database(database_path: str | None = None) -> None:
    """Upgrade the stored document to the current schema version.

    Args:
        database_path: Path to database file. If None, uses default location.

    Raises:
        Exception: If migration fails
    """
    slot = create_sqlite_slot(database_path=database_path)
    slot.connect()
    slot.initialize_schema()

    try:
        payload = slot.read(STORAGE_KEY)
        if payload is None:
            print("Nothing to migrate: no business data stored")
            return

        if slot.read_schema_version(STORAGE_KEY) == CURRENT_SCHEMA_VERSION:
            print(f"Migration already applied: document is at schema version {CURRENT_SCHEMA_VERSION}")
            return

        raw = json.loads(payload, parse_float=Decimal)
        if not isinstance(raw, dict):
            raise Exception("Stored business data is not a JSON object")

        print(f"Starting migration: schema version {raw.get('schemaVersion', 0)} -> {CURRENT_SCHEMA_VERSION}...")

        document = migrate_document(raw)
        validate_document_dict(document)
        data = document_to_domain(document)
        print(f"  Migrated {len(data.entries)} entries and {len(data.stock)} stock items")

        if not DocumentStore(slot).save(data):
            raise Exception("Could not write the migrated document")

        print("Migration completed successfully!")

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        slot.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Upgrade the stored business document to the current schema version"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides SHOPLEDGER_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
