"""Factory functions for creating slot and store instances."""

import os
from pathlib import Path
from typing import Optional

from shopledger.database.sqlalchemy_db import SQLAlchemyDocumentSlot
from shopledger.database.store import DocumentStore


def create_sqlite_slot(database_path: Optional[str] = None) -> SQLAlchemyDocumentSlot:
    """Create a SQLite-backed key-value slot.

    Args:
        database_path: Path to SQLite database file. If None, checks SHOPLEDGER_DB_PATH
            environment variable, then defaults to ~/.shopledger/shopledger.db

    Returns:
        SQLAlchemyDocumentSlot instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("SHOPLEDGER_DB_PATH")

    if database_path is None:
        # Default to ~/.shopledger/shopledger.db
        home = Path.home()
        db_dir = home / ".shopledger"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "shopledger.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDocumentSlot(database_url)


def create_sqlite_store(database_path: Optional[str] = None) -> DocumentStore:
    """Create a DocumentStore on top of a SQLite slot."""
    slot = create_sqlite_slot(database_path=database_path)
    slot.connect()
    slot.initialize_schema()
    return DocumentStore(slot)
