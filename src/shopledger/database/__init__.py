"""Database layer for shopledger application."""

from shopledger.database.base import DocumentSlot
from shopledger.database.store import DocumentStore
from shopledger.database.factories import create_sqlite_slot, create_sqlite_store

__all__ = ["DocumentSlot", "DocumentStore", "create_sqlite_slot", "create_sqlite_store"]
