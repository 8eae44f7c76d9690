"""Shared pytest fixtures for shopledger tests."""

import logging
import os
import tempfile
from datetime import date

import pytest
import structlog

from shopledger.database.factories import create_sqlite_store
from shopledger.domain.inventory import StockService
from shopledger.domain.ledger import EntryLedgerService
from shopledger.domain.settings import SettingsService
from shopledger.domain.transfer import TransferService


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to streams that CliRunner closes after a test."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    structlog.reset_defaults()


@pytest.fixture
def temp_store():
    """Create a document store on a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path

    yield store

    # Cleanup
    store.slot.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def ledger(temp_store):
    """Create an EntryLedgerService with a temporary store."""
    return EntryLedgerService(temp_store)


@pytest.fixture
def stock_service(temp_store, ledger):
    """Create a StockService with a temporary store."""
    return StockService(temp_store, ledger)


@pytest.fixture
def settings_service(temp_store):
    """Create a SettingsService with a temporary store."""
    return SettingsService(temp_store)


@pytest.fixture
def transfer_service(temp_store):
    """Create a TransferService with a temporary store."""
    return TransferService(temp_store)


@pytest.fixture
def sample_product(stock_service):
    """Create a sample product with 10 units and an alert level of 3."""
    return stock_service.create_item(name="Rice 5kg", quantity=10, threshold=3).value


@pytest.fixture
def today():
    """Fixed reference day for analytics tests."""
    return date(2025, 6, 15)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()

