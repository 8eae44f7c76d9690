"""Tests for CLI commands."""

import json

import pytest

from shopledger.cli.main import cli
from shopledger.database.factories import create_sqlite_store


@pytest.fixture
def db_path(tmp_path):
    """Path of a fresh database file for one CLI session."""
    return str(tmp_path / "shop.db")


@pytest.fixture
def run(cli_runner, db_path):
    """Invoke the CLI against the test database."""

    def invoke(*args, **kwargs):
        return cli_runner.invoke(cli, ["--db-path", db_path, *args], **kwargs)

    return invoke


def load(db_path):
    store = create_sqlite_store(database_path=db_path)
    try:
        return store.load()
    finally:
        store.slot.disconnect()


@pytest.fixture
def shop(run):
    """Initialized business with one product of 10 units."""
    assert run("init", "Chez Awa", "--daily-target", "25 000").exit_code == 0
    assert run("stock", "add", "Rice", "--quantity", "10", "--threshold", "3").exit_code == 0
    return run


def test_help_does_not_need_database(cli_runner, tmp_path):
    result = cli_runner.invoke(cli, ["--db-path", str(tmp_path / "none.db"), "--help"])

    assert result.exit_code == 0
    assert "Shopledger" in result.output
    assert not (tmp_path / "none.db").exists()


def test_init_and_show_settings(shop):
    result = shop("settings", "show")

    assert result.exit_code == 0
    assert "Chez Awa" in result.output
    assert "25,000" in result.output


def test_init_twice_fails(shop):
    result = shop("init", "Other")

    assert result.exit_code == 1
    assert "already initialized" in result.output


def test_settings_set(shop, db_path):
    result = shop("settings", "set", "--name", "Awa Shop", "--clear-target")

    assert result.exit_code == 0
    settings = load(db_path).settings
    assert settings.name == "Awa Shop"
    assert settings.daily_target is None


def test_settings_set_requires_option(shop):
    result = shop("settings", "set")
    assert result.exit_code == 1
    assert "Nothing to change" in result.output


def test_stock_list(shop):
    result = shop("stock", "list")

    assert result.exit_code == 0
    assert "Rice" in result.output


def test_stock_add_duplicate(shop):
    result = shop("stock", "add", "rice")

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_stock_edit_and_delete(shop, db_path):
    assert shop("stock", "edit", "Rice", "--threshold", "5").exit_code == 0
    assert load(db_path).stock[0].threshold == 5

    result = shop("stock", "delete", "Rice", "--yes")

    assert result.exit_code == 0
    assert load(db_path).stock == ()


def test_stock_unknown_product(shop):
    result = shop("stock", "edit", "Beans", "--quantity", "1")

    assert result.exit_code == 1
    assert "Product 'Beans' not found" in result.output


def test_sale_updates_stock(shop, db_path):
    result = shop("entry", "sale", "Rice", "--quantity", "2", "--amount", "3000", "--date", "2025-06-01")

    assert result.exit_code == 0
    assert "Recorded sale of 2 x 'Rice' for 3,000" in result.output
    item = load(db_path).stock[0]
    assert item.quantity == 8
    assert item.total_sold == 2


def test_sale_without_amount_uses_average_price(shop, db_path):
    first = shop("entry", "sale", "Rice", "--quantity", "1")
    assert first.exit_code == 1
    assert "--amount is required" in first.output

    assert shop("entry", "sale", "Rice", "--quantity", "2", "--amount", "3000").exit_code == 0
    result = shop("entry", "sale", "Rice", "--quantity", "3")

    assert result.exit_code == 0
    assert "for 4,500" in result.output


def test_sale_beyond_stock_warns(shop, db_path):
    result = shop("entry", "sale", "Rice", "--quantity", "12", "--amount", "12000")

    assert result.exit_code == 0
    assert "Warning: only 10" in result.output
    assert load(db_path).stock[0].quantity == 0


def test_stock_expense_requires_product(shop):
    result = shop("entry", "expense", "stock", "--amount", "5000")

    assert result.exit_code == 1
    assert "productId" in result.output


def test_initial_stock(shop, db_path):
    result = shop("stock", "initial", "Rice", "--quantity", "20", "--amount", "40000")
    assert result.exit_code == 0

    again = shop("stock", "initial", "Rice", "--quantity", "20", "--amount", "40000")
    assert again.exit_code == 1
    assert "already recorded" in again.output
    assert load(db_path).stock[0].quantity == 30


def test_entry_edit_and_delete(shop, db_path):
    assert shop("entry", "sale", "Rice", "--quantity", "3", "--amount", "3000").exit_code == 0
    entry_id = load(db_path).entries[0].id

    assert shop("entry", "edit", entry_id, "--quantity", "5").exit_code == 0
    assert load(db_path).stock[0].quantity == 5

    result = shop("entry", "delete", entry_id, "--yes")

    assert result.exit_code == 0
    data = load(db_path)
    assert data.entries == ()
    assert data.stock[0].quantity == 10
    assert data.stock[0].total_sold == 0


def test_entry_edit_unknown(shop):
    result = shop("entry", "edit", "entry_missing", "--amount", "10")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_entry_delete_needs_confirmation(shop, db_path):
    assert shop("entry", "expense", "Loyer", "--amount", "50000").exit_code == 0
    entry_id = load(db_path).entries[0].id

    result = shop("entry", "delete", entry_id, input="n\n")

    assert result.exit_code == 1
    assert len(load(db_path).entries) == 1


def test_entry_list_and_day(shop):
    shop("entry", "sale", "Rice", "--quantity", "2", "--amount", "100000", "--date", "2025-06-01")
    shop("entry", "expense", "Transport", "--amount", "10000", "--date", "2025-06-01")

    listing = shop("entry", "list", "--date", "2025-06-01")
    assert listing.exit_code == 0
    assert "Sale of 2 x Rice" in listing.output
    assert "Transport" in listing.output

    day = shop("entry", "day", "2025-06-01")
    assert day.exit_code == 0
    assert "Sales:    100,000" in day.output
    assert "Expenses: 10,000" in day.output
    assert "Profit:   90,000" in day.output


def test_entry_list_empty_and_invalid_month(shop):
    assert "No entries found" in shop("entry", "list").output

    result = shop("entry", "list", "--month", "June")
    assert result.exit_code == 1
    assert "Could not parse month" in result.output


def test_reports(shop):
    shop("entry", "sale", "Rice", "--quantity", "2", "--amount", "10000")
    shop("entry", "expense", "Transport", "--amount", "2000")

    health = shop("report", "health")
    assert health.exit_code == 0
    assert "Health score:" in health.output

    profit = shop("report", "profit")
    assert profit.exit_code == 0
    assert "Today's profit:       8,000" in profit.output

    expenses = shop("report", "expenses", "--period", "all")
    assert expenses.exit_code == 0
    assert "Transport" in expenses.output
    assert "100%" in expenses.output

    products = shop("report", "products")
    assert products.exit_code == 0
    assert "Rice: 2 sold" in products.output


def test_export_reset_import(shop, db_path, tmp_path):
    shop("entry", "sale", "Rice", "--quantity", "2", "--amount", "3000")
    before = load(db_path)
    backup = tmp_path / "backup.json"

    assert shop("export", "--output", str(backup)).exit_code == 0
    assert json.loads(backup.read_text())["version"] == 1

    assert shop("reset", "--yes").exit_code == 0
    assert load(db_path).stock == ()

    result = shop("import", str(backup), "--yes")

    assert result.exit_code == 0
    assert "1 products and 1 entries" in result.output
    after = load(db_path)
    assert after.stock == before.stock
    assert after.entries == before.entries


def test_import_rejects_other_version(shop, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"version": 2, "stock": [], "entries": []}))

    result = shop("import", str(bad), "--yes")

    assert result.exit_code == 1
    assert "Unsupported export file version" in result.output


def test_log_level_option(cli_runner, db_path):
    result = cli_runner.invoke(
        cli, ["--db-path", db_path, "--log-level", "info", "stock", "add", "Oil"]
    )

    assert result.exit_code == 0
    assert "stock.created" in result.output


@pytest.mark.parametrize("month", ["0000-05", "9999-12"])
def test_entry_list_out_of_range_month(shop, month):
    result = shop("entry", "list", "--month", month)

    assert result.exit_code == 0
    assert "No entries found" in result.output
