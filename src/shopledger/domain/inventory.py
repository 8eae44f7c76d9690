"""Stock item domain service."""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import uuid4

import structlog

from shopledger.database.store import DocumentStore
from shopledger.domain.entities import ExpenseCategory, Outcome, StockItem
from shopledger.domain.errors import (
    ConflictError,
    DomainError,
    ValidationError,
    duplicate_product_name,
    product_not_found,
    save_failed,
)
from shopledger.domain.ledger import EntryLedgerService, make_expense
from shopledger.domain.stock import find_product, product_exists

logger = structlog.get_logger(__name__)


def new_stock_id() -> str:
    """Generate a unique stock item ID."""
    return f"stock_{uuid4().hex[:12]}"


def _check_fields(name: str, quantity: int, threshold: int) -> str:
    name = name.strip()
    if not name:
        raise ValidationError("Product name is required")
    if quantity < 0 or threshold < 0:
        raise ValidationError("Quantity and threshold must be non-negative")
    return name


class StockService:
    """Service for managing stock items.

    Quantity changes caused by sales and purchases go through the ledger;
    this service only creates, edits and removes the items themselves.
    """

    def __init__(self, store: DocumentStore, ledger: Optional[EntryLedgerService] = None):
        """Initialize stock service.

        Args:
            store: Document store instance
            ledger: Ledger used to record stocking purchases
        """
        self.store = store
        self.ledger = ledger or EntryLedgerService(store)

    def list_items(self, search: Optional[str] = None) -> list[StockItem]:
        """List stock items sorted by name, optionally filtered by a name fragment."""
        items = list(self.store.load().stock)
        if search:
            query = search.strip().lower()
            items = [item for item in items if query in item.name.lower()]
        return sorted(items, key=lambda item: item.name.casefold())

    def get_item(self, product_id: str) -> Optional[StockItem]:
        """Get stock item by ID."""
        return find_product(self.store.load().stock, product_id)

    def find_by_name(self, name: str) -> Optional[StockItem]:
        """Get stock item by case-insensitive name."""
        wanted = name.strip().casefold()
        return next(
            (item for item in self.store.load().stock if item.name.casefold() == wanted),
            None,
        )

    def create_item(self, name: str, quantity: int = 0, threshold: int = 0) -> Outcome:
        """Create a stock item.

        Returns:
            Outcome carrying the new StockItem on success
        """
        try:
            name = _check_fields(name, quantity, threshold)
            data = self.store.load()
            if any(item.name.casefold() == name.casefold() for item in data.stock):
                raise ConflictError(duplicate_product_name(name))
        except DomainError as e:
            return Outcome.failure(str(e))

        item = StockItem(id=new_stock_id(), name=name, quantity=quantity, threshold=threshold)
        if not self.store.save(replace(data, stock=data.stock + (item,))):
            return Outcome.failure(save_failed())
        logger.info("stock.created", product_id=item.id, name=name)
        return Outcome.success(item)

    def update_item(
        self,
        product_id: str,
        name: Optional[str] = None,
        quantity: Optional[int] = None,
        threshold: Optional[int] = None,
    ) -> Outcome:
        """Edit a stock item's name, on-hand quantity or alert threshold.

        Cumulative sales and the average unit price are kept.

        Returns:
            Outcome carrying the updated StockItem on success
        """
        data = self.store.load()
        current = find_product(data.stock, product_id)
        if current is None:
            return Outcome.failure(product_not_found(product_id))

        try:
            new_name = _check_fields(
                current.name if name is None else name,
                current.quantity if quantity is None else quantity,
                current.threshold if threshold is None else threshold,
            )
            clash = any(
                item.id != product_id and item.name.casefold() == new_name.casefold()
                for item in data.stock
            )
            if clash:
                raise ConflictError(duplicate_product_name(new_name))
        except DomainError as e:
            return Outcome.failure(str(e))

        updated = replace(
            current,
            name=new_name,
            quantity=current.quantity if quantity is None else quantity,
            threshold=current.threshold if threshold is None else threshold,
        )
        stock = tuple(updated if item.id == product_id else item for item in data.stock)
        if not self.store.save(replace(data, stock=stock)):
            return Outcome.failure(save_failed())
        logger.info("stock.updated", product_id=product_id)
        return Outcome.success(updated)

    def delete_item(self, product_id: str) -> Outcome:
        """Delete a stock item.

        Entries referencing the item are kept; they simply no longer affect stock.
        """
        data = self.store.load()
        if not product_exists(data.stock, product_id):
            return Outcome.failure(product_not_found(product_id))

        stock = tuple(item for item in data.stock if item.id != product_id)
        if not self.store.save(replace(data, stock=stock)):
            return Outcome.failure(save_failed())
        logger.info("stock.deleted", product_id=product_id)
        return Outcome.success(product_id)

    def record_initial_stock(
        self, product_id: str, quantity: int, amount: Decimal, day: date
    ) -> Outcome:
        """Record the first stocking purchase of a product.

        A Stock-category expense is added through the ledger, which raises the
        on-hand quantity and flags the item as initially stocked in one write.

        Returns:
            Outcome carrying the expense entry id on success
        """
        item = self.get_item(product_id)
        if item is None:
            return Outcome.failure(product_not_found(product_id))
        if item.has_initial_stock_transaction:
            return Outcome.failure(f"Initial stock already recorded for '{item.name}'")

        entry = make_expense(
            day,
            ExpenseCategory.STOCK,
            amount,
            product_id=product_id,
            quantity=quantity,
        )

        def mark_stocked(stock: tuple[StockItem, ...]) -> tuple[StockItem, ...]:
            return tuple(
                replace(s, has_initial_stock_transaction=True) if s.id == product_id else s
                for s in stock
            )

        outcome = self.ledger.add(entry, adjust_stock=mark_stocked)
        if outcome:
            logger.info("stock.initial_recorded", product_id=product_id, entry_id=entry.id)
        return outcome
