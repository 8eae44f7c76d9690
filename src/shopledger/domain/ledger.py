"""Entry ledger domain service.

The ledger is the only place where entries and stock are mutated together.
Every mutation is one load -> mutate -> validate -> save cycle against the
document store. Stock side-effects are derived by ``side_effect_of`` and
applied with sign +1, or reverted with sign -1, so edits and deletions can
never leave residual stock impact from an entry's previous values.
"""

import re
import time
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional
from uuid import uuid4

import structlog
from dateutil.relativedelta import relativedelta

from shopledger.database.store import DocumentStore
from shopledger.domain.entities import (
    BusinessData,
    DayTotals,
    Entry,
    EntryType,
    ExpenseCategory,
    Outcome,
    StockDelta,
    StockItem,
)
from shopledger.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    duplicate_entry_id,
    entry_not_found,
    save_failed,
)
from shopledger.domain.stock import apply_stock_delta
from shopledger.domain.validation import validate_new_entry

logger = structlog.get_logger(__name__)

YEAR_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def new_entry_id() -> str:
    """Generate a unique entry ID."""
    return f"entry_{uuid4().hex}"


def now_timestamp() -> int:
    """Current instant in epoch milliseconds."""
    return int(time.time() * 1000)


def make_sale(
    day: date,
    product_id: str,
    quantity: int,
    amount: Decimal,
    timestamp: Optional[int] = None,
    entry_id: Optional[str] = None,
) -> Entry:
    """Build a SALE entry with a generated id and creation timestamp."""
    return Entry(
        id=entry_id or new_entry_id(),
        date=day,
        timestamp=now_timestamp() if timestamp is None else timestamp,
        type=EntryType.SALE,
        amount=amount,
        product_id=product_id,
        quantity=quantity,
    )


def make_expense(
    day: date,
    category: ExpenseCategory,
    amount: Decimal,
    product_id: Optional[str] = None,
    quantity: Optional[int] = None,
    timestamp: Optional[int] = None,
    entry_id: Optional[str] = None,
) -> Entry:
    """Build an EXPENSE entry with a generated id and creation timestamp."""
    return Entry(
        id=entry_id or new_entry_id(),
        date=day,
        timestamp=now_timestamp() if timestamp is None else timestamp,
        type=EntryType.EXPENSE,
        amount=amount,
        category=category,
        product_id=product_id,
        quantity=quantity,
    )


def side_effect_of(entry: Entry) -> Optional[StockDelta]:
    """Return the stock change caused by applying an entry.

    Sales take units out of stock and add to the units sold and revenue.
    Stock-category expenses put units into stock. Other entries have no
    stock side-effect.
    """
    if entry.product_id is None or not entry.quantity:
        return None
    if entry.type == EntryType.SALE:
        return StockDelta(
            product_id=entry.product_id,
            quantity_change=-entry.quantity,
            sold_change=entry.quantity,
            revenue=entry.amount,
        )
    if entry.is_stock_expense:
        return StockDelta(product_id=entry.product_id, quantity_change=entry.quantity)
    return None


def apply_side_effect(
    stock: tuple[StockItem, ...], entry: Entry, sign: int
) -> tuple[StockItem, ...]:
    """Apply (sign=+1) or revert (sign=-1) an entry's side-effect on stock.

    An entry that references a missing product leaves stock unchanged.
    """
    delta = side_effect_of(entry)
    if delta is None:
        return stock
    updated, found = apply_stock_delta(stock, delta, sign)
    if not found:
        logger.warning(
            "ledger.product_missing",
            entry_id=entry.id,
            product_id=delta.product_id,
            direction="apply" if sign > 0 else "revert",
        )
    return updated


def sort_entries(entries: Iterable[Entry]) -> tuple[Entry, ...]:
    """Order entries by day, then by creation timestamp."""
    return tuple(sorted(entries, key=lambda e: e.sort_key))


def month_bounds(year_month: str) -> Optional[tuple[int, int]]:
    """Return [start, end) epoch-ms bounds of a YYYY-MM month in local time."""
    match = YEAR_MONTH_PATTERN.match(year_month)
    if match is None:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return None
    try:
        start = datetime(year, month, 1)
        end = start + relativedelta(months=1)
        return int(start.timestamp() * 1000), int(end.timestamp() * 1000)
    except (ValueError, OverflowError, OSError):
        # Outside the datetime or platform clock range
        return None


class EntryLedgerService:
    """Service for recording, editing and deleting entries."""

    def __init__(self, store: DocumentStore):
        """Initialize entry ledger service.

        Args:
            store: Document store instance
        """
        self.store = store

    def _commit(self, data: BusinessData, event: str, entry_id: str) -> Outcome:
        if not self.store.save(data):
            return Outcome.failure(save_failed())
        logger.info(event, entry_id=entry_id)
        return Outcome.success(entry_id)

    def add(
        self,
        entry: Entry,
        adjust_stock: Optional[Callable[[tuple[StockItem, ...]], tuple[StockItem, ...]]] = None,
    ) -> Outcome:
        """Record a new entry and apply its stock side-effect.

        Args:
            entry: Entry to record
            adjust_stock: Optional extra change to the stock list, saved in the
                same write as the entry

        Returns:
            Outcome carrying the entry id on success
        """
        try:
            validate_new_entry(entry)
            data = self.store.load()
            if any(e.id == entry.id for e in data.entries):
                raise ConflictError(duplicate_entry_id(entry.id))
        except DomainError as e:
            logger.warning("ledger.add.rejected", entry_id=entry.id, error=str(e))
            return Outcome.failure(str(e))

        stock = apply_side_effect(data.stock, entry, +1)
        if adjust_stock is not None:
            stock = adjust_stock(stock)
        entries = sort_entries(data.entries + (entry,))
        return self._commit(replace(data, entries=entries, stock=stock), "ledger.added", entry.id)

    def update(self, entry: Entry) -> Outcome:
        """Replace an existing entry with the same id.

        The old entry's side-effect is reverted before the new one is applied.

        Args:
            entry: Replacement entry

        Returns:
            Outcome carrying the entry id on success
        """
        try:
            validate_new_entry(entry)
            data = self.store.load()
            old = next((e for e in data.entries if e.id == entry.id), None)
            if old is None:
                raise NotFoundError(entry_not_found(entry.id))
        except DomainError as e:
            logger.warning("ledger.update.rejected", entry_id=entry.id, error=str(e))
            return Outcome.failure(str(e))

        stock = apply_side_effect(data.stock, old, -1)
        stock = apply_side_effect(stock, entry, +1)
        entries = sort_entries(entry if e.id == entry.id else e for e in data.entries)
        return self._commit(
            replace(data, entries=entries, stock=stock), "ledger.updated", entry.id
        )

    def delete(self, entry_id: str) -> Outcome:
        """Remove an entry and revert its stock side-effect.

        Args:
            entry_id: ID of the entry to delete
        """
        data = self.store.load()
        old = next((e for e in data.entries if e.id == entry_id), None)
        if old is None:
            message = entry_not_found(entry_id)
            logger.warning("ledger.delete.rejected", entry_id=entry_id, error=message)
            return Outcome.failure(message)

        stock = apply_side_effect(data.stock, old, -1)
        entries = tuple(e for e in data.entries if e.id != entry_id)
        return self._commit(
            replace(data, entries=entries, stock=stock), "ledger.deleted", entry_id
        )

    def all_entries(self) -> tuple[Entry, ...]:
        """Return all entries in ledger order."""
        return self.store.load().entries

    def by_id(self, entry_id: str) -> Optional[Entry]:
        """Get entry by ID.

        Returns:
            Entry or None if not found
        """
        return next((e for e in self.store.load().entries if e.id == entry_id), None)

    def entries_for_date(self, day: date) -> list[Entry]:
        """Return the entries of one day, ordered by timestamp."""
        entries = [e for e in self.store.load().entries if e.date == day]
        return sorted(entries, key=lambda e: e.timestamp)

    def entries_for_month(self, year_month: str) -> list[Entry]:
        """Return entries created during a YYYY-MM month.

        The month is matched on the creation timestamp, so an entry recorded
        on the 1st for the previous month's last day belongs to the new month.
        A malformed month yields no entries.
        """
        bounds = month_bounds(year_month)
        if bounds is None:
            logger.warning("ledger.month.invalid", year_month=year_month)
            return []
        start, end = bounds
        return [e for e in self.store.load().entries if start <= e.timestamp < end]

    def day_totals(self, day: date) -> DayTotals:
        """Return total sales and total expenses of one day."""
        entries = self.entries_for_date(day)
        return DayTotals(
            sales=sum((e.amount for e in entries if e.type == EntryType.SALE), Decimal("0")),
            expenses=sum(
                (e.amount for e in entries if e.type == EntryType.EXPENSE), Decimal("0")
            ),
        )
