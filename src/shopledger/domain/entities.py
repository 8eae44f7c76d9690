"""Domain model entities for shopledger.

These are pure data classes representing business concepts, independent of
the persisted document layout. The database layer converts between these and
the JSON document through the mappers module.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class EntryType(str, Enum):
    """Kind of financial event recorded in the ledger."""

    SALE = "SALE"
    EXPENSE = "EXPENSE"


class ExpenseCategory(str, Enum):
    """Fixed list of expense categories used by analytics."""

    STOCK = "Stock"
    TRANSPORT = "Transport"
    LOYER = "Loyer"
    SALAIRE = "Salaire"
    INTERNET = "Internet"
    AUTRE = "Autre"


EXPENSE_CATEGORIES: tuple[ExpenseCategory, ...] = tuple(ExpenseCategory)


@dataclass(frozen=True)
class BusinessSettings:
    """Business settings domain entity."""

    name: str = ""
    daily_target: Optional[Decimal] = None


@dataclass(frozen=True)
class StockItem:
    """Trackable product domain entity."""

    id: str
    name: str
    quantity: int
    threshold: int
    total_sold: int = 0
    unit_price: Optional[Decimal] = None
    has_initial_stock_transaction: bool = False


@dataclass(frozen=True)
class Entry:
    """Financial event domain entity (a sale or an expense)."""

    id: str
    date: date
    timestamp: int
    type: EntryType
    amount: Decimal
    product_id: Optional[str] = None
    quantity: Optional[int] = None
    category: Optional[ExpenseCategory] = None

    @property
    def is_sale(self) -> bool:
        return self.type == EntryType.SALE

    @property
    def is_stock_expense(self) -> bool:
        return self.type == EntryType.EXPENSE and self.category == ExpenseCategory.STOCK

    @property
    def sort_key(self) -> tuple[date, int]:
        return (self.date, self.timestamp)


@dataclass(frozen=True)
class BusinessData:
    """Aggregate root: the whole persisted state."""

    settings: BusinessSettings = field(default_factory=BusinessSettings)
    entries: tuple[Entry, ...] = ()
    stock: tuple[StockItem, ...] = ()


@dataclass(frozen=True)
class StockDelta:
    """Stock side-effect of one entry, expressed for the apply direction.

    Applying uses sign +1, reverting uses sign -1.
    """

    product_id: str
    quantity_change: int
    sold_change: int = 0
    revenue: Decimal = Decimal("0")


@dataclass(frozen=True)
class Outcome:
    """Success or failure of a mutating operation."""

    ok: bool
    error: Optional[str] = None
    value: Any = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "Outcome":
        return cls(ok=False, error=error)


@dataclass(frozen=True)
class DayTotals:
    """Sales and expense totals of one calendar day."""

    sales: Decimal
    expenses: Decimal

    @property
    def profit(self) -> Decimal:
        return self.sales - self.expenses


@dataclass(frozen=True)
class LowStockItem:
    """Stock item below its alert threshold."""

    item: StockItem
    remaining_percentage: float


@dataclass(frozen=True)
class TopSellingProduct:
    """Product ranked by cumulative units sold."""

    item: StockItem
    total_sold: int
    current_stock: int


@dataclass(frozen=True)
class TopRevenueProduct:
    """Product ranked by revenue aggregated from sale entries."""

    item: StockItem
    total_revenue: Decimal
    units_sold: int
    average_price: Decimal


@dataclass(frozen=True)
class StockHealthStatus:
    """Summary of the stock situation."""

    total_items: int
    low_stock_count: int
    out_of_stock_count: int
    well_stocked_count: int
    average_stock: float


@dataclass(frozen=True)
class ExpenseBreakdownItem:
    """One category line of an expense breakdown."""

    category: ExpenseCategory
    amount: Decimal
    percentage: int


@dataclass(frozen=True)
class HealthScoreResult:
    """Composite business health score with its explanation."""

    score: float
    message: str
    band: str
    message_key: str


@dataclass(frozen=True)
class ExportPayload:
    """Portable snapshot of stock and entries."""

    version: int
    exported_at: int
    stock: tuple[StockItem, ...]
    entries: tuple[Entry, ...]


@dataclass(frozen=True)
class ImportResult:
    """Outcome of parsing an export file."""

    ok: bool
    payload: Optional[ExportPayload] = None
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok
