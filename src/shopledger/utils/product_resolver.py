"""Utility for resolving product names to stock items."""

from shopledger.domain.entities import StockItem
from shopledger.domain.inventory import StockService


def resolve_product(stock_service: StockService, product: str) -> StockItem:
    """Resolve a product ID or name to its stock item.

    Args:
        stock_service: StockService instance
        product: Product ID or name (names match case-insensitively)

    Returns:
        Matching stock item

    Raises:
        ValueError: If product is not found
    """
    item = stock_service.get_item(product)
    if item is not None:
        return item

    item = stock_service.find_by_name(product)
    if item is not None:
        return item

    raise ValueError(f"Product '{product}' not found")
