"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a non-negative Decimal.

    Handles various formats:
    - "100000"
    - "100 000" (space as thousands separator)
    - "100,000.50"
    - "100000 FCFA", "100000F", "€100"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = amount_str.strip()

    # Remove currency markers
    cleaned = re.sub(r"(?i)fcfa|cfa|xof|[$€£¥]", "", cleaned)
    cleaned = re.sub(r"(?i)f$", "", cleaned.strip())

    # Remove thousands separators (commas and any kind of space)
    cleaned = re.sub(r"[,\s]", "", cleaned)

    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e!r}")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount must not be negative: '{amount_str}'")
    return amount
