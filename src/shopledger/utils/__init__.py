"""Utility functions for shopledger."""

from shopledger.utils.date_parser import parse_date, parse_year_month
from shopledger.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_year_month", "parse_amount"]
