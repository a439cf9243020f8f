"""Utility functions for firereport."""

from firereport.utils.date_parser import parse_date, resolve_date_range
from firereport.utils.amount_parser import parse_amount
from firereport.utils.formatting import format_currency

__all__ = ["parse_date", "resolve_date_range", "parse_amount", "format_currency"]
