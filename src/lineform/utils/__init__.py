"""Utility functions for lineform."""

from lineform.utils.date_parser import parse_date
from lineform.utils.amount_parser import parse_amount, parse_field_number, parse_or_zero, is_positive

__all__ = ["parse_date", "parse_amount", "parse_field_number", "parse_or_zero", "is_positive"]
