"""Utility functions for bankimport."""

from bankimport.utils.amount_parser import parse_amount, format_amount
from bankimport.utils.date_parser import (
    parse_date,
    parse_statement_date,
    format_statement_date,
)
from bankimport.utils.text import normalize_label, normalize_description

__all__ = [
    "parse_amount",
    "format_amount",
    "parse_date",
    "parse_statement_date",
    "format_statement_date",
    "normalize_label",
    "normalize_description",
]
