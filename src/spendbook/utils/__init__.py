"""Utility functions for spendbook."""

from spendbook.utils.date_parser import parse_date, parse_timestamp, period_range
from spendbook.utils.amount_parser import parse_amount, coerce_amount

__all__ = ["parse_date", "parse_timestamp", "period_range", "parse_amount", "coerce_amount"]
