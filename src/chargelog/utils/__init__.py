"""Utility functions for chargelog."""

from chargelog.utils.date_parser import parse_date, parse_month, month_key
from chargelog.utils.time_parser import parse_time, format_time
from chargelog.utils.amount_parser import parse_amount, round2, round3

__all__ = [
    "parse_date",
    "parse_month",
    "month_key",
    "parse_time",
    "format_time",
    "parse_amount",
    "round2",
    "round3",
]
