"""Utility functions for the bootstrap framework."""

from app_bootstrap.utils.dates import format_date, format_datetime, format_time
from app_bootstrap.utils.json import parse, stringify

__all__ = [
    "format_date",
    "format_datetime",
    "format_time",
    "parse",
    "stringify",
]
