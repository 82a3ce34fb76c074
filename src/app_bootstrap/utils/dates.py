"""Date and time formatting helpers."""

from datetime import date, datetime, time

import arrow

DATE_FORMAT = "YYYY-MM-DD"
TIME_FORMAT = "HH:mm:ss"
DATE_TIME_FORMAT = "YYYY-MM-DD HH:mm:ss"


def format_date(value: date) -> str:
    """Format a date as ``YYYY-MM-DD``.

    Examples:
        >>> format_date(date(1990, 4, 7))
        '1990-04-07'
    """
    return arrow.get(value).format(DATE_FORMAT)


def format_time(value: time) -> str:
    """Format a time of day as ``HH:mm:ss`` (24-hour clock)."""
    return arrow.get(datetime.combine(date.today(), value.replace(tzinfo=None))).format(TIME_FORMAT)


def format_datetime(value: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DD HH:mm:ss`` in its own timezone."""
    return arrow.get(value).format(DATE_TIME_FORMAT)
