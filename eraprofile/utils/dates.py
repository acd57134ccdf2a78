"""Calendar date helpers.

Parsing of ISO calendar dates, month/day projection onto a concrete year,
and the DD.MM.YYYY formatting used across profile output.

Examples:
  >>> parse_iso_date("2024-02-10")
  datetime.date(2024, 2, 10)

  >>> project_month_day(2023, 2, 29)
  datetime.date(2023, 2, 28)

  >>> format_date(date(2024, 1, 5))
  '05.01.2024'
"""

from __future__ import annotations
from datetime import date, datetime
from typing import Union
import re

try:
    from dateutil import parser as dateutil_parser
    from dateutil.relativedelta import relativedelta
except ImportError as e:
    raise ImportError("python-dateutil not installed. pip install python-dateutil") from e

from eraprofile.errors import InvalidDateError


ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[str, date, datetime]


def parse_iso_date(value: DateLike) -> date:
    """
    Parse a calendar date.

    Strings must be ISO-8601 calendar dates (YYYY-MM-DD) and are read as a
    local calendar day with no time or timezone. date objects pass through,
    datetime objects are truncated to their date.

    Raises:
        InvalidDateError: If the value is not a valid calendar date

    Examples:
        >>> parse_iso_date("2024-01-05")
        datetime.date(2024, 1, 5)

        >>> parse_iso_date("2024-02-30")
        Traceback (most recent call last):
        ...
        eraprofile.errors.InvalidDateError: Invalid date: '2024-02-30'
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError(value)

    text = value.strip()
    if not ISO_DATE_RE.match(text):
        raise InvalidDateError(value)

    try:
        return dateutil_parser.isoparse(text).date()
    except (ValueError, OverflowError) as e:
        raise InvalidDateError(value) from e


def project_month_day(year: int, month: int, day: int) -> date:
    """
    Place a recurring month/day onto a concrete year.

    A day past the end of the month in that year (Feb 29 in a common year)
    is clamped to the month's last day. It does not roll over into the next
    month, so Feb 29 becomes Feb 28 rather than Mar 1.

    Raises:
        ValueError: If `year` is outside the date range (1 to 9999)

    Examples:
        >>> project_month_day(2024, 12, 15)
        datetime.date(2024, 12, 15)

        >>> project_month_day(2024, 2, 29)
        datetime.date(2024, 2, 29)

        >>> project_month_day(2025, 2, 29)
        datetime.date(2025, 2, 28)
    """
    return date(year, 1, 1) + relativedelta(month=month, day=day)


def format_date(d: date) -> str:
    """Format date as DD.MM.YYYY."""
    return f"{d.day:02d}.{d.month:02d}.{d.year}"


def format_date_long(d: date) -> str:
    """
    Format date for display, e.g. '5 January 2024'.

    Examples:
        >>> format_date_long(date(2024, 1, 5))
        '5 January 2024'
    """
    return f"{d.day} {d.strftime('%B %Y')}"


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end precedes start)."""
    return (end - start).days


__all__ = [
    "DateLike",
    "parse_iso_date",
    "project_month_day",
    "format_date",
    "format_date_long",
    "days_between",
]
