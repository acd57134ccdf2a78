"""Derived period flags.

Peak and overlap flags are step functions of the day within a period; the
next-period preview is a convenience projection onto the current year.
"""

from __future__ import annotations
from datetime import date
from typing import Optional, Sequence

from eraprofile.period.periodidentity import PeriodDefinition
from eraprofile.utils.dates import format_date


def is_peak(day_in_period: int, peak_range: Sequence[int]) -> bool:
    """
    True when day_in_period lies within the inclusive peak range.

    Examples:
        >>> is_peak(10, (10, 20))
        True
        >>> is_peak(21, (10, 20))
        False
    """
    start, end = peak_range
    return start <= day_in_period <= end


def is_overlap(day_in_period: int, duration: int, overlap_days: int) -> bool:
    """
    True during the last `overlap_days` days of a period, and on its final day.

    Examples:
        >>> is_overlap(37, 37, 3)
        True
        >>> is_overlap(34, 37, 3)
        True
        >>> is_overlap(33, 37, 3)
        False
    """
    return duration - day_in_period <= overlap_days


def next_period(
    index: int,
    definitions: Sequence[PeriodDefinition],
    *,
    asof: Optional[date] = None,
) -> dict:
    """
    Preview of the period following `index` in the cycle.

    The successor is projected onto the calendar year of `asof` (default:
    today), not onto the year of whatever date produced `index`.

    Args:
        index: Index of the current period in `definitions`
        definitions: Period definitions in cycle order
        asof: Reference date whose year anchors the preview

    Returns:
        Dict with name, ISO and DD.MM.YYYY start/end dates, duration and index

    Raises:
        ValueError: If definitions is empty
    """
    if not definitions:
        raise ValueError("Cannot compute next period of an empty period table")

    if asof is None:
        asof = date.today()

    next_index = (index + 1) % len(definitions)
    definition = definitions[next_index]
    start, end = definition.project(asof.year)

    return {
        "name": definition.name,
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "start_date_formatted": format_date(start),
        "end_date_formatted": format_date(end),
        "duration": definition.duration,
        "index": next_index,
    }


__all__ = [
    "is_peak",
    "is_overlap",
    "next_period",
]
