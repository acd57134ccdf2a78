"""Period Resolution
-----------------

Core resolver that places a calendar date inside the recurring yearly
period cycle.

A period definition is anchored to month/day, not to a year, so every query
projects each definition onto concrete years around the query date:

  - Non-crossing periods ("Mar 6 - Apr 20") use the query's own year.
  - Crossing periods ("Dec 15 - Jan 20") started in the previous year when
    the query's month/day falls before the period's start month/day, and
    otherwise start in the query year and end in the next one.

Resolution order:
  1. First definition (table order) whose anchored interval contains the
     date, both ends inclusive.
  2. Every crossing definition tried with both year anchors.
  3. The last definition anchored to the query year, flagged as a fallback
     (or PeriodUnresolvableError when strict=True).

Key Design Principles:
  1. duration comes from the table and is never recomputed
  2. day_in_period is 1-based: the start date is day 1
  3. Month/day values missing from a year (Feb 29) clamp to the month end

Example:
  >>> tail = PeriodDefinition("Tail of the Year", 12, 15, 1, 20, 37, cross_year=True)
  >>> r = resolve_period_for_date(date(2024, 1, 5), [tail])
  >>> r.start_date, r.end_date, r.day_in_period
  (datetime.date(2023, 12, 15), datetime.date(2024, 1, 20), 22)
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Iterator, Mapping, Sequence
import logging

from eraprofile.errors import PeriodUnresolvableError
from eraprofile.utils.build_utils import coerce_int
from eraprofile.utils.dates import days_between, format_date, project_month_day

logger = logging.getLogger(__name__)


# camelCase keys as found in JSON exports of the period table
_FIELD_ALIASES = {
    "startMonth": "start_month",
    "startDay": "start_day",
    "endMonth": "end_month",
    "endDay": "end_day",
    "crossYear": "cross_year",
    "crossesYearBoundary": "cross_year",
}


# ---- Types ----

@dataclass(frozen=True)
class PeriodDefinition:
    """One recurring named interval of the yearly cycle."""

    name: str
    start_month: int
    start_day: int
    end_month: int
    end_day: int
    duration: int
    cross_year: bool = False

    @classmethod
    def from_dict(cls, data: Mapping) -> "PeriodDefinition":
        """
        Build a definition from a patterns table entry.

        Raises:
            ValueError: If a required field is missing or not an integer
        """
        fields = {_FIELD_ALIASES.get(k, k): v for k, v in data.items()}
        name = fields.get("name")
        if not name:
            raise ValueError(f"Period definition without name: {dict(data)}")

        return cls(
            name=str(name),
            start_month=coerce_int(fields.get("start_month"), "start_month"),
            start_day=coerce_int(fields.get("start_day"), "start_day"),
            end_month=coerce_int(fields.get("end_month"), "end_month"),
            end_day=coerce_int(fields.get("end_day"), "end_day"),
            duration=coerce_int(fields.get("duration"), "duration"),
            cross_year=bool(fields.get("cross_year", False)),
        )

    def project(self, year: int) -> tuple[date, date]:
        """
        Interval of the occurrence that starts in `year`.

        Crossing periods end in year + 1.

        Example:
            >>> PeriodDefinition("Tail", 12, 15, 1, 20, 37, True).project(2024)
            (datetime.date(2024, 12, 15), datetime.date(2025, 1, 20))
        """
        start = project_month_day(year, self.start_month, self.start_day)
        end_year = year + 1 if self.cross_year else year
        end = project_month_day(end_year, self.end_month, self.end_day)
        return start, end


@dataclass(frozen=True)
class ResolvedPeriod:
    """A period definition matched against a date for a concrete year."""

    name: str
    day_in_period: int
    duration: int
    start_date: date
    end_date: date
    index: int
    fallback: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "day_in_period": self.day_in_period,
            "duration": self.duration,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "start_date_formatted": format_date(self.start_date),
            "end_date_formatted": format_date(self.end_date),
            "index": self.index,
            "fallback": self.fallback,
        }


# ---- Interval construction ----

def anchored_interval(definition: PeriodDefinition, query: date) -> tuple[date, date]:
    """
    Interval of `definition` relevant to `query`, anchored to the query year.

    Example:
        >>> tail = PeriodDefinition("Tail", 12, 15, 1, 20, 37, True)
        >>> anchored_interval(tail, date(2024, 1, 5))
        (datetime.date(2023, 12, 15), datetime.date(2024, 1, 20))
        >>> anchored_interval(tail, date(2024, 12, 20))
        (datetime.date(2024, 12, 15), datetime.date(2025, 1, 20))
    """
    year = query.year
    if not definition.cross_year:
        return definition.project(year)

    if (query.month, query.day) < (definition.start_month, definition.start_day):
        # Tail of the occurrence that began last year
        return definition.project(year - 1)
    return definition.project(year)


def _both_year_anchors(definition: PeriodDefinition, query: date) -> Iterator[tuple[date, date]]:
    for start_year in (query.year - 1, query.year):
        try:
            start = project_month_day(start_year, definition.start_month, definition.start_day)
            end = project_month_day(start_year + 1, definition.end_month, definition.end_day)
        except (ValueError, OverflowError):
            # Anchor year outside the calendar range (year 0 or 10000)
            continue
        yield start, end


def _resolved(
    definition: PeriodDefinition,
    index: int,
    query: date,
    start: date,
    end: date,
    *,
    fallback: bool = False,
) -> ResolvedPeriod:
    return ResolvedPeriod(
        name=definition.name,
        day_in_period=days_between(start, query) + 1,
        duration=definition.duration,
        start_date=start,
        end_date=end,
        index=index,
        fallback=fallback,
    )


# ---- Main Resolution Function ----

def resolve_period_for_date(
    query: date,
    definitions: Sequence[PeriodDefinition],
    *,
    strict: bool = False,
) -> ResolvedPeriod:
    """
    Resolve the period containing `query`.

    Args:
        query: Calendar date to place
        definitions: Period definitions in cycle order
        strict: Raise instead of returning the last-definition fallback

    Returns:
        ResolvedPeriod; `fallback` is True only when no definition contained
        the date and the last definition was used as a best-effort answer

    Raises:
        PeriodUnresolvableError: If the table is empty, if strict=True and
            no definition contains the date, or if the fallback period cannot
            be placed in the query year (end of the calendar range)
    """
    if not definitions:
        raise PeriodUnresolvableError(query, "Period table is empty")

    # 1. Anchored pass, table order
    for index, definition in enumerate(definitions):
        try:
            start, end = anchored_interval(definition, query)
        except (ValueError, OverflowError):
            logger.debug(f"Period {definition.name} cannot be anchored around {query}, skipping")
            continue
        if start <= query <= end:
            resolved = _resolved(definition, index, query, start, end)
            logger.debug(
                f"Resolved {query} to period {definition.name}: "
                f"day {resolved.day_in_period}/{definition.duration} ({start} - {end})"
            )
            return resolved

    # 2. Crossing periods with both year anchors
    logger.debug(f"No anchored period contains {query}, trying both year anchors")
    for index, definition in enumerate(definitions):
        if not definition.cross_year:
            continue
        for start, end in _both_year_anchors(definition, query):
            if start <= query <= end:
                logger.debug(f"Resolved {query} to crossing period {definition.name} ({start} - {end})")
                return _resolved(definition, index, query, start, end)

    # 3. Degraded result
    if strict:
        raise PeriodUnresolvableError(query)

    index = len(definitions) - 1
    last = definitions[index]
    try:
        start, end = last.project(query.year)
    except (ValueError, OverflowError) as e:
        raise PeriodUnresolvableError(
            query, f"No period definition contains date {query} and {last.name} cannot be projected onto {query.year}"
        ) from e
    logger.warning(
        f"No period definition contains {query}; falling back to last period {last.name} "
        f"({start} - {end}). Check the period table for gaps."
    )
    return _resolved(last, index, query, start, end, fallback=True)


def project_definitions(year: int, definitions: Sequence[PeriodDefinition]) -> list[ResolvedPeriod]:
    """
    Project every definition onto `year`.

    Crossing periods start in `year` and end in `year + 1`. day_in_period is
    1 for every entry, since each is reported from its own start.
    """
    projected = []
    for index, definition in enumerate(definitions):
        start, end = definition.project(year)
        projected.append(_resolved(definition, index, start, start, end))
    return projected


__all__ = [
    "PeriodDefinition",
    "ResolvedPeriod",
    "anchored_interval",
    "resolve_period_for_date",
    "project_definitions",
]
