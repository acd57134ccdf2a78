"""
Era Resolution
--------------

Maps a calendar date to the era covering it.

Eras partition the timeline by start date: era i covers
[start_i, start_{i+1}) and the last era is open-ended. Dates before the
first start have no era.

API:
  EraResolver(eras).resolve(date) -> Era
  EraResolver(eras).era_by_year(year) -> Era | None

Examples:
  >>> from eraprofile.eras.eraapi import load_eras
  >>> resolver = EraResolver(load_eras())
  >>> resolver.resolve("2024-02-10").year
  2024
  >>> resolver.resolve("2024-02-09").year
  2023
"""

from __future__ import annotations
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional, Union
import logging

import pandas as pd

from eraprofile.errors import EraNotFoundError
from eraprofile.utils.build_utils import coerce_int
from eraprofile.utils.dates import DateLike, format_date, parse_iso_date

logger = logging.getLogger(__name__)


ERA_COLUMNS = [
    "year",
    "start_date",
    "animal_index",
    "character_index",
    "element_index",
    "mengi_index",
]


@dataclass(frozen=True)
class Era:
    """A multi-year epoch with fixed attribute indices."""

    year: int
    start_date: date
    animal_index: int
    character_index: int
    element_index: int
    mengi_index: int

    @classmethod
    def from_row(cls, row: Mapping) -> "Era":
        """
        Build an era from a table row (dict or pandas Series).

        Raises:
            ValueError: If a field is missing or malformed
            InvalidDateError: If start_date is not a calendar date
        """
        start = row.get("start_date")
        if isinstance(start, pd.Timestamp):
            start = start.date()
        return cls(
            year=coerce_int(row.get("year"), "year"),
            start_date=parse_iso_date(start),
            animal_index=coerce_int(row.get("animal_index"), "animal_index"),
            character_index=coerce_int(row.get("character_index"), "character_index"),
            element_index=coerce_int(row.get("element_index"), "element_index"),
            mengi_index=coerce_int(row.get("mengi_index"), "mengi_index"),
        )

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "start_date": self.start_date.isoformat(),
            "start_date_formatted": format_date(self.start_date),
            "animal_index": self.animal_index,
            "character_index": self.character_index,
            "element_index": self.element_index,
            "mengi_index": self.mengi_index,
        }


def eras_from_frame(df: pd.DataFrame) -> list[Era]:
    """Convert an eras DataFrame into Era records (table order)."""
    return [Era.from_row(row) for _, row in df.iterrows()]


class EraResolver:
    """Resolve dates to eras with a per-day memo.

    The memo is keyed by ISO date string and owned by the instance. It is
    unbounded unless max_cache_size is given, in which case the oldest
    entries are evicted first.

    Args:
        eras: Eras DataFrame (see ERA_COLUMNS) or iterable of Era
        max_cache_size: Optional cap on memoized dates
    """

    def __init__(
        self,
        eras: Union[pd.DataFrame, Iterable[Era]],
        *,
        max_cache_size: Optional[int] = None,
    ):
        if isinstance(eras, pd.DataFrame):
            records = eras_from_frame(eras)
        else:
            records = list(eras)

        # stable sort keeps table order for equal start dates
        self._eras = tuple(sorted(records, key=lambda e: e.start_date))
        self._starts = pd.DatetimeIndex([pd.Timestamp(e.start_date) for e in self._eras])
        self._by_year = {}
        for era in self._eras:
            self._by_year.setdefault(era.year, era)

        if max_cache_size is not None and max_cache_size < 1:
            raise ValueError(f"max_cache_size must be positive, got {max_cache_size}")
        self.max_cache_size = max_cache_size
        self._cache: OrderedDict[str, Era] = OrderedDict()

    @property
    def eras(self) -> tuple[Era, ...]:
        """Eras sorted ascending by start date."""
        return self._eras

    def __len__(self) -> int:
        return len(self._eras)

    def resolve(self, value: DateLike) -> Era:
        """
        Era covering the given date.

        Raises:
            InvalidDateError: If value is not a valid date
            EraNotFoundError: If the date precedes the earliest era
        """
        query = parse_iso_date(value)
        key = query.isoformat()

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug(f"Era cache hit for {key}")
            return cached

        era = self._locate(query)
        self._cache[key] = era
        if self.max_cache_size is not None and len(self._cache) > self.max_cache_size:
            self._cache.popitem(last=False)
        return era

    def _locate(self, query: date) -> Era:
        if not self._eras:
            raise EraNotFoundError(query, "Era table is empty")

        earliest = self._eras[0]
        if query < earliest.start_date:
            raise EraNotFoundError(query, earliest=earliest.start_date)

        latest = self._eras[-1]
        if query >= latest.start_date:
            return latest

        # Right-exclusive partition: the last start <= query owns the date
        position = int(self._starts.searchsorted(pd.Timestamp(query), side="right")) - 1
        era = self._eras[position]
        following = self._eras[position + 1]
        if not (era.start_date <= query < following.start_date):
            raise EraNotFoundError(query)

        logger.debug(f"Resolved {query} to era {era.year} (starts {era.start_date})")
        return era

    def era_by_year(self, year: int) -> Optional[Era]:
        """Era with the given nominal year, or None."""
        return self._by_year.get(year)

    def cache_info(self) -> dict:
        return {"size": len(self._cache), "max_size": self.max_cache_size}

    def clear_cache(self) -> None:
        self._cache.clear()


__all__ = [
    "ERA_COLUMNS",
    "Era",
    "eras_from_frame",
    "EraResolver",
]
