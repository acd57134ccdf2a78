"""Period resolution API.

Public API for placing dates in the yearly period cycle, listing a year's
periods and looking up period definitions by name.
"""

from typing import Mapping, Optional, Sequence

import pandas as pd

from eraprofile.patterns.patternapi import load_patterns
from eraprofile.period.periodidentity import (
    PeriodDefinition,
    resolve_period_for_date,
    project_definitions,
)
from eraprofile.utils.dates import DateLike, parse_iso_date
from eraprofile.utils.normalize import normalize_name
from eraprofile.utils.resolver import find_best_match, topk_matches


def get_period_definitions(patterns: Optional[Mapping] = None) -> list[PeriodDefinition]:
    """Period definitions in cycle order.

    Args:
        patterns: Pattern bundle (default: load_patterns())

    Raises:
        ValueError: If an entry is malformed
    """
    if patterns is None:
        patterns = load_patterns()
    return [PeriodDefinition.from_dict(p) for p in patterns.get("periods") or []]


def period_identifier(
    value: DateLike,
    *,
    definitions: Optional[Sequence[PeriodDefinition]] = None,
    strict: bool = False,
) -> dict:
    """
    Resolve the period containing a date.

    Args:
        value: ISO date string (YYYY-MM-DD) or date
        definitions: Period definitions (default: packaged patterns)
        strict: Raise PeriodUnresolvableError instead of returning a fallback

    Returns:
        Period dict with structure:
        {
            "name": str,
            "day_in_period": int,        # 1-based
            "duration": int,             # from the table
            "start_date": "YYYY-MM-DD",
            "end_date": "YYYY-MM-DD",
            "start_date_formatted": "DD.MM.YYYY",
            "end_date_formatted": "DD.MM.YYYY",
            "index": int,
            "fallback": bool,
        }

    Raises:
        InvalidDateError: If value is not a valid date
        PeriodUnresolvableError: If the table is empty (or strict and unmatched)

    Examples:
        >>> period_identifier("2024-01-05")
        {'name': 'Tail of the Year', 'day_in_period': 22, 'duration': 37,
         'start_date': '2023-12-15', 'end_date': '2024-01-20', ...}

        >>> period_identifier("2024-03-05")["day_in_period"]  # leap year
        45
    """
    query = parse_iso_date(value)
    if definitions is None:
        definitions = get_period_definitions()
    return resolve_period_for_date(query, definitions, strict=strict).to_dict()


def periods_for_year(
    year: int,
    *,
    definitions: Optional[Sequence[PeriodDefinition]] = None,
) -> list[dict]:
    """
    All periods of the cycle projected onto `year`.

    Crossing periods start in `year` and end in `year + 1`.

    Examples:
        >>> [(p["name"], p["start_date"], p["end_date"]) for p in periods_for_year(2024)][:2]
        [('Tail of the Year', '2024-12-15', '2025-01-20'),
         ('Early Spring', '2024-01-21', '2024-03-05')]
    """
    if definitions is None:
        definitions = get_period_definitions()

    result = []
    for resolved in project_definitions(year, definitions):
        entry = resolved.to_dict()
        del entry["day_in_period"]
        del entry["fallback"]
        result.append(entry)
    return result


def _definitions_frame(definitions: Sequence[PeriodDefinition]) -> pd.DataFrame:
    return pd.DataFrame(
        [{**vars(d), "index": i} for i, d in enumerate(definitions)]
    )


def _definition_dict(definitions: Sequence[PeriodDefinition], row: pd.Series) -> dict:
    index = int(row["index"])
    return {**vars(definitions[index]), "index": index}


def period_definition(
    name: str,
    *,
    threshold: int = 90,
    definitions: Optional[Sequence[PeriodDefinition]] = None,
) -> Optional[dict]:
    """Return the period definition matching `name` as dict, or None.

    Exact (normalized) names win; otherwise the best RapidFuzz WRatio match
    at or above `threshold` is returned.

    Examples:
        >>> period_definition("early spring")["start_month"]
        1
        >>> period_definition("Late Autum")["name"]
        'Late Autumn'
    """
    if definitions is None:
        definitions = get_period_definitions()

    row = find_best_match(
        _definitions_frame(definitions),
        normalize_name(name),
        normalize_name,
        threshold=threshold,
    )
    if row is None:
        return None
    return _definition_dict(definitions, row)


def match_period(
    name: str,
    *,
    k: int = 5,
    definitions: Optional[Sequence[PeriodDefinition]] = None,
) -> list[dict]:
    """Top-K period definitions with fuzzy match scores (for review UIs).

    Examples:
        >>> [m["name"] for m in match_period("spring", k=3)]
        ['Spring', 'Early Spring', 'Late Spring']
    """
    if definitions is None:
        definitions = get_period_definitions()

    results = topk_matches(_definitions_frame(definitions), normalize_name(name), normalize_name, k=k)
    return [
        {**_definition_dict(definitions, row), "score": float(score)}
        for row, score in results
    ]


def format_period_display(period: dict) -> str:
    """
    Format period dict for human-readable display.

    Examples:
        >>> format_period_display(period_identifier("2024-01-05"))
        'Tail of the Year, day 22 of 37 (15.12.2023 - 20.01.2024)'

        >>> format_period_display(periods_for_year(2024)[1])
        'Early Spring (21.01.2024 - 05.03.2024)'
    """
    if not period:
        return ""

    span = f"({period['start_date_formatted']} - {period['end_date_formatted']})"
    if "day_in_period" in period:
        return f"{period['name']}, day {period['day_in_period']} of {period['duration']} {span}"
    return f"{period['name']} {span}"


__all__ = [
    "get_period_definitions",
    "period_identifier",
    "periods_for_year",
    "period_definition",
    "match_period",
    "format_period_display",
]
