"""Profile API.

Composes era resolution, period resolution and the derived flags into one
profile dict for a calendar date.
"""

from datetime import date
from typing import List, Mapping, Optional
import logging

from eraprofile.eras.eraapi import get_era_resolver, load_eras
from eraprofile.eras.eraidentity import EraResolver
from eraprofile.eras.eravalidate import validate_eras
from eraprofile.patterns.patternapi import get_rules, load_patterns, year_characteristics
from eraprofile.patterns.patternvalidate import validate_patterns
from eraprofile.period.periodapi import get_period_definitions
from eraprofile.period.periodflags import is_overlap, is_peak, next_period
from eraprofile.period.periodidentity import resolve_period_for_date
from eraprofile.utils.dates import (
    DateLike,
    days_between,
    format_date,
    format_date_long,
    parse_iso_date,
)

logger = logging.getLogger(__name__)


def calculate_profile(
    value: DateLike,
    *,
    asof: Optional[date] = None,
    strict: bool = False,
    resolver: Optional[EraResolver] = None,
    patterns: Optional[Mapping] = None,
) -> dict:
    """
    Compute the full profile of a calendar date.

    Args:
        value: ISO date string (YYYY-MM-DD) or date
        asof: Reference date for the next-period preview year (default: today)
        strict: Raise PeriodUnresolvableError instead of a fallback period
        resolver: EraResolver to use (default: shared packaged resolver)
        patterns: Pattern bundle (default: packaged patterns.yaml)

    Returns:
        Profile dict with structure:
        {
            "date": "YYYY-MM-DD",
            "formatted_date": "DD.MM.YYYY",
            "year": int,                      # nominal era year
            "year_start_date": "YYYY-MM-DD",
            "year_start_date_formatted": "DD.MM.YYYY",
            "year_day": int,                  # 0-based offset from era start
            "animal": str, "character": str, "element": str, "mengi": str,
            "period": str,
            "period_day": int,                # 1-based
            "period_duration": int,
            "period_start": "YYYY-MM-DD",
            "period_end": "YYYY-MM-DD",
            "period_start_formatted": "DD.MM.YYYY",
            "period_end_formatted": "DD.MM.YYYY",
            "period_fallback": bool,
            "is_peak_period": bool,
            "is_overlap_period": bool,
            "next_period": dict | None,       # only when is_overlap_period
            "indices": {
                "animal_index": int, "character_index": int,
                "element_index": int, "mengi_index": int,
                "period_index": int,
            },
        }

    Raises:
        InvalidDateError: If value is not a valid date
        EraNotFoundError: If the date precedes the earliest era
        PeriodUnresolvableError: If the period table is empty (or strict)

    Examples:
        >>> profile = calculate_profile("2024-01-05")
        >>> profile["year"], profile["animal"], profile["period"], profile["period_day"]
        (2023, 'Hare', 'Tail of the Year', 22)
    """
    query = parse_iso_date(value)

    if resolver is None:
        resolver = get_era_resolver()
    if patterns is None:
        patterns = load_patterns()

    era = resolver.resolve(query)
    definitions = get_period_definitions(patterns)
    period = resolve_period_for_date(query, definitions, strict=strict)
    rules = get_rules(patterns)

    peak = is_peak(period.day_in_period, rules["peak_days"])
    overlap = is_overlap(period.day_in_period, period.duration, rules["overlap_days"])
    preview = next_period(period.index, definitions, asof=asof) if overlap else None

    logger.debug(
        f"Profile for {query}: era {era.year}, period {period.name} "
        f"day {period.day_in_period}/{period.duration}"
    )

    return {
        "date": query.isoformat(),
        "formatted_date": format_date(query),
        "year": era.year,
        "year_start_date": era.start_date.isoformat(),
        "year_start_date_formatted": format_date(era.start_date),
        "year_day": days_between(era.start_date, query),
        **year_characteristics(era, patterns),
        "period": period.name,
        "period_day": period.day_in_period,
        "period_duration": period.duration,
        "period_start": period.start_date.isoformat(),
        "period_end": period.end_date.isoformat(),
        "period_start_formatted": format_date(period.start_date),
        "period_end_formatted": format_date(period.end_date),
        "period_fallback": period.fallback,
        "is_peak_period": peak,
        "is_overlap_period": overlap,
        "next_period": preview,
        "indices": {
            "animal_index": era.animal_index,
            "character_index": era.character_index,
            "element_index": era.element_index,
            "mengi_index": era.mengi_index,
            "period_index": period.index,
        },
    }


def validate_static_tables() -> List[str]:
    """Validate the packaged era table and pattern bundle together.

    Returns:
        List of issues (empty when both tables are consistent)
    """
    patterns = load_patterns()
    issues = validate_patterns(patterns)
    issues.extend(validate_eras(load_eras(), patterns))
    return issues


__all__ = [
    "calculate_profile",
    "validate_static_tables",
    "format_date",
    "format_date_long",
]
