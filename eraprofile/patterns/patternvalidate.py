"""Consistency checks for the pattern bundle.

Issues are reported, never fixed: a duration that differs from the literal
day span of its period may be intentional.
"""

from datetime import timedelta
from typing import List, Mapping
import calendar

from eraprofile.patterns.patternapi import ATTRIBUTE_TABLES, get_rules
from eraprofile.utils.normalize import normalize_name

# Common year used to measure literal period spans
REFERENCE_YEAR = 2023


def _validate_month_day(name: str, label: str, month: int, day: int) -> List[str]:
    if not 1 <= month <= 12:
        return [f"Period {name}: {label} month {month} out of range"]
    # Feb 29 is allowed, it clamps in common years
    last_day = calendar.monthrange(2024, month)[1]
    if not 1 <= day <= last_day:
        return [f"Period {name}: {label} day {day} out of range for month {month}"]
    return []


def validate_periods(raw_periods: list) -> List[str]:
    """Check period definitions individually and as a cycle."""
    # Deferred: eraprofile.period imports this package
    from eraprofile.period.periodidentity import PeriodDefinition

    issues = []
    if not raw_periods:
        return ["No periods defined"]

    definitions = []
    for i, raw in enumerate(raw_periods):
        try:
            definitions.append(PeriodDefinition.from_dict(raw))
        except (ValueError, AttributeError) as e:
            issues.append(f"Period #{i}: {e}")
    if issues:
        return issues

    seen = {}
    for d in definitions:
        key = normalize_name(d.name)
        if key in seen:
            issues.append(f"Duplicate period name: {d.name}")
        seen[key] = d

        month_day_issues = (
            _validate_month_day(d.name, "start", d.start_month, d.start_day)
            + _validate_month_day(d.name, "end", d.end_month, d.end_day)
        )
        if month_day_issues:
            issues.extend(month_day_issues)
            continue

        ends_before_start = (d.end_month, d.end_day) < (d.start_month, d.start_day)
        if ends_before_start != d.cross_year:
            issues.append(
                f"Period {d.name}: cross_year={d.cross_year} but ends "
                f"{'before' if ends_before_start else 'after'} it starts"
            )
            continue

        if d.duration <= 0:
            issues.append(f"Period {d.name}: duration must be positive, got {d.duration}")

        start, end = d.project(REFERENCE_YEAR)
        span = (end - start).days + 1
        if span != d.duration:
            issues.append(f"Period {d.name}: duration {d.duration} differs from day span {span}")

    if issues:
        return issues

    # Each period must start the day after its predecessor ends
    for i, d in enumerate(definitions):
        successor = definitions[(i + 1) % len(definitions)]
        _, end = d.project(REFERENCE_YEAR)
        following = end + timedelta(days=1)
        if (following.month, following.day) != (successor.start_month, successor.start_day):
            issues.append(
                f"Gap or overlap between {d.name} (ends {end.month:02d}-{end.day:02d}) and "
                f"{successor.name} (starts {successor.start_month:02d}-{successor.start_day:02d})"
            )

    crossing = [d.name for d in definitions if d.cross_year]
    if len(crossing) > 1:
        issues.append(f"More than one period crosses the year boundary: {crossing}")

    return issues


def validate_rules(patterns: Mapping) -> List[str]:
    """Check rule thresholds."""
    try:
        rules = get_rules(patterns)
    except ValueError as e:
        return [str(e)]

    issues = []
    start, end = rules["peak_days"]
    if start > end:
        issues.append(f"rules.peak_days start {start} is after end {end}")
    if start < 1:
        issues.append(f"rules.peak_days start must be >= 1, got {start}")
    if rules["overlap_days"] < 0:
        issues.append(f"rules.overlap_days must be >= 0, got {rules['overlap_days']}")
    return issues


def validate_patterns(patterns: Mapping) -> List[str]:
    """Validate the whole pattern bundle and return a list of issues.

    Examples:
        >>> from eraprofile.patterns.patternapi import load_patterns
        >>> validate_patterns(load_patterns())
        []
    """
    issues = []

    for key in ATTRIBUTE_TABLES.values():
        table = patterns.get(key)
        if not table:
            issues.append(f"Missing or empty {key} table")
            continue
        names = [normalize_name(str(v)) for v in table]
        if len(set(names)) != len(names):
            issues.append(f"Duplicate names in {key} table")

    issues.extend(validate_periods(patterns.get("periods") or []))
    issues.extend(validate_rules(patterns))
    return issues


__all__ = [
    "validate_periods",
    "validate_rules",
    "validate_patterns",
]
