"""Consistency checks for the era table."""

from typing import List, Mapping, Optional

import pandas as pd

from eraprofile.eras.eraidentity import ERA_COLUMNS, Era
from eraprofile.errors import InvalidDateError
from eraprofile.patterns.patternapi import ATTRIBUTE_TABLES
from eraprofile.utils.build_framework import validate_duplicate_ids, validate_required_fields


def validate_eras(df: pd.DataFrame, patterns: Optional[Mapping] = None) -> List[str]:
    """Validate era rows and return a list of issues.

    Checks:
      - required columns and values
      - duplicate years and duplicate start dates
      - rows sorted ascending by start date, with years increasing
      - attribute indices within the pattern tables (when patterns given)
    """
    if df.empty:
        return ["Era table is empty"]

    issues = validate_required_fields(df, ERA_COLUMNS, "year")
    if issues:
        return issues

    issues.extend(validate_duplicate_ids(df, "year", "eras"))
    issues.extend(validate_duplicate_ids(df, "start_date", "eras"))

    eras = []
    for position, (_, row) in enumerate(df.iterrows()):
        try:
            eras.append(Era.from_row(row))
        except (ValueError, InvalidDateError) as e:
            issues.append(f"Row {position}: {e}")
    if len(eras) != len(df):
        return issues

    for previous, current in zip(eras, eras[1:]):
        if current.start_date <= previous.start_date:
            issues.append(
                f"Era {current.year} starts {current.start_date}, not after era "
                f"{previous.year} ({previous.start_date})"
            )
        elif current.year <= previous.year:
            issues.append(f"Era years not increasing: {previous.year} then {current.year}")

    if patterns is not None:
        for kind, key in ATTRIBUTE_TABLES.items():
            size = len(patterns.get(key) or [])
            bad = [e.year for e in eras if not 0 <= getattr(e, f"{kind}_index") < size]
            if bad:
                issues.append(f"{kind}_index outside {key} table (size {size}) for eras: {bad}")

    return issues


__all__ = [
    "validate_eras",
]
