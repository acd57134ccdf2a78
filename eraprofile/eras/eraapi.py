"""Era resolution API.

Public API for finding the era that covers a date and for browsing the era
table by year or by attribute.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional, Union
import logging

import pandas as pd

from eraprofile.eras.eraidentity import ERA_COLUMNS, Era, EraResolver
from eraprofile.patterns.patternapi import (
    ATTRIBUTE_TABLES,
    attribute_index,
    load_patterns,
    year_characteristics,
)
from eraprofile.utils.dataloader import (
    find_data_file,
    resolve_data_path,
    load_parquet_or_csv,
    format_not_found_error,
)
from eraprofile.utils.dates import DateLike

logger = logging.getLogger(__name__)

ERAS_ENV_VAR = "ERAPROFILE_ERAS_PATH"


@lru_cache(maxsize=1)
def load_eras(path: Optional[Union[str, Path]] = None) -> pd.DataFrame:
    """Load the era table into memory.

    Loading priority:
    1. Explicit path if provided
    2. ERAPROFILE_ERAS_PATH environment variable
    3. Package data: eras/data/eras.parquet, then eras/data/eras.csv
    4. Development tables (../tables/eras/)

    Args:
        path: Optional path to an eras .parquet or .csv file

    Returns:
        DataFrame sorted by start_date with columns:
          - year: nominal era id
          - start_date: ISO date string of the era's first day
          - animal_index, character_index, element_index, mengi_index

    Raises:
        FileNotFoundError: If no era table is available
        ValueError: If required columns are missing

    Examples:
        >>> df = load_eras()
        >>> df[df["year"] == 2024]["start_date"].iloc[0]
        '2024-02-10'
    """
    found_path = resolve_data_path(path, ERAS_ENV_VAR)

    if found_path is None:
        found_path = find_data_file(
            module_file=__file__,
            subdirectory="eras",
            filenames=["eras.parquet", "eras.csv"],
        )

    if found_path is None:
        eras_dir = Path(__file__).parent / "data"
        error_msg = format_not_found_error(
            subdirectory="eras",
            searched_locations=[
                ("Environment variable", ERAS_ENV_VAR),
                ("Module-local data", eras_dir),
                ("Development tables", Path(__file__).parent.parent.parent / "tables" / "eras"),
            ],
            fix_instructions=[
                f"Set {ERAS_ENV_VAR} to point to an eras .csv or .parquet file",
                "Or restore eraprofile/eras/data/eras.csv",
            ],
        )
        raise FileNotFoundError(error_msg)

    df = load_parquet_or_csv(Path(found_path))

    missing = [col for col in ERA_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns in {found_path}: {missing}")

    df = df[ERA_COLUMNS].copy()
    df["start_date"] = df["start_date"].astype(str)
    df = df.sort_values("start_date", kind="stable").reset_index(drop=True)

    logger.info(f"Loaded {len(df)} eras from {found_path}")
    return df


@lru_cache(maxsize=1)
def get_era_resolver() -> EraResolver:
    """Shared resolver over the packaged era table."""
    return EraResolver(load_eras())


def _era_details(era: Era, patterns: Mapping) -> dict:
    return {**era.to_dict(), **year_characteristics(era, patterns)}


def era_identifier(
    value: DateLike,
    *,
    resolver: Optional[EraResolver] = None,
) -> dict:
    """Return the era covering a date, with attribute names.

    Args:
        value: ISO date string (YYYY-MM-DD) or date
        resolver: EraResolver to use (default: shared packaged resolver)

    Returns:
        Dict with year, start_date, start_date_formatted, the four *_index
        fields and animal, character, element, mengi names

    Raises:
        InvalidDateError: If value is not a valid date
        EraNotFoundError: If the date precedes the earliest era

    Examples:
        >>> era_identifier("2024-03-01")
        {'year': 2024, 'start_date': '2024-02-10', 'start_date_formatted': '10.02.2024',
         ..., 'animal': 'Dragon', 'character': 'Male', 'element': 'Wood', 'mengi': '3 Blue'}
    """
    if resolver is None:
        resolver = get_era_resolver()
    return _era_details(resolver.resolve(value), load_patterns())


def get_era_by_year(year: int, *, resolver: Optional[EraResolver] = None) -> Optional[dict]:
    """Return the era with nominal year `year`, with attribute names, or None.

    Examples:
        >>> get_era_by_year(1984)["animal"]
        'Mouse'
        >>> get_era_by_year(1066) is None
        True
    """
    if resolver is None:
        resolver = get_era_resolver()
    era = resolver.era_by_year(year)
    if era is None:
        return None
    return _era_details(era, load_patterns())


def list_eras(
    animal: Optional[Any] = None,
    character: Optional[Any] = None,
    element: Optional[Any] = None,
    mengi: Optional[Any] = None,
) -> pd.DataFrame:
    """List eras filtered by attribute name or index.

    Names are matched case- and diacritic-insensitively. An unknown name
    yields an empty result.

    Examples:
        >>> list_eras(animal="Dragon", element="Wood")["year"].tolist()
        [1964, 2024]
    """
    df = load_eras()
    patterns = load_patterns()
    filters = {"animal": animal, "character": character, "element": element, "mengi": mengi}

    mask = pd.Series(True, index=df.index)
    for kind, value in filters.items():
        if value is None:
            continue
        index = attribute_index(kind, value, patterns)
        if index is None:
            return df.iloc[0:0].copy()
        mask &= df[f"{kind}_index"] == index

    return df[mask].reset_index(drop=True)


def era_stats() -> dict:
    """Summary of the static tables.

    Returns:
        Dict with total_eras, min_year, max_year and total_periods
    """
    df = load_eras()
    patterns = load_patterns()
    return {
        "total_eras": len(df),
        "min_year": int(df["year"].min()) if len(df) else 0,
        "max_year": int(df["year"].max()) if len(df) else 0,
        "total_periods": len(patterns.get("periods") or []),
        "attribute_tables": {
            key: len(patterns.get(key) or []) for key in ATTRIBUTE_TABLES.values()
        },
    }


def clear_cache():
    """Clear cached era tables and the shared resolver.

    Useful for testing or when ERAPROFILE_ERAS_PATH changes.
    """
    load_eras.cache_clear()
    get_era_resolver.cache_clear()
    logger.info("Cleared eras loader cache")


__all__ = [
    "load_eras",
    "get_era_resolver",
    "era_identifier",
    "get_era_by_year",
    "list_eras",
    "era_stats",
    "clear_cache",
]
