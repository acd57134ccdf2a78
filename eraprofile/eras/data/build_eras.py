#!/usr/bin/env python3
"""
Build eras.parquet from eras.csv.

This script:
1. Loads eras.csv and ../../patterns/data/patterns.yaml
2. Coerces years and attribute indices to integers
3. Normalizes start dates to ISO YYYY-MM-DD strings
4. Validates duplicates, ordering and index ranges against the pattern tables
5. Writes eras.parquet sorted by start_date
"""

import sys
from pathlib import Path
from typing import Optional

import pandas as pd

from eraprofile.eras.eraidentity import ERA_COLUMNS
from eraprofile.eras.eravalidate import validate_eras
from eraprofile.patterns.patternapi import ATTRIBUTE_TABLES
from eraprofile.utils.build_framework import BuildConfig, build_entity_database
from eraprofile.utils.build_utils import coerce_int
from eraprofile.utils.dates import parse_iso_date


def process_era(era: dict) -> dict:
    """Convert an eras.csv row to a typed DataFrame row.

    Raises:
        ValueError: If a year, index or start date is malformed
    """
    row = {column: coerce_int(era.get(column), column) for column in ERA_COLUMNS if column != "start_date"}
    row["start_date"] = parse_iso_date(str(era.get("start_date", "")).strip()).isoformat()
    return {column: row[column] for column in ERA_COLUMNS}


def generate_era_summary(df: pd.DataFrame, patterns: Optional[dict]) -> None:
    """Print era-specific summary statistics."""
    print(f"\nYears covered: {df['year'].min()} - {df['year'].max()}")
    print(f"First era starts: {df['start_date'].iloc[0]}")
    print(f"Last era starts: {df['start_date'].iloc[-1]}")

    if patterns:
        print("\nAnimal distribution:")
        animals = patterns.get("animals") or []
        for index, count in df["animal_index"].value_counts().sort_index().items():
            label = animals[index] if 0 <= index < len(animals) else f"#{index}"
            print(f"  {label}: {count}")

        sizes = {key: len(patterns.get(key) or []) for key in ATTRIBUTE_TABLES.values()}
        print(f"\nPattern table sizes: {sizes}")


def main():
    """Main build process."""
    data_dir = Path(__file__).parent

    config = BuildConfig(
        input_csv=data_dir / "eras.csv",
        output_parquet=data_dir / "eras.parquet",
        aux_yaml=data_dir.parent.parent / "patterns" / "data" / "patterns.yaml",
        process_entity=process_era,
        validate_data=validate_eras,
        generate_summary=generate_era_summary,
        entity_name="era",
        entity_plural="eras",
        sort_column="start_date",
    )

    return build_entity_database(config)


if __name__ == "__main__":
    sys.exit(main())
