"""
Shared framework for compiling static tables.

Reads a CSV source table, converts each row through a table-specific
callback, validates the result and writes a parquet file. Used by
eras/data/build_eras.py.
"""

from pathlib import Path
from typing import List, Optional, Callable
from dataclasses import dataclass

import pandas as pd

from eraprofile.utils.build_utils import load_yaml_file


@dataclass
class BuildConfig:
    """Configuration for compiling a static table."""

    # Source and target (required)
    input_csv: Path = None
    output_parquet: Path = None

    # Table-specific callbacks (required except generate_summary)
    process_entity: Callable[[dict], dict] = None  # Source row -> typed row
    validate_data: Callable[[pd.DataFrame, Optional[dict]], List[str]] = None  # Issues, empty when clean
    generate_summary: Optional[Callable[[pd.DataFrame, Optional[dict]], None]] = None

    # Labels for progress output
    entity_name: str = None  # "era"
    entity_plural: str = None  # "eras"
    sort_column: Optional[str] = None  # Defaults to the first column

    # YAML handed to validate_data and generate_summary (e.g. patterns.yaml)
    aux_yaml: Optional[Path] = None


def _print_issues(issues: List[str]) -> None:
    if not issues:
        print("✅ All validations passed")
        return
    print(f"\n⚠️  {len(issues)} validation issue(s):")
    for issue in issues:
        print(f"  - {issue}")
    print()


def _print_banner(config: BuildConfig, df: pd.DataFrame) -> None:
    size_kb = config.output_parquet.stat().st_size / 1024
    print("\n" + "=" * 60)
    print(f"{config.entity_plural.upper()} BUILD SUMMARY")
    print("=" * 60)
    print(f"Rows written: {len(df)}")
    print(f"Output file: {config.output_parquet} ({size_kb:.1f} KB)")


def build_entity_database(config: BuildConfig) -> int:
    """
    Compile config.input_csv into config.output_parquet.

    The parquet file is written even when validation reports issues, so the
    report and the output can be inspected together.

    Returns:
        0 on success, 1 if validation issues found

    Raises:
        ValueError: If no input_csv is configured
    """
    if config.input_csv is None:
        raise ValueError(f"BuildConfig for {config.entity_plural} needs input_csv")

    print(f"Building {config.entity_plural} table from {config.input_csv}")
    source = pd.read_csv(config.input_csv, dtype=str, keep_default_na=False)

    aux_data = None
    if config.aux_yaml is not None and config.aux_yaml.exists():
        aux_data = load_yaml_file(config.aux_yaml)
        print(f"Using {config.aux_yaml} for validation")

    print(f"Processing {len(source)} {config.entity_plural}...")
    df = pd.DataFrame([config.process_entity(row) for row in source.to_dict("records")])

    print("\nValidating data...")
    issues = config.validate_data(df, aux_data)
    _print_issues(issues)

    df = df.sort_values(config.sort_column or df.columns[0], kind="stable").reset_index(drop=True)
    df.to_parquet(config.output_parquet, index=False, engine="pyarrow")

    _print_banner(config, df)
    if config.generate_summary is not None:
        config.generate_summary(df, aux_data)

    if issues:
        print(f"\n⚠️  {config.entity_plural} written with {len(issues)} validation issue(s)")
        return 1
    print(f"\n✅ {config.entity_plural} built successfully")
    return 0


def validate_duplicate_ids(df: pd.DataFrame, id_field: str, entity_plural: str) -> List[str]:
    """Report values of id_field that occur more than once."""
    repeated = df.loc[df[id_field].duplicated(keep=False), id_field]
    if repeated.empty:
        return []
    return [f"Duplicate {id_field}s found in {entity_plural}: {sorted(set(repeated.astype(str)))}"]


def validate_required_fields(df: pd.DataFrame, required_fields: List[str], label_field: str) -> List[str]:
    """Check for missing columns and empty values in required fields."""
    issues = []
    for field in required_fields:
        if field not in df.columns:
            issues.append(f"Missing column: {field}")
            continue
        blank = df[field].isna() | (df[field].astype(str).str.strip() == "")
        if blank.any():
            labels = df.loc[blank, label_field].astype(str).tolist() if label_field in df.columns else df.index[blank].tolist()
            issues.append(f"Missing {field} for rows: {labels}")
    return issues


__all__ = [
    "BuildConfig",
    "build_entity_database",
    "validate_duplicate_ids",
    "validate_required_fields",
]
