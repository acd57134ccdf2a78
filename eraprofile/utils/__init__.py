"""Shared utilities for the eraprofile package."""

from eraprofile.utils.dataloader import (
    find_data_file,
    resolve_data_path,
    load_parquet_or_csv,
    format_not_found_error,
)
from eraprofile.utils.normalize import normalize_name
from eraprofile.utils.resolver import (
    score_candidate,
    find_best_match,
    topk_matches,
)
from eraprofile.utils.build_utils import (
    load_yaml_file,
    coerce_int,
)
from eraprofile.utils.dates import (
    parse_iso_date,
    project_month_day,
    format_date,
    format_date_long,
    days_between,
)

__all__ = [
    # Data loading
    "find_data_file",
    "resolve_data_path",
    "load_parquet_or_csv",
    "format_not_found_error",

    # Normalization
    "normalize_name",

    # Fuzzy matching
    "score_candidate",
    "find_best_match",
    "topk_matches",

    # Build helpers
    "load_yaml_file",
    "coerce_int",

    # Dates
    "parse_iso_date",
    "project_month_day",
    "format_date",
    "format_date_long",
    "days_between",
]
