"""Era resolution: which multi-year era covers a date."""

from eraprofile.eras.eraapi import (
    load_eras,
    era_identifier,
    get_era_by_year,
    list_eras,
    era_stats,
)
from eraprofile.eras.eraidentity import Era, EraResolver

__all__ = [
    "load_eras",
    "era_identifier",
    "get_era_by_year",
    "list_eras",
    "era_stats",
    "Era",
    "EraResolver",
]
