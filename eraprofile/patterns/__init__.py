"""Pattern tables: attribute names, period definitions and rule thresholds."""

from eraprofile.patterns.patternapi import (
    load_patterns,
    get_rules,
    attribute_name,
    attribute_index,
    year_characteristics,
)

__all__ = [
    "load_patterns",
    "get_rules",
    "attribute_name",
    "attribute_index",
    "year_characteristics",
]
