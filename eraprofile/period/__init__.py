"""Period resolution within the yearly cycle."""

from eraprofile.period.periodapi import (
    get_period_definitions,
    period_identifier,
    periods_for_year,
    period_definition,
    match_period,
    format_period_display,
)

__all__ = [
    "get_period_definitions",
    "period_identifier",
    "periods_for_year",
    "period_definition",
    "match_period",
    "format_period_display",
]
