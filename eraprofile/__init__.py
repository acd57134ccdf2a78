"""Era Profile - date profiles over eras and a yearly period cycle

Public API for computing the profile of a calendar date: the era covering it,
the era's symbolic attributes, the period of the yearly cycle the date falls
in and the peak/overlap flags derived from the day within that period.

Usage:
    from eraprofile import calculate_profile, era_identifier, period_identifier

    # Full profile of a date
    profile = calculate_profile("2024-01-05")
    # Returns: {'year': 2023, 'animal': 'Hare', 'period': 'Tail of the Year', 'period_day': 22, ...}

    # Era covering a date
    era = era_identifier("2024-02-10")  # Returns: {'year': 2024, 'animal': 'Dragon', ...}

    # Period containing a date
    period = period_identifier("2024-01-05")  # Returns: {'name': 'Tail of the Year', 'day_in_period': 22, ...}
"""

__version__ = "0.0.1"

# ============================================================================
# Errors
# ============================================================================

from .errors import (
    ProfileError,             # Base class, carries the offending date
    InvalidDateError,         # Input is not a YYYY-MM-DD calendar date
    EraNotFoundError,         # Date precedes the earliest era
    PeriodUnresolvableError,  # Period table empty (or strict and unmatched)
)

# ============================================================================
# Pattern Tables API
# ============================================================================

from .patterns.patternapi import (
    load_patterns,           # Load attribute tables, periods and rules
    get_rules,               # Peak/overlap thresholds
    attribute_name,          # Attribute name by index
    attribute_index,         # Attribute index by name
)

# ============================================================================
# Era Resolution API
# ============================================================================

from .eras.eraapi import (
    era_identifier,          # Primary API - era covering a date
    get_era_by_year,         # Era by nominal year
    list_eras,               # List/filter eras by attribute
    era_stats,               # Table summary
    load_eras,               # Load eras database
)
from .eras.eraidentity import (
    Era,
    EraResolver,             # Memoizing date -> era resolver
)

# ============================================================================
# Period Resolution API
# ============================================================================

from .period.periodapi import (
    period_identifier,       # Primary API - period containing a date
    periods_for_year,        # All periods projected onto a year
    period_definition,       # Period definition by (fuzzy) name
    match_period,            # Get top-K period matches
    format_period_display,   # Format period for display
)
from .period.periodflags import (
    is_peak,                 # Day falls in the peak window
    is_overlap,              # Day is near the period end
    next_period,             # Preview of the following period
)

# ============================================================================
# Profile API
# ============================================================================

from .profile.profileapi import (
    calculate_profile,       # Primary API - full profile of a date
    validate_static_tables,  # Consistency report for packaged tables
    format_date,             # DD.MM.YYYY
    format_date_long,        # '5 January 2024'
)

__all__ = [
    # Version
    "__version__",

    # ========================================================================
    # PRIMARY APIS - Start here!
    # ========================================================================
    "calculate_profile",    # Date -> full profile
    "era_identifier",       # Date -> era with attribute names
    "period_identifier",    # Date -> period with day in period

    # ========================================================================
    # Errors
    # ========================================================================
    "ProfileError",
    "InvalidDateError",
    "EraNotFoundError",
    "PeriodUnresolvableError",

    # ========================================================================
    # Pattern Tables
    # ========================================================================
    "load_patterns",
    "get_rules",
    "attribute_name",
    "attribute_index",

    # ========================================================================
    # Era Resolution
    # ========================================================================
    "get_era_by_year",
    "list_eras",
    "era_stats",
    "load_eras",
    "Era",
    "EraResolver",

    # ========================================================================
    # Period Resolution
    # ========================================================================
    "periods_for_year",
    "period_definition",
    "match_period",
    "format_period_display",
    "is_peak",
    "is_overlap",
    "next_period",

    # ========================================================================
    # Profile
    # ========================================================================
    "validate_static_tables",
    "format_date",
    "format_date_long",
]
