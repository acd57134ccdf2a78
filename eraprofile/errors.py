"""Error kinds raised by profile calculation.

Every error keeps the offending date so callers can render their own
messages:

  - InvalidDateError: input does not parse to a calendar date
  - EraNotFoundError: no era covers the date (e.g. before the earliest era)
  - PeriodUnresolvableError: no period definition contains the date
"""

from __future__ import annotations
from typing import Any, Optional


class ProfileError(Exception):
    """Base class for profile calculation errors."""

    kind = "ProfileError"

    def __init__(self, date: Any, message: Optional[str] = None):
        self.date = date
        super().__init__(message or f"{self.kind}: {date!r}")


class InvalidDateError(ProfileError, ValueError):
    """Input string is not a valid YYYY-MM-DD calendar date."""

    kind = "InvalidDate"

    def __init__(self, date: Any, message: Optional[str] = None):
        super().__init__(date, message or f"Invalid date: {date!r}")


class EraNotFoundError(ProfileError, LookupError):
    """No era covers the requested date."""

    kind = "NotFound"

    def __init__(self, date: Any, message: Optional[str] = None, earliest: Any = None):
        self.earliest = earliest
        if message is None:
            if earliest is not None:
                message = f"Date {date} is earlier than the earliest era start {earliest}"
            else:
                message = f"No era found for date {date}"
        super().__init__(date, message)


class PeriodUnresolvableError(ProfileError, LookupError):
    """No period definition contains the requested date."""

    kind = "Unresolvable"

    def __init__(self, date: Any, message: Optional[str] = None):
        super().__init__(date, message or f"No period definition contains date {date}")


__all__ = [
    "ProfileError",
    "InvalidDateError",
    "EraNotFoundError",
    "PeriodUnresolvableError",
]
