"""Profile assembly."""

from eraprofile.profile.profileapi import calculate_profile, validate_static_tables

__all__ = [
    "calculate_profile",
    "validate_static_tables",
]
