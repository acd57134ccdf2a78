"""Pattern tables API.

Loads the pattern bundle (attribute name lists, period definitions and rule
thresholds) from patterns.yaml and exposes typed views over it.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional, Union
import logging

from eraprofile.utils.build_utils import coerce_int, load_yaml_file
from eraprofile.utils.dataloader import (
    find_data_file,
    resolve_data_path,
    format_not_found_error,
)
from eraprofile.utils.normalize import normalize_name

logger = logging.getLogger(__name__)

PATTERNS_ENV_VAR = "ERAPROFILE_PATTERNS_PATH"

# Attribute kind -> list key in patterns.yaml
ATTRIBUTE_TABLES = {
    "animal": "animals",
    "character": "characters",
    "element": "elements",
    "mengi": "mengi",
}


@lru_cache(maxsize=1)
def load_patterns(path: Optional[Union[str, Path]] = None) -> dict:
    """Load the pattern bundle into memory.

    Loading priority:
    1. Explicit path if provided
    2. ERAPROFILE_PATTERNS_PATH environment variable
    3. Package data (patterns/data/patterns.yaml)

    Args:
        path: Optional explicit path to a patterns YAML file

    Returns:
        Dict with keys: animals, characters, elements, mengi, periods, rules

    Raises:
        FileNotFoundError: If no patterns file is available
    """
    found_path = resolve_data_path(path, PATTERNS_ENV_VAR)

    if found_path is None:
        found_path = find_data_file(
            module_file=__file__,
            subdirectory="patterns",
            filenames=["patterns.yaml", "patterns.yml"],
        )

    if found_path is None:
        error_msg = format_not_found_error(
            subdirectory="patterns",
            searched_locations=[
                ("Environment variable", PATTERNS_ENV_VAR),
                ("Module-local data", Path(__file__).parent / "data"),
            ],
            fix_instructions=[
                f"Set {PATTERNS_ENV_VAR} to point to a patterns.yaml file",
                "Or restore eraprofile/patterns/data/patterns.yaml",
            ],
        )
        raise FileNotFoundError(error_msg)

    patterns = load_yaml_file(found_path)
    logger.info(
        f"Loaded patterns from {found_path}: "
        f"{len(patterns.get('periods') or [])} periods"
    )
    return patterns


def get_rules(patterns: Optional[Mapping] = None) -> dict:
    """Rule thresholds as {'peak_days': (start, end), 'overlap_days': int}.

    Raises:
        ValueError: If rules are missing or malformed
    """
    if patterns is None:
        patterns = load_patterns()

    rules = patterns.get("rules") or {}
    peak_days = rules.get("peak_days")
    if peak_days is None or len(peak_days) != 2:
        raise ValueError(f"rules.peak_days must be a [start, end] pair, got {peak_days!r}")
    if "overlap_days" not in rules:
        raise ValueError("rules.overlap_days is missing")

    return {
        "peak_days": (
            coerce_int(peak_days[0], "peak_days[0]"),
            coerce_int(peak_days[1], "peak_days[1]"),
        ),
        "overlap_days": coerce_int(rules["overlap_days"], "overlap_days"),
    }


def _attribute_table(kind: str, patterns: Mapping) -> list:
    if kind not in ATTRIBUTE_TABLES:
        raise ValueError(f"Unknown attribute kind: {kind}. Use one of {sorted(ATTRIBUTE_TABLES)}")
    return list(patterns.get(ATTRIBUTE_TABLES[kind]) or [])


def attribute_name(kind: str, index: int, patterns: Optional[Mapping] = None) -> Optional[str]:
    """Name of attribute `kind` at `index`, or None when out of range.

    Examples:
        >>> attribute_name("animal", 4)
        'Dragon'
        >>> attribute_name("element", 3)
        'Iron'
    """
    if patterns is None:
        patterns = load_patterns()

    table = _attribute_table(kind, patterns)
    if 0 <= index < len(table):
        return str(table[index])

    logger.warning(f"{kind} index {index} out of range (table has {len(table)} entries)")
    return None


def attribute_index(kind: str, name: Any, patterns: Optional[Mapping] = None) -> Optional[int]:
    """Index of attribute `kind` by name (case/diacritic-insensitive) or by int.

    Examples:
        >>> attribute_index("animal", "dragon")
        4
        >>> attribute_index("mengi", "7 RED")
        6
    """
    if patterns is None:
        patterns = load_patterns()

    table = _attribute_table(kind, patterns)
    if isinstance(name, int) and not isinstance(name, bool):
        return name if 0 <= name < len(table) else None

    query = normalize_name(str(name))
    for i, value in enumerate(table):
        if normalize_name(str(value)) == query:
            return i
    return None


def year_characteristics(era: Any, patterns: Optional[Mapping] = None) -> dict:
    """Attribute names for an era (anything with the four *_index attributes).

    Returns:
        Dict with animal, character, element and mengi names (None when an
        index is outside its table)
    """
    if patterns is None:
        patterns = load_patterns()

    return {
        kind: attribute_name(kind, getattr(era, f"{kind}_index"), patterns)
        for kind in ATTRIBUTE_TABLES
    }


def clear_cache():
    """Clear the LRU cache for load_patterns."""
    load_patterns.cache_clear()
    logger.info("Cleared patterns loader cache")


__all__ = [
    "ATTRIBUTE_TABLES",
    "load_patterns",
    "get_rules",
    "attribute_name",
    "attribute_index",
    "year_characteristics",
    "clear_cache",
]
