"""
Build Utility Functions
-----------------------

Common functions used by the table loaders and the era build script.

Functions:
  - load_yaml_file: Load and parse YAML file
  - coerce_int: Convert table cells to int with a readable error
"""

from pathlib import Path
from typing import Any


def load_yaml_file(path: Path) -> dict:
    """
    Load and parse YAML file.

    Args:
        path: Path to YAML file

    Returns:
        Parsed YAML data as dictionary

    Raises:
        FileNotFoundError: If file does not exist

    Examples:
        >>> data = load_yaml_file(Path("patterns.yaml"))
        >>> data['rules']['overlap_days']
        3
    """
    import yaml

    if not path.exists():
        raise FileNotFoundError(f"Required file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def coerce_int(value: Any, field: str) -> int:
    """
    Convert a table cell to int.

    Accepts ints, integral floats (pandas upcasts columns with gaps) and
    numeric strings.

    Raises:
        ValueError: If the value is missing or not integral

    Examples:
        >>> coerce_int("12", "start_month")
        12
        >>> coerce_int(3.0, "mengi_index")
        3
    """
    if value is None or value == "":
        raise ValueError(f"Missing value for {field}")
    if isinstance(value, bool):
        raise ValueError(f"Expected integer for {field}, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Expected integer for {field}, got {value!r}") from e
    if number != number or not number.is_integer():
        raise ValueError(f"Expected integer for {field}, got {value!r}")
    return int(number)


__all__ = [
    "load_yaml_file",
    "coerce_int",
]
