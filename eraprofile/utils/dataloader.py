"""Locating and reading the static tables.

Tables ship as package data next to the module that owns them. During
development they may also live in a top-level tables/<subdirectory>/
directory, and callers can point at replacement files through an explicit
path or an environment variable.
"""

import os
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

import pandas as pd

_READERS = {
    ".parquet": pd.read_parquet,
    ".csv": pd.read_csv,
}


def _search_dirs(
    module_file: str,
    subdirectory: str,
    search_dev_tables: bool,
    module_local_data: bool,
) -> Iterator[Path]:
    module_dir = Path(module_file).parent
    package_root = module_dir.parent
    if module_local_data:
        yield module_dir / "data"
    yield package_root / "data" / subdirectory
    if search_dev_tables:
        yield package_root.parent / "tables" / subdirectory


def find_data_file(
    module_file: str,
    subdirectory: str,
    filenames: List[str],
    search_dev_tables: bool = True,
    module_local_data: bool = True,
) -> Optional[Path]:
    """Return the first existing table file, or None.

    Directories are searched in order:
      - {module_dir}/data/ (when module_local_data)
      - eraprofile/data/{subdirectory}/
      - tables/{subdirectory}/ beside the package (when search_dev_tables)

    Within a directory the filenames are tried in the order given, so
    ['eras.parquet', 'eras.csv'] prefers a compiled parquet file.

    Examples:
        >>> find_data_file(__file__, "eras", ["eras.parquet", "eras.csv"])
        PosixPath('.../eraprofile/eras/data/eras.csv')
    """
    for directory in _search_dirs(module_file, subdirectory, search_dev_tables, module_local_data):
        for filename in filenames:
            candidate = directory / filename
            if candidate.exists():
                return candidate
    return None


def resolve_data_path(
    path: Optional[Union[str, Path]],
    env_var: str,
) -> Optional[Path]:
    """Return the first existing path among an explicit path and an env override.

    Args:
        path: Explicit path passed by the caller (highest priority)
        env_var: Name of the environment variable holding an override path

    Returns:
        Existing Path, or None when neither source points at a file

    Raises:
        FileNotFoundError: If an explicit path is given but does not exist
    """
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Required file not found: {path}")
        return path

    env_path = os.environ.get(env_var)
    if env_path:
        env_path = Path(env_path)
        if env_path.exists():
            return env_path

    return None


def load_parquet_or_csv(file_path: Path) -> pd.DataFrame:
    """Read a .parquet or .csv table into a DataFrame.

    Raises:
        ValueError: For any other extension
    """
    reader = _READERS.get(file_path.suffix)
    if reader is None:
        raise ValueError(f"Unsupported file format: {file_path.suffix}. Use .parquet or .csv")
    return reader(file_path)


def format_not_found_error(
    subdirectory: str,
    searched_locations: List[Tuple[str, Path]],
    fix_instructions: List[str],
) -> str:
    """Build the message for a missing table FileNotFoundError.

    Args:
        subdirectory: Table name (e.g., 'eras', 'patterns')
        searched_locations: (description, location) pairs that were checked
        fix_instructions: Steps that make the table available
    """
    searched = [f"  {n}. {desc}: {where}" for n, (desc, where) in enumerate(searched_locations, 1)]
    fixes = [f"  • {step}" for step in fix_instructions]
    return "\n".join(
        [f"No {subdirectory} data found in standard locations.", "", "Searched:"]
        + searched
        + ["", "To fix:"]
        + fixes
    )


__all__ = [
    "find_data_file",
    "resolve_data_path",
    "load_parquet_or_csv",
    "format_not_found_error",
]
