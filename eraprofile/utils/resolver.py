"""Shared name resolution utilities.

Fuzzy lookup helpers used to find period definitions by (possibly
misspelled) name.
"""

from __future__ import annotations
from typing import Callable, Optional
import pandas as pd

try:
    from rapidfuzz import fuzz
except ImportError as e:
    raise ImportError("rapidfuzz not installed. pip install rapidfuzz") from e


def score_candidate(
    row: pd.Series,
    query_norm: str,
    normalize_fn: Callable[[str], str],
    name_column: str = "name",
) -> float:
    """Score a candidate row against a normalized query using fuzzy matching.

    Uses RapidFuzz WRatio scorer on the normalized name column.

    Args:
        row: Candidate row
        query_norm: Normalized query string
        normalize_fn: Function used to normalize the candidate name
        name_column: Name of the column holding the display name (default: "name")

    Returns:
        Fuzzy match score (0-100)

    Examples:
        >>> row = pd.Series({'name': 'Early Spring'})
        >>> score_candidate(row, 'early spring', str.lower)
        100.0
    """
    value = row[name_column]
    if pd.isna(value) or not str(value).strip():
        return 0.0
    return float(fuzz.WRatio(query_norm, normalize_fn(str(value))))


def find_best_match(
    candidates: pd.DataFrame,
    query_norm: str,
    normalize_fn: Callable[[str], str],
    threshold: int = 90,
    name_column: str = "name",
) -> Optional[pd.Series]:
    """Find the best matching candidate above a threshold.

    Exact normalized matches win outright; otherwise all candidates are scored
    and the best one is returned if it reaches the threshold.

    Args:
        candidates: DataFrame of candidates
        query_norm: Normalized query string
        normalize_fn: Function used to normalize candidate names
        threshold: Minimum fuzzy match score (0-100, default: 90)
        name_column: Name of the column holding the display name

    Returns:
        Best-matching row as Series, or None if no match above threshold
    """
    if candidates.empty or not query_norm:
        return None

    exact = candidates[candidates[name_column].map(lambda v: normalize_fn(str(v))) == query_norm]
    if not exact.empty:
        return exact.iloc[0]

    scored = topk_matches(candidates, query_norm, normalize_fn, k=1, name_column=name_column)
    if not scored:
        return None

    best_row, best_score = scored[0]
    if best_score < threshold:
        return None

    return best_row


def topk_matches(
    candidates: pd.DataFrame,
    query_norm: str,
    normalize_fn: Callable[[str], str],
    k: int = 5,
    name_column: str = "name",
) -> list[tuple[pd.Series, float]]:
    """Return top-K matching candidates with scores.

    Ties keep table order, so the earlier definition wins.

    Args:
        candidates: DataFrame of candidates
        query_norm: Normalized query string
        normalize_fn: Function used to normalize candidate names
        k: Number of top candidates to return (default: 5)
        name_column: Name of the column holding the display name

    Returns:
        List of (row, score) tuples, ordered by descending score

    Examples:
        >>> candidates = pd.DataFrame({'name': ['Spring', 'Late Spring', 'Summer']})
        >>> matches = topk_matches(candidates, 'spring', str.lower, k=2)
        >>> [row['name'] for row, score in matches]
        ['Spring', 'Late Spring']
    """
    if candidates.empty:
        return []

    scored = []
    for _, row in candidates.iterrows():
        score = score_candidate(row, query_norm, normalize_fn, name_column)
        scored.append((row.copy(), score))

    # sort is stable, so equal scores keep table order
    scored.sort(key=lambda x: x[1], reverse=True)
    return scored[:k]


__all__ = [
    "score_candidate",
    "find_best_match",
    "topk_matches",
]
