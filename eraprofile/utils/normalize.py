"""Name normalization for table lookups.

Attribute names ("7 Red") and period names ("Tail of the Year") are compared
after folding case, accents and punctuation away.
"""

import re
import unicodedata

_WHITESPACE = re.compile(r"\s+")


def normalize_name(
    s: str,
    *,
    allowed_chars: str = r"a-z0-9\s\-",
) -> str:
    """Fold a display name into its lookup key.

    Accents are stripped after NFKD decomposition, the text is casefolded and
    every character outside `allowed_chars` becomes a space before runs of
    whitespace are collapsed.

    Examples:
        >>> normalize_name("Tail of the Year")
        'tail of the year'

        >>> normalize_name("  EARLY   spring! ")
        'early spring'

        >>> normalize_name("Éarly Sprîng")
        'early spring'
    """
    if not s:
        return ""

    decomposed = unicodedata.normalize("NFKD", s)
    ascii_only = "".join(ch for ch in decomposed if ord(ch) < 128)
    folded = re.sub(rf"[^{allowed_chars}]", " ", ascii_only.casefold())
    return _WHITESPACE.sub(" ", folded).strip()


__all__ = [
    "normalize_name",
]
