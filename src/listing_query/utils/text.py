"""String matching helpers shared by the query parser and slug code."""

import re
from functools import lru_cache

from rapidfuzz.distance import Levenshtein

_WHITESPACE_RE = re.compile(r"\s+")


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance with unit insert, delete and substitute costs."""
    return Levenshtein.distance(a, b)


def similarity_score(a: str, b: str) -> float:
    """Normalized similarity in [0, 1]: ``1 - distance / max(len(a), len(b))``.

    Comparison is case-insensitive. Two empty strings are identical.
    """
    return Levenshtein.normalized_similarity(a.lower(), b.lower())


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


@lru_cache(maxsize=1024)
def _phrase_pattern(phrase: str) -> re.Pattern[str]:
    # A phrase only matches on alphanumeric token boundaries.
    return re.compile(rf"(?<![a-z0-9]){re.escape(phrase.lower())}(?![a-z0-9])", re.IGNORECASE)


def contains_phrase(text: str, phrase: str) -> bool:
    """True if ``phrase`` occurs in ``text`` as whole tokens."""
    if not phrase:
        return False
    return _phrase_pattern(phrase).search(text) is not None


def remove_phrase(text: str, phrase: str) -> str:
    """Remove every whole-token occurrence of ``phrase`` and tidy whitespace."""
    if not phrase:
        return text
    return collapse_whitespace(_phrase_pattern(phrase).sub(" ", text))
