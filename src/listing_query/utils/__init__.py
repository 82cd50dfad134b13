"""Utility modules for query understanding."""

from .text import (
    collapse_whitespace,
    contains_phrase,
    levenshtein_distance,
    remove_phrase,
    similarity_score,
)

__all__ = [
    "collapse_whitespace",
    "contains_phrase",
    "levenshtein_distance",
    "remove_phrase",
    "similarity_score",
]
