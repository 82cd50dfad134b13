"""
Tests for the string matching helpers.
"""

import pytest

from listing_query.utils import (
    collapse_whitespace,
    contains_phrase,
    levenshtein_distance,
    remove_phrase,
    similarity_score,
)


@pytest.mark.parametrize(
    ("a", "b", "expected"),
    [
        ("", "", 0),
        ("abc", "", 3),
        ("", "abc", 3),
        ("kitten", "sitting", 3),
        ("gachibowli", "gachibowly", 1),
        ("flaw", "lawn", 2),
        ("same", "same", 0),
    ],
)
def test_levenshtein_distance(a, b, expected):
    """Test classic edit distances."""
    assert levenshtein_distance(a, b) == expected
    assert levenshtein_distance(b, a) == expected


def test_similarity_score_is_case_insensitive():
    """Test similarity ignores case."""
    assert similarity_score("Kokapet", "kokapet") == 1.0


def test_similarity_score_normalizes_by_longer_string():
    """Test similarity divides by the longer length."""
    assert similarity_score("kollur", "kolxur") == pytest.approx(1 - 1 / 6)
    assert similarity_score("moti", "maxi") == pytest.approx(0.5)
    assert similarity_score("", "") == 1.0


def test_contains_phrase_respects_token_boundaries():
    """Test phrases only match as whole tokens."""
    assert contains_phrase("rtm flats", "rtm")
    assert not contains_phrase("flats near smartmall", "rtm")
    assert not contains_phrase("apartments", "apartment")
    assert contains_phrase("pre-launch offers", "pre-launch")
    assert not contains_phrase("anything", "")


def test_remove_phrase_removes_every_occurrence():
    """Test removal tidies whitespace."""
    assert remove_phrase("villa in kokapet villa", "villa") == "in kokapet"
    assert remove_phrase("in kokapet", "") == "in kokapet"


def test_collapse_whitespace():
    """Test whitespace collapsing."""
    assert collapse_whitespace("  a \t b\n c  ") == "a b c"


@pytest.mark.parametrize(
    ("a", "b"),
    [
        ("gachibowli", "gachibowly"),
        ("kokapet", "kokpet"),
        ("maxi", "mani"),
        ("Tellapur", "tellapuram"),
        ("financial district", "financial distrct"),
        ("", ""),
        ("abc", ""),
    ],
)
def test_similarity_score_matches_edit_distance_formula(a, b):
    """Test similarity is one minus distance over the longer length."""
    longest = max(len(a), len(b))
    expected = 1.0 if longest == 0 else 1 - levenshtein_distance(a.lower(), b.lower()) / longest

    assert similarity_score(a, b) == pytest.approx(expected)
