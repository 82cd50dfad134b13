"""Free-text search query parser.

Turns input such as "3bhk apartment in gachibowli by xyz developers" into
structured filters. Parsing is a fixed, ordered pipeline of stages; each
stage takes the working text, and when it matches it returns the text with
the matched phrase removed, so a later stage never claims the same token.

Stages:
    1. Specific completion status ("new launch", "rtm", ...)
    2. Generic new-listing indicator ("new projects", ...), only if 1 missed
    3. Unit configuration ("3 bhk" -> "3BHK")
    4. Category ("flats" -> "apartment")
    5. Location, exact then fuzzy against the entity catalog
    6. Vendor, full name then first word
    7. Residual cleanup (connector words, whitespace)
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from listing_query.config import settings
from listing_query.entities import EntityType, ParsedQuery
from listing_query.services.catalog_cache import EntityCatalogCache
from listing_query.utils import collapse_whitespace, contains_phrase, remove_phrase, similarity_score

logger = logging.getLogger(__name__)

# Checked in order; the first phrase present wins.
STATUS_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("new launch", "New Launch"),
    ("newlaunch", "New Launch"),
    ("newly launched", "New Launch"),
    ("under construction", "Under Construction"),
    ("underconstruction", "Under Construction"),
    ("ready to move", "Ready to Move"),
    ("readytomove", "Ready to Move"),
    ("rtm", "Ready to Move"),
    ("pre-launch", "Pre-Launch"),
    ("prelaunch", "Pre-Launch"),
    ("upcoming", "Upcoming"),
)

NEW_LISTING_INDICATORS: tuple[str, ...] = (
    "new projects",
    "new project",
    "latest projects",
    "latest project",
    "recent projects",
    "recent project",
)

# Multi-word and plural synonyms come before the words they contain.
CATEGORY_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("standalone apartments", "standalone apartment"),
    ("standalone apartment", "standalone apartment"),
    ("independent houses", "independent house"),
    ("independent house", "independent house"),
    ("apartments", "apartment"),
    ("apartment", "apartment"),
    ("flats", "apartment"),
    ("flat", "apartment"),
    ("villas", "villa"),
    ("villa", "villa"),
    ("plots", "plot"),
    ("plot", "plot"),
    ("penthouses", "penthouse"),
    ("penthouse", "penthouse"),
    ("duplexes", "duplex"),
    ("duplex", "duplex"),
    ("independent", "independent house"),
    ("standalone", "standalone apartment"),
    ("offices", "office"),
    ("office", "office"),
    ("retail", "retail"),
    ("commercial", "commercial"),
)

CONNECTOR_WORDS: tuple[str, ...] = ("in", "at", "near", "by")

UNIT_CONFIG_RE = re.compile(r"(?<![a-z0-9])(\d)\s*bhk(?![a-z0-9])", re.IGNORECASE)

MIN_FUZZY_WORD_LENGTH = 3
MIN_VENDOR_FIRST_WORD_LENGTH = 4


@dataclass(frozen=True)
class StageResult:
    """Output of one parsing stage.

    Attributes:
        text: Working text after the stage
        match: Canonical value the stage extracted, or None
    """

    text: str
    match: str | None = None


def match_completion_status(text: str) -> StageResult:
    for phrase, status in STATUS_KEYWORDS:
        if contains_phrase(text, phrase):
            return StageResult(remove_phrase(text, phrase), status)
    return StageResult(text)


def match_new_listing_indicator(text: str) -> StageResult:
    for phrase in NEW_LISTING_INDICATORS:
        if contains_phrase(text, phrase):
            return StageResult(remove_phrase(text, phrase), phrase)
    return StageResult(text)


def match_unit_config(text: str) -> StageResult:
    found = UNIT_CONFIG_RE.search(text)
    if not found:
        return StageResult(text)
    remaining = collapse_whitespace(text[: found.start()] + " " + text[found.end() :])
    return StageResult(remaining, f"{found.group(1)}BHK")


def match_category(text: str) -> StageResult:
    for phrase, category in CATEGORY_KEYWORDS:
        if contains_phrase(text, phrase):
            return StageResult(remove_phrase(text, phrase), category)
    return StageResult(text)


def _word_windows(words: list[str], size: int) -> list[str]:
    if size <= 0 or size > len(words):
        return []
    return [" ".join(words[i : i + size]) for i in range(len(words) - size + 1)]


def _fuzzy_windows(words: list[str], target: str, threshold: float) -> list[tuple[float, str]]:
    """(score, window) for every word window of ``target``'s size clearing the threshold."""
    hits = []
    for window in _word_windows(words, len(target.split())):
        if len(window) < MIN_FUZZY_WORD_LENGTH:
            continue
        score = similarity_score(window, target)
        if score >= threshold:
            hits.append((score, window))
    return hits


def match_location(
    text: str,
    locations: Sequence[str],
    threshold: float = 0.8,
    strategy: str = "best",
) -> StageResult:
    """Match a catalog location, exactly or by edit-distance similarity.

    "first" walks the catalog in order and, for each name, tries
    containment and then fuzzy similarity before moving to the next name.
    "best" accepts any contained name first (a perfect score), otherwise
    the highest-scoring fuzzy candidate, earliest catalog entry on ties.
    """
    words = text.split()

    if strategy == "first":
        for name in locations:
            target = name.lower()
            if contains_phrase(text, target):
                return StageResult(remove_phrase(text, target), name)
            hits = _fuzzy_windows(words, target, threshold)
            if hits:
                score, window = hits[0]
                logger.debug("Fuzzy location %r matched %r (score %.2f)", window, name, score)
                return StageResult(remove_phrase(text, window), name)
        return StageResult(text)

    for name in locations:
        if contains_phrase(text, name.lower()):
            return StageResult(remove_phrase(text, name.lower()), name)

    best: tuple[float, str, str] | None = None
    for name in locations:
        for score, window in _fuzzy_windows(words, name.lower(), threshold):
            if best is None or score > best[0]:
                best = (score, name, window)

    if best is None:
        return StageResult(text)

    score, name, window = best
    logger.debug("Fuzzy location %r matched %r (score %.2f)", window, name, score)
    return StageResult(remove_phrase(text, window), name)


def match_vendor(text: str, vendors: Sequence[str]) -> StageResult:
    for name in vendors:
        full = name.lower().strip()
        if contains_phrase(text, full):
            return StageResult(remove_phrase(text, full), name)

        first_word = full.split(" ")[0] if full else ""
        if len(first_word) >= MIN_VENDOR_FIRST_WORD_LENGTH and contains_phrase(text, first_word):
            return StageResult(remove_phrase(text, first_word), name)
    return StageResult(text)


def clean_residual(text: str) -> str:
    for word in CONNECTOR_WORDS:
        text = remove_phrase(text, word)
    return collapse_whitespace(text)


class QueryParser:
    """Rule-based parser from free text to a ParsedQuery.

    Example:
        ```python
        parser = QueryParser.create()
        parsed = await parser.parse("rtm villas near kokapet", catalog)
        parsed.completion_status  # "Ready to Move"
        ```
    """

    def __init__(
        self,
        fuzzy_threshold: float | None = None,
        strategy: str | None = None,
    ) -> None:
        """Initialize the query parser.

        Args:
            fuzzy_threshold: Minimum similarity for a fuzzy location match. Defaults to settings.
            strategy: "best" or "first" fuzzy tie-break policy. Defaults to settings.
        """
        self._threshold = fuzzy_threshold if fuzzy_threshold is not None else settings.fuzzy_threshold
        self._strategy = strategy if strategy is not None else settings.fuzzy_strategy
        if self._strategy not in ("best", "first"):
            raise ValueError(f"Unknown fuzzy strategy: {self._strategy!r}")

    @classmethod
    def create(
        cls,
        fuzzy_threshold: float | None = None,
        strategy: str | None = None,
    ) -> "QueryParser":
        """Factory method to create QueryParser with settings defaults."""
        return cls(fuzzy_threshold=fuzzy_threshold, strategy=strategy)

    async def parse(self, raw_text: str, catalog: EntityCatalogCache) -> ParsedQuery:
        """Parse free text against the cached entity catalog.

        Never raises; on any failure the result carries no filters and
        the normalized input as remaining text.
        """
        normalized = _normalize(raw_text)
        if not normalized:
            return ParsedQuery.empty()

        try:
            locations = await catalog.get(EntityType.LOCATION)
            vendors = await catalog.get(EntityType.VENDOR)
        except Exception:
            logger.exception("Catalog lookup failed while parsing %r", normalized)
            locations, vendors = [], []

        return self.parse_with_names(normalized, locations, vendors)

    def parse_with_names(
        self,
        raw_text: str,
        locations: Sequence[str],
        vendors: Sequence[str],
    ) -> ParsedQuery:
        """Parse free text against explicit name lists. Pure and synchronous."""
        normalized = _normalize(raw_text)
        if not normalized:
            return ParsedQuery.empty()

        try:
            return self._run_pipeline(normalized, locations, vendors)
        except Exception:
            logger.exception("Query parsing failed for %r", normalized)
            return ParsedQuery.empty(normalized)

    def _run_pipeline(
        self,
        normalized: str,
        locations: Sequence[str],
        vendors: Sequence[str],
    ) -> ParsedQuery:
        status = match_completion_status(normalized)
        text = status.text

        is_new_listing = False
        if status.match is None:
            indicator = match_new_listing_indicator(text)
            text = indicator.text
            is_new_listing = indicator.match is not None

        unit = match_unit_config(text)
        category = match_category(unit.text)
        location = match_location(
            category.text,
            locations,
            threshold=self._threshold,
            strategy=self._strategy,
        )
        vendor = match_vendor(location.text, vendors)

        parsed = ParsedQuery(
            location=location.match,
            vendor=vendor.match,
            unit_config=unit.match,
            category=category.match,
            completion_status=status.match,
            is_generic_new_listing=is_new_listing,
            remaining_text=clean_residual(vendor.text),
        )
        logger.debug("Parsed %r -> %s", normalized, parsed)
        return parsed

    @property
    def threshold(self) -> float:
        """Get the fuzzy match threshold."""
        return self._threshold

    @property
    def strategy(self) -> str:
        return self._strategy


def _normalize(raw_text: str | None) -> str:
    if not isinstance(raw_text, str):
        return ""
    return collapse_whitespace(raw_text.lower())
