"""Canonical listing slug generation.

Slugs look like ``[unit]-[category]-[name]-[location]``, for example
``4bhk-villa-green-meadows-kokapet``. They are lowercase, hyphenated,
at most 50 characters, and never empty.
"""

import re
from collections.abc import Iterable

from listing_query.config import settings
from listing_query.entities import SlugInput
from listing_query.locations import BROAD_LOCATION_NAMES

HARD_MAX_LENGTH = 50
# Backtracking to a hyphen is only allowed past this share of the target length.
BACKTRACK_RATIO = 0.7
FALLBACK_SLUG = "property"

_WHITESPACE_RE = re.compile(r"\s+")
_INVALID_CHARS_RE = re.compile(r"[^a-z0-9-]")
_REPEATED_HYPHENS_RE = re.compile(r"-+")

# Longest first so a full UUID is not half-stripped by the shorter patterns.
_UUID_SUFFIX_RES = (
    re.compile(r"-[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE),
    re.compile(r"-[0-9a-f]{12}$", re.IGNORECASE),
    re.compile(r"-[0-9a-f]{8}$", re.IGNORECASE),
)
_REPEATED_UNIT_AFTER_CATEGORY_RE = re.compile(r"^(\d+bhk)-(apartment|villa|house|flat)-\1-", re.IGNORECASE)
_REPEATED_UNIT_RE = re.compile(r"^(\d+bhk)-(\d+bhk)-", re.IGNORECASE)
_TRAILING_BROAD_LOCATION_RE = re.compile(
    r"-(" + "|".join(re.escape(name) for name in BROAD_LOCATION_NAMES) + r")$",
    re.IGNORECASE,
)
_VALID_SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def clean_part(text: str | None) -> str:
    """Normalize one slug part: lowercase, hyphens for spaces, [a-z0-9-] only."""
    if not text:
        return ""
    part = _WHITESPACE_RE.sub("-", text.strip().lower())
    part = _INVALID_CHARS_RE.sub("", part)
    return _trim_hyphens(part)


def _trim_hyphens(slug: str) -> str:
    return _REPEATED_HYPHENS_RE.sub("-", slug).strip("-")


def slugify(text: str | None) -> str:
    """URL-safe slug that keeps every word of ``text``."""
    if not text:
        return ""
    slug = re.sub(r"[^\w\s-]", "", text.lower().strip())
    slug = _WHITESPACE_RE.sub("-", slug).replace("_", "-")
    return _trim_hyphens(slug)


def is_valid_slug(slug: str) -> bool:
    """Check a slug is 3-80 characters of hyphen-separated [a-z0-9] words."""
    if not 3 <= len(slug) <= 80:
        return False
    return _VALID_SLUG_RE.match(slug) is not None


def truncate_slug(slug: str, max_length: int) -> str:
    """Cut ``slug`` to ``max_length``, backing up to a hyphen when mid-word.

    The backtrack only happens when that hyphen is past 70% of the target,
    otherwise the slug is cut mid-word rather than reduced to a fragment.
    """
    if len(slug) <= max_length:
        return slug

    cut = slug[:max_length]
    if slug[max_length] != "-":
        last_hyphen = cut.rfind("-")
        if last_hyphen > max_length * BACKTRACK_RATIO:
            cut = cut[:last_hyphen]
    return cut.rstrip("-")


class SlugGenerator:
    """Builds canonical listing slugs and makes them unique.

    Stateless: uniqueness is checked against the existing slugs the
    caller passes in.

    Example:
        ```python
        generator = SlugGenerator.create()
        slug = generator.generate(
            SlugInput(
                unit_config="4BHK",
                category="villa",
                primary_name="Green Meadows",
                location_candidates=("Kokapet",),
            )
        )
        # "4bhk-villa-green-meadows-kokapet"
        slug = generator.ensure_unique(slug, existing_slugs)
        ```
    """

    def __init__(self, max_length: int | None = None) -> None:
        """Initialize the slug generator.

        Args:
            max_length: Default maximum slug length. Defaults to settings;
                never more than 50 in effect.
        """
        self._max_length = max_length if max_length is not None else settings.slug_max_length

    @classmethod
    def create(cls, max_length: int | None = None) -> "SlugGenerator":
        """Factory method to create SlugGenerator with settings defaults."""
        return cls(max_length=max_length)

    def generate(self, slug_input: SlugInput, max_length: int | None = None) -> str:
        """Generate the canonical slug for a listing.

        Args:
            slug_input: Listing attributes
            max_length: Override the default maximum length

        Returns:
            A non-empty slug; "property" when nothing usable was given
        """
        target_length = min(max_length if max_length is not None else self._max_length, HARD_MAX_LENGTH)

        parts = [
            _unit_token(slug_input),
            clean_part(slug_input.category),
            clean_part(slug_input.primary_name),
            clean_part(slug_input.location),
        ]
        slug = _trim_hyphens("-".join(part for part in parts if part))

        for pattern in _UUID_SUFFIX_RES:
            slug = pattern.sub("", slug)

        slug = _REPEATED_UNIT_AFTER_CATEGORY_RE.sub(r"\1-\2-", slug)
        slug = _REPEATED_UNIT_RE.sub(r"\1-", slug)

        slug = _TRAILING_BROAD_LOCATION_RE.sub("", slug)
        slug = slug.replace("-in-", "-")
        slug = _trim_hyphens(slug)

        slug = truncate_slug(slug, target_length)
        return slug or FALLBACK_SLUG

    def generate_location_first(
        self,
        slug_input: SlugInput,
        suffix: str,
        max_length: int | None = None,
    ) -> str:
        """Generate a ``{location}-{name}-{category}-{unit}-{suffix}`` slug.

        Used for holiday-home listings, which always end in their region.

        Args:
            slug_input: Listing attributes
            suffix: Region token appended last, e.g. "goa"
            max_length: Override the default maximum length

        Returns:
            A non-empty slug; "property-{suffix}" when nothing usable was given
        """
        target_length = max_length if max_length is not None else self._max_length
        parts = [
            clean_part(slug_input.location),
            clean_part(slug_input.primary_name),
            clean_part(slug_input.category),
            _unit_token(slug_input),
            clean_part(suffix),
        ]
        slug = _trim_hyphens("-".join(part for part in parts if part))
        slug = slug[:target_length].rstrip("-")
        return slug or _trim_hyphens(f"{FALLBACK_SLUG}-{clean_part(suffix)}")

    def ensure_unique(self, slug: str, existing_slugs: Iterable[str]) -> str:
        """Append -1, -2, ... until ``slug`` is not among ``existing_slugs``."""
        taken = set(existing_slugs)
        candidate = slug
        counter = 1
        while candidate in taken:
            candidate = f"{slug}-{counter}"
            counter += 1
        return candidate

    @property
    def max_length(self) -> int:
        """Get the default maximum slug length."""
        return self._max_length


def _unit_token(slug_input: SlugInput) -> str:
    if slug_input.unit_config:
        return clean_part(slug_input.unit_config)
    if slug_input.bedrooms:
        return f"{slug_input.bedrooms}bhk"
    return ""
