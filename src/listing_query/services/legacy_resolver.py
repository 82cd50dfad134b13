"""Legacy listing URL resolution.

Maps a historical or malformed listing slug to the listing's current
canonical slug so old inbound links can be permanently redirected.

Pipeline (strictly sequential, first hit wins):
    1. Exact: by id when the slug is a UUID, else by equality against the
       context's canonical slug fields.
    2. Fuzzy (non-UUID only): keyword queries on title, then on title and
       location fields, picking the candidate whose slug overlaps the input.
    3. Redirect table: a persisted (old_slug, location) -> new_slug mapping.

Every backing-store call has a timeout. A failed or timed-out call makes
its stage a miss; it never aborts the resolve call.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable
from typing import TypeVar

from listing_query.config import settings
from listing_query.entities import NOT_FOUND, ListingRecord, ResolutionResult
from listing_query.locations import LocationContext, get_location_context
from listing_query.protocols import ListingStore, RedirectStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)

KEYWORD_GROUP_SIZE = 3
MIN_KEYWORD_LENGTH = 3
PREFIX_OVERLAP = 20


def is_uuid(value: str) -> bool:
    return UUID_RE.match(value) is not None


def slug_keywords(slug: str, trailing_token: str | None = None) -> tuple[list[str], list[str]]:
    """Split a slug into primary-name and location keyword groups.

    Args:
        slug: Legacy slug
        trailing_token: Context token to drop from the end, e.g. "goa"

    Returns:
        (first three tokens, last three tokens)
    """
    tokens = [token for token in slug.lower().split("-") if token]
    if trailing_token and len(tokens) > 1 and tokens[-1] == trailing_token:
        tokens = tokens[:-1]
    return tokens[:KEYWORD_GROUP_SIZE], tokens[-KEYWORD_GROUP_SIZE:]


def pick_candidate(
    slug: str,
    candidates: list[ListingRecord],
    primary_keywords: list[str],
) -> ListingRecord | None:
    """First candidate whose slug overlaps the input slug, or None.

    Overlap means either slug contains the other's first 20 characters,
    or the candidate's slug contains a primary-name keyword of at least
    3 characters.
    """
    wanted = slug.lower()
    keywords = [word for word in primary_keywords if len(word) >= MIN_KEYWORD_LENGTH]

    for candidate in candidates:
        candidate_slug = (candidate.canonical_slug or "").lower()
        if not candidate_slug:
            continue
        if wanted[:PREFIX_OVERLAP] in candidate_slug or candidate_slug[:PREFIX_OVERLAP] in wanted:
            return candidate
        if any(word in candidate_slug for word in keywords):
            return candidate
    return None


class LegacyURLResolver:
    """Resolves legacy listing slugs to canonical slugs.

    This is best-effort: the fuzzy stage can pick a plausible but wrong
    listing. In lenient mode (the default) it even falls back to the first
    candidate a query returned; strict mode turns that case into a miss.

    Example:
        ```python
        resolver = LegacyURLResolver.create(
            listings=repository,
            redirects=repository,
        )
        result = await resolver.resolve("hyderabad", "old-project-slug")
        if result.found:
            location = result.redirect_path("hyderabad")
        ```
    """

    def __init__(
        self,
        listings: ListingStore,
        redirects: RedirectStore,
        lenient_fallback: bool | None = None,
        verify_redirects: bool | None = None,
        timeout: float | None = None,
        candidate_limit: int | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            listings: Listing lookups (required).
            redirects: Redirect table lookups (required).
            lenient_fallback: Allow the first-candidate fallback. Defaults to settings.
            verify_redirects: Re-resolve redirect targets before returning them. Defaults to settings.
            timeout: Per-call store timeout in seconds. Defaults to settings.
            candidate_limit: Rows requested per fuzzy query. Defaults to settings.
        """
        self._listings = listings
        self._redirects = redirects
        self._lenient = settings.resolver_lenient_fallback if lenient_fallback is None else lenient_fallback
        self._verify_redirects = (
            settings.resolver_verify_redirects if verify_redirects is None else verify_redirects
        )
        self._timeout = timeout if timeout is not None else settings.store_timeout
        self._candidate_limit = candidate_limit if candidate_limit is not None else settings.fuzzy_candidate_limit

    @classmethod
    def create(
        cls,
        listings: ListingStore,
        redirects: RedirectStore,
        lenient_fallback: bool | None = None,
    ) -> "LegacyURLResolver":
        """Factory method to create LegacyURLResolver with settings defaults."""
        return cls(listings=listings, redirects=redirects, lenient_fallback=lenient_fallback)

    async def resolve(self, location_context: str, raw_slug: str) -> ResolutionResult:
        """Resolve a legacy slug within a location context.

        Args:
            location_context: First URL path segment, e.g. "hyderabad"
            raw_slug: Slug from the legacy path

        Returns:
            The canonical slug and the stage that found it, or NOT_FOUND
        """
        context = get_location_context(location_context)
        slug = (raw_slug or "").strip()
        if context is None or not slug:
            logger.info("Unresolvable legacy path %r/%r", location_context, raw_slug)
            return NOT_FOUND

        record = await self.exact_lookup(context, slug)
        if record is not None:
            return self._found(record, "exact", context, slug)

        if not is_uuid(slug):
            record = await self.fuzzy_lookup(context, slug)
            if record is not None:
                return self._found(record, "fuzzy", context, slug)

        result = await self.redirect_lookup(context, slug)
        if result.found:
            logger.info("Resolved %s/%s via redirect -> %s", context.key, slug, result.canonical_slug)
            return result

        logger.info("No listing for %s/%s", context.key, slug)
        return NOT_FOUND

    async def exact_lookup(self, context: LocationContext, slug: str) -> ListingRecord | None:
        """Find a listing by id (UUID input) or by exact canonical slug."""
        if is_uuid(slug):
            return await self._call(self._listings.find_by_id(context, slug), "find_by_id")
        return await self._call(self._listings.find_by_slug(context, slug), "find_by_slug")

    async def fuzzy_lookup(self, context: LocationContext, slug: str) -> ListingRecord | None:
        """Find a listing whose title or location loosely matches the slug's keywords."""
        primary, location = slug_keywords(slug, context.trailing_token)
        primary_text = " ".join(primary)
        location_text = " ".join(location)
        if len(primary_text) < MIN_KEYWORD_LENGTH:
            return None

        candidates = await self._call(
            self._listings.search_by_title(context, primary_text, self._candidate_limit),
            "search_by_title",
        )
        if not candidates and len(location_text) >= MIN_KEYWORD_LENGTH:
            candidates = await self._call(
                self._listings.search_by_location(context, location_text, self._candidate_limit),
                "search_by_location",
            )
        if not candidates:
            return None

        chosen = pick_candidate(slug, candidates, primary)
        if chosen is not None:
            return chosen

        if not self._lenient:
            logger.info("No overlapping candidate for %s/%s (strict mode)", context.key, slug)
            return None

        fallback = next((candidate for candidate in candidates if candidate.canonical_slug), None)
        if fallback is None:
            return None
        logger.warning(
            "Fuzzy fallback for %s/%s picked first candidate %r with no slug overlap",
            context.key,
            slug,
            fallback.canonical_slug,
        )
        return fallback

    async def redirect_lookup(self, context: LocationContext, slug: str) -> ResolutionResult:
        """Follow the persisted redirect table, confirming the target when configured."""
        redirect = await self._call(self._redirects.find_redirect(slug, context.key), "find_redirect")
        if redirect is None or not redirect.new_slug:
            return NOT_FOUND

        if not self._verify_redirects:
            return ResolutionResult(canonical_slug=redirect.new_slug, stage="redirect")

        target = await self._call(self._listings.find_by_slug(context, redirect.new_slug), "find_by_slug")
        if target is None or not target.canonical_slug:
            logger.info("Redirect target %s/%s no longer resolves", context.key, redirect.new_slug)
            return NOT_FOUND
        return ResolutionResult(canonical_slug=target.canonical_slug, stage="redirect")

    def _found(self, record: ListingRecord, stage: str, context: LocationContext, slug: str) -> ResolutionResult:
        # Rows found by id may predate slugs; keep the requested path then.
        canonical = record.canonical_slug or slug
        logger.info("Resolved %s/%s via %s -> %s", context.key, slug, stage, canonical)
        return ResolutionResult(canonical_slug=canonical, stage=stage)

    async def _call(self, awaitable: Awaitable[T], operation: str) -> T | None:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("%s timed out after %.1fs", operation, self._timeout)
        except Exception:
            logger.warning("%s failed", operation, exc_info=True)
        return None

    @property
    def lenient_fallback(self) -> bool:
        return self._lenient
