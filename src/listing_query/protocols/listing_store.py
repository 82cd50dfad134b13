"""Listing and redirect lookup protocols.

These are the narrow read-only lookups the legacy URL resolver needs.
Every lookup is scoped to a location context and to that context's
active/published status.
"""

from typing import Protocol, runtime_checkable

from listing_query.entities import ListingRecord, RedirectRecord
from listing_query.locations import LocationContext


@runtime_checkable
class ListingStore(Protocol):
    """Protocol for listing lookups."""

    async def find_by_id(self, context: LocationContext, listing_id: str) -> ListingRecord | None:
        """Find an active listing by its id.

        Args:
            context: Location context the listing belongs to
            listing_id: UUID of the listing

        Returns:
            The listing, or None
        """
        ...

    async def find_by_slug(self, context: LocationContext, slug: str) -> ListingRecord | None:
        """Find an active listing whose canonical slug field equals ``slug``.

        Args:
            context: Location context the listing belongs to
            slug: Exact slug, compared against every canonical slug field of the context

        Returns:
            The listing, or None
        """
        ...

    async def search_by_title(
        self,
        context: LocationContext,
        keywords: str,
        limit: int = 10,
    ) -> list[ListingRecord]:
        """Find active listings whose title loosely contains ``keywords``.

        Args:
            context: Location context
            keywords: Space-joined keywords, matched case-insensitively as a substring
            limit: Maximum number of rows

        Returns:
            Candidate listings in backend order
        """
        ...

    async def search_by_location(
        self,
        context: LocationContext,
        keywords: str,
        limit: int = 10,
    ) -> list[ListingRecord]:
        """Find active listings whose title or location fields loosely contain ``keywords``.

        Args:
            context: Location context
            keywords: Space-joined keywords
            limit: Maximum number of rows

        Returns:
            Candidate listings in backend order
        """
        ...


@runtime_checkable
class RedirectStore(Protocol):
    """Protocol for the persisted slug redirect table."""

    async def find_redirect(self, old_slug: str, location_context: str) -> RedirectRecord | None:
        """Look up a redirect keyed by (old_slug, location).

        Args:
            old_slug: The historical slug exactly as requested
            location_context: Location context key, e.g. "hyderabad"

        Returns:
            The redirect record, or None
        """
        ...
