"""Listing and redirect domain entities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ListingRecord:
    """The slug-bearing part of a listing row.

    Attributes:
        id: Listing identifier (UUID)
        seo_slug: Primary canonical slug field
        slug: Secondary (older) slug field
        title: Listing title, used by fuzzy lookups
    """

    id: str | None = None
    seo_slug: str | None = None
    slug: str | None = None
    title: str | None = None

    @property
    def canonical_slug(self) -> str | None:
        """Primary canonical field, falling back to the secondary slug."""
        return self.seo_slug or self.slug or None


@dataclass(frozen=True)
class RedirectRecord:
    """A persisted mapping from an old slug to its replacement."""

    old_slug: str
    new_slug: str
    location_context: str
