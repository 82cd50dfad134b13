"""Location contexts the site serves listings under.

A location context is the first path segment of a listing URL
(``/{context}/buy/{slug}``). Each one is backed by its own listings
table with its own notion of an "active" row.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LocationContext:
    """How listings for one location context are stored.

    Attributes:
        key: URL path segment, e.g. "hyderabad"
        table: Listings table name
        active_status: Value of the status column for live listings
        slug_fields: Canonical slug columns, primary first
        location_fields: Columns searched by the location-keyword query
        trailing_token: Token legacy slugs of this context may end with
    """

    key: str
    table: str
    active_status: str
    slug_fields: tuple[str, ...] = ("seo_slug", "slug")
    location_fields: tuple[str, ...] = ("title", "location")
    trailing_token: str | None = None


LOCATION_CONTEXTS: dict[str, LocationContext] = {
    "hyderabad": LocationContext(
        key="hyderabad",
        table="hyderabad_properties",
        active_status="active",
        location_fields=("title", "location", "micro_market"),
    ),
    "goa": LocationContext(
        key="goa",
        table="goa_holiday_properties",
        active_status="Active",
        slug_fields=("seo_slug",),
        trailing_token="goa",
    ),
    "dubai": LocationContext(
        key="dubai",
        table="dubai_properties",
        active_status="published",
        location_fields=("title", "location", "community"),
    ),
}

# Broad city/region names; a slug ending in one of these is redundant
# when a more specific location precedes it.
BROAD_LOCATION_NAMES = tuple(LOCATION_CONTEXTS)


def get_location_context(key: str | None) -> LocationContext | None:
    """Look up a location context by its URL segment (case-insensitive)."""
    if not key:
        return None
    return LOCATION_CONTEXTS.get(key.strip().lower())
