"""Slug input domain entity."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# Most specific first: micro-market, micro-location, community, region,
# emirate, then the generic location field.
LOCATION_FIELDS = (
    "micro_market",
    "micro_location",
    "community",
    "region",
    "emirate",
    "location",
)


@dataclass(frozen=True)
class SlugInput:
    """Attributes a canonical listing slug is built from.

    Attributes:
        primary_name: Project name or listing title
        unit_config: Unit configuration such as "3BHK"
        category: Property category such as "villa"
        location_candidates: Location values in priority order; the first
            non-empty one is used
        bedrooms: Bedroom count, used only when unit_config is empty
    """

    primary_name: str = ""
    unit_config: str | None = None
    category: str | None = None
    location_candidates: tuple[str | None, ...] = field(default_factory=tuple)
    bedrooms: int | None = None

    @property
    def location(self) -> str | None:
        """First non-empty location candidate, or None."""
        for candidate in self.location_candidates:
            if candidate and candidate.strip():
                return candidate
        return None

    @classmethod
    def from_listing(cls, row: Mapping[str, Any]) -> "SlugInput":
        """Build from a listing row using the datastore's column names."""
        bedrooms = row.get("bedrooms")
        try:
            bedrooms = int(bedrooms) if bedrooms else None
        except (TypeError, ValueError):
            bedrooms = None

        return cls(
            primary_name=row.get("project_name") or row.get("title") or "",
            unit_config=row.get("bhk_config") or None,
            category=row.get("property_type") or None,
            location_candidates=tuple(row.get(name) for name in LOCATION_FIELDS),
            bedrooms=bedrooms,
        )
