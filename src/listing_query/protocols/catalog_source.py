"""Catalog source protocol.

Defines the read-only "fetch all names for an entity type" call the
entity catalog cache is filled from.
"""

from typing import Protocol, runtime_checkable

from listing_query.entities import EntityType


@runtime_checkable
class CatalogSource(Protocol):
    """Protocol for backends that can list catalog entity names."""

    async def fetch_names(self, entity_type: EntityType) -> list[str]:
        """Fetch every display name for an entity type.

        Args:
            entity_type: Location or vendor

        Returns:
            Display names in the backend's natural order
        """
        ...
