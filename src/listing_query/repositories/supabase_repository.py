"""Supabase implementation of the datastore protocols.

Reads listings, the slug redirect table and the entity catalog from the
hosted Postgres database through the async Supabase client. Satisfies
ListingStore, RedirectStore and CatalogSource.
"""

import logging
import re
from typing import Any

from supabase import AsyncClient

from listing_query.entities import CatalogEntity, EntityType, ListingRecord, RedirectRecord
from listing_query.locations import LocationContext

logger = logging.getLogger(__name__)

# (table, name column) per entity type
CATALOG_TABLES: dict[EntityType, tuple[str, str]] = {
    EntityType.LOCATION: ("micro_markets", "micro_market_name"),
    EntityType.VENDOR: ("developers", "developer_name"),
}

REDIRECTS_TABLE = "property_slug_redirects"

# Characters with meaning inside PostgREST filter expressions
_FILTER_UNSAFE_RE = re.compile(r"[,()%*\"\\.:]")


def _like_pattern(keywords: str) -> str:
    return f"%{_FILTER_UNSAFE_RE.sub(' ', keywords).strip()}%"


class SupabaseListingRepository:
    """Supabase-backed listing, redirect and catalog lookups.

    This class satisfies the ListingStore, RedirectStore and CatalogSource
    protocols through structural typing - no explicit inheritance needed.

    Every listing query is scoped to the context's table and its active
    status value.
    """

    def __init__(self, client: AsyncClient) -> None:
        """Initialize the repository.

        Args:
            client: Async Supabase client
        """
        self._client = client

    @classmethod
    def create(cls, client: AsyncClient) -> "SupabaseListingRepository":
        """Factory method to create SupabaseListingRepository."""
        return cls(client=client)

    def _select(self, context: LocationContext):
        columns = ", ".join(("id", "title", *context.slug_fields))
        return (
            self._client.table(context.table)
            .select(columns)
            .eq("status", context.active_status)
        )

    async def find_by_id(self, context: LocationContext, listing_id: str) -> ListingRecord | None:
        response = await self._select(context).eq("id", listing_id).limit(1).execute()
        return _first_record(response.data)

    async def find_by_slug(self, context: LocationContext, slug: str) -> ListingRecord | None:
        # One query per field so the primary slug field takes precedence.
        for field_name in context.slug_fields:
            response = await self._select(context).eq(field_name, slug).limit(1).execute()
            record = _first_record(response.data)
            if record is not None:
                return record
        return None

    async def search_by_title(
        self,
        context: LocationContext,
        keywords: str,
        limit: int = 10,
    ) -> list[ListingRecord]:
        response = await (
            self._select(context)
            .ilike("title", _like_pattern(keywords))
            .limit(limit)
            .execute()
        )
        return [_to_record(row) for row in response.data or []]

    async def search_by_location(
        self,
        context: LocationContext,
        keywords: str,
        limit: int = 10,
    ) -> list[ListingRecord]:
        pattern = _like_pattern(keywords)
        filters = ",".join(f"{column}.ilike.{pattern}" for column in context.location_fields)
        response = await self._select(context).or_(filters).limit(limit).execute()
        return [_to_record(row) for row in response.data or []]

    async def find_redirect(self, old_slug: str, location_context: str) -> RedirectRecord | None:
        response = await (
            self._client.table(REDIRECTS_TABLE)
            .select("old_slug, new_slug, location")
            .eq("old_slug", old_slug)
            .eq("location", location_context)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None

        row = response.data[0]
        return RedirectRecord(
            old_slug=row["old_slug"],
            new_slug=row["new_slug"],
            location_context=row["location"],
        )

    async def fetch_entities(self, entity_type: EntityType) -> list[CatalogEntity]:
        """Fetch every catalog entity of a type.

        Args:
            entity_type: Location or vendor

        Returns:
            Entities with their display names
        """
        table, name_column = CATALOG_TABLES[entity_type]
        response = await self._client.table(table).select(f"id, {name_column}").execute()
        return [
            CatalogEntity(id=str(row["id"]), display_name=row[name_column], entity_type=entity_type)
            for row in response.data or []
            if row.get(name_column)
        ]

    async def fetch_names(self, entity_type: EntityType) -> list[str]:
        entities = await self.fetch_entities(entity_type)
        logger.debug("Fetched %d %s names", len(entities), entity_type.value)
        return [entity.display_name for entity in entities]

    async def health_check(self) -> bool:
        """Check if the datastore is reachable.

        Returns:
            True if healthy, False otherwise
        """
        table, _ = CATALOG_TABLES[EntityType.LOCATION]
        try:
            await self._client.table(table).select("id").limit(1).execute()
            return True
        except Exception:
            return False

    @property
    def client(self) -> AsyncClient:
        """Get the Supabase client."""
        return self._client


def _to_record(row: dict[str, Any]) -> ListingRecord:
    return ListingRecord(
        id=str(row["id"]) if row.get("id") is not None else None,
        seo_slug=row.get("seo_slug"),
        slug=row.get("slug"),
        title=row.get("title"),
    )


def _first_record(rows: list[dict[str, Any]] | None) -> ListingRecord | None:
    if not rows:
        return None
    return _to_record(rows[0])
