"""Listing Query - query understanding and URL resolution for property listings.

This package turns free-text property searches into structured filters,
builds canonical listing slugs, and resolves legacy listing URLs to their
current canonical slugs.

Layers:
    - protocols: Interface contracts (CatalogSource, ListingStore, RedirectStore)
    - repositories: Data access implementations (Supabase, Redis)
    - services: Business logic (catalog cache, parser, slug generator, resolver)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from listing_query.services import EntityCatalogCache, QueryParser

    catalog = EntityCatalogCache.create(source=repository)
    parsed = await QueryParser.create().parse("3bhk flats in kokapet", catalog)
    ```

For HTTP API:
    ```python
    from listing_query.api.app import app
    ```
"""

from listing_query.config import get_redis_client, get_supabase_client, settings
from listing_query.entities import (
    NOT_FOUND,
    CatalogEntity,
    EntityType,
    ListingRecord,
    ParsedQuery,
    RedirectRecord,
    ResolutionResult,
    SlugInput,
)
from listing_query.handlers import ListingHandler
from listing_query.locations import LOCATION_CONTEXTS, LocationContext, get_location_context
from listing_query.protocols import CatalogSource, ListingStore, RedirectStore
from listing_query.repositories import RedisCatalogSource, SupabaseListingRepository
from listing_query.services import (
    EntityCatalogCache,
    LegacyURLResolver,
    QueryParser,
    SlugGenerator,
    is_valid_slug,
    slugify,
)

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    "get_supabase_client",
    "LOCATION_CONTEXTS",
    "LocationContext",
    "get_location_context",
    # Protocols (interfaces)
    "CatalogSource",
    "ListingStore",
    "RedirectStore",
    # Services (business logic)
    "EntityCatalogCache",
    "QueryParser",
    "SlugGenerator",
    "LegacyURLResolver",
    "is_valid_slug",
    "slugify",
    # Handlers (HTTP)
    "ListingHandler",
    # Repositories (data access)
    "SupabaseListingRepository",
    "RedisCatalogSource",
    # Entities (domain models)
    "CatalogEntity",
    "EntityType",
    "ListingRecord",
    "ParsedQuery",
    "RedirectRecord",
    "ResolutionResult",
    "NOT_FOUND",
    "SlugInput",
]
