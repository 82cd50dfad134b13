"""Service layer for query understanding and URL resolution.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from listing_query.services import EntityCatalogCache, QueryParser

    catalog = EntityCatalogCache.create(source=repository)
    parsed = await QueryParser.create().parse("2bhk flats in kokapet", catalog)
    ```
"""

from .catalog_cache import EntityCatalogCache
from .legacy_resolver import LegacyURLResolver
from .query_parser import QueryParser
from .slug_generator import SlugGenerator, is_valid_slug, slugify

__all__ = [
    "EntityCatalogCache",
    "LegacyURLResolver",
    "QueryParser",
    "SlugGenerator",
    "is_valid_slug",
    "slugify",
]
