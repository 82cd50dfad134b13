"""Repository layer for data access.

This layer abstracts external dependencies (Supabase, Redis) behind
protocol-based interfaces. This enables:
- Easy swapping of implementations
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from listing_query.protocols import CatalogSource, ListingStore, RedirectStore

from .redis_catalog_source import RedisCatalogSource
from .supabase_repository import SupabaseListingRepository

__all__ = [
    "CatalogSource",
    "ListingStore",
    "RedirectStore",
    "RedisCatalogSource",
    "SupabaseListingRepository",
]
