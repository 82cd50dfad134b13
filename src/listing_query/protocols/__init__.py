"""Protocol interfaces for swappable implementations.

Protocols enable:
- Swapping the datastore (Supabase, plain Postgres, in-memory fakes)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from listing_query.protocols import ListingStore

    store: ListingStore = SupabaseListingRepository(client)
    ```
"""

from .catalog_source import CatalogSource
from .listing_store import ListingStore, RedirectStore

__all__ = [
    "CatalogSource",
    "ListingStore",
    "RedirectStore",
]
