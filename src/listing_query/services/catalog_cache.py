"""Entity catalog cache.

Holds the known location and vendor names used by the query parser,
refilled from a catalog source once the TTL has lapsed.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from listing_query.config import settings
from listing_query.entities import EntityType
from listing_query.protocols import CatalogSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogEntry:
    """One filled entity list.

    Attributes:
        names: Display names as returned by the source
        filled_at: Clock reading when the list was stored
        ttl: Seconds the list stays fresh
    """

    names: tuple[str, ...]
    filled_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.filled_at < self.ttl


class EntityCatalogCache:
    """TTL cache of catalog entity names, one list per entity type.

    Injected into its callers; there is no module-level cache.
    There is no lock: callers racing on an expired entry may each refetch,
    and the last fill wins.

    Example:
        ```python
        cache = EntityCatalogCache.create(source=SupabaseListingRepository(client))
        locations = await cache.get(EntityType.LOCATION)
        ```
    """

    def __init__(
        self,
        source: CatalogSource,
        ttl: float | None = None,
        failure_ttl: float | None = None,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the catalog cache.

        Args:
            source: Backend the names are fetched from (required).
            ttl: Seconds a filled list stays fresh. Defaults to settings.
            failure_ttl: Seconds an empty list stored after a failed fetch
                stays fresh. Defaults to settings.
            timeout: Per-fetch timeout in seconds. Defaults to settings.
            clock: Monotonic clock, injectable for tests.
        """
        self._source = source
        self._ttl = ttl if ttl is not None else settings.catalog_ttl
        self._failure_ttl = failure_ttl if failure_ttl is not None else settings.catalog_failure_ttl
        self._timeout = timeout if timeout is not None else settings.store_timeout
        self._clock = clock
        self._entries: dict[EntityType, CatalogEntry] = {}

    @classmethod
    def create(
        cls,
        source: CatalogSource,
        ttl: float | None = None,
        timeout: float | None = None,
    ) -> "EntityCatalogCache":
        """Factory method to create an EntityCatalogCache with settings defaults."""
        return cls(source=source, ttl=ttl, timeout=timeout)

    async def get(self, entity_type: EntityType) -> list[str]:
        """Return the cached names for an entity type, refilling when stale.

        Never raises for backend failures; an unreachable source yields
        an empty list.
        """
        entry = self._entries.get(entity_type)
        if entry is not None and entry.is_fresh(self._clock()):
            return list(entry.names)

        entry = await self._fill(entity_type)
        return list(entry.names)

    async def _fill(self, entity_type: EntityType) -> CatalogEntry:
        try:
            names = await asyncio.wait_for(
                self._source.fetch_names(entity_type),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Catalog fetch for %s timed out after %.1fs", entity_type.value, self._timeout)
            names = None
        except Exception:
            logger.warning("Catalog fetch for %s failed", entity_type.value, exc_info=True)
            names = None

        cleaned = tuple(name for name in (names or []) if name and name.strip())
        if cleaned:
            entry = CatalogEntry(names=cleaned, filled_at=self._clock(), ttl=self._ttl)
            logger.info("Catalog %s filled with %d names", entity_type.value, len(cleaned))
        else:
            if names is not None:
                logger.warning("Catalog fetch for %s returned no names", entity_type.value)
            entry = CatalogEntry(names=(), filled_at=self._clock(), ttl=self._failure_ttl)

        self._entries[entity_type] = entry
        return entry

    def prime(
        self,
        entity_type: EntityType,
        names: list[str],
        filled_at: float | None = None,
    ) -> None:
        """Store a list directly, as if it had just been fetched.

        Args:
            entity_type: Location or vendor
            names: Names to store
            filled_at: Fill timestamp on this cache's clock. Defaults to now.
        """
        self._entries[entity_type] = CatalogEntry(
            names=tuple(names),
            filled_at=self._clock() if filled_at is None else filled_at,
            ttl=self._ttl,
        )

    def invalidate(self, entity_type: EntityType | None = None) -> None:
        """Drop one entity list, or all of them."""
        if entity_type is None:
            self._entries.clear()
        else:
            self._entries.pop(entity_type, None)

    def stats(self) -> dict:
        """Per-type counts and ages.

        Returns:
            Dictionary keyed by entity type value
        """
        now = self._clock()
        result: dict = {"ttl": self._ttl}
        for entity_type in EntityType:
            entry = self._entries.get(entity_type)
            result[entity_type.value] = {
                "count": len(entry.names) if entry else 0,
                "age_seconds": round(now - entry.filled_at, 3) if entry else None,
                "fresh": entry.is_fresh(now) if entry else False,
            }
        return result

    @property
    def ttl(self) -> float:
        """Get the TTL for successfully filled lists."""
        return self._ttl
