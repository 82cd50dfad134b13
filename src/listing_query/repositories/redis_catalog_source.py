"""Redis-backed catalog snapshot.

Wraps another CatalogSource and keeps its name lists in Redis with a TTL,
so every worker process shares one datastore fetch per TTL window instead
of each refilling its own EntityCatalogCache from the database.
"""

import json
import logging

import redis.asyncio as redis

from listing_query.config import get_redis_client, settings
from listing_query.entities import EntityType
from listing_query.protocols import CatalogSource

logger = logging.getLogger(__name__)


class RedisCatalogSource:
    """Read-through Redis cache in front of a CatalogSource.

    This class satisfies the CatalogSource protocol through structural
    typing - no explicit inheritance needed.

    Redis errors are logged and bypassed; the wrapped source is then
    queried directly.
    """

    def __init__(
        self,
        source: CatalogSource,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
        ttl: int | None = None,
    ) -> None:
        """Initialize the Redis catalog source.

        Args:
            source: Source queried on a Redis miss (required).
            redis_client: Async Redis client. If None, creates default.
            prefix: Key prefix. Defaults to settings.
            ttl: Snapshot time-to-live in seconds. Defaults to settings.
        """
        self._source = source
        self._client = redis_client if redis_client is not None else get_redis_client()
        self._prefix = prefix if prefix is not None else settings.catalog_redis_prefix
        self._ttl = ttl if ttl is not None else settings.catalog_snapshot_ttl

    @classmethod
    def create(
        cls,
        source: CatalogSource,
        prefix: str | None = None,
        ttl: int | None = None,
    ) -> "RedisCatalogSource":
        """Factory method to create RedisCatalogSource with defaults."""
        return cls(source=source, prefix=prefix, ttl=ttl)

    def key_for(self, entity_type: EntityType) -> str:
        return f"{self._prefix}:{entity_type.value}"

    async def fetch_names(self, entity_type: EntityType) -> list[str]:
        key = self.key_for(entity_type)

        try:
            cached = await self._client.get(key)
        except Exception:
            logger.warning("Redis read for %s failed, bypassing snapshot", key, exc_info=True)
            return await self._source.fetch_names(entity_type)

        if cached:
            try:
                return list(json.loads(cached))
            except (json.JSONDecodeError, TypeError):
                logger.warning("Discarding unreadable catalog snapshot %s", key)

        names = await self._source.fetch_names(entity_type)
        if names:
            try:
                await self._client.set(key, json.dumps(names), ex=self._ttl)
            except Exception:
                logger.warning("Redis write for %s failed", key, exc_info=True)
        return names

    async def clear(self) -> int:
        """Delete every catalog snapshot.

        Returns:
            Number of keys deleted
        """
        keys = [self.key_for(entity_type) for entity_type in EntityType]
        return await self._client.delete(*keys)

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except Exception:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
