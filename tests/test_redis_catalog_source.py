"""
Tests for the Redis catalog snapshot.
"""

import json

import pytest
from conftest import LOCATIONS, FakeCatalogSource

from listing_query.config import settings
from listing_query.entities import EntityType
from listing_query.repositories import RedisCatalogSource

pytestmark = pytest.mark.asyncio


class FakeRedis:
    """Async subset of redis.asyncio.Redis backed by a dict."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = False) -> None:
        self.store: dict[str, str] = {}
        self.expiry: dict[str, int | None] = {}
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise ConnectionError("redis down")
        return self.store.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        if self.fail_writes:
            raise ConnectionError("redis down")
        self.store[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    async def ping(self) -> bool:
        if self.fail_reads:
            raise ConnectionError("redis down")
        return True


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def snapshot(catalog_source, fake_redis):
    return RedisCatalogSource(source=catalog_source, redis_client=fake_redis, prefix="test_catalog", ttl=600)


async def test_miss_fetches_and_stores_with_ttl(snapshot, catalog_source, fake_redis):
    """Test a cold key is filled from the source and expires."""
    names = await snapshot.fetch_names(EntityType.LOCATION)

    assert names == LOCATIONS
    assert catalog_source.calls == [EntityType.LOCATION]
    assert json.loads(fake_redis.store["test_catalog:location"]) == LOCATIONS
    assert fake_redis.expiry["test_catalog:location"] == 600


async def test_hit_skips_source(snapshot, catalog_source, fake_redis):
    fake_redis.store["test_catalog:vendor"] = json.dumps(["Cached Builders"])

    assert await snapshot.fetch_names(EntityType.VENDOR) == ["Cached Builders"]
    assert catalog_source.calls == []


async def test_redis_read_error_bypasses_snapshot(catalog_source):
    """Test an unreachable Redis still yields names from the source."""
    snapshot = RedisCatalogSource(source=catalog_source, redis_client=FakeRedis(fail_reads=True), ttl=600)

    assert await snapshot.fetch_names(EntityType.LOCATION) == LOCATIONS


async def test_redis_write_error_is_ignored(catalog_source):
    snapshot = RedisCatalogSource(source=catalog_source, redis_client=FakeRedis(fail_writes=True), ttl=600)

    assert await snapshot.fetch_names(EntityType.LOCATION) == LOCATIONS


async def test_empty_result_is_not_stored(fake_redis):
    """Test an empty catalog is never pinned in Redis for a full TTL."""
    source = FakeCatalogSource(names={})
    snapshot = RedisCatalogSource(source=source, redis_client=fake_redis, prefix="test_catalog", ttl=600)

    assert await snapshot.fetch_names(EntityType.LOCATION) == []
    assert fake_redis.store == {}


async def test_corrupt_snapshot_is_refetched(snapshot, catalog_source, fake_redis):
    fake_redis.store["test_catalog:location"] = "{not json"

    assert await snapshot.fetch_names(EntityType.LOCATION) == LOCATIONS
    assert catalog_source.calls == [EntityType.LOCATION]
    assert json.loads(fake_redis.store["test_catalog:location"]) == LOCATIONS


async def test_source_errors_propagate(fake_redis):
    """Test failures of the wrapped source reach the catalog cache."""
    source = FakeCatalogSource(error=ConnectionError("db down"))
    snapshot = RedisCatalogSource(source=source, redis_client=fake_redis, ttl=600)

    with pytest.raises(ConnectionError):
        await snapshot.fetch_names(EntityType.LOCATION)


async def test_clear_and_health_check(snapshot, fake_redis):
    await snapshot.fetch_names(EntityType.LOCATION)
    await snapshot.fetch_names(EntityType.VENDOR)

    assert await snapshot.clear() == 2
    assert fake_redis.store == {}
    assert await snapshot.health_check() is True
    assert snapshot.client is fake_redis
    assert snapshot.key_for(EntityType.VENDOR) == "test_catalog:vendor"


async def test_health_check_reports_unreachable_redis(catalog_source):
    snapshot = RedisCatalogSource(source=catalog_source, redis_client=FakeRedis(fail_reads=True), ttl=600)

    assert await snapshot.health_check() is False


async def test_default_snapshot_ttl_is_shorter_than_catalog_ttl(catalog_source, fake_redis):
    """Test the snapshot expires before the in-process catalog TTL by default."""
    snapshot = RedisCatalogSource(source=catalog_source, redis_client=fake_redis, prefix="test_catalog")

    await snapshot.fetch_names(EntityType.LOCATION)

    assert fake_redis.expiry["test_catalog:location"] == settings.catalog_snapshot_ttl
    assert settings.catalog_snapshot_ttl < settings.catalog_ttl
