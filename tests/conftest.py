"""Shared fixtures and in-memory fakes satisfying the datastore protocols."""

import asyncio
from collections.abc import Iterable
from typing import Any

import pytest

from listing_query.entities import EntityType, ListingRecord, RedirectRecord
from listing_query.locations import LocationContext
from listing_query.services import EntityCatalogCache

LOCATIONS = [
    "Gachibowli",
    "Kokapet",
    "Financial District",
    "Narsingi",
    "Kollur",
    "Tellapur",
    "Moti",
]

VENDORS = [
    "XYZ Developers",
    "Prestige Group",
    "My Home Constructions",
]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCatalogSource:
    """CatalogSource returning fixed names, with failure and delay knobs."""

    def __init__(
        self,
        names: dict[EntityType, list[str]] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.names = names if names is not None else {
            EntityType.LOCATION: list(LOCATIONS),
            EntityType.VENDOR: list(VENDORS),
        }
        self.error = error
        self.delay = delay
        self.calls: list[EntityType] = []

    async def fetch_names(self, entity_type: EntityType) -> list[str]:
        self.calls.append(entity_type)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.names.get(entity_type, []))


class FakeListingStore:
    """ListingStore and RedirectStore over in-memory rows.

    Rows are dicts with a "context" key plus listing columns. Methods named
    in ``failing`` raise; methods named in ``slow`` sleep for ``delay`` first.
    """

    def __init__(
        self,
        rows: Iterable[dict[str, Any]] = (),
        redirects: Iterable[RedirectRecord] = (),
        failing: Iterable[str] = (),
        slow: Iterable[str] = (),
        delay: float = 0.0,
    ) -> None:
        self.rows = list(rows)
        self.redirects = list(redirects)
        self.failing = set(failing)
        self.slow = set(slow)
        self.delay = delay
        self.calls: list[str] = []

    async def _enter(self, method: str) -> None:
        self.calls.append(method)
        if method in self.slow:
            await asyncio.sleep(self.delay)
        if method in self.failing:
            raise ConnectionError(f"{method} unavailable")

    def _active(self, context: LocationContext) -> list[dict[str, Any]]:
        return [
            row
            for row in self.rows
            if row.get("context") == context.key and row.get("status") == context.active_status
        ]

    @staticmethod
    def _record(row: dict[str, Any], context: LocationContext) -> ListingRecord:
        return ListingRecord(
            id=row.get("id"),
            seo_slug=row.get("seo_slug"),
            slug=row.get("slug") if "slug" in context.slug_fields else None,
            title=row.get("title"),
        )

    async def find_by_id(self, context: LocationContext, listing_id: str) -> ListingRecord | None:
        await self._enter("find_by_id")
        for row in self._active(context):
            if row.get("id") == listing_id:
                return self._record(row, context)
        return None

    async def find_by_slug(self, context: LocationContext, slug: str) -> ListingRecord | None:
        await self._enter("find_by_slug")
        for field_name in context.slug_fields:
            for row in self._active(context):
                if row.get(field_name) == slug:
                    return self._record(row, context)
        return None

    async def search_by_title(self, context: LocationContext, keywords: str, limit: int = 10) -> list[ListingRecord]:
        await self._enter("search_by_title")
        wanted = keywords.lower()
        matches = [row for row in self._active(context) if wanted in (row.get("title") or "").lower()]
        return [self._record(row, context) for row in matches[:limit]]

    async def search_by_location(self, context: LocationContext, keywords: str, limit: int = 10) -> list[ListingRecord]:
        await self._enter("search_by_location")
        wanted = keywords.lower()
        matches = [
            row
            for row in self._active(context)
            if any(wanted in (row.get(column) or "").lower() for column in context.location_fields)
        ]
        return [self._record(row, context) for row in matches[:limit]]

    async def find_redirect(self, old_slug: str, location_context: str) -> RedirectRecord | None:
        await self._enter("find_redirect")
        for redirect in self.redirects:
            if redirect.old_slug == old_slug and redirect.location_context == location_context:
                return redirect
        return None


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def catalog_source() -> FakeCatalogSource:
    return FakeCatalogSource()


@pytest.fixture
def catalog(catalog_source: FakeCatalogSource, clock: FakeClock) -> EntityCatalogCache:
    """Catalog cache over the default locations and vendors."""
    return EntityCatalogCache(source=catalog_source, ttl=3600, failure_ttl=60, timeout=1.0, clock=clock)
