"""
Tests for the Supabase repository against a recording query-builder fake.
"""

from types import SimpleNamespace

import pytest

from listing_query.entities import EntityType
from listing_query.locations import LOCATION_CONTEXTS
from listing_query.repositories import SupabaseListingRepository

pytestmark = pytest.mark.asyncio


class FakeQuery:
    """Chained PostgREST query builder; applies eq filters to fixed rows."""

    def __init__(self, client: "FakeSupabase", table: str) -> None:
        self.client = client
        self.table = table
        self.ops: list[tuple] = []

    def select(self, columns: str) -> "FakeQuery":
        self.ops.append(("select", columns))
        return self

    def eq(self, column: str, value) -> "FakeQuery":
        self.ops.append(("eq", column, value))
        return self

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        self.ops.append(("ilike", column, pattern))
        return self

    def or_(self, filters: str) -> "FakeQuery":
        self.ops.append(("or", filters))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.ops.append(("limit", count))
        return self

    async def execute(self) -> SimpleNamespace:
        self.client.queries.append(self)
        if self.client.error is not None:
            raise self.client.error
        rows = self.client.tables.get(self.table, [])
        for op in self.ops:
            if op[0] == "eq":
                rows = [row for row in rows if row.get(op[1]) == op[2]]
        return SimpleNamespace(data=rows)


class FakeSupabase:
    def __init__(self, tables: dict[str, list[dict]] | None = None, error: Exception | None = None) -> None:
        self.tables = tables or {}
        self.error = error
        self.queries: list[FakeQuery] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


HYDERABAD = LOCATION_CONTEXTS["hyderabad"]
GOA = LOCATION_CONTEXTS["goa"]

TABLES = {
    "hyderabad_properties": [
        {"id": 1, "title": "Green Meadows", "seo_slug": "4bhk-villa-green-meadows-kokapet",
         "slug": "green-meadows-villa", "status": "active"},
        {"id": 2, "title": "Old Draft", "seo_slug": None, "slug": "old-draft", "status": "draft"},
    ],
    "property_slug_redirects": [
        {"old_slug": "old-one", "new_slug": "new-one", "location": "hyderabad"},
    ],
    "micro_markets": [
        {"id": 1, "micro_market_name": "Kokapet"},
        {"id": 2, "micro_market_name": None},
        {"id": 3, "micro_market_name": "Gachibowli"},
    ],
    "developers": [{"id": 9, "developer_name": "Prestige Group"}],
}


@pytest.fixture
def client():
    return FakeSupabase(tables=TABLES)


@pytest.fixture
def repository(client):
    return SupabaseListingRepository.create(client)


async def test_find_by_slug_checks_secondary_field(repository, client):
    """Test the primary slug column is queried before the secondary one."""
    record = await repository.find_by_slug(HYDERABAD, "green-meadows-villa")

    assert record.canonical_slug == "4bhk-villa-green-meadows-kokapet"
    assert record.id == "1"
    fields = [op[1] for query in client.queries for op in query.ops if op[0] == "eq" and op[1] != "status"]
    assert fields == ["seo_slug", "slug"]


async def test_queries_are_scoped_to_active_status(repository, client):
    assert await repository.find_by_slug(HYDERABAD, "old-draft") is None
    assert all(("eq", "status", "active") in query.ops for query in client.queries)


async def test_goa_selects_only_seo_slug(repository, client):
    await repository.find_by_slug(GOA, "anything")

    assert len(client.queries) == 1
    assert client.queries[0].table == "goa_holiday_properties"
    assert ("select", "id, title, seo_slug") in client.queries[0].ops
    assert ("eq", "status", "Active") in client.queries[0].ops


async def test_find_by_id(repository):
    record = await repository.find_by_id(HYDERABAD, 1)

    assert record.seo_slug == "4bhk-villa-green-meadows-kokapet"


async def test_search_by_title_sanitizes_keywords(repository, client):
    """Test filter metacharacters never reach the PostgREST expression."""
    await repository.search_by_title(HYDERABAD, "green,meadows (kokapet)", limit=5)

    ops = client.queries[0].ops
    assert ("ilike", "title", "%green meadows  kokapet%") in ops
    assert ("limit", 5) in ops


async def test_search_by_location_ors_location_fields(repository, client):
    await repository.search_by_location(HYDERABAD, "gachibowli lakeside")

    ors = [op[1] for op in client.queries[0].ops if op[0] == "or"]
    assert ors == [
        "title.ilike.%gachibowli lakeside%,"
        "location.ilike.%gachibowli lakeside%,"
        "micro_market.ilike.%gachibowli lakeside%"
    ]


async def test_find_redirect(repository):
    redirect = await repository.find_redirect("old-one", "hyderabad")

    assert redirect.new_slug == "new-one"
    assert redirect.location_context == "hyderabad"
    assert await repository.find_redirect("old-one", "dubai") is None


async def test_fetch_names_skips_blank_rows(repository):
    assert await repository.fetch_names(EntityType.LOCATION) == ["Kokapet", "Gachibowli"]
    assert await repository.fetch_names(EntityType.VENDOR) == ["Prestige Group"]


async def test_fetch_entities_carries_ids(repository):
    entities = await repository.fetch_entities(EntityType.VENDOR)

    assert entities[0].id == "9"
    assert entities[0].entity_type is EntityType.VENDOR


async def test_health_check():
    assert await SupabaseListingRepository(FakeSupabase(tables=TABLES)).health_check() is True
    assert await SupabaseListingRepository(FakeSupabase(error=ConnectionError("down"))).health_check() is False


async def test_errors_propagate_to_caller():
    repository = SupabaseListingRepository(FakeSupabase(error=ConnectionError("down")))

    with pytest.raises(ConnectionError):
        await repository.find_by_slug(HYDERABAD, "x")
