#!/usr/bin/env python3
"""
Demo script for the listing query engine.

Runs the query parser, slug generator and legacy URL resolver against a
small in-memory catalog, so no datastore or Redis is needed.
"""

import asyncio
import time

from listing_query import (
    EntityCatalogCache,
    EntityType,
    LegacyURLResolver,
    ListingRecord,
    QueryParser,
    RedirectRecord,
    SlugGenerator,
    SlugInput,
)
from listing_query.locations import LocationContext

CATALOG = {
    EntityType.LOCATION: ["Gachibowli", "Kokapet", "Financial District", "Narsingi", "Tellapur"],
    EntityType.VENDOR: ["XYZ Developers", "Prestige Group", "My Home Constructions"],
}

LISTINGS = [
    ListingRecord(id="1", seo_slug="4bhk-villa-green-meadows-kokapet", slug="green-meadows-villa",
                  title="Green Meadows Kokapet Phase 1"),
    ListingRecord(id="2", seo_slug="3bhk-apartment-skyline-residency-gachibowli", slug=None,
                  title="Skyline Residency Gachibowli"),
]

REDIRECTS = [
    RedirectRecord(
        old_slug="4bhk-apartment-old-project-name-somewhere",
        new_slug="3bhk-apartment-skyline-residency-gachibowli",
        location_context="hyderabad",
    ),
]


class InMemoryCatalog:
    """CatalogSource over the demo catalog."""

    async def fetch_names(self, entity_type: EntityType) -> list[str]:
        return list(CATALOG[entity_type])


class InMemoryListings:
    """ListingStore and RedirectStore over the demo listings."""

    async def find_by_id(self, context: LocationContext, listing_id: str) -> ListingRecord | None:
        return next((row for row in LISTINGS if row.id == listing_id), None)

    async def find_by_slug(self, context: LocationContext, slug: str) -> ListingRecord | None:
        return next((row for row in LISTINGS if slug in (row.seo_slug, row.slug)), None)

    async def search_by_title(self, context: LocationContext, keywords: str, limit: int = 10) -> list[ListingRecord]:
        return [row for row in LISTINGS if keywords.lower() in (row.title or "").lower()][:limit]

    async def search_by_location(
        self, context: LocationContext, keywords: str, limit: int = 10
    ) -> list[ListingRecord]:
        return await self.search_by_title(context, keywords, limit)

    async def find_redirect(self, old_slug: str, location_context: str) -> RedirectRecord | None:
        return next(
            (r for r in REDIRECTS if r.old_slug == old_slug and r.location_context == location_context),
            None,
        )


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_query_parsing(catalog: EntityCatalogCache) -> None:
    """Demonstrate free-text query parsing."""
    print_section("Query Parsing")

    parser = QueryParser.create()
    queries = [
        "3bhk apartment in gachibowli by xyz developers",
        "ready to move villas near kokapet",
        "new projects in financial distrct",
        "prestige plots tellapur",
        "something completely different",
    ]

    for query in queries:
        start = time.time()
        parsed = await parser.parse(query, catalog)
        duration = (time.time() - start) * 1000
        print(f"\n  Query: {query}")
        for key, value in parsed.to_dict().items():
            if value not in (None, False, ""):
                print(f"    {key}: {value}")
        print(f"    ({duration:.2f}ms)")

    stats = catalog.stats()
    print(f"\n📊 Catalog: {stats['location']['count']} locations, {stats['vendor']['count']} vendors")


def demo_slug_generation() -> None:
    """Demonstrate canonical slug generation."""
    print_section("Slug Generation")

    generator = SlugGenerator.create()
    inputs = [
        SlugInput(unit_config="4BHK", category="villa", primary_name="Green Meadows",
                  location_candidates=("Kokapet",)),
        SlugInput(unit_config="3BHK", category="apartment", primary_name="3BHK Sky Homes 3f2a9c1e",
                  location_candidates=(None, "", "Hyderabad")),
        SlugInput(unit_config="3BHK", primary_name="Prestige High Fields Luxury Residences Phase Two Tower",
                  location_candidates=("Kokapet",)),
        SlugInput(primary_name="!!!"),
    ]

    existing: list[str] = []
    for slug_input in inputs:
        slug = generator.ensure_unique(generator.generate(slug_input), existing)
        existing.append(slug)
        print(f"  {slug_input.primary_name or '(empty)'!r:<60} -> {slug}")

    duplicate = generator.ensure_unique(generator.generate(inputs[0]), existing)
    print(f"\n  Duplicate listing -> {duplicate}")


async def demo_legacy_resolution() -> None:
    """Demonstrate legacy URL resolution."""
    print_section("Legacy URL Resolution")

    store = InMemoryListings()
    resolver = LegacyURLResolver.create(listings=store, redirects=store)
    paths = [
        ("hyderabad", "green-meadows-villa"),
        ("hyderabad", "green-meadows-kokapet-villa-for-sale"),
        ("hyderabad", "4bhk-apartment-old-project-name-somewhere"),
        ("hyderabad", "nothing-like-this"),
        ("mumbai", "green-meadows-villa"),
    ]

    for location, slug in paths:
        result = await resolver.resolve(location, slug)
        print(f"\n  /properties/{location}/{slug}")
        if result.found:
            print(f"  ✓ 301 -> {result.redirect_path(location)} ({result.stage})")
        else:
            print("  ✗ 404")


async def demo_threshold_tuning(catalog: EntityCatalogCache) -> None:
    """Demonstrate how the fuzzy threshold changes location matches."""
    print_section("Fuzzy Threshold Tuning")

    queries = ["villas in kokapt", "flats in gachbowli", "plots in narsngi", "homes in tellapoor"]
    thresholds = [0.70, 0.75, 0.80, 0.85, 0.90]

    print(f"\n{'Threshold':<12} {'Matched':<10} Locations")
    print("-" * 60)
    for threshold in thresholds:
        parser = QueryParser(fuzzy_threshold=threshold)
        matches = [(await parser.parse(query, catalog)).location for query in queries]
        found = [match for match in matches if match]
        print(f"{threshold:<12.2f} {len(found)}/{len(queries):<8} {', '.join(found)}")


async def run() -> None:
    catalog = EntityCatalogCache.create(source=InMemoryCatalog())
    await demo_query_parsing(catalog)
    demo_slug_generation()
    await demo_legacy_resolution()
    await demo_threshold_tuning(catalog)


def main() -> None:
    """Run all demos."""
    print("\n🚀 Listing Query Engine Demo")
    print("=" * 70)

    try:
        asyncio.run(run())

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)

    except Exception as e:
        print(f"\n❌ Error: {e}")


if __name__ == "__main__":
    main()
