"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from listing_query.config import get_supabase_client
from listing_query.handlers import ListingHandler
from listing_query.repositories import RedisCatalogSource, SupabaseListingRepository
from listing_query.services import EntityCatalogCache, LegacyURLResolver, QueryParser, SlugGenerator


def get_handler(request: Request) -> ListingHandler:
    """Dependency injection for ListingHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The ListingHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "listing_handler", None)
    if handler is None:
        raise RuntimeError("ListingHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Repository (data access) - Supabase, with a Redis catalog snapshot in front
    2. Services (business logic) - catalog cache, parser, slug generator, resolver
    3. Handler (HTTP endpoints) - stored in app.state.listing_handler

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Removes all services from app.state on shutdown
    """
    client = await get_supabase_client()
    repository = SupabaseListingRepository.create(client=client)

    # Shared snapshot so worker processes do not each hit the catalog tables
    catalog_source = RedisCatalogSource.create(source=repository)
    catalog = EntityCatalogCache.create(source=catalog_source)

    listing_handler = ListingHandler(
        parser=QueryParser.create(),
        catalog=catalog,
        slug_generator=SlugGenerator.create(),
        resolver=LegacyURLResolver.create(listings=repository, redirects=repository),
        datastore_health=repository.health_check,
    )

    app.state.listing_handler = listing_handler
    app.state.catalog = catalog
    app.state.repository = repository

    print("✓ Listing query engine initialized")
    print(f"✓ Catalog TTL: {catalog.ttl}s")
    print(f"✓ Redis snapshot: {await catalog_source.health_check()}")

    yield

    # Cleanup - remove from app.state
    del app.state.listing_handler
    del app.state.catalog
    del app.state.repository
    await catalog_source.client.aclose()
    print("✓ Listing query engine shut down")


# Type alias for cleaner dependency injection
HandlerDep = Annotated[ListingHandler, Depends(get_handler)]
