from typing import Any

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from listing_query.api.dependencies import HandlerDep, lifespan
from listing_query.config import settings
from listing_query.dto import GenerateSlugRequest, GenerateSlugResponse, HealthCheckResponse, ParseQueryResponse

app = FastAPI(
    title="Listing Query API",
    description="Search query understanding, canonical slugs and legacy URL resolution for property listings",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Listing Query API",
        "version": "0.1.0",
        "endpoints": {
            "parse": "/search/parse?q=",
            "slugs": "/slugs",
            "legacy": "/properties/{location}/{slug}",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@app.get("/search/parse", response_model=ParseQueryResponse)
async def parse_query(handler: HandlerDep, q: str = Query("", description="Free-text search query")) -> ParseQueryResponse:
    """
    Parse a search query into structured filters without running the search.

    Args:
        q: Free-text search query.

    Returns:
        Parsed filters, or a null ``parsed`` for an empty query.
    """
    return await handler.parse_query(q)


@app.post("/slugs", response_model=GenerateSlugResponse)
async def generate_slug(request: GenerateSlugRequest, handler: HandlerDep) -> GenerateSlugResponse:
    """
    Generate a unique canonical slug for a new listing.

    Args:
        request: Listing attributes and the slugs already taken.

    Returns:
        The unique slug.
    """
    return await handler.generate_slug(request)


@app.get("/properties/{location}/{slug}", response_class=RedirectResponse)
async def legacy_listing(location: str, slug: str, handler: HandlerDep) -> RedirectResponse:
    """
    Permanently redirect an old listing URL to its canonical path.

    Old search-engine-indexed URLs have the pattern /properties/{location}/{slug};
    canonical URLs are /{location}/buy/{canonical_slug}.
    """
    return await handler.resolve_legacy_path(location, slug)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "listing_query.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
