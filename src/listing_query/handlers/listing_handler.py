"""HTTP handlers for search parsing, slug generation and legacy redirects.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, redirects and error handling.
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import HTTPException, status
from fastapi.responses import RedirectResponse

from listing_query.dto import (
    GenerateSlugRequest,
    GenerateSlugResponse,
    HealthCheckResponse,
    ParsedQueryItem,
    ParseQueryResponse,
)
from listing_query.entities import SlugInput
from listing_query.services import (
    EntityCatalogCache,
    LegacyURLResolver,
    QueryParser,
    SlugGenerator,
    is_valid_slug,
)


class ListingHandler:
    """HTTP handlers for the query understanding engine.

    This handler delegates business logic to the services and handles
    HTTP-specific concerns like:
    - Converting entities to DTOs
    - Turning resolutions into 301 redirects or 404s
    - Error handling and responses

    Example:
        ```python
        handler = ListingHandler(
            parser=QueryParser.create(),
            catalog=EntityCatalogCache.create(source=repository),
            slug_generator=SlugGenerator.create(),
            resolver=LegacyURLResolver.create(listings=repository, redirects=repository),
        )

        @app.get("/search/parse", response_model=ParseQueryResponse)
        async def parse(q: str = ""):
            return await handler.parse_query(q)
        ```
    """

    def __init__(
        self,
        parser: QueryParser,
        catalog: EntityCatalogCache,
        slug_generator: SlugGenerator,
        resolver: LegacyURLResolver,
        datastore_health: Callable[[], Awaitable[bool]] | None = None,
    ) -> None:
        """Initialize the listing handler.

        Args:
            parser: Query parser (required).
            catalog: Entity catalog cache the parser reads (required).
            slug_generator: Slug generator (required).
            resolver: Legacy URL resolver (required).
            datastore_health: Async health check for the datastore, used by /health.
        """
        self._parser = parser
        self._catalog = catalog
        self._slugs = slug_generator
        self._resolver = resolver
        self._datastore_health = datastore_health

    async def parse_query(self, query: str) -> ParseQueryResponse:
        """Handle GET /search/parse requests.

        Args:
            query: Raw search text

        Returns:
            ParseQueryResponse; ``parsed`` is null for a blank query
        """
        if not query or not query.strip():
            return ParseQueryResponse(
                query=query or "",
                parsed=None,
                message="Please provide a search query",
            )

        start_time = time.time()
        parsed = await self._parser.parse(query.strip(), self._catalog)
        parse_time_ms = (time.time() - start_time) * 1000

        return ParseQueryResponse(
            query=query,
            parsed=ParsedQueryItem(**parsed.to_dict()),
            parse_time_ms=parse_time_ms,
        )

    async def generate_slug(self, request: GenerateSlugRequest) -> GenerateSlugResponse:
        """Handle POST /slugs requests.

        Args:
            request: The generate slug request DTO

        Returns:
            GenerateSlugResponse with the unique slug

        Raises:
            HTTPException: If slug generation fails unexpectedly
        """
        try:
            slug_input = SlugInput(
                primary_name=request.primary_name,
                unit_config=request.unit_config,
                category=request.category,
                location_candidates=tuple(request.location_candidates),
                bedrooms=request.bedrooms,
            )
            base_slug = self._slugs.generate(slug_input, max_length=request.max_length)
            slug = self._slugs.ensure_unique(base_slug, request.existing_slugs)

            return GenerateSlugResponse(
                slug=slug,
                base_slug=base_slug,
                is_valid=is_valid_slug(slug),
            )

        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to generate slug: {e}",
            ) from e

    async def resolve_legacy_path(self, location: str, slug: str) -> RedirectResponse:
        """Handle GET /properties/{location}/{slug} requests.

        Args:
            location: Location context path segment
            slug: Legacy listing slug

        Returns:
            301 redirect to /{location}/buy/{canonical_slug}

        Raises:
            HTTPException: 404 when the slug does not resolve
        """
        result = await self._resolver.resolve(location, slug)
        if not result.found:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No listing found for {location}/{slug}",
            )

        return RedirectResponse(
            url=result.redirect_path(location.strip().lower()),
            status_code=status.HTTP_301_MOVED_PERMANENTLY,
        )

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests.

        Returns:
            HealthCheckResponse with datastore status and catalog stats
        """
        datastore_healthy = True
        if self._datastore_health is not None:
            datastore_healthy = await self._datastore_health()

        return HealthCheckResponse(
            status="healthy" if datastore_healthy else "unhealthy",
            datastore_healthy=datastore_healthy,
            catalog=self._catalog.stats(),
        )
