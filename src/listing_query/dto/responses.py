"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class ParsedQueryItem(BaseModel):
    """Structured filters extracted from a search query."""

    location: str | None = Field(None, description="Matched location (micro-market)")
    vendor: str | None = Field(None, description="Matched vendor (developer)")
    unit_config: str | None = Field(None, description="Unit configuration, e.g. '3BHK'")
    category: str | None = Field(None, description="Normalized property category")
    completion_status: str | None = Field(None, description="Specific completion status")
    is_generic_new_listing: bool = Field(
        False,
        description="True for 'new projects'-style queries without a specific status",
    )
    remaining_text: str = Field("", description="Text no filter claimed")


class ParseQueryResponse(BaseModel):
    """Response DTO for the parse endpoint."""

    query: str = Field(..., description="The query as received")
    parsed: ParsedQueryItem | None = Field(None, description="Parsed filters, null for an empty query")
    message: str | None = Field(None, description="Human-readable note")
    parse_time_ms: float = Field(0.0, description="Time taken to parse in milliseconds", ge=0.0)


class GenerateSlugResponse(BaseModel):
    """Response DTO for slug generation."""

    slug: str = Field(..., description="Unique canonical slug")
    base_slug: str = Field(..., description="Slug before uniqueness suffixing")
    is_valid: bool = Field(..., description="Whether the slug passes SEO slug validation")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    datastore_healthy: bool = Field(..., description="Whether the listings datastore is reachable")
    catalog: dict = Field(default_factory=dict, description="Entity catalog cache statistics")
