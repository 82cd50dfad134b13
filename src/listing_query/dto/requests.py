"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class GenerateSlugRequest(BaseModel):
    """Request DTO for generating a canonical listing slug.

    The handler will convert this to a SlugInput for the service layer.
    """

    primary_name: str = Field("", description="Project name or listing title")
    unit_config: str | None = Field(None, description="Unit configuration, e.g. '3BHK'")
    category: str | None = Field(None, description="Property category, e.g. 'villa'")
    bedrooms: int | None = Field(
        None,
        description="Bedroom count, used when unit_config is empty",
        ge=0,
    )
    location_candidates: list[str | None] = Field(
        default_factory=list,
        description="Location values, most specific first; the first non-empty one is used",
    )
    max_length: int | None = Field(
        None,
        description="Maximum slug length (never more than 50 in effect)",
        ge=1,
    )
    existing_slugs: list[str] = Field(
        default_factory=list,
        description="Slugs already taken; the result is made unique against these",
    )
