"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import GenerateSlugRequest
from .responses import (
    GenerateSlugResponse,
    HealthCheckResponse,
    ParsedQueryItem,
    ParseQueryResponse,
)

__all__ = [
    "GenerateSlugRequest",
    "GenerateSlugResponse",
    "HealthCheckResponse",
    "ParsedQueryItem",
    "ParseQueryResponse",
]
