"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .catalog_entity import CatalogEntity, EntityType
from .listing import ListingRecord, RedirectRecord
from .parsed_query import ParsedQuery
from .resolution import NOT_FOUND, ResolutionResult
from .slug_input import SlugInput

__all__ = [
    "CatalogEntity",
    "EntityType",
    "ListingRecord",
    "RedirectRecord",
    "ParsedQuery",
    "ResolutionResult",
    "NOT_FOUND",
    "SlugInput",
]
