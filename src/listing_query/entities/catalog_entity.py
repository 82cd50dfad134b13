"""Catalog entity domain entity."""

from dataclasses import dataclass
from enum import Enum


class EntityType(str, Enum):
    """Kinds of named reference objects the catalog knows about."""

    LOCATION = "location"
    VENDOR = "vendor"


@dataclass(frozen=True)
class CatalogEntity:
    """A named location (micro-market) or vendor (developer).

    Owned by the external datastore; the engine only reads copies.

    Attributes:
        id: Datastore identifier
        display_name: Human-readable name used for matching
        entity_type: Which catalog the entity belongs to
    """

    id: str
    display_name: str
    entity_type: EntityType
