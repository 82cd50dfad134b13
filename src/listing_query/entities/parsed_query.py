"""Parsed search query domain entity."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class ParsedQuery:
    """Structured filters extracted from free-text search input.

    Attributes:
        location: Matched location (micro-market) display name
        vendor: Matched vendor (developer) display name
        unit_config: Unit configuration such as "3BHK"
        category: Normalized property category such as "apartment"
        completion_status: Specific completion status such as "New Launch"
        is_generic_new_listing: True for "new projects"-style queries with no specific status
        remaining_text: Whatever text no stage claimed
    """

    location: str | None = None
    vendor: str | None = None
    unit_config: str | None = None
    category: str | None = None
    completion_status: str | None = None
    is_generic_new_listing: bool = False
    remaining_text: str = ""

    @classmethod
    def empty(cls, remaining_text: str = "") -> "ParsedQuery":
        """A query with no extracted filters."""
        return cls(remaining_text=remaining_text)

    @property
    def has_filters(self) -> bool:
        return any(
            (
                self.location,
                self.vendor,
                self.unit_config,
                self.category,
                self.completion_status,
                self.is_generic_new_listing,
            )
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
