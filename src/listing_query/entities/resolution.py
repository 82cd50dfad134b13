"""Legacy URL resolution result."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving a legacy listing path.

    A result with an empty ``canonical_slug`` is the distinguished
    "not found" value; use ``NOT_FOUND`` rather than building one.

    Attributes:
        canonical_slug: Current canonical slug of the listing
        stage: Pipeline stage that produced the hit ("exact", "fuzzy", "redirect")
    """

    canonical_slug: str | None = None
    stage: str | None = None

    @property
    def found(self) -> bool:
        return bool(self.canonical_slug)

    def redirect_path(self, location_context: str) -> str:
        """Path the calling layer should permanently redirect to."""
        if not self.found:
            raise ValueError("Cannot build a redirect path for an unresolved slug")
        return f"/{location_context}/buy/{self.canonical_slug}"


NOT_FOUND = ResolutionResult()
