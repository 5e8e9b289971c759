"""
Domain Entities: Photo, SearchRequest, PipelineState

Pure value objects: no I/O and no source-specific parsing.
Mapping from API payloads is handled by Infrastructure layer mappers.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field

from photo_search.shared.exceptions import ErrorKind


@dataclass(frozen=True, slots=True)
class Photo:
    """
    One search hit.

    Identity is the server-assigned ``id``: two Photo values with the same id
    compare equal and hash alike even if their URLs differ, so presenters can
    diff result sets by identity.
    """

    id: int
    image_url: str = field(compare=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "image_url": self.image_url}


@dataclass(frozen=True, slots=True)
class SearchRequest:
    """An encoded, immutable search attempt."""

    query: str
    encoded_query: str
    per_page: int = 200
    safe_search: bool = True
    used_fallback: bool = False

    def to_params(self) -> dict[str, str]:
        """Query parameters excluding the credential; ``q`` is already encoded."""
        return {
            "q": self.encoded_query,
            "per_page": str(self.per_page),
            "safesearch": "true" if self.safe_search else "false",
        }


@dataclass(frozen=True, slots=True)
class PipelineState:
    """
    Immutable snapshot of the search pipeline.

    ``current_results`` and ``last_error`` only ever come from the response to
    the most recently dispatched request; ``query`` is the text that produced
    ``current_results``.
    """

    latest_dispatched_id: int = 0
    latest_completed_id: int = 0
    current_results: tuple[Photo, ...] = ()
    last_error: ErrorKind | None = None
    query: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.current_results and self.last_error is None

    def evolve(self, **changes) -> PipelineState:
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "latest_dispatched_id": self.latest_dispatched_id,
            "latest_completed_id": self.latest_completed_id,
            "current_results": [photo.to_dict() for photo in self.current_results],
            "last_error": self.last_error.value if self.last_error else None,
            "query": self.query,
        }
