"""Domain entities for Photo Search."""

from .photo import Photo, PipelineState, SearchRequest

__all__ = ["Photo", "PipelineState", "SearchRequest"]
