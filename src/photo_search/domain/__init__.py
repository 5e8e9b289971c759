"""
Domain Layer

Immutable value objects shared by every other layer.
"""

from .entities import Photo, PipelineState, SearchRequest

__all__ = ["Photo", "PipelineState", "SearchRequest"]
