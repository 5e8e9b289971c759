"""
Photo Search - Debounced, ordering-safe photo search client

Turns a stream of search-text changes into the minimal sequence of Pixabay
searches and publishes immutable result snapshots. A response that arrives
for a superseded search is never shown.

Usage:
    from photo_search import PixabayClient, QueryEncoder, ReactivePipeline

    async with PixabayClient(api_key="...") as client:
        pipeline = ReactivePipeline(QueryEncoder(), client, on_state_change=print)
        pipeline.on_input("paris")
        await pipeline.wait_idle()

Features:
    - 1 second trailing debounce and duplicate suppression
    - Latest-request-wins reconciliation of concurrent responses
    - Typed NetworkError / DecodeError surfaced as state, never raised
    - Scoped PipelineSession lifecycle for subscriptions and HTTP clients
"""

from .application.search import PipelineSession, QueryEncoder, ReactivePipeline, SearchGateway
from .domain.entities import Photo, PipelineState, SearchRequest
from .infrastructure.sources import PixabayClient
from .shared import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    ErrorKind,
    NetworkError,
    PhotoSearchError,
    PhotoSearchSettings,
)

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "ReactivePipeline",
    "PipelineSession",
    "QueryEncoder",
    "SearchGateway",
    # Entities
    "Photo",
    "PipelineState",
    "SearchRequest",
    # Sources
    "PixabayClient",
    # Errors and settings
    "PhotoSearchError",
    "EncodeError",
    "NetworkError",
    "DecodeError",
    "ConfigurationError",
    "ErrorKind",
    "PhotoSearchSettings",
]
