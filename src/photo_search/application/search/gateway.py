"""
SearchGateway port.

The pipeline depends on this protocol only; PixabayClient is the production
implementation and tests substitute fakes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from photo_search.domain.entities.photo import Photo, SearchRequest


@runtime_checkable
class SearchGateway(Protocol):
    """Executes one encoded request; raises NetworkError or DecodeError on failure."""

    async def search(self, request: SearchRequest) -> list[Photo]: ...

    async def close(self) -> None: ...
