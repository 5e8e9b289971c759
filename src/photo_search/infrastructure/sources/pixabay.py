"""
Pixabay Image Search Client

Implements the SearchGateway port against the Pixabay REST API.

API Documentation: https://pixabay.com/api/docs/

Request:
    GET https://pixabay.com/api/?key=KEY&q=ENCODED&per_page=200&safesearch=true

Response (only the fields used here):
    {"total": 4692, "totalHits": 500,
     "hits": [{"id": 195893, "webformatURL": "https://pixabay.com/get/...", ...}]}

Limitations:
- per_page accepts 3-200
- q may not exceed 100 characters
- One page per search; pagination is not used
"""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from photo_search.domain.entities.photo import Photo, SearchRequest
from photo_search.infrastructure.http.base_client import BaseAPIClient
from photo_search.shared.exceptions import ConfigurationError, DecodeError, ErrorContext
from photo_search.shared.settings import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


# Response envelope (unknown fields ignored)
class PixabayHit(BaseModel):
    """One entry of the ``hits`` array."""
    model_config = ConfigDict(extra="ignore")

    id: int
    webformatURL: str


class PixabayResponse(BaseModel):
    """Top-level Pixabay search response."""
    model_config = ConfigDict(extra="ignore")

    total: int | None = None
    totalHits: int | None = None
    hits: list[PixabayHit]


class PixabayClient(BaseAPIClient):
    """
    Pixabay photo search client.

    Stateless per call: every ``search()`` issues exactly one GET and either
    returns the decoded photos in server order or raises. Calls may run
    concurrently; ordering between them is the caller's concern.

    Usage:
        async with PixabayClient(api_key="...") as client:
            photos = await client.search(QueryEncoder().encode("paris"))
    """

    _service_name = "Pixabay"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("Pixabay API key is required")
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )
        self._api_key = api_key

    def _request_path(self, request: SearchRequest) -> str:
        """
        Query string for ``request``, relative to the configured endpoint.

        The query is already percent-encoded by QueryEncoder and is inserted
        verbatim; only the credential is encoded here.
        """
        pairs = [f"key={urllib.parse.quote(self._api_key, safe='')}"]
        pairs.extend(f"{name}={value}" for name, value in request.to_params().items())
        prefix = "&" if "?" in self._base_url else "/?"
        return prefix + "&".join(pairs)

    def build_url(self, request: SearchRequest) -> str:
        """Full request URL for ``request``."""
        return self._build_url(self._request_path(request))

    async def search(self, request: SearchRequest) -> list[Photo]:
        """
        Execute one search.

        Raises:
            NetworkError: transport failure, timeout or non-2xx status
            DecodeError: body is not JSON or does not match the envelope
        """
        data = await self._make_request(self._request_path(request))
        photos = self._decode(data)
        logger.debug(f"Pixabay returned {len(photos)} photos for {request.query!r}")
        return photos

    @staticmethod
    def _decode(data: Any) -> list[Photo]:
        """Validate the envelope and map hits to Photo entities, preserving order."""
        try:
            envelope = PixabayResponse.model_validate(data)
        except ValidationError as e:
            raise DecodeError(
                f"unexpected response schema ({e.error_count()} errors)",
                source="Pixabay",
                context=ErrorContext(operation="decode", metadata={"errors": e.errors(include_url=False)}),
            ) from e
        return [PixabayClient._map_to_photo(hit) for hit in envelope.hits]

    @staticmethod
    def _map_to_photo(hit: PixabayHit) -> Photo:
        return Photo(id=hit.id, image_url=hit.webformatURL)
