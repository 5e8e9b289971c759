"""
Base API Client - single-shot async HTTP requests with typed failures.

Provides a reusable base class for remote search sources:
- httpx.AsyncClient management (connection pooling, timeout, headers)
- Exactly one HTTP call per request: no retry, no cache, no rate limiting
- Transport failures, timeouts and non-2xx statuses raise NetworkError
- Bodies that are not valid JSON raise DecodeError
- Credential query parameters are masked in every log line
"""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any

import httpx
from typing_extensions import Self

from photo_search.shared.exceptions import DecodeError, ErrorContext, NetworkError

logger = logging.getLogger(__name__)


class BaseAPIClient:
    """
    Base class for external API clients.

    Subclasses should set ``_service_name`` and can override:
    - ``_execute_request()``: Custom request behavior
    - ``_parse_response()``: Custom response decoding

    Example:
        class MyClient(BaseAPIClient):
            _service_name = "MyAPI"

            def __init__(self):
                super().__init__(base_url="https://api.example.com")

            async def get_item(self, item_id: str) -> dict:
                return await self._make_request(f"/items/{item_id}")
    """

    _service_name: str = "API"
    _redacted_params: frozenset[str] = frozenset({"key", "api_key", "token"})

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize base client.

        Args:
            base_url: Base URL for the API (optional, can pass full URLs)
            timeout: Request timeout in seconds
            headers: Default headers for all requests
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            headers=headers or {},
            limits=httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10,
                keepalive_expiry=30.0,
            ),
            transport=transport,
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def _build_url(self, url: str) -> str:
        """Build full URL from path or full URL."""
        if url.startswith(("http://", "https://")):
            return url
        return f"{self._base_url}{url}"

    def _redact(self, url: str) -> str:
        """Mask credential parameters so URLs can be logged."""
        parts = urllib.parse.urlsplit(url)
        if not parts.query:
            return url
        pairs = []
        for pair in parts.query.split("&"):
            name, sep, value = pair.partition("=")
            if sep and name in self._redacted_params:
                value = "***"
            pairs.append(f"{name}{sep}{value}")
        return urllib.parse.urlunsplit(parts._replace(query="&".join(pairs)))

    async def _make_request(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Make one HTTP GET request and decode the JSON body.

        Args:
            url: Full URL or path (appended to base_url)
            headers: Additional headers for this request

        Returns:
            Parsed JSON value

        Raises:
            NetworkError: connection failure, timeout or non-2xx status
            DecodeError: body is not valid JSON
        """
        full_url = self._build_url(url)
        safe_url = self._redact(full_url)
        logger.debug(f"{self._service_name} GET {safe_url}")

        try:
            response = await self._execute_request(full_url, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(f"{self._service_name} HTTP error {status}: {e.response.reason_phrase}")
            raise NetworkError(
                f"{self._service_name}: HTTP {status} {e.response.reason_phrase}",
                status_code=status,
                context=ErrorContext(operation="search", input_value=safe_url),
            ) from e
        except httpx.TimeoutException as e:
            logger.warning(f"{self._service_name} request timed out after {self._timeout}s")
            raise NetworkError(
                f"{self._service_name}: request timeout after {self._timeout}s",
                context=ErrorContext(operation="search", input_value=safe_url),
            ) from e
        except httpx.RequestError as e:
            logger.warning(f"{self._service_name} request failed: {e}")
            raise NetworkError(
                f"{self._service_name}: connection failed: {e}",
                context=ErrorContext(operation="search", input_value=safe_url),
            ) from e

        return self._parse_response(response)

    async def _execute_request(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Execute the actual HTTP request. Override for custom behavior."""
        return await self._client.get(url, headers=headers or {})

    def _parse_response(self, response: httpx.Response) -> Any:
        """Parse response body as JSON. Override for custom extraction logic."""
        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"{self._service_name} returned a non-JSON body")
            raise DecodeError("Invalid JSON response", source=self._service_name) from e

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
