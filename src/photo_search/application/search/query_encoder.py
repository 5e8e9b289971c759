"""
QueryEncoder - free text to SearchRequest

Pre-flight step before a query is handed to the search gateway:
- Trim surrounding whitespace; blank text is rejected
- Clamp to the API's query length limit
- Percent-encode for use as a URL query component

A query that cannot be percent-encoded (e.g. text holding lone surrogates
that have no UTF-8 form) degrades to a configurable fallback term instead of
failing, so one bad keystroke never halts the pipeline.

Example:
    >>> encoder = QueryEncoder()
    >>> request = encoder.encode("  red fox ")
    >>> request.encoded_query
    'red%20fox'
    >>> request.per_page
    200
"""

from __future__ import annotations

import logging
import urllib.parse

from photo_search.domain.entities.photo import SearchRequest
from photo_search.shared.exceptions import ConfigurationError, EncodeError, ErrorContext
from photo_search.shared.settings import DEFAULT_FALLBACK_QUERY, DEFAULT_PER_PAGE

logger = logging.getLogger(__name__)

# Pixabay rejects q values longer than this
MAX_QUERY_LENGTH = 100


class QueryEncoder:
    """
    Stateless query encoder. Safe to share between pipelines.

    Raises:
        ConfigurationError: ``fallback_query`` itself cannot be percent-encoded
    """

    def __init__(
        self,
        per_page: int = DEFAULT_PER_PAGE,
        safe_search: bool = True,
        fallback_query: str | None = DEFAULT_FALLBACK_QUERY,
    ) -> None:
        self.per_page = per_page
        self.safe_search = safe_search
        self.fallback_query = (fallback_query or "").strip() or None
        self._encoded_fallback: str | None = None
        if self.fallback_query is not None:
            try:
                self._encoded_fallback = self._percent_encode(self.fallback_query)
            except UnicodeEncodeError as e:
                raise ConfigurationError(
                    f"Fallback query cannot be percent-encoded ({e.reason}): {self.fallback_query!r}"
                ) from e

    def encode(self, raw_text: str) -> SearchRequest:
        """
        Encode ``raw_text`` into a SearchRequest.

        Raises:
            EncodeError: text is blank, or it cannot be encoded and no
                fallback term is configured
        """
        text = (raw_text or "").strip()
        if not text:
            raise EncodeError(raw_text, "Query cannot be empty")

        if len(text) > MAX_QUERY_LENGTH:
            logger.debug(f"Query truncated from {len(text)} to {MAX_QUERY_LENGTH} characters")
            text = text[:MAX_QUERY_LENGTH].rstrip()

        try:
            encoded = self._percent_encode(text)
        except UnicodeEncodeError as e:
            return self._fallback(text, e)

        return SearchRequest(
            query=text,
            encoded_query=encoded,
            per_page=self.per_page,
            safe_search=self.safe_search,
        )

    @staticmethod
    def _percent_encode(text: str) -> str:
        return urllib.parse.quote(text, safe="", encoding="utf-8", errors="strict")

    def _fallback(self, text: str, cause: UnicodeEncodeError) -> SearchRequest:
        if self._encoded_fallback is None:
            raise EncodeError(
                text,
                f"Cannot percent-encode query: {cause.reason}",
                context=ErrorContext(operation="encode", suggestion="Remove unsupported characters"),
            ) from cause

        logger.warning(
            f"Query {text!r} could not be encoded ({cause.reason}); "
            f"falling back to {self.fallback_query!r}"
        )
        return SearchRequest(
            query=text,
            encoded_query=self._encoded_fallback,
            per_page=self.per_page,
            safe_search=self.safe_search,
            used_fallback=True,
        )
