"""
Runtime settings for Photo Search.

Environment Variables:
    PIXABAY_API_KEY: API key for the Pixabay image search API
    PHOTO_SEARCH_BASE_URL: Search endpoint (default: https://pixabay.com/api/)
    PHOTO_SEARCH_DEBOUNCE: Quiet window in seconds (default: 1.0)
    PHOTO_SEARCH_PER_PAGE: Results per request, 3-200 (default: 200)
    PHOTO_SEARCH_SAFESEARCH: "true"/"false" (default: true)
    PHOTO_SEARCH_FALLBACK_QUERY: Term used when a query cannot be encoded
                                 (default: "paris", empty string disables)
    PHOTO_SEARCH_TIMEOUT: HTTP timeout in seconds (default: 30.0)
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://pixabay.com/api/"
DEFAULT_DEBOUNCE_SECONDS = 1.0
DEFAULT_PER_PAGE = 200
DEFAULT_FALLBACK_QUERY = "paris"
DEFAULT_TIMEOUT = 30.0

# Pixabay accepts per_page in this range
MIN_PER_PAGE = 3
MAX_PER_PAGE = 200

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True, slots=True)
class PhotoSearchSettings:
    """Validated configuration shared by the encoder, gateway and pipeline."""

    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    per_page: int = DEFAULT_PER_PAGE
    safe_search: bool = True
    fallback_query: str | None = DEFAULT_FALLBACK_QUERY
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if self.debounce_seconds < 0:
            raise ConfigurationError(f"debounce_seconds must be >= 0, got {self.debounce_seconds}")
        if not MIN_PER_PAGE <= self.per_page <= MAX_PER_PAGE:
            raise ConfigurationError(
                f"per_page must be between {MIN_PER_PAGE} and {MAX_PER_PAGE}, got {self.per_page}"
            )
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be > 0, got {self.timeout}")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        if self.fallback_query is not None:
            try:
                self.fallback_query.encode("utf-8")
            except UnicodeEncodeError as e:
                raise ConfigurationError(
                    f"fallback_query cannot be encoded as UTF-8 ({e.reason}): {self.fallback_query!r}"
                ) from e

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PhotoSearchSettings:
        """Build settings from environment variables."""
        env = os.environ if environ is None else environ

        fallback = env.get("PHOTO_SEARCH_FALLBACK_QUERY", DEFAULT_FALLBACK_QUERY).strip() or None

        return cls(
            api_key=env.get("PIXABAY_API_KEY", "").strip() or None,
            base_url=env.get("PHOTO_SEARCH_BASE_URL", "").strip() or DEFAULT_BASE_URL,
            debounce_seconds=_parse_float(env, "PHOTO_SEARCH_DEBOUNCE", DEFAULT_DEBOUNCE_SECONDS),
            per_page=_parse_int(env, "PHOTO_SEARCH_PER_PAGE", DEFAULT_PER_PAGE),
            safe_search=_parse_bool(env, "PHOTO_SEARCH_SAFESEARCH", True),
            fallback_query=fallback,
            timeout=_parse_float(env, "PHOTO_SEARCH_TIMEOUT", DEFAULT_TIMEOUT),
        )

    def replace(self, **changes: Any) -> PhotoSearchSettings:
        """Return a copy with ``changes`` applied; ``None`` values are ignored."""
        return dataclasses.replace(self, **{k: v for k, v in changes.items() if v is not None})

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("PIXABAY_API_KEY is not set; pass --api-key or export PIXABAY_API_KEY")
        return self.api_key


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _parse_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be true or false, got {raw!r}")
