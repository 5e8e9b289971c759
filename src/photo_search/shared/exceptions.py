"""
Unified Exception Hierarchy for Photo Search.

Every failure the search pipeline can record is tagged with an ErrorKind so
that it can be stored in PipelineState as data instead of being raised.

Exception Hierarchy:
    PhotoSearchError (base)
    ├── EncodeError          (ErrorKind.ENCODE_ERROR)
    ├── APIError
    │   └── NetworkError     (ErrorKind.NETWORK_ERROR)
    ├── DataError
    │   └── DecodeError      (ErrorKind.DECODE_ERROR)
    └── ConfigurationError
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Failure kinds surfaced to presenters through PipelineState.last_error."""

    ENCODE_ERROR = "encode_error"
    NETWORK_ERROR = "network_error"
    DECODE_ERROR = "decode_error"


class ErrorSeverity(Enum):
    """Severity levels for errors; values are the matching logging levels."""
    WARNING = logging.WARNING      # Degraded result, pipeline continues
    ERROR = logging.ERROR          # Request failed, next input re-arms
    CRITICAL = logging.CRITICAL    # Cannot start (bad configuration)


class ErrorCategory(Enum):
    """Categories for error classification."""
    ENCODING = "encoding"
    API = "api"
    DATA = "data"
    CONFIGURATION = "config"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Structured context attached to every PhotoSearchError."""
    operation: str | None = None
    input_value: Any = None
    status_code: int | None = None
    suggestion: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class PhotoSearchError(Exception):
    """
    Base exception for all Photo Search errors.

    Provides:
    - Structured error context
    - Severity classification
    - The ErrorKind recorded in pipeline state (None for errors that never
      reach the state, such as configuration problems)
    """

    __slots__ = ('context', 'severity', 'category', 'kind')

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        category: ErrorCategory = ErrorCategory.API,
        kind: ErrorKind | None = None,
    ) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category
        self.kind = kind

    @property
    def log_level(self) -> int:
        """Logging level to report this error at."""
        return self.severity.value

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "category": self.category.value,
            "severity": self.severity.name.lower(),
        }
        if self.kind is not None:
            result["kind"] = self.kind.value
        if self.context.operation:
            result["operation"] = self.context.operation
        if self.context.status_code is not None:
            result["status_code"] = self.context.status_code
        if self.context.suggestion:
            result["suggestion"] = self.context.suggestion
        return result


# =============================================================================
# Encoding Errors
# =============================================================================

class EncodeError(PhotoSearchError):
    """Raised when a query cannot be turned into a SearchRequest."""

    def __init__(
        self,
        query: str | None,
        reason: str = "Query cannot be encoded",
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        ctx = ErrorContext(
            operation=ctx.operation or "encode",
            input_value=query,
            status_code=ctx.status_code,
            suggestion=ctx.suggestion or "Type a different search term",
            metadata=ctx.metadata,
        )
        super().__init__(
            f"Invalid query: {reason}",
            context=ctx,
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.ENCODING,
            kind=ErrorKind.ENCODE_ERROR,
        )


# =============================================================================
# API Errors
# =============================================================================

class APIError(PhotoSearchError):
    """Base class for remote API errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        kind: ErrorKind = ErrorKind.NETWORK_ERROR,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.API,
            kind=kind,
        )


class NetworkError(APIError):
    """Raised for transport failures, timeouts and non-success statuses."""

    def __init__(
        self,
        message: str = "Network connection failed",
        *,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        if status_code is not None:
            ctx = ErrorContext(
                operation=ctx.operation,
                input_value=ctx.input_value,
                status_code=status_code,
                suggestion=ctx.suggestion,
                metadata=ctx.metadata,
            )
        super().__init__(message, context=ctx, kind=ErrorKind.NETWORK_ERROR)

    @property
    def status_code(self) -> int | None:
        return self.context.status_code


# =============================================================================
# Data Errors
# =============================================================================

class DataError(PhotoSearchError):
    """Base class for response data errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        kind: ErrorKind = ErrorKind.DECODE_ERROR,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.DATA,
            kind=kind,
        )


class DecodeError(DataError):
    """Raised when a response body does not match the expected schema."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        full_msg = f"Decode error: {message}"
        if source:
            full_msg = f"Decode error ({source}): {message}"
        super().__init__(full_msg, context=context, kind=ErrorKind.DECODE_ERROR)


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(PhotoSearchError):
    """Raised for missing or invalid settings."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
        )


def error_kind_of(error: BaseException) -> ErrorKind:
    """
    Map any exception to the ErrorKind recorded in pipeline state.

    Anything that is not a tagged PhotoSearchError counts as a transport
    failure: the request did not produce a usable response.
    """
    if isinstance(error, PhotoSearchError) and error.kind is not None:
        return error.kind
    return ErrorKind.NETWORK_ERROR
