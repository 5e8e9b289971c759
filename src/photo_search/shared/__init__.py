"""
Shared kernel for Photo Search.

Provides:
- Unified exception hierarchy and ErrorKind tags
- Async utilities (debouncing, task cancellation)
- Observable signal primitives
- Runtime settings
"""

from .async_utils import Debouncer, cancel_and_wait
from .exceptions import (
    APIError,
    ConfigurationError,
    DataError,
    DecodeError,
    EncodeError,
    ErrorCategory,
    ErrorContext,
    ErrorKind,
    ErrorSeverity,
    NetworkError,
    PhotoSearchError,
    error_kind_of,
)
from .settings import PhotoSearchSettings
from .signals import StateSubject, Subscription

__all__ = [
    # Exceptions
    "PhotoSearchError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorKind",
    "EncodeError",
    "APIError",
    "NetworkError",
    "DataError",
    "DecodeError",
    "ConfigurationError",
    "error_kind_of",
    # Async utilities
    "Debouncer",
    "cancel_and_wait",
    # Signals
    "StateSubject",
    "Subscription",
    # Settings
    "PhotoSearchSettings",
]
