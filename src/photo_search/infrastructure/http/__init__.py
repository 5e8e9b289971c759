"""
HTTP infrastructure.

Usage:
    from photo_search.infrastructure.http import BaseAPIClient
"""

from .base_client import BaseAPIClient

__all__ = ["BaseAPIClient"]
