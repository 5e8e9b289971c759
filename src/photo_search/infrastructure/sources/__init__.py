"""
Remote search sources.

Each source implements the SearchGateway port from
``photo_search.application.search.gateway``.
"""

from .pixabay import PixabayClient, PixabayHit, PixabayResponse

__all__ = ["PixabayClient", "PixabayHit", "PixabayResponse"]
