"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from photo_search.application.search.query_encoder import QueryEncoder
from photo_search.domain.entities.photo import Photo, SearchRequest
from photo_search.infrastructure.sources.pixabay import PixabayClient

# Short quiet window so pipeline tests run fast
FAST_DEBOUNCE = 0.05


async def drain(iterations: int = 10) -> None:
    """Let the event loop run pending callbacks and task steps."""
    for _ in range(iterations):
        await asyncio.sleep(0)


async def settle(debounce: float = FAST_DEBOUNCE) -> None:
    """Wait past one debounce window, then let dispatched tasks start."""
    await asyncio.sleep(debounce * 3)
    await drain()


# ============================================================
# Fake Gateway
# ============================================================


class FakeGateway:
    """
    In-memory SearchGateway.

    Queries listed in ``responses`` resolve immediately (a list of photos) or
    raise (an exception). Any other query blocks until the test calls
    ``resolve()`` or ``fail()`` with the call's index, so tests control the
    completion order of concurrent searches.
    """

    def __init__(self, responses: dict[str, list[Photo] | Exception] | None = None) -> None:
        self.responses = responses or {}
        self.requests: list[SearchRequest] = []
        self.cancelled: list[int] = []
        self.closed = False
        self._futures: list[asyncio.Future[list[Photo]]] = []

    @property
    def queries(self) -> list[str]:
        return [request.query for request in self.requests]

    async def search(self, request: SearchRequest) -> list[Photo]:
        index = len(self.requests)
        self.requests.append(request)
        future: asyncio.Future[list[Photo]] = asyncio.get_running_loop().create_future()
        self._futures.append(future)

        canned = self.responses.get(request.query)
        if isinstance(canned, Exception):
            future.set_exception(canned)
        elif canned is not None:
            future.set_result(list(canned))

        try:
            return await future
        except asyncio.CancelledError:
            self.cancelled.append(index)
            raise

    def resolve(self, index: int, photos: list[Photo]) -> None:
        self._futures[index].set_result(photos)

    def fail(self, index: int, error: Exception) -> None:
        self._futures[index].set_exception(error)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_gateway():
    """A FakeGateway with no canned responses."""
    return FakeGateway()


@pytest.fixture
def encoder():
    """Default QueryEncoder (200 per page, safe search, "paris" fallback)."""
    return QueryEncoder()


@pytest.fixture
def cat_photos():
    return [Photo(id=11, image_url="https://cdn.example/cat1.jpg"), Photo(id=12, image_url="https://cdn.example/cat2.jpg")]


@pytest.fixture
def dog_photos():
    return [Photo(id=21, image_url="https://cdn.example/dog1.jpg")]


# ============================================================
# Mock Pixabay API Responses
# ============================================================


@pytest.fixture
def pixabay_payload():
    """Pixabay search response trimmed to a few realistic fields."""
    return {
        "total": 4692,
        "totalHits": 500,
        "hits": [
            {
                "id": 195893,
                "pageURL": "https://pixabay.com/en/blossom-bloom-flower-195893/",
                "type": "photo",
                "tags": "blossom, bloom, flower",
                "previewURL": "https://cdn.pixabay.com/photo/2013/10/15/09/12/flower-195893_150.jpg",
                "webformatURL": "https://pixabay.com/get/35bbf209e13e39d2_640.jpg",
                "webformatWidth": 640,
                "likes": 1,
            },
            {
                "id": 73424,
                "webformatURL": "https://pixabay.com/get/73424_640.jpg",
                "user": "Josch13",
            },
        ],
    }


def make_transport(handler) -> httpx.MockTransport:
    """Wrap a request handler, recording every request it sees."""
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    transport = httpx.MockTransport(_handler)
    transport.seen = seen  # type: ignore[attr-defined]
    return transport


@pytest.fixture
def pixabay_client_factory():
    """Build PixabayClients backed by an httpx.MockTransport."""
    clients: list[PixabayClient] = []

    def _factory(handler, **kwargs) -> PixabayClient:
        transport = make_transport(handler)
        client = PixabayClient(api_key="test-key", transport=transport, **kwargs)
        client.transport = transport  # type: ignore[attr-defined]
        clients.append(client)
        return client

    return _factory
