"""
Reactive search pipeline.

Turns a raw stream of search-text changes into an ordered sequence of
remote searches and state snapshots:

    on_input(text)
        → debounce (only the last text of a burst survives the quiet window)
        → dedupe   (same text as the last dispatched request is dropped)
        → guard    (blank text clears the results, nothing is dispatched)
        → dispatch (encode, assign the next request id, start the search task)
    on_response(request_id, result)
        → reconcile (only the response to the live request touches state)

All state mutation happens on the event loop that owns the pipeline.
Searches run as concurrent tasks; their completion is delivered through task
done-callbacks on that same loop, so reconciliations never interleave. A
response that arrives for a superseded request is dropped, which is what
keeps a slow, older search from overwriting a newer one.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable, Sequence

from typing_extensions import Self

from photo_search.application.search.gateway import SearchGateway
from photo_search.application.search.query_encoder import QueryEncoder
from photo_search.domain.entities.photo import Photo, PipelineState, SearchRequest
from photo_search.shared.async_utils import Debouncer, cancel_and_wait
from photo_search.shared.exceptions import EncodeError, ErrorKind, PhotoSearchError, error_kind_of
from photo_search.shared.settings import DEFAULT_DEBOUNCE_SECONDS
from photo_search.shared.signals import StateSubject, Subscription

logger = logging.getLogger(__name__)

# What a search task resolves to: the photos, or the error the gateway raised
SearchOutcome = Sequence[Photo] | Exception

StateCallback = Callable[[PipelineState], None]


class ReactivePipeline:
    """
    Debounced, deduplicated, ordering-safe search pipeline.

    Args:
        encoder: Builds SearchRequests from text
        gateway: Executes requests (PixabayClient in production)
        debounce_seconds: Quiet window before a text is acted on
        on_state_change: Optional callback receiving every snapshot
        cancel_superseded: Also cancel the search task of a request once a
            newer one is dispatched. Stale responses are discarded either way.

    Example:
        pipeline = ReactivePipeline(QueryEncoder(), client, on_state_change=render)
        pipeline.on_input("pa")
        pipeline.on_input("paris")
        await pipeline.wait_idle()
    """

    def __init__(
        self,
        encoder: QueryEncoder,
        gateway: SearchGateway,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        on_state_change: StateCallback | None = None,
        cancel_superseded: bool = False,
    ) -> None:
        self._encoder = encoder
        self._gateway = gateway
        self._cancel_superseded = cancel_superseded

        self._state = PipelineState()
        self._subject: StateSubject[PipelineState] = StateSubject()
        self._debouncer: Debouncer[str] = Debouncer(debounce_seconds, self._on_settled)

        self._search_text = ""
        self._last_dispatched_text: str | None = None
        self._live_request_id: int | None = None
        self._live_query = ""
        self._in_flight: dict[int, asyncio.Task[SearchOutcome]] = {}
        self._closed = False

        if on_state_change is not None:
            self._subject.subscribe(on_state_change)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> PipelineState:
        """Current snapshot."""
        return self._state

    @property
    def search_text(self) -> str:
        """Latest text received by ``on_input``."""
        return self._search_text

    @property
    def debounce_seconds(self) -> float:
        return self._debouncer.delay

    @property
    def in_flight(self) -> int:
        """Number of search tasks still running."""
        return len(self._in_flight)

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, callback: StateCallback) -> Subscription:
        """Register for snapshots; dispose the returned handle to stop."""
        return self._subject.subscribe(callback)

    # ------------------------------------------------------------------
    # Inbound events
    # ------------------------------------------------------------------

    def on_input(self, text: str) -> None:
        """Record a text change. Returns immediately; must run on the loop thread."""
        if self._closed:
            logger.warning("Input ignored: pipeline is closed")
            return
        self._search_text = text
        self._debouncer.push(text)

    def on_response(self, request_id: int, result: SearchOutcome) -> None:
        """
        Reconcile the outcome of request ``request_id`` into the state.

        Only the live request (the most recently dispatched one, unless a
        blank input or encode failure superseded it) may change the state;
        anything else is dropped without a notification.
        """
        if self._closed:
            return
        if request_id != self._live_request_id:
            logger.debug(
                f"Discarding stale response for request {request_id} "
                f"(live request: {self._live_request_id})"
            )
            return

        if isinstance(result, Exception):
            kind = error_kind_of(result)
            if isinstance(result, PhotoSearchError):
                level, details = result.log_level, result.to_dict()
            else:
                level, details = logging.ERROR, {"error": str(result)}
            logger.log(level, f"Search {request_id} for {self._live_query!r} failed ({kind.value}): {details}")
            self._update(last_error=kind)
            return

        photos = tuple(result)
        logger.debug(f"Search {request_id} for {self._live_query!r} returned {len(photos)} photos")
        self._update(
            current_results=photos,
            last_error=None,
            latest_completed_id=request_id,
            query=self._live_query,
        )

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def _on_settled(self, text: str) -> None:
        if text == self._last_dispatched_text:
            logger.debug(f"Dropping duplicate query {text!r}")
            return

        if not text.strip():
            self._clear()
            return
        self._dispatch(text)

    def _clear(self) -> None:
        self._supersede()
        if self._state.is_empty and not self._state.query:
            return
        logger.debug("Search text cleared; resetting results")
        self._update(current_results=(), last_error=None, query="")

    def _dispatch(self, text: str) -> None:
        try:
            request = self._encoder.encode(text)
        except EncodeError as e:
            logger.log(e.log_level, f"Not dispatching {text!r}: {e.to_dict()}")
            self._supersede()
            self._update(last_error=ErrorKind.ENCODE_ERROR)
            return

        self._supersede()
        self._last_dispatched_text = text
        request_id = self._state.latest_dispatched_id + 1
        self._live_request_id = request_id
        self._live_query = request.query
        self._state = self._state.evolve(latest_dispatched_id=request_id)

        task = asyncio.get_running_loop().create_task(
            self._run_search(request),
            name=f"photo-search-{request_id}",
        )
        self._in_flight[request_id] = task
        task.add_done_callback(functools.partial(self._on_task_done, request_id))
        logger.debug(f"Dispatched search {request_id} for {request.query!r} ({self.in_flight} in flight)")

    def _supersede(self) -> None:
        """Retire the live request so its response will be discarded."""
        previous = self._live_request_id
        self._live_request_id = None
        if previous is None or not self._cancel_superseded:
            return
        task = self._in_flight.get(previous)
        if task is not None and not task.done():
            logger.debug(f"Cancelling superseded search {previous}")
            task.cancel()

    async def _run_search(self, request: SearchRequest) -> SearchOutcome:
        try:
            return await self._gateway.search(request)
        except PhotoSearchError as e:
            return e
        except Exception as e:
            logger.exception(f"Unexpected gateway failure for {request.query!r}")
            return e

    def _on_task_done(self, request_id: int, task: asyncio.Task[SearchOutcome]) -> None:
        self._in_flight.pop(request_id, None)
        if task.cancelled():
            logger.debug(f"Search {request_id} cancelled")
            return
        self.on_response(request_id, task.result())

    def _update(self, **changes) -> None:
        self._state = self._state.evolve(**changes)
        self._subject.emit(self._state)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def wait_idle(self) -> None:
        """Wait until no text is being debounced and no search is in flight."""
        while self._debouncer.pending or self._in_flight:
            if self._debouncer.pending:
                await self._debouncer.wait()
            tasks = list(self._in_flight.values())
            if tasks:
                await asyncio.wait(tasks)
            await asyncio.sleep(0)

    async def close(self) -> None:
        """Stop accepting input, cancel pending work and drop subscribers."""
        if self._closed:
            return
        self._closed = True
        self._debouncer.cancel()
        self._live_request_id = None
        await cancel_and_wait(list(self._in_flight.values()))
        self._in_flight.clear()
        self._subject.clear()
        logger.debug("Pipeline closed")

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
