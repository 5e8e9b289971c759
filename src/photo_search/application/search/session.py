"""
Pipeline session - scoped lifetime for one search UI.

A session owns a pipeline, the gateway it talks to, and every subscription
made through it. Leaving the ``async with`` block releases all of them
together: subscriptions are disposed, pending searches are cancelled and the
gateway's HTTP client is closed.

Usage:
    async with PipelineSession(pipeline, gateway) as session:
        session.subscribe(presenter.render)
        session.on_input("paris")
        await session.wait_idle()
"""

from __future__ import annotations

import logging

from typing_extensions import Self

from photo_search.application.search.gateway import SearchGateway
from photo_search.application.search.pipeline import ReactivePipeline, StateCallback
from photo_search.domain.entities.photo import PipelineState
from photo_search.shared.signals import Subscription

logger = logging.getLogger(__name__)


class PipelineSession:
    """Owns a pipeline, its gateway and its subscriptions."""

    def __init__(
        self,
        pipeline: ReactivePipeline,
        gateway: SearchGateway | None = None,
        *,
        owns_gateway: bool = True,
    ) -> None:
        self.pipeline = pipeline
        self._gateway = gateway
        self._owns_gateway = owns_gateway and gateway is not None
        self._subscriptions: list[Subscription] = []
        self._closed = False

    @property
    def state(self) -> PipelineState:
        return self.pipeline.state

    @property
    def subscription_count(self) -> int:
        return sum(1 for sub in self._subscriptions if not sub.disposed)

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, callback: StateCallback) -> Subscription:
        """Subscribe to snapshots for the lifetime of this session."""
        subscription = self.pipeline.subscribe(callback)
        self._subscriptions.append(subscription)
        return subscription

    def on_input(self, text: str) -> None:
        self.pipeline.on_input(text)

    async def wait_idle(self) -> None:
        await self.pipeline.wait_idle()

    async def close(self) -> None:
        """Release every resource owned by the session. Idempotent."""
        if self._closed:
            return
        self._closed = True

        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()

        await self.pipeline.close()

        if self._owns_gateway and self._gateway is not None:
            await self._gateway.close()
        logger.debug("Pipeline session closed")

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
