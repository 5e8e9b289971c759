"""
Application DI Container (dependency-injector).

Centralizes creation of the encoder, the search gateway and pipeline
sessions from one configuration source.

Usage::

    from photo_search.container import ApplicationContainer

    container = ApplicationContainer()
    container.config.from_dict(PhotoSearchSettings.from_env().to_dict())

    session = container.session(on_state_change=presenter.render)

    # In tests, override any provider:
    container.gateway.override(providers.Object(fake_gateway))
"""

from __future__ import annotations

import logging

from dependency_injector import containers, providers

from photo_search.shared.settings import PhotoSearchSettings

logger = logging.getLogger(__name__)


def _create_encoder(per_page: int, safe_search: bool, fallback_query: str | None) -> object:
    """Lazy factory for QueryEncoder (avoids top-level import)."""
    from photo_search.application.search.query_encoder import QueryEncoder

    return QueryEncoder(per_page=per_page, safe_search=safe_search, fallback_query=fallback_query)


def _create_gateway(api_key: str | None, base_url: str, timeout: float) -> object:
    """Lazy factory for PixabayClient."""
    from photo_search.infrastructure.sources.pixabay import PixabayClient
    from photo_search.shared.exceptions import ConfigurationError

    if not api_key:
        raise ConfigurationError("PIXABAY_API_KEY is not set; pass --api-key or export PIXABAY_API_KEY")
    return PixabayClient(api_key=api_key, base_url=base_url, timeout=timeout)


def _create_session(encoder: object, gateway: object, debounce_seconds: float, **kwargs) -> object:
    """Factory for a PipelineSession owning a fresh pipeline."""
    from photo_search.application.search.pipeline import ReactivePipeline
    from photo_search.application.search.session import PipelineSession

    pipeline = ReactivePipeline(encoder, gateway, debounce_seconds=debounce_seconds, **kwargs)
    return PipelineSession(pipeline, gateway)


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for Photo Search.

    Manages:
    - ``encoder``: stateless QueryEncoder (Singleton)
    - ``gateway``: Pixabay search client (Factory; each session owns and
      closes its own client)
    - ``session``: a new PipelineSession per call (Factory); extra keyword
      arguments such as ``on_state_change`` reach ReactivePipeline
    """

    config = providers.Configuration()

    encoder = providers.Singleton(
        _create_encoder,
        per_page=config.per_page,
        safe_search=config.safe_search,
        fallback_query=config.fallback_query,
    )

    gateway = providers.Factory(
        _create_gateway,
        api_key=config.api_key,
        base_url=config.base_url,
        timeout=config.timeout,
    )

    session = providers.Factory(
        _create_session,
        encoder=encoder,
        gateway=gateway,
        debounce_seconds=config.debounce_seconds,
    )


def create_container(settings: PhotoSearchSettings | None = None) -> ApplicationContainer:
    """Build a container configured from ``settings`` (default: environment)."""
    settings = settings or PhotoSearchSettings.from_env()
    container = ApplicationContainer()
    container.config.from_dict(settings.to_dict())
    logger.debug(
        f"Container configured: base_url={settings.base_url}, per_page={settings.per_page}, "
        f"debounce={settings.debounce_seconds}s"
    )
    return container


__all__ = ["ApplicationContainer", "create_container"]
