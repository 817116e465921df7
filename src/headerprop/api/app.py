"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from headerprop import __version__
from headerprop.api.routes import admin, events, health
from headerprop.core.config import AppSettings
from headerprop.core.logging import configure_logging
from headerprop.core.protocols import ICacheBackend, IObjectStore
from headerprop.header.cache import HeaderStatusStore
from headerprop.orchestration.orchestrator import PropagationOrchestrator
from headerprop.persistence import create_persistence


def create_app(settings: AppSettings | None = None, *,
               object_store: IObjectStore | None = None,
               cache: ICacheBackend | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Backends not passed in are built from settings at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize and tear down application resources."""
        resolved = settings or AppSettings()
        configure_logging(resolved.log_level)

        store, cache_backend = object_store, cache
        if store is None or cache_backend is None:
            default_store, default_cache = create_persistence(resolved)
            store = store or default_store
            cache_backend = cache_backend or default_cache

        header_cache = HeaderStatusStore(cache_backend)
        app.state.settings = resolved
        app.state.cache_backend = cache_backend
        app.state.header_cache = header_cache
        app.state.orchestrator = PropagationOrchestrator.from_settings(
            resolved, store=store, cache=header_cache,
        )
        yield

    app = FastAPI(
        title="Header Propagation Service",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(health.router)
    app.include_router(events.router)
    app.include_router(admin.router, prefix="/admin")
    return app
