"""
Main entrypoint for the Composition Store API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  ``create_app`` builds the database
handle, the identity strategy and the composition store from
``Settings`` and wires them into the app.  Run it with uvicorn's
factory mode::

    uvicorn composition_store.app.main:create_app --factory

or through ``run.py``, which runs the schema guard before the server
starts listening.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import Database, init_db, resolve_database_path
from .core.identity import get_strategy
from .core.logging_config import setup_logging
from .services.composition_service import CompositionStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> CompositionStore:
    """Create the composition store described by ``settings``.

    Raises ``StartupFailure`` for an unknown identity strategy.
    """
    strategy = get_strategy(settings.identity_strategy)
    database = Database(
        resolve_database_path(settings.database_url), timeout=settings.database_timeout
    )
    return CompositionStore(database, strategy)


def create_app(settings: Optional[Settings] = None, store: Optional[CompositionStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the environment‑derived
        module level settings.
    store : Optional[CompositionStore]
        Pre‑built store, e.g. one over a temporary database in tests.
        Built from ``settings`` when omitted.

    Returns
    -------
    FastAPI
        A configured FastAPI instance.  The schema guard runs during
        the lifespan startup phase; if it fails the server never
        starts accepting requests.
    """
    settings = settings or default_settings
    setup_logging(settings)

    store = store or build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting %s v%s", settings.project_name, settings.api_version)
        init_db(store.database, store.strategy)
        yield
        logger.info("Shutting down...")

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    origins = settings.allowed_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/health")
    def health_check() -> dict:
        return {"status": "healthy", "identity": store.strategy.name}

    # Mounted last so API routes take precedence over files.
    if settings.static_dir:
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app
