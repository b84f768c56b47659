"""Entry point for the Composition Store API.

The process starts in two phases.  First the schema guard creates or
verifies the ``compositions`` table; if that fails the process exits
with status 1 before anything listens on a socket.  Only then is the
FastAPI application served with Uvicorn.

Configuration is read from environment variables (see
``composition_store.app.core.config``).

Usage:
    python run.py
"""
import asyncio
import logging
import sys

from uvicorn import Config, Server

from composition_store.app.core.config import settings
from composition_store.app.core.db import init_db
from composition_store.app.core.exceptions import StartupFailure
from composition_store.app.core.logging_config import resolve_level, setup_logging
from composition_store.app.main import build_store, create_app

logger = logging.getLogger("run")


def bootstrap():
    """Build the store and run the schema guard.

    Returns the ready store; raises ``StartupFailure`` otherwise.
    """
    store = build_store(settings)
    init_db(store.database, store.strategy)
    return store


async def serve(store) -> None:
    """Serve the API on ``settings.host``/``settings.port``."""
    app = create_app(settings, store=store)
    # Uvicorn keeps the handlers installed by setup_logging.
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=resolve_level(settings.log_level),
    )
    server = Server(config)
    await server.serve()


def main() -> int:
    setup_logging(settings)
    try:
        store = bootstrap()
    except StartupFailure as exc:
        logger.critical("Refusing to start: %s", exc)
        return 1
    logger.info("Server is running at http://%s:%s", settings.host, settings.port)
    asyncio.run(serve(store))
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
