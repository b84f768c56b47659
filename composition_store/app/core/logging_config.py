"""
Logging setup shared by the API and the ``run.py`` launcher.

``setup_logging`` attaches this project's handlers to the root logger
and puts uvicorn's own loggers on the same level, so request logs,
store logs and startup failures all come out through one formatter.
Handlers are named; calling it again replaces them instead of
stacking duplicates.
"""

import logging
from pathlib import Path
from typing import List

from .config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER = "composition_store.console"
FILE_HANDLER = "composition_store.file"

# Uvicorn logs through these; with ``log_config=None`` they propagate to root.
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def resolve_level(name: str) -> int:
    """Map a level name such as ``"debug"`` to its number, ``INFO`` if unknown."""
    level = logging.getLevelName((name or "").upper())
    return level if isinstance(level, int) else logging.INFO


def _build_handlers(settings: Settings) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    console = logging.StreamHandler()
    console.set_name(CONSOLE_HANDLER)
    handlers: List[logging.Handler] = [console]
    if settings.log_file:
        file_handler = logging.FileHandler(Path(settings.log_file).resolve(), encoding="utf-8")
        file_handler.set_name(FILE_HANDLER)
        handlers.append(file_handler)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(settings: Settings) -> int:
    """Configure the root and uvicorn loggers from ``settings``.

    Returns the numeric level that was applied.
    """
    level = resolve_level(settings.log_level)
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() in (CONSOLE_HANDLER, FILE_HANDLER):
            root.removeHandler(handler)
            handler.close()
    for handler in _build_handlers(settings):
        root.addHandler(handler)
    root.setLevel(level)

    for name in UVICORN_LOGGERS:
        logging.getLogger(name).setLevel(level)
    return level
