"""
SQLite database integration and schema guard.

This module provides the ``Database`` handle that is created once per
process and passed explicitly to the composition store, plus
``init_db`` which makes sure the ``compositions`` table exists before
any request is accepted.  SQLite is used as a lightweight embedded
database; every store operation is a single statement and relies on
SQLite's own locking for isolation.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .exceptions import StartupFailure
from .identity import IdentityStrategy

logger = logging.getLogger(__name__)

# Millisecond precision keeps list ordering stable for rows saved in the
# same second.
CREATED_AT_DEFAULT = "(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))"


def resolve_database_path(db_url: str) -> str:
    """Compute the path to the SQLite database file.

    If ``db_url`` is an absolute path, use it directly.  Otherwise
    resolve it relative to the project root.
    """
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


class Database:
    """Long‑lived handle on the SQLite file holding compositions.

    The handle owns the location and connection parameters; each
    operation opens a short‑lived connection so that concurrent
    requests served from different threads never share one.
    """

    def __init__(self, path: str, timeout: float = 5.0) -> None:
        self.path = path
        self.timeout = timeout

    def connect(self) -> sqlite3.Connection:
        """Create and return a new SQLite connection.

        The connection uses a row factory to access columns by name.
        Timestamps are returned exactly as stored (ISO text).
        """
        conn = sqlite3.connect(self.path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, commit on success and always close the connection."""
        conn = self.connect()
        try:
            yield conn.cursor()
            conn.commit()
        finally:
            conn.close()

    def __repr__(self) -> str:
        return f"Database(path={self.path!r})"


def init_db(database: Database, strategy: IdentityStrategy) -> None:
    """Create the ``compositions`` table if it does not exist.

    The ``id`` column follows the configured identity strategy.  Any
    failure (unwritable directory, corrupt file, locked database) is
    raised as :class:`StartupFailure` so that the process refuses to
    start instead of accepting requests it cannot persist.
    """
    ddl = f"""
        CREATE TABLE IF NOT EXISTS compositions (
            {strategy.id_column},
            name TEXT NOT NULL CHECK (name <> ''),
            tracks TEXT NOT NULL CHECK (tracks <> ''),
            created_at TEXT NOT NULL DEFAULT {CREATED_AT_DEFAULT}
        )
    """
    try:
        with database.cursor() as cursor:
            cursor.execute(ddl)
            # Touch the table so a file that is not a database fails here.
            cursor.execute("SELECT COUNT(*) AS total FROM compositions").fetchone()
    except (sqlite3.Error, OSError) as exc:
        logger.error("Schema guard failed for %s: %s", database.path, exc)
        raise StartupFailure(f"Cannot initialise database at {database.path}: {exc}") from exc
    logger.info(
        "Database ready at %s (identity strategy: %s)", database.path, strategy.name
    )
