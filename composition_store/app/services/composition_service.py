"""
Service layer for compositions.

``CompositionStore`` is the CRUD engine over the ``compositions``
table.  It is constructed with a :class:`Database` handle and an
:class:`IdentityStrategy`, so the same code serves both addressing
schemes:

* under the opaque‑code strategy ``save`` is an upsert keyed by the
  caller's code; replaying the same payload leaves the same row, and
  the original ``created_at`` is kept on replace;
* under the sequential strategy ``save`` always inserts and returns
  the id assigned by SQLite.

Every operation is a single parameterized statement.  The ``tracks``
payload is passed through untouched in both directions.  Any
``sqlite3.Error`` is re‑raised as :class:`StoreUnavailable`; the store
never retries.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from composition_store.app.core.db import Database
from composition_store.app.core.exceptions import (
    MissingFields,
    StoreUnavailable,
    UnsupportedOperation,
)
from composition_store.app.core.identity import Address, IdentityStrategy, is_utf8
from composition_store.app.schemas.composition import CompositionRead, CompositionSummary

logger = logging.getLogger(__name__)


class CompositionStore:
    """Persist, read, list and delete compositions."""

    def __init__(self, database: Database, strategy: IdentityStrategy) -> None:
        self.database = database
        self.strategy = strategy

    def save(self, name: Any, tracks: Any, composition_id: Any = None) -> Address:
        """Save a composition according to the configured strategy.

        Returns the address of the stored row.
        """
        if self.strategy.upserts:
            return self.upsert(composition_id, name, tracks)
        return self.insert(name, tracks)

    def upsert(self, composition_id: Any, name: Any, tracks: Any) -> Address:
        """Insert or replace the composition stored under ``composition_id``.

        At most one row per address survives.  ``created_at`` keeps the
        value from the first insert.
        """
        if not self.strategy.upserts:
            raise UnsupportedOperation(
                f"Upsert is not available with the {self.strategy.name} identity strategy"
            )
        address = self.strategy.mint(composition_id)
        name, tracks = self._require_payload(name, tracks)
        with self._cursor() as cursor:
            cursor.execute(
                "INSERT INTO compositions (id, name, tracks) VALUES (?, ?, ?)"
                " ON CONFLICT(id) DO UPDATE SET name = excluded.name, tracks = excluded.tracks",
                (address, name, tracks),
            )
        logger.info("Saved composition %s", address)
        return address

    def insert(self, name: Any, tracks: Any) -> Address:
        """Create a new composition and return its store‑assigned id.

        Not idempotent: identical payloads produce distinct rows.
        """
        if not self.strategy.store_assigned:
            raise UnsupportedOperation(
                f"Insert without an id is not available with the {self.strategy.name} identity strategy"
            )
        name, tracks = self._require_payload(name, tracks)
        with self._cursor() as cursor:
            cursor.execute(
                "INSERT INTO compositions (name, tracks) VALUES (?, ?)",
                (name, tracks),
            )
            composition_id = cursor.lastrowid
        logger.info("Created composition %s", composition_id)
        return composition_id

    def get(self, composition_id: Any) -> Optional[CompositionRead]:
        """Retrieve a single composition, or ``None`` if the address is unused."""
        address = self.strategy.validate(composition_id)
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT id, name, tracks, created_at FROM compositions WHERE id = ?",
                (address,),
            ).fetchone()
        if not row:
            return None
        return CompositionRead(
            id=row["id"],
            name=row["name"],
            tracks=row["tracks"],
            created_at=row["created_at"],
        )

    def list(self) -> List[CompositionSummary]:
        """Return every composition without its tracks, newest first."""
        with self._cursor() as cursor:
            rows = cursor.execute(
                "SELECT id, name, created_at FROM compositions"
                " ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
        return [
            CompositionSummary(id=row["id"], name=row["name"], created_at=row["created_at"])
            for row in rows
        ]

    def delete(self, composition_id: Any) -> bool:
        """Delete a composition by address.

        Returns ``True`` if a row was deleted, ``False`` if none existed.
        """
        address = self.strategy.validate(composition_id)
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM compositions WHERE id = ?", (address,))
            affected = cursor.rowcount
        if affected:
            logger.info("Deleted composition %s", address)
        return affected > 0

    @staticmethod
    def _require_payload(name: Any, tracks: Any) -> tuple[str, str]:
        # ``tracks`` is opaque: any non-empty string is kept, whitespace included.
        missing = []
        if not isinstance(name, str) or not name.strip():
            missing.append("name")
        if not isinstance(tracks, str) or tracks == "":
            missing.append("tracks")
        if missing:
            raise MissingFields(f"Missing required fields: {', '.join(missing)}")
        invalid = [
            field for field, value in (("name", name), ("tracks", tracks)) if not is_utf8(value)
        ]
        if invalid:
            raise MissingFields(f"Fields are not valid UTF-8: {', '.join(invalid)}")
        return name, tracks

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor for one statement, translating backend failures."""
        try:
            with self.database.cursor() as cursor:
                yield cursor
        except sqlite3.Error as exc:
            logger.error("Composition store statement failed: %s", exc)
            raise StoreUnavailable(str(exc)) from exc
