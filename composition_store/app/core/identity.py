"""
Identity strategies for compositions.

A strategy decides how a composition acquires its address.  Two
interchangeable policies exist and one is selected per deployment:

* :class:`OpaqueCodePolicy` accepts a caller‑chosen code, normalises it
  to upper case and uses it as a text primary key.  Saving under an
  existing code replaces the stored row (upsert).
* :class:`SequentialIdPolicy` ignores any caller‑supplied address and
  lets SQLite assign the next integer through ``AUTOINCREMENT``, which
  never reuses an id, even after deletes.

The store is written once against :class:`IdentityStrategy` and asks
the strategy for the column definition, for validation of incoming
addresses and for minting of new ones.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Union

from .exceptions import MissingIdentity, StartupFailure

Address = Union[str, int]

# Largest value SQLite can store in an INTEGER column.
MAX_SEQUENTIAL_ID = 2**63 - 1


def is_utf8(text: str) -> bool:
    """Return whether ``text`` can be stored, i.e. holds no lone surrogates."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class IdentityStrategy(ABC):
    """Abstract addressing policy used by the composition store."""

    #: Short name used in configuration and reported by ``/health``.
    name: str = ""

    #: Column definition of the ``id`` column in the ``compositions`` table.
    id_column: str = ""

    #: Whether ``mint`` returns the address or the database assigns it.
    store_assigned: bool = False

    #: Whether saving under an existing address replaces the row.
    upserts: bool = False

    @abstractmethod
    def validate(self, raw: Any) -> Address:
        """Normalise an address received from a caller.

        Raises :class:`MissingIdentity` when the value is absent or
        cannot be an address under this policy.
        """

    @abstractmethod
    def mint(self, raw: Any = None) -> Optional[Address]:
        """Return the address a new composition is saved under.

        ``None`` means the database assigns the address during the
        insert.
        """


class OpaqueCodePolicy(IdentityStrategy):
    """Caller‑chosen, case‑normalised string codes."""

    name = "code"
    id_column = "id TEXT PRIMARY KEY"
    store_assigned = False
    upserts = True

    def validate(self, raw: Any) -> str:
        if raw is None:
            raise MissingIdentity("Composition id is required")
        code = str(raw).strip().upper()
        if not code:
            raise MissingIdentity("Composition id is required")
        if not is_utf8(code):
            raise MissingIdentity(f"Composition id is not valid UTF-8: {code!r}")
        return code

    def mint(self, raw: Any = None) -> str:
        # Codes are never invented by the store; the caller chooses them.
        return self.validate(raw)


class SequentialIdPolicy(IdentityStrategy):
    """Store‑assigned, strictly increasing integer ids."""

    name = "sequential"
    id_column = "id INTEGER PRIMARY KEY AUTOINCREMENT"
    store_assigned = True
    upserts = False

    def validate(self, raw: Any) -> int:
        if raw is None or isinstance(raw, bool):
            raise MissingIdentity("Composition id is required")
        try:
            value = int(str(raw).strip())
        except ValueError:
            raise MissingIdentity(f"Composition id must be an integer, got {raw!r}")
        if not 1 <= value <= MAX_SEQUENTIAL_ID:
            raise MissingIdentity(f"Composition id out of range: {value}")
        return value

    def mint(self, raw: Any = None) -> None:
        return None


_STRATEGIES = {
    OpaqueCodePolicy.name: OpaqueCodePolicy,
    SequentialIdPolicy.name: SequentialIdPolicy,
}


def get_strategy(name: str) -> IdentityStrategy:
    """Instantiate the strategy registered under ``name``.

    Raises :class:`StartupFailure` for an unknown name.
    """
    key = (name or "").strip().lower()
    try:
        return _STRATEGIES[key]()
    except KeyError:
        choices = ", ".join(sorted(_STRATEGIES))
        raise StartupFailure(f"Unknown identity strategy {name!r}; expected one of: {choices}")
