"""Composition Store API client.

This module defines a small client wrapper around the Composition
Store REST API.  It uses the ``requests`` library internally and
exposes one method per operation:

* :meth:`CompositionClient.save` – save a composition and return its address.
* :meth:`CompositionClient.get` – fetch a composition including its tracks.
* :meth:`CompositionClient.list` – list compositions without tracks.
* :meth:`CompositionClient.delete` – delete a composition.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is empty and ``error`` is a dictionary
with keys ``status_code`` and ``message``.  A missing composition is
reported by :meth:`get` as ``(None, None)`` rather than as an error.

Deployments using caller‑chosen codes expect the client to pick the
code; :func:`generate_code` returns a fresh one.
"""

from __future__ import annotations

import logging
import secrets
import string
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(length: int = 6) -> str:
    """Return a random upper‑case alphanumeric composition code."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


class CompositionClient:
    """Client for interacting with the composition store API."""

    def __init__(
        self,
        *,
        base_url: str,
        prefix: str = "/api/v1/compositions",
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:3000``.
            prefix: Path under which the composition routes are mounted.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per‑request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.prefix = "/" + prefix.strip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, composition_id: Any = None) -> str:
        """Return the collection URL, or the URL of a single composition."""
        url = f"{self.base_url}{self.prefix}/"
        if composition_id is not None:
            url += quote(str(composition_id), safe="")
        return url

    @staticmethod
    def _detail(response: requests.Response) -> str:
        """Extract FastAPI's ``detail`` message from an error response."""
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason or f"HTTP {response.status_code}"
        if isinstance(body, dict) and body.get("detail"):
            return str(body["detail"])
        return str(body)

    def _call(
        self,
        method: str,
        composition_id: Any = None,
        *,
        payload: Optional[Dict[str, Any]] = None,
        missing_ok: bool = False,
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Send one request to the composition routes.

        With ``missing_ok`` a 404 answer means "no such composition"
        and yields ``(None, None)`` instead of an error.
        """
        url = self._url(composition_id)
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method=method, url=url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Composition API unreachable: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

        if missing_ok and response.status_code == 404:
            return None, None
        if not response.ok:
            message = self._detail(response)
            logger.error("%s %s failed (%s): %s", method, url, response.status_code, message)
            return None, {"status_code": response.status_code, "message": message}
        if not response.content:
            return None, None
        try:
            return response.json(), None
        except ValueError:
            return None, {"status_code": response.status_code, "message": "Response body is not JSON"}

    def save(
        self, name: str, tracks: str, composition_id: Any = None
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Save a composition and return ``(id, error)``.

        ``composition_id`` is the caller‑chosen code; servers using
        sequential ids ignore it.
        """
        payload: Dict[str, Any] = {"name": name, "tracks": tracks}
        if composition_id is not None:
            payload["id"] = composition_id
        data, error = self._call("POST", payload=payload)
        if error or not isinstance(data, dict):
            return None, error
        return data.get("id"), None

    def get(self, composition_id: Any) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Fetch a composition; ``(None, None)`` when nothing is stored there."""
        return self._call("GET", composition_id, missing_ok=True)

    def list(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Retrieve all compositions, newest first, without tracks."""
        data, error = self._call("GET")
        return (data if isinstance(data, list) else []), error

    def delete(self, composition_id: Any) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """Delete a composition and return ``(deleted, error)``."""
        data, error = self._call("DELETE", composition_id)
        return bool(isinstance(data, dict) and data.get("deleted")), error
