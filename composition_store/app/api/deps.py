"""
Shared FastAPI dependencies.

The composition store is built once in ``create_app`` and kept on
``app.state``; handlers receive it through ``get_store`` so tests can
substitute their own with ``app.dependency_overrides``.
"""

from fastapi import Request

from composition_store.app.services.composition_service import CompositionStore


def get_store(request: Request) -> CompositionStore:
    """Return the composition store attached to the running application."""
    return request.app.state.store
