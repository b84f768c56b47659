"""
Application package initializer.

This package contains the FastAPI application and its building
blocks: configuration and storage primitives in ``core``, pydantic
models in ``schemas``, the composition store in ``services`` and the
versioned routers in ``api``.

``create_app`` is exported rather than a module level instance so that
importing the package never opens the database.
"""

from .main import create_app  # noqa: F401
