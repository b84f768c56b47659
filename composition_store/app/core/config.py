"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts with no configuration at all.  Tests and embedding
applications may construct ``Settings`` explicitly and pass it to
``create_app``.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Composition Store API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database file.  A relative path is resolved
    # relative to the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "compositions.db")

    # Seconds a statement waits on a locked database before giving up.
    database_timeout: float = float(os.getenv("DATABASE_TIMEOUT", "5.0"))

    # Addressing scheme for compositions: ``code`` for caller‑chosen
    # opaque codes with upsert, ``sequential`` for store‑assigned
    # integer ids.  Chosen per deployment, never per request.
    identity_strategy: str = os.getenv("IDENTITY_STRATEGY", "sequential")

    # Comma‑separated list of allowed origins.  Empty disables the CORS
    # middleware entirely.  Example: CORS_ORIGINS="http://localhost:5173".
    cors_origins: str = os.getenv("CORS_ORIGINS", "")

    # Optional directory with the browser client.  When set, its files
    # are served at ``/`` with ``index.html`` as the default document.
    static_dir: str = os.getenv("STATIC_DIR", "")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    def allowed_origins(self) -> list[str]:
        """Return ``cors_origins`` split into a list of non‑empty entries."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class definition time, environment variables
# should be set before importing this module.
settings = Settings()
