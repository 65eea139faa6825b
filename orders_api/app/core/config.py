"""
Configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for every field so the
service starts with an in‑memory store when nothing is configured.
Settings are consumed once at startup by the application factory; the
domain, repositories and services never read the environment
themselves.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _default_backend() -> str:
    # A configured database URL implies the durable store unless the
    # backend is named explicitly.
    explicit = os.getenv("REPOSITORY_BACKEND")
    if explicit:
        return explicit.strip().lower()
    return "sqlite" if os.getenv("DATABASE_URL") else "memory"


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Orders API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "0.1.0"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    server_host: str = field(default_factory=lambda: os.getenv("SERVER_HOST", "0.0.0.0"))
    server_port: int = field(default_factory=lambda: int(os.getenv("SERVER_PORT", "3000")))

    # Connection string for the durable store, e.g. ``sqlite://orders.db``.
    # Bare filesystem paths are accepted as well.
    database_url: Optional[str] = field(default_factory=lambda: os.getenv("DATABASE_URL") or None)

    # ``memory`` or ``sqlite``.  Chosen once at startup and fixed for the
    # lifetime of the process.
    repository_backend: str = field(default_factory=_default_backend)

    # Number of pooled SQLite connections and how long (in seconds) an
    # operation may wait for one, or for a locked database, before it
    # fails with ``StorageUnavailable``.
    db_pool_size: int = field(default_factory=lambda: int(os.getenv("DB_POOL_SIZE", "5")))
    db_timeout_seconds: float = field(default_factory=lambda: float(os.getenv("DB_TIMEOUT_SECONDS", "5")))


# Instantiate settings once so other modules can import it.  Tests build
# their own ``Settings`` instances instead of mutating this one.
settings = Settings()
