"""
Repository adapters.

``build_repository`` picks the adapter named by the settings.  It is
called once, by the application factory, and the resulting instance is
injected into ``OrderService``; nothing downstream branches on which
adapter is in use.
"""

import logging

from orders_api.app.core.config import Settings
from orders_api.app.repositories.base import (  # noqa: F401
    OrderConflict,
    OrderNotFound,
    OrderRepository,
    RepositoryError,
    StorageUnavailable,
)
from orders_api.app.repositories.memory import InMemoryOrderRepository
from orders_api.app.repositories.sqlite import SqliteOrderRepository

logger = logging.getLogger(__name__)

BACKENDS = ("memory", "sqlite")


def build_repository(settings: Settings) -> OrderRepository:
    """Construct the repository selected by ``settings.repository_backend``.

    Raises ``ValueError`` for an unknown backend, or for ``sqlite``
    without a ``database_url``.
    """
    backend = settings.repository_backend
    if backend == "memory":
        logger.info("Using in-memory order repository")
        return InMemoryOrderRepository()
    if backend == "sqlite":
        if not settings.database_url:
            raise ValueError("REPOSITORY_BACKEND=sqlite requires DATABASE_URL")
        return SqliteOrderRepository(
            settings.database_url,
            pool_size=settings.db_pool_size,
            timeout=settings.db_timeout_seconds,
        )
    raise ValueError(f"unknown repository backend {backend!r}; expected one of {', '.join(BACKENDS)}")
