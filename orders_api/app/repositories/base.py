"""
Repository port for orders.

``OrderRepository`` is the persistence contract the service layer
depends on.  Adapters implement it for a concrete backend; the service
never inspects which adapter it was given.

Adapters report failures only through the ``RepositoryError``
hierarchy defined here.  Backend exceptions (``sqlite3.Error`` and the
like) are translated inside the adapter and never escape it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from orders_api.app.domain.order import Order, OrderStatus


class RepositoryError(Exception):
    """Base class for errors raised by repository adapters."""


class OrderNotFound(RepositoryError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"order {order_id} not found")
        self.order_id = order_id


class OrderConflict(RepositoryError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"order {order_id} already exists")
        self.order_id = order_id


class StorageUnavailable(RepositoryError):
    """The backing store failed for infrastructure reasons (connection, timeout, I/O)."""


class OrderRepository(ABC):
    """Persistence port for :class:`Order` records.

    Every operation is atomic with respect to a single order: no caller
    can observe a partially written record.  Implementations must be
    safe to call from several threads at once.
    """

    @abstractmethod
    def insert(self, order: Order) -> None:
        """Store a new order.  Raises :class:`OrderConflict` if the id exists."""

    @abstractmethod
    def get(self, order_id: str) -> Order:
        """Return the order with ``order_id`` or raise :class:`OrderNotFound`."""

    @abstractmethod
    def list(self) -> List[Order]:
        """Return all orders in an order that is stable for this instance."""

    @abstractmethod
    def update_status(self, order_id: str, status: OrderStatus) -> Order:
        """Set the status, refresh ``updated_at`` and return the stored record.

        Raises :class:`OrderNotFound` if no such order exists.
        """

    @abstractmethod
    def delete(self, order_id: str) -> None:
        """Remove the order or raise :class:`OrderNotFound`."""

    def close(self) -> None:
        """Release resources held by the adapter.  No-op by default."""
