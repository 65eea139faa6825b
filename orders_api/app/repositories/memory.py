"""
In‑memory order repository.

Orders live in a plain ``dict`` owned by the repository instance and
guarded by a single re-entrant lock.  Writers are serialized globally;
readers hold the lock only long enough to copy what they need, so a
read never waits on more than one in-flight write.  Stored orders are
frozen models, so handing them out does not expose internal state.

Contents are lost when the process exits.  Intended for development
and tests.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List

from orders_api.app.domain.order import Order, OrderStatus
from orders_api.app.repositories.base import OrderConflict, OrderNotFound, OrderRepository

logger = logging.getLogger(__name__)


class InMemoryOrderRepository(OrderRepository):
    """Thread-safe, volatile implementation of :class:`OrderRepository`."""

    def __init__(self) -> None:
        # dicts preserve insertion order, which is the listing order.
        self._orders: Dict[str, Order] = {}
        self._lock = threading.RLock()

    def insert(self, order: Order) -> None:
        with self._lock:
            if order.id in self._orders:
                raise OrderConflict(order.id)
            self._orders[order.id] = order
        logger.debug("Stored order %s in memory", order.id)

    def get(self, order_id: str) -> Order:
        with self._lock:
            order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    def list(self) -> List[Order]:
        with self._lock:
            return list(self._orders.values())

    def update_status(self, order_id: str, status: OrderStatus) -> Order:
        with self._lock:
            current = self._orders.get(order_id)
            if current is None:
                raise OrderNotFound(order_id)
            updated = current.with_status(status)
            self._orders[order_id] = updated
        logger.debug("Order %s status set to %s", order_id, status.value)
        return updated

    def delete(self, order_id: str) -> None:
        with self._lock:
            if self._orders.pop(order_id, None) is None:
                raise OrderNotFound(order_id)
        logger.debug("Removed order %s from memory", order_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)
