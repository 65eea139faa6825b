"""
Service layer for orders.

``OrderService`` validates requests, calls the repository port and
translates every failure into the taxonomy in ``core.errors``.  It is
constructed once at startup with the repository chosen by the
configuration and does not know which adapter it holds.

Repository calls are blocking (SQLite I/O, or a lock for the memory
store), so they run in the threadpool to keep the event loop free.
The correlation id of the current request is logged on entry and
attached to every error raised from here.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, TypeVar

from starlette.concurrency import run_in_threadpool

from orders_api.app.core.errors import (
    ConflictError,
    NotFoundError,
    OrderError,
    StorageUnavailableError,
    ValidationError,
)
from orders_api.app.core.logging_config import get_request_id
from orders_api.app.domain.order import InvalidOrder, Order, OrderStatus, validate
from orders_api.app.repositories.base import (
    OrderConflict,
    OrderNotFound,
    OrderRepository,
    RepositoryError,
    StorageUnavailable,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OrderService:
    """Application service for the order lifecycle."""

    def __init__(self, repository: OrderRepository) -> None:
        self._repository = repository

    async def _call(self, func: Callable[..., T], *args: Any) -> T:
        try:
            return await run_in_threadpool(func, *args)
        except OrderNotFound as exc:
            raise self._error(NotFoundError, f"order {exc.order_id} not found") from exc
        except OrderConflict as exc:
            logger.error("Order id collision on insert: %s", exc.order_id)
            raise self._error(ConflictError, "order id collision") from exc
        except StorageUnavailable as exc:
            logger.error("Order storage unavailable: %s", exc)
            raise self._error(StorageUnavailableError, "order storage is unavailable") from exc
        except RepositoryError as exc:
            logger.exception("Unexpected repository failure")
            raise self._error(StorageUnavailableError, str(exc)) from exc

    @staticmethod
    def _error(kind: type, message: str) -> OrderError:
        return kind(message, request_id=get_request_id())

    async def create_order(self, request: Any) -> Order:
        """Validate ``request`` and store the resulting order.

        ``request`` exposes ``customer_name``, ``email`` and ``items``
        (see :func:`orders_api.app.domain.order.validate`).  Nothing is
        stored if validation fails.
        """
        logger.info("create_order")
        try:
            order = validate(request)
        except InvalidOrder as exc:
            logger.info("Rejected order: %s", exc)
            raise self._error(ValidationError, str(exc)) from exc
        await self._call(self._repository.insert, order)
        logger.info("Created order %s (total %s cents)", order.id, order.total_cents)
        return order

    async def get_order(self, order_id: str) -> Order:
        logger.info("get_order %s", order_id)
        return await self._call(self._repository.get, order_id)

    async def list_orders(self) -> List[Order]:
        logger.info("list_orders")
        return await self._call(self._repository.list)

    async def update_order_status(self, order_id: str, raw_status: Any) -> Order:
        """Set the status of an order.

        ``raw_status`` must equal one of the ``OrderStatus`` values.
        Any status may follow any other.
        """
        logger.info("update_order_status %s -> %r", order_id, raw_status)
        try:
            status = OrderStatus.parse(raw_status)
        except InvalidOrder as exc:
            raise self._error(ValidationError, str(exc)) from exc
        return await self._call(self._repository.update_status, order_id, status)

    async def delete_order(self, order_id: str) -> None:
        logger.info("delete_order %s", order_id)
        await self._call(self._repository.delete, order_id)
        logger.info("Deleted order %s", order_id)
