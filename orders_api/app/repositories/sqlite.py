"""
SQLite order repository.

Orders are stored one row per order in the ``orders`` table created by
``core/migrations/0001_create_orders.sql``.  Line items are serialized
as a JSON array in ``items_json``; the round trip preserves item order
and every field exactly.

Each repository call acquires one pooled connection for its duration
and runs as a single transaction.  ``sqlite3`` failures (locked or
unreachable database, pool exhaustion, I/O errors) are reported as
``StorageUnavailable``; nothing backend specific leaves this module.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List

from orders_api.app.core.db import ConnectionPool, apply_migrations, resolve_database
from orders_api.app.domain.order import Order, OrderItem, OrderStatus
from orders_api.app.repositories.base import (
    OrderConflict,
    OrderNotFound,
    OrderRepository,
    StorageUnavailable,
)

logger = logging.getLogger(__name__)

_COLUMNS = "id, customer_name, email, total_cents, status, created_at, updated_at, items_json"


def _format_timestamp(value: datetime) -> str:
    # Fixed-width ISO strings sort chronologically as text.
    return value.isoformat(timespec="microseconds")


def dump_items(items) -> str:
    return json.dumps([item.model_dump() for item in items], separators=(",", ":"))


def load_items(raw: str) -> List[OrderItem]:
    return [OrderItem(**item) for item in json.loads(raw)]


class SqliteOrderRepository(OrderRepository):
    """Durable implementation of :class:`OrderRepository` backed by SQLite.

    The schema is migrated when the repository is constructed, so a
    fresh database file is usable immediately.
    """

    def __init__(self, database_url: str, *, pool_size: int = 5, timeout: float = 5.0) -> None:
        database, uri = resolve_database(database_url)
        if uri:
            # Shared-cache memory databases fail with SQLITE_LOCKED instead of
            # honouring the busy timeout, so writers queue on a single connection.
            pool_size = 1
        self._pool = ConnectionPool(database, size=pool_size, timeout=timeout, uri=uri)
        try:
            version = apply_migrations(self._pool)
        except sqlite3.Error as exc:
            self._pool.close()
            raise StorageUnavailable(f"could not migrate {database_url}: {exc}") from exc
        logger.info("SQLite order repository ready at %s (schema version %s)", database_url, version)

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        try:
            with self._pool.connection() as conn:
                yield conn
        except (sqlite3.Error, OverflowError) as exc:
            # OverflowError: an integer outside SQLite's 64-bit range.
            logger.warning("SQLite operation failed: %s", exc)
            raise StorageUnavailable(str(exc)) from exc

    @staticmethod
    def _row_to_order(row: sqlite3.Row) -> Order:
        try:
            return Order(
                id=row["id"],
                customer_name=row["customer_name"],
                email=row["email"],
                items=load_items(row["items_json"]),
                total_cents=row["total_cents"],
                status=OrderStatus(row["status"]),
                created_at=datetime.fromisoformat(row["created_at"]),
                updated_at=datetime.fromisoformat(row["updated_at"]),
            )
        except (ValueError, TypeError, KeyError) as exc:
            raise StorageUnavailable(f"stored order {row['id']} is unreadable: {exc}") from exc

    def insert(self, order: Order) -> None:
        with self._connection() as conn:
            try:
                conn.execute(
                    f"INSERT INTO orders ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        order.id,
                        order.customer_name,
                        order.email,
                        order.total_cents,
                        order.status.value,
                        _format_timestamp(order.created_at),
                        _format_timestamp(order.updated_at),
                        dump_items(order.items),
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise OrderConflict(order.id) from exc
        logger.debug("Inserted order %s", order.id)

    def get(self, order_id: str) -> Order:
        with self._connection() as conn:
            row = conn.execute(f"SELECT {_COLUMNS} FROM orders WHERE id = ?", (order_id,)).fetchone()
        if row is None:
            raise OrderNotFound(order_id)
        return self._row_to_order(row)

    def list(self) -> List[Order]:
        with self._connection() as conn:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM orders ORDER BY created_at ASC, id ASC").fetchall()
        return [self._row_to_order(row) for row in rows]

    def update_status(self, order_id: str, status: OrderStatus) -> Order:
        with self._connection() as conn:
            # Take the write lock up front so the read and the update see
            # the same row.
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(f"SELECT {_COLUMNS} FROM orders WHERE id = ?", (order_id,)).fetchone()
            if row is None:
                raise OrderNotFound(order_id)
            updated = self._row_to_order(row).with_status(status)
            cursor = conn.execute(
                "UPDATE orders SET status = ?, updated_at = ? WHERE id = ?",
                (updated.status.value, _format_timestamp(updated.updated_at), order_id),
            )
            if cursor.rowcount == 0:
                raise OrderNotFound(order_id)
        logger.debug("Order %s status set to %s", order_id, status.value)
        return updated

    def delete(self, order_id: str) -> None:
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM orders WHERE id = ?", (order_id,))
            if cursor.rowcount == 0:
                raise OrderNotFound(order_id)
        logger.debug("Deleted order %s", order_id)

    def close(self) -> None:
        self._pool.close()
