"""
Order domain model.

An order is created once from a validated request and afterwards only
its status changes.  Models are frozen pydantic models: mutations
produce new instances, so a record handed out by a repository can
never be modified behind the repository's back.

Validation follows the same convention as the rest of the code base:
business rule violations raise ``ValueError`` (here the
``InvalidOrder`` subclass) and the service layer translates them.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")

# Amounts and quantities are stored as signed 64-bit integers.
MAX_INT64 = 2**63 - 1


class InvalidOrder(ValueError):
    """Raised when an order request or a status value breaks a domain rule."""


class OrderStatus(str, Enum):
    CREATED = "Created"
    PAID = "Paid"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, raw: Any) -> "OrderStatus":
        """Return the member whose value equals ``raw`` exactly.

        Any status may follow any other; only membership is checked.
        """
        if isinstance(raw, cls):
            return raw
        for member in cls:
            if member.value == raw:
                return member
        allowed = ", ".join(m.value for m in cls)
        raise InvalidOrder(f"unknown status {raw!r}; expected one of: {allowed}")


class OrderItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    qty: int
    unit_price_cents: int


class Order(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    customer_name: str
    email: str
    items: Tuple[OrderItem, ...]
    total_cents: int
    status: OrderStatus
    created_at: datetime
    updated_at: datetime

    def with_status(self, status: OrderStatus, now: datetime | None = None) -> "Order":
        """Return a copy carrying ``status`` and a refreshed ``updated_at``."""
        return self.model_copy(
            update={"status": status, "updated_at": next_timestamp(self.updated_at, now)}
        )


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_timestamp(previous: datetime, now: datetime | None = None) -> datetime:
    """Return a timestamp strictly later than ``previous``.

    Two mutations within the same clock tick would otherwise share an
    ``updated_at`` value.
    """
    now = now or utcnow()
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def compute_total(items: Iterable[OrderItem]) -> int:
    return sum(item.qty * item.unit_price_cents for item in items)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _validate_items(raw_items: Any) -> List[OrderItem]:
    if not raw_items:
        raise InvalidOrder("items must contain at least one entry")
    items: List[OrderItem] = []
    for index, raw in enumerate(raw_items):
        name = _field(raw, "name")
        qty = _field(raw, "qty")
        price = _field(raw, "unit_price_cents")
        if not isinstance(name, str) or not name.strip():
            raise InvalidOrder(f"items[{index}].name must not be empty")
        if not _is_int(qty) or not 0 < qty <= MAX_INT64:
            raise InvalidOrder(f"items[{index}].qty must be a positive 64-bit integer")
        if not _is_int(price) or not 0 <= price <= MAX_INT64:
            raise InvalidOrder(f"items[{index}].unit_price_cents must be a non-negative 64-bit integer")
        items.append(OrderItem(name=name, qty=qty, unit_price_cents=price))
    return items


def validate(request: Any) -> Order:
    """Validate a create request and build a new ``Order``.

    ``request`` may be any object (or mapping) exposing
    ``customer_name``, ``email`` and ``items``; each item exposes
    ``name``, ``qty`` and ``unit_price_cents``.  On success the order
    gets a fresh id, ``created_at == updated_at == now``, the computed
    total and status ``Created``.  Raises :class:`InvalidOrder` on the
    first rule that is broken.  Performs no I/O.
    """
    customer_name = _field(request, "customer_name")
    email = _field(request, "email")

    if not isinstance(customer_name, str) or not customer_name.strip():
        raise InvalidOrder("customer_name must not be empty")
    if not isinstance(email, str) or not EMAIL_PATTERN.fullmatch(email):
        raise InvalidOrder("email is not a valid address")
    items = _validate_items(_field(request, "items"))
    total_cents = compute_total(items)
    if total_cents > MAX_INT64:
        raise InvalidOrder("order total is too large")

    now = utcnow()
    return Order(
        id=str(uuid.uuid4()),
        customer_name=customer_name,
        email=email,
        items=tuple(items),
        total_cents=total_cents,
        status=OrderStatus.CREATED,
        created_at=now,
        updated_at=now,
    )
