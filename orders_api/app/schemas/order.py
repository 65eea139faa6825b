"""
Pydantic models for order requests.

These schemas only describe the shape of the JSON bodies.  Business
rules (non-empty names, positive quantities, known status values and
so on) are enforced by the domain layer so that every entry point,
HTTP or not, applies the same checks.
"""

from typing import List

from pydantic import BaseModel, Field, StrictInt


class OrderItemCreate(BaseModel):
    """A single line item in a create request."""

    name: str = Field(..., examples=["Widget"])
    qty: StrictInt = Field(..., examples=[2], description="Quantity; must be greater than zero")
    unit_price_cents: StrictInt = Field(..., examples=[500], description="Unit price in cents; must not be negative")


class OrderCreate(BaseModel):
    """Schema for creating an order.

    The total, status, id and timestamps are assigned by the server.
    """

    customer_name: str = Field(..., examples=["Alice"])
    email: str = Field(..., examples=["alice@example.com"])
    items: List[OrderItemCreate] = Field(default_factory=list)


class OrderStatusUpdate(BaseModel):
    # Kept as a plain string so unknown values reach the service and are
    # reported through the regular error taxonomy.
    status: str = Field(..., examples=["Shipped"])
