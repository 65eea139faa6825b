"""
Order endpoints.

These routes expose create, read, list, status update and delete
operations for orders.  All of the work is delegated to
``OrderService``; failures surface as ``OrderError`` subclasses and are
rendered by the exception handler installed in ``main.py``.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from orders_api.app.api.deps import get_order_service
from orders_api.app.domain.order import Order
from orders_api.app.schemas.order import OrderCreate, OrderStatusUpdate
from orders_api.app.services.order_service import OrderService

router = APIRouter()


@router.post("", response_model=Order, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_in: OrderCreate,
    service: OrderService = Depends(get_order_service),
) -> Order:
    """Create an order.

    The server assigns the id, computes ``total_cents`` from the items
    and sets the status to ``Created``.  Returns HTTP 400 if the request
    breaks a validation rule.
    """
    return await service.create_order(order_in)


@router.get("", response_model=List[Order])
async def list_orders(service: OrderService = Depends(get_order_service)) -> List[Order]:
    """Return every order."""
    return await service.list_orders()


@router.get("/{order_id}", response_model=Order)
async def get_order(order_id: str, service: OrderService = Depends(get_order_service)) -> Order:
    """Retrieve a single order.  Returns HTTP 404 if it does not exist."""
    return await service.get_order(order_id)


@router.patch("/{order_id}/status", response_model=Order)
async def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
) -> Order:
    """Change the status of an order.

    Returns HTTP 400 for an unknown status value and HTTP 404 if the
    order does not exist.
    """
    return await service.update_order_status(order_id, payload.status)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(order_id: str, service: OrderService = Depends(get_order_service)) -> Response:
    """Delete an order.  Returns HTTP 404 if it does not exist."""
    await service.delete_order(order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
