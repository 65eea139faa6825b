"""FastAPI dependencies shared by the endpoint modules."""

from fastapi import Request

from orders_api.app.services.order_service import OrderService


def get_order_service(request: Request) -> OrderService:
    """Return the service instance built by ``create_app``."""
    return request.app.state.order_service
