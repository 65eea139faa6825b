"""
Top‑level router.

Aggregates the resource routers.  Orders are served under ``/orders``
and the health check at ``/health``.
"""

from fastapi import APIRouter

from .endpoints import health, orders

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(orders.router, prefix="/orders", tags=["orders"])
