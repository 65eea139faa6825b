"""
Domain model for orders.

Nothing in this package performs I/O; it can be imported and tested
without a database or a web server.
"""

from .order import Order, OrderItem, OrderStatus, validate  # noqa: F401
