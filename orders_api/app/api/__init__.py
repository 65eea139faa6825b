"""
HTTP layer.

``router.py`` aggregates the routers defined in ``endpoints`` and is
included by the application factory in ``main.py``.
"""
