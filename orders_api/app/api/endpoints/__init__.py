"""
Endpoint modules.

Each module defines an ``APIRouter`` for one resource.  Routers are
aggregated in ``api/router.py``.
"""
