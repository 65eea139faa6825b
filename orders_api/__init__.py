"""
Top‑level package for the Orders API.

The HTTP application lives in :mod:`orders_api.app`; a small HTTP
client for talking to a running server lives in
:mod:`orders_api.client`.  Importing this package has no side effects.
"""

__all__ = []
