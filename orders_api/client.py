"""Orders API client.

A thin wrapper around the HTTP interface served by
:mod:`orders_api.app`.  It uses the ``requests`` library and returns the
decoded JSON bodies as plain dictionaries.

The client exposes one method per endpoint:

* :meth:`OrdersClient.create_order` – ``POST /orders``
* :meth:`OrdersClient.get_order` – ``GET /orders/{id}``
* :meth:`OrdersClient.list_orders` – ``GET /orders``
* :meth:`OrdersClient.update_status` – ``PATCH /orders/{id}/status``
* :meth:`OrdersClient.delete_order` – ``DELETE /orders/{id}``
* :meth:`OrdersClient.health` – ``GET /health``

Error responses raise :class:`OrdersClientError` with the HTTP status,
the error kind reported by the server and the server's request id.
Transport failures raise the same exception with ``status_code`` set
to ``None``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import requests


logger = logging.getLogger(__name__)


class OrdersClientError(Exception):
    """Raised when a request fails or the server returns an error status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.request_id = request_id


class OrdersClient:
    """Client for interacting with the Orders API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: Optional[float] = None,
        headers: Optional[Mapping[str, str]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL for the API, e.g. ``http://localhost:3000``.
            timeout: Optional per-request timeout in seconds.
            headers: Extra headers sent with every request.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers: Dict[str, str] = dict(headers or {})
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, *, json: Any = None, expect_body: bool = True) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                json=json,
                headers=self.headers or None,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise OrdersClientError(f"{method} {url} failed: {exc}") from exc

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            detail = body.get("detail") or response.text or f"HTTP {response.status_code}"
            raise OrdersClientError(
                f"{method} {path} returned {response.status_code}: {detail}",
                status_code=response.status_code,
                error=body.get("error"),
                request_id=body.get("request_id") or response.headers.get("X-Request-ID"),
            )
        if not expect_body:
            return None
        return response.json()

    def create_order(self, customer_name: str, email: str, items: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
        """Create an order.  ``items`` are mappings with ``name``, ``qty`` and ``unit_price_cents``."""
        payload = {"customer_name": customer_name, "email": email, "items": [dict(item) for item in items]}
        return self._request("POST", "/orders", json=payload)

    def get_order(self, order_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/orders/{order_id}")

    def list_orders(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/orders")

    def update_status(self, order_id: str, status: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/orders/{order_id}/status", json={"status": status})

    def delete_order(self, order_id: str) -> None:
        self._request("DELETE", f"/orders/{order_id}", expect_body=False)

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")
