import uuid
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from orders_api.app.core.config import Settings
from orders_api.app.main import create_app
from orders_api.app.repositories.base import StorageUnavailable
from orders_api.app.repositories.memory import InMemoryOrderRepository


def parse_ts(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_order_lifecycle(client, make_request):
    response = client.post("/orders", json=make_request())
    assert response.status_code == 201
    created = response.json()
    assert created["total_cents"] == 1000
    assert created["status"] == "Created"
    assert created["customer_name"] == "Alice"
    assert created["items"] == [{"name": "Widget", "qty": 2, "unit_price_cents": 500}]
    order_id = created["id"]

    response = client.get(f"/orders/{order_id}")
    assert response.status_code == 200
    assert response.json() == created

    response = client.patch(f"/orders/{order_id}/status", json={"status": "Shipped"})
    assert response.status_code == 200
    shipped = response.json()
    assert shipped["status"] == "Shipped"
    assert parse_ts(shipped["updated_at"]) > parse_ts(shipped["created_at"])

    response = client.delete(f"/orders/{order_id}")
    assert response.status_code == 204
    assert response.content == b""

    response = client.get(f"/orders/{order_id}")
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_list_orders(client, make_request):
    assert client.get("/orders").json() == []
    ids = [client.post("/orders", json=make_request(customer_name=f"c{i}")).json()["id"] for i in range(3)]
    listed = client.get("/orders").json()
    assert sorted(o["id"] for o in listed) == sorted(ids)


def test_create_with_empty_items(client, make_request):
    response = client.post("/orders", json=make_request(items=[]))
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
    assert client.get("/orders").json() == []


def test_create_with_bad_email(client, make_request):
    response = client.post("/orders", json=make_request(email="nope"))
    assert response.status_code == 400
    assert "email" in response.json()["detail"]


def test_malformed_body_is_a_validation_error(client):
    response = client.post("/orders", json={"customer_name": "Alice"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validation_error"
    assert "email" in body["detail"]

    response = client.post("/orders", content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400


def test_client_cannot_set_total(client, make_request):
    response = client.post("/orders", json=make_request(total_cents=1, status="Delivered"))
    assert response.status_code == 201
    assert response.json()["total_cents"] == 1000
    assert response.json()["status"] == "Created"


def test_bogus_status(client, make_request):
    created = client.post("/orders", json=make_request()).json()
    response = client.patch(f"/orders/{created['id']}/status", json={"status": "Bogus"})
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
    assert client.get(f"/orders/{created['id']}").json() == created


def test_missing_orders(client):
    missing = str(uuid.uuid4())
    assert client.get(f"/orders/{missing}").status_code == 404
    assert client.patch(f"/orders/{missing}/status", json={"status": "Paid"}).status_code == 404
    assert client.delete(f"/orders/{missing}").status_code == 404


def test_request_id_is_echoed(client):
    response = client.get("/orders/unknown", headers={"X-Request-ID": "trace-42"})
    assert response.status_code == 404
    assert response.headers["X-Request-ID"] == "trace-42"
    assert response.json()["request_id"] == "trace-42"


def test_request_id_is_generated(client):
    response = client.get("/health")
    assert len(response.headers["X-Request-ID"]) == 32


class BrokenRepository(InMemoryOrderRepository):
    def list(self):
        raise StorageUnavailable("database is locked")

    def get(self, order_id):
        raise RuntimeError("unexpected")


def test_storage_unavailable_is_503():
    app = create_app(Settings(repository_backend="memory"), repository=BrokenRepository())
    client = TestClient(app)
    response = client.get("/orders")
    assert response.status_code == 503
    assert response.json()["error"] == "storage_unavailable"
    assert response.json()["request_id"] == response.headers["X-Request-ID"]


def test_unexpected_errors_are_labelled():
    app = create_app(Settings(repository_backend="memory"), repository=BrokenRepository())
    client = TestClient(app)
    response = client.get("/orders/abc")
    assert response.status_code == 500
    assert response.json()["error"] == "internal_error"
    assert response.json()["request_id"] == response.headers["X-Request-ID"]


def test_health_does_not_touch_the_repository():
    app = create_app(Settings(repository_backend="memory"), repository=BrokenRepository())
    assert TestClient(app).get("/health").status_code == 200


def test_apps_do_not_share_state(make_request):
    first = TestClient(create_app(Settings(repository_backend="memory")))
    second = TestClient(create_app(Settings(repository_backend="memory")))
    first.post("/orders", json=make_request())
    assert len(first.get("/orders").json()) == 1
    assert second.get("/orders").json() == []


def test_total_beyond_64_bits_is_rejected(client, make_request):
    response = client.post(
        "/orders", json=make_request(items=[{"name": "Gold", "qty": 2, "unit_price_cents": 2**62}])
    )
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
    assert client.get("/orders").json() == []


def test_largest_total_is_stored(client, make_request):
    response = client.post(
        "/orders", json=make_request(items=[{"name": "Gold", "qty": 1, "unit_price_cents": 2**63 - 1}])
    )
    assert response.status_code == 201
    order_id = response.json()["id"]
    assert client.get(f"/orders/{order_id}").json()["total_cents"] == 2**63 - 1


@pytest.mark.parametrize(
    "item",
    [
        {"name": "W", "qty": True, "unit_price_cents": 5},
        {"name": "W", "qty": 1, "unit_price_cents": 5.0},
        {"name": "W", "qty": "2", "unit_price_cents": 5},
        {"name": "W", "qty": 2.0, "unit_price_cents": 5},
    ],
)
def test_non_integer_item_fields_are_rejected(client, make_request, item):
    response = client.post("/orders", json=make_request(items=[item]))
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
    assert client.get("/orders").json() == []


def test_email_with_trailing_newline_is_rejected(client, make_request):
    response = client.post("/orders", json=make_request(email="alice@example.com\n"))
    assert response.status_code == 400
