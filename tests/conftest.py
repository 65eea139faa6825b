import pytest
from fastapi.testclient import TestClient

from orders_api.app.core.config import Settings
from orders_api.app.main import create_app
from orders_api.app.repositories.memory import InMemoryOrderRepository
from orders_api.app.repositories.sqlite import SqliteOrderRepository


def order_request(**overrides):
    data = {
        "customer_name": "Alice",
        "email": "alice@example.com",
        "items": [{"name": "Widget", "qty": 2, "unit_price_cents": 500}],
    }
    data.update(overrides)
    return data


@pytest.fixture
def memory_repo():
    return InMemoryOrderRepository()


@pytest.fixture
def sqlite_repo(tmp_path):
    repo = SqliteOrderRepository(f"sqlite://{tmp_path / 'orders.db'}", pool_size=4, timeout=2.0)
    yield repo
    repo.close()


@pytest.fixture(params=["memory", "sqlite"])
def repository(request, tmp_path):
    if request.param == "memory":
        yield InMemoryOrderRepository()
        return
    repo = SqliteOrderRepository(f"sqlite://{tmp_path / 'orders.db'}", pool_size=4, timeout=2.0)
    yield repo
    repo.close()


@pytest.fixture
def client(repository):
    app = create_app(Settings(repository_backend="memory"), repository=repository)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_request():
    return order_request
