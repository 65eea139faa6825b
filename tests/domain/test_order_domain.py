from datetime import timedelta

import pytest

from orders_api.app.domain.order import (
    MAX_INT64,
    InvalidOrder,
    Order,
    OrderItem,
    OrderStatus,
    compute_total,
    next_timestamp,
    validate,
)
from orders_api.app.schemas.order import OrderCreate


class TestValidate:
    def test_computes_total_and_defaults_to_created(self, make_request):
        request = make_request(
            items=[
                {"name": "A", "qty": 2, "unit_price_cents": 500},
                {"name": "B", "qty": 1, "unit_price_cents": 250},
            ]
        )
        order = validate(request)
        assert order.total_cents == 1250
        assert order.status is OrderStatus.CREATED
        assert order.created_at == order.updated_at
        assert order.created_at.tzinfo is not None

    def test_accepts_pydantic_request(self, make_request):
        order = validate(OrderCreate(**make_request()))
        assert order.total_cents == 1000
        assert order.items == (OrderItem(name="Widget", qty=2, unit_price_cents=500),)

    def test_preserves_item_order(self, make_request):
        items = [{"name": f"item-{i}", "qty": i + 1, "unit_price_cents": 10 * i} for i in range(5)]
        order = validate(make_request(items=items))
        assert [item.name for item in order.items] == [f"item-{i}" for i in range(5)]
        assert order.total_cents == sum((i + 1) * 10 * i for i in range(5))

    def test_ids_are_unique(self, make_request):
        ids = {validate(make_request()).id for _ in range(50)}
        assert len(ids) == 50

    def test_free_items_are_allowed(self, make_request):
        order = validate(make_request(items=[{"name": "Sample", "qty": 3, "unit_price_cents": 0}]))
        assert order.total_cents == 0

    @pytest.mark.parametrize(
        "overrides",
        [
            {"customer_name": ""},
            {"customer_name": "   "},
            {"email": "invalid"},
            {"email": "a@b"},
            {"email": "two words@example.com"},
            {"items": []},
            {"items": [{"name": "A", "qty": 0, "unit_price_cents": 100}]},
            {"items": [{"name": "A", "qty": -1, "unit_price_cents": 100}]},
            {"items": [{"name": "A", "qty": 1, "unit_price_cents": -1}]},
            {"items": [{"name": "", "qty": 1, "unit_price_cents": 100}]},
            {"items": [{"name": "A", "qty": True, "unit_price_cents": 100}]},
            {"items": [{"name": "A", "qty": 1.5, "unit_price_cents": 100}]},
            {"email": "alice@example.com\n"},
            {"items": [{"name": "A", "qty": 2**63, "unit_price_cents": 1}]},
            {"items": [{"name": "A", "qty": 1, "unit_price_cents": 2**63}]},
            {"items": [{"name": "Gold", "qty": 2, "unit_price_cents": 2**62}]},
        ],
    )
    def test_rejects_invalid_requests(self, make_request, overrides):
        with pytest.raises(InvalidOrder):
            validate(make_request(**overrides))

    def test_invalid_order_is_a_value_error(self, make_request):
        with pytest.raises(ValueError, match="items"):
            validate(make_request(items=[]))


class TestOrderStatus:
    @pytest.mark.parametrize("value", ["Created", "Paid", "Shipped", "Delivered", "Cancelled"])
    def test_parse_known_values(self, value):
        assert OrderStatus.parse(value).value == value

    @pytest.mark.parametrize("value", ["Bogus", "shipped", "", None, 3])
    def test_parse_rejects_unknown_values(self, value):
        with pytest.raises(InvalidOrder):
            OrderStatus.parse(value)

    def test_parse_passes_members_through(self):
        assert OrderStatus.parse(OrderStatus.PAID) is OrderStatus.PAID


class TestOrder:
    def test_with_status_refreshes_updated_at(self, make_request):
        order = validate(make_request())
        updated = order.with_status(OrderStatus.SHIPPED)
        assert updated.status is OrderStatus.SHIPPED
        assert updated.updated_at > order.updated_at
        assert updated.created_at == order.created_at
        assert updated.id == order.id
        assert order.status is OrderStatus.CREATED

    def test_with_status_is_strictly_monotonic_for_a_stale_clock(self, make_request):
        order = validate(make_request())
        stale = order.updated_at - timedelta(seconds=5)
        updated = order.with_status(OrderStatus.PAID, now=stale)
        assert updated.updated_at == order.updated_at + timedelta(microseconds=1)

    def test_orders_are_frozen(self, make_request):
        order = validate(make_request())
        with pytest.raises(Exception):
            order.status = OrderStatus.PAID

    def test_json_uses_status_values(self, make_request):
        data = validate(make_request()).model_dump(mode="json")
        assert data["status"] == "Created"
        assert data["items"] == [{"name": "Widget", "qty": 2, "unit_price_cents": 500}]


def test_compute_total():
    items = [OrderItem(name="a", qty=3, unit_price_cents=7), OrderItem(name="b", qty=1, unit_price_cents=1)]
    assert compute_total(items) == 22


def test_next_timestamp_uses_now_when_later(make_request):
    order = validate(make_request())
    later = order.updated_at + timedelta(seconds=1)
    assert next_timestamp(order.updated_at, later) == later


def test_order_model_round_trips_through_json(make_request):
    order = validate(make_request())
    assert Order.model_validate_json(order.model_dump_json()) == order


def test_largest_total_is_accepted(make_request):
    order = validate(make_request(items=[{"name": "Gold", "qty": 1, "unit_price_cents": MAX_INT64}]))
    assert order.total_cents == MAX_INT64
