"""
Unit tests for the Order model: pricing, print time and status machine.
"""

import pytest

from models.account import Account, Role
from models.material import Material
from models.order import Order, OrderPriority, OrderStatus, parse_dimensions
from modules.system_config import SystemConfig


# Fixtures

@pytest.fixture
def config():
    return SystemConfig()


@pytest.fixture
def account():
    return Account("alice", "alice@example.com", Role.CUSTOMER)


@pytest.fixture
def pla():
    return Material("Overture", "PLA", 0.02, 210, "Black")


@pytest.fixture
def make_order(account, pla):
    def _make(quantity=5, grams=20.0, priority=OrderPriority.NORMAL, status=OrderStatus.PENDING):
        return Order(
            order_id=1000,
            account=account,
            material=pla,
            dimensions="10x10x5",
            quantity=quantity,
            material_grams=grams,
            priority=priority,
            status=status,
        )
    return _make


class TestPricing:

    def test_normal_price_scenario(self, make_order, config):
        assert make_order().calculate_price(config) == pytest.approx(7.56)

    def test_rush_price_scenario(self, make_order, config):
        order = make_order(priority=OrderPriority.RUSH)
        assert order.calculate_price(config) == pytest.approx(9.45)

    def test_vip_priced_like_normal(self, make_order, config):
        assert make_order(priority=OrderPriority.VIP).calculate_price(config) == pytest.approx(7.56)

    def test_rush_strictly_more_expensive(self, make_order, config):
        normal = make_order().calculate_price(config)
        rush = make_order(priority=OrderPriority.RUSH).calculate_price(config)
        assert rush > normal

    def test_rush_equal_when_surcharge_zero(self, make_order, config):
        config.rush_order_surcharge = 0.0
        normal = make_order().calculate_price(config)
        assert make_order(priority=OrderPriority.RUSH).calculate_price(config) == pytest.approx(normal)

    @pytest.mark.parametrize("priority", list(OrderPriority))
    def test_monotonic_in_quantity_and_grams(self, make_order, config, priority):
        prices_by_quantity = [make_order(quantity=q, priority=priority).calculate_price(config) for q in range(1, 20)]
        assert prices_by_quantity == sorted(prices_by_quantity)

        prices_by_grams = [
            make_order(grams=g, priority=priority).calculate_price(config)
            for g in (0.5, 1, 5, 12, 50, 200)
        ]
        assert prices_by_grams == sorted(prices_by_grams)

    def test_price_uses_current_config(self, make_order, config):
        config.tax_rate = 0.0
        config.base_setup_cost = 0.0
        assert make_order().calculate_price(config) == pytest.approx(2.00)

    def test_required_grams_rounds_up(self, make_order):
        assert make_order(quantity=3, grams=2.5).required_grams == 8
        assert make_order(quantity=5, grams=20).required_grams == 100


class TestPrintTime:

    def test_estimate(self, make_order):
        assert make_order(quantity=2, grams=24).estimate_print_time_hours() == pytest.approx(4.0)

    def test_minimum_per_unit(self, make_order):
        assert make_order(quantity=3, grams=0.5).estimate_print_time_hours() == pytest.approx(0.3)

    def test_monotonic(self, make_order):
        times = [make_order(quantity=q, grams=g).estimate_print_time_hours()
                 for q, g in ((1, 1), (1, 12), (2, 12), (2, 30), (5, 30))]
        assert times == sorted(times)


class TestStatus:

    def test_new_order_is_pending_normal(self, make_order):
        order = make_order()
        assert order.status is OrderStatus.PENDING
        assert order.priority is OrderPriority.NORMAL

    def test_accepts_strings(self, make_order):
        order = make_order()
        assert order.update_status("Processing")
        assert order.status is OrderStatus.PROCESSING

    def test_unknown_status_rejected(self, make_order):
        order = make_order()
        assert not order.update_status("shipped")
        assert not order.update_status(None)
        assert order.status is OrderStatus.PENDING

    def test_permissive_allows_backwards(self, make_order):
        order = make_order(status=OrderStatus.COMPLETED)
        assert order.update_status(OrderStatus.PENDING)
        assert order.status is OrderStatus.PENDING

    def test_strict_forward_only(self, make_order):
        order = make_order()
        assert order.update_status(OrderStatus.PROCESSING, strict=True)
        assert order.update_status(OrderStatus.COMPLETED, strict=True)
        assert not order.update_status(OrderStatus.PENDING, strict=True)
        assert not order.update_status(OrderStatus.COMPLETED, strict=True)
        assert order.status is OrderStatus.COMPLETED

    def test_strict_allows_skipping_ahead(self, make_order):
        order = make_order()
        assert order.update_status("completed", strict=True)


class TestPriority:

    def test_set_priority_any_time(self, make_order):
        order = make_order(status=OrderStatus.COMPLETED)
        assert order.set_priority("rush")
        assert order.priority is OrderPriority.RUSH

    def test_unknown_priority_rejected(self, make_order):
        order = make_order()
        assert not order.set_priority("urgent")
        assert order.priority is OrderPriority.NORMAL


class TestDimensions:

    @pytest.mark.parametrize("text,expected", [
        ("10x10x5", (10.0, 10.0, 5.0)),
        ("1.5 X 2 x 3", (1.5, 2.0, 3.0)),
    ])
    def test_valid(self, text, expected):
        assert parse_dimensions(text) == expected

    @pytest.mark.parametrize("text", ["", "10x10", "axbxc", "0x1x1", "10x10x5x2", None])
    def test_invalid(self, text):
        assert parse_dimensions(text) is None


class TestSerialization:

    def test_to_dict_includes_price_with_config(self, make_order, config):
        data = make_order().to_dict(config)
        assert data["total_price"] == 7.56
        assert data["status"] == "pending"
        assert data["material"] == "PLA - Overture (Black)"

    def test_to_dict_without_config(self, make_order):
        assert "total_price" not in make_order().to_dict()
