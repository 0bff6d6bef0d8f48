"""
Unit tests for input validation and text sanitizing.
"""

import pytest

from models.material import Material
from modules.system_config import SystemConfig
from modules.validator import (
    sanitize_text,
    validate_account_request,
    validate_dimensions,
    validate_email,
    validate_material,
    validate_material_grams,
    validate_order_request,
    validate_quantity,
    validate_username,
)


@pytest.fixture
def config():
    return SystemConfig()


@pytest.fixture
def pla():
    return Material("Overture", "PLA", 0.02, 210, "Black")


class TestSanitize:

    def test_strips_markup(self):
        assert sanitize_text("<b>bold</b> text") == "bold text"

    def test_removes_record_separators(self):
        assert sanitize_text("a|b\r\nc") == "a b c"

    def test_truncates(self):
        assert sanitize_text("abcdef", max_length=3) == "abc"

    def test_none(self):
        assert sanitize_text(None) == ""


class TestAccountFields:

    @pytest.mark.parametrize("username", ["bob", "alice_01", "j.doe-x"])
    def test_valid_usernames(self, username):
        assert validate_username(username).is_valid

    @pytest.mark.parametrize("username", ["", "ab", "has space", "x" * 31, None])
    def test_invalid_usernames(self, username):
        assert not validate_username(username).is_valid

    @pytest.mark.parametrize("email,valid", [
        ("a@b.io", True),
        ("first.last+tag@example.co.uk", True),
        ("nope", False),
        ("a@b", False),
        ("", False),
    ])
    def test_email(self, email, valid):
        assert validate_email(email).is_valid is valid

    def test_account_request_collects_everything(self):
        result = validate_account_request("", "", "wizard", "")
        assert len(result.errors) >= 4


class TestOrderFields:

    @pytest.mark.parametrize("quantity,valid", [(1, True), (100, True), (101, False), (0, False), ("5", False), (True, False)])
    def test_quantity(self, quantity, valid):
        assert validate_quantity(quantity, 100).is_valid is valid

    def test_dimensions(self):
        assert validate_dimensions("10x5x2").is_valid
        assert not validate_dimensions("10 by 5").is_valid
        assert not validate_dimensions("").is_valid

    def test_valid_order(self, pla, config):
        result = validate_order_request(pla, "10x10x5", 5, 20, "", "normal", config)
        assert result.is_valid

    def test_unknown_priority(self, pla, config):
        result = validate_order_request(pla, "10x10x5", 5, 20, "", "urgent", config)
        assert any("Priority must be one of" in e for e in result.errors)

    def test_rush_flag(self, pla, config):
        config.allow_rush_orders = False
        result = validate_order_request(pla, "10x10x5", 5, 20, "", "rush", config)
        assert result.errors == ["Rush orders are currently not available"]

    def test_quantity_limit_follows_config(self, pla, config):
        config.max_order_quantity = 3
        assert not validate_order_request(pla, "1x1x1", 4, 1, "", None, config).is_valid

    @pytest.mark.parametrize("grams", [float("nan"), float("inf"), -float("inf"), 10 ** 400])
    def test_non_finite_grams(self, grams):
        assert not validate_material_grams(grams).is_valid

    def test_total_grams_overflow(self, pla, config):
        result = validate_order_request(pla, "10x10x5", 5, 1e308, "", None, config)
        assert result.errors == ["Total material for this order is too large"]

    def test_non_finite_material_cost(self):
        assert not validate_material(Material("Odd", "PLA", float("nan"), 210, "Grey")).is_valid

    def test_summary(self, config):
        result = validate_order_request(None, "", 0, 0, "", None, config)
        summary = result.summary()
        assert "Valid: No" in summary
        assert "Material must be selected" in summary
