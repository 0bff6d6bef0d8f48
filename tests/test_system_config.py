"""
Unit tests for SystemConfig.

Covers best-effort setters, the text file format and the save/reset/load
round trip.
"""

import pytest

from modules.system_config import DEFAULTS, SystemConfig, parse_config_lines


# Fixtures

@pytest.fixture
def config():
    return SystemConfig()


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "system_config.txt"


class TestDefaults:
    """Built-in defaults."""

    def test_defaults(self, config):
        assert config.electricity_cost_per_hour == 0.15
        assert config.machine_time_cost_per_hour == 2.50
        assert config.base_setup_cost == 5.00
        assert config.tax_rate == 0.08
        assert config.currency == "USD"
        assert config.max_order_quantity == 100
        assert config.max_order_value == 1000.00
        assert config.allow_rush_orders is True
        assert config.rush_order_surcharge == 0.25

    def test_to_dict_matches_defaults(self, config):
        assert config.to_dict() == DEFAULTS


class TestSetters:
    """Invalid values are ignored and the previous value is kept."""

    def test_negative_cost_ignored(self, config):
        config.base_setup_cost = -1.0
        assert config.base_setup_cost == 5.00

    def test_tax_rate_out_of_range_ignored(self, config):
        config.tax_rate = 1.5
        assert config.tax_rate == 0.08
        config.tax_rate = -0.1
        assert config.tax_rate == 0.08

    def test_tax_rate_bounds_accepted(self, config):
        config.tax_rate = 0.0
        assert config.tax_rate == 0.0
        config.tax_rate = 1.0
        assert config.tax_rate == 1.0

    def test_non_positive_limits_ignored(self, config):
        config.max_order_quantity = 0
        config.max_order_value = -5
        assert config.max_order_quantity == 100
        assert config.max_order_value == 1000.00

    def test_rush_surcharge_range(self, config):
        config.rush_order_surcharge = 2.0
        assert config.rush_order_surcharge == 0.25
        config.rush_order_surcharge = 0.5
        assert config.rush_order_surcharge == 0.5

    def test_currency_trimmed_and_upper_cased(self, config):
        config.currency = "  eur "
        assert config.currency == "EUR"

    def test_blank_currency_ignored(self, config):
        config.currency = "   "
        assert config.currency == "USD"

    def test_set_reports_acceptance(self, config):
        assert config.set("tax_rate", 0.2) is True
        assert config.set("tax_rate", 3) is False
        assert config.set("no_such_key", 1) is False

    def test_update_from_dict_reports_rejections(self, config):
        rejected = config.update_from_dict({
            "tax_rate": "0.1",
            "max_order_quantity": "abc",
            "base_setup_cost": -3,
            "mystery": 1,
        })
        assert config.tax_rate == 0.1
        assert set(rejected) == {"max_order_quantity", "base_setup_cost", "mystery"}


class TestPersistence:
    """system_config.txt format and round trip."""

    def test_round_trip_restores_values_exactly(self, config, config_path):
        config.electricity_cost_per_hour = 0.1 + 0.2  # not representable as a short decimal
        config.tax_rate = 0.0725
        config.currency = "gbp"
        config.max_order_quantity = 42
        config.allow_rush_orders = False
        config.rush_order_surcharge = 1 / 3
        saved = config.to_dict()

        assert config.save_to_file(config_path)
        config.reset_to_defaults()
        assert config.to_dict() == DEFAULTS

        assert config.load_from_file(config_path)
        assert config.to_dict() == saved

    def test_file_has_sections_and_booleans(self, config, config_path):
        config.save_to_file(config_path)
        text = config_path.read_text()
        assert "# PRICING CONSTANTS" in text
        assert "allow_rush_orders=true" in text
        assert "tax_rate=0.08" in text

    def test_missing_file_is_success(self, config, tmp_path):
        assert config.load_from_file(tmp_path / "absent.txt") is True
        report = config.load_report(tmp_path / "absent.txt")
        assert report.found is False

    def test_bad_entries_skipped_but_load_succeeds(self, config, config_path):
        config_path.write_text(
            "# comment\n"
            "[pricing]\n"
            "\n"
            "tax_rate=0.1\n"
            "base_setup_cost=lots\n"
            "unknown_key=5\n"
            "rush_order_surcharge=7\n"
            "garbage line\n"
        )
        assert config.load_from_file(config_path) is True
        assert config.tax_rate == 0.1
        assert config.base_setup_cost == 5.00
        assert config.rush_order_surcharge == 0.25

        fresh = SystemConfig()
        report = fresh.load_report(config_path)
        assert report.found
        assert report.applied == ["tax_rate"]
        assert set(report.rejected) == {"base_setup_cost", "unknown_key", "rush_order_surcharge", "garbage line"}
        assert not report.clean

    def test_unreadable_path_returns_false(self, config, tmp_path):
        # A directory exists but cannot be read as a file
        assert config.load_from_file(tmp_path) is False

    def test_undecodable_file_returns_false(self, config, config_path):
        config_path.write_bytes(b"tax_rate=0.1\ncurrency=\xff\xfe\n")
        assert config.load_from_file(config_path) is False
        assert config.validate_file(config_path) is False
        assert config.tax_rate == 0.08

    def test_validate_file(self, config, config_path, tmp_path):
        config.save_to_file(config_path)
        assert config.validate_file(config_path)

        partial = tmp_path / "partial.txt"
        partial.write_text("tax_rate=0.08\n")
        assert not config.validate_file(partial)
        assert not config.validate_file(tmp_path / "absent.txt")

    def test_parse_config_lines(self):
        entries = parse_config_lines("# c\n[s]\na=1\n b = two \n")
        assert entries == [("a", "1"), ("b", "two")]


class TestReset:

    def test_reset_restores_defaults(self, config):
        config.tax_rate = 0.5
        config.currency = "EUR"
        config.reset_to_defaults()
        assert config.to_dict() == DEFAULTS

    def test_summary_mentions_values(self, config):
        summary = config.summary()
        assert "Tax Rate: 8.0%" in summary
        assert "Currency: USD" in summary
