"""
Pricing, tax and order-limit parameters.

SystemConfig is an ordinary object owned by the application context rather
than a process-wide singleton. Setters are best-effort: a value that breaks
its parameter's constraint is ignored and the previous value kept. Callers
that need confirmation use set(), which reports whether the value was taken.

File format (system_config.txt):
    # PRICING CONSTANTS
    electricity_cost_per_hour=0.15
    ...
Lines starting with '#', blank lines and '[section]' headers are ignored.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from logging_config import get_logger

logger = get_logger(__name__)

CONFIG_FILENAME = "system_config.txt"
COMMENT_PREFIX = "#"
KEY_VALUE_SEPARATOR = "="
VALID_KEY_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_]*$")

DEFAULTS: Dict[str, Any] = {
    "electricity_cost_per_hour": 0.15,
    "machine_time_cost_per_hour": 2.50,
    "base_setup_cost": 5.00,
    "tax_rate": 0.08,
    "currency": "USD",
    "max_order_quantity": 100,
    "max_order_value": 1000.00,
    "allow_rush_orders": True,
    "rush_order_surcharge": 0.25,
}

# Section title -> keys written under it, in file order
SECTIONS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("PRICING CONSTANTS", ("electricity_cost_per_hour", "machine_time_cost_per_hour", "base_setup_cost")),
    ("TAX & CURRENCY", ("tax_rate", "currency")),
    ("ORDER LIMITS", ("max_order_quantity", "max_order_value")),
    ("RUSH ORDER SETTINGS", ("allow_rush_orders", "rush_order_surcharge")),
)

_TRUE_WORDS = ("true", "yes", "1", "on")
_FALSE_WORDS = ("false", "no", "0", "off")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_bool(raw: str) -> bool:
    word = raw.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _parse_int(raw: str) -> int:
    return int(raw.strip())


def _parse_float(raw: str) -> float:
    return float(raw.strip())


def _parse_str(raw: str) -> str:
    return raw


# key -> (parser for file/API strings, acceptance rule, normalizer)
_RULES: Dict[str, Tuple[Callable[[str], Any], Callable[[Any], bool], Callable[[Any], Any]]] = {
    "electricity_cost_per_hour": (_parse_float, lambda v: _is_number(v) and v >= 0, float),
    "machine_time_cost_per_hour": (_parse_float, lambda v: _is_number(v) and v >= 0, float),
    "base_setup_cost": (_parse_float, lambda v: _is_number(v) and v >= 0, float),
    "tax_rate": (_parse_float, lambda v: _is_number(v) and 0 <= v <= 1, float),
    "currency": (_parse_str, lambda v: isinstance(v, str) and bool(v.strip()), lambda v: v.strip().upper()),
    "max_order_quantity": (
        _parse_int,
        lambda v: _is_number(v) and float(v).is_integer() and v > 0,
        int,
    ),
    "max_order_value": (_parse_float, lambda v: _is_number(v) and v > 0, float),
    "allow_rush_orders": (_parse_bool, lambda v: isinstance(v, bool), bool),
    "rush_order_surcharge": (_parse_float, lambda v: _is_number(v) and 0 <= v <= 1, float),
}


@dataclass
class ConfigLoadReport:
    """What happened while applying a configuration file."""

    found: bool = False
    applied: List[str] = field(default_factory=list)
    rejected: Dict[str, str] = field(default_factory=dict)

    @property
    def clean(self) -> bool:
        """True when every line in the file was applied."""
        return not self.rejected


class SystemConfig:
    """Tunable pricing, tax and limit parameters."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._values: Dict[str, Any] = dict(DEFAULTS)

    # ------------------------------------------------------------------
    # Generic access
    # ------------------------------------------------------------------
    def get(self, key: str) -> Any:
        return self._values[key]

    def set(self, key: str, value: Any) -> bool:
        """
        Assign a parameter if the value satisfies its constraint.

        Returns:
            True if the value was stored, False if it was ignored
        """
        rule = _RULES.get(key)
        if rule is None:
            logger.warning(f"Unknown configuration key: {key}")
            return False

        _, accepts, normalize = rule
        if not accepts(value):
            logger.debug(f"Ignoring out-of-range value for {key}: {value!r}")
            return False

        with self._lock:
            self._values[key] = normalize(value)
        return True

    def reset_to_defaults(self) -> None:
        """Restore every parameter to its built-in default (orders are untouched)."""
        with self._lock:
            self._values = dict(DEFAULTS)
        logger.info("System configuration reset to defaults")

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._values)

    def update_from_dict(self, data: Dict[str, Any]) -> Dict[str, str]:
        """
        Apply several parameters at once (values may be strings).

        Returns:
            Mapping of rejected keys to the reason they were rejected
        """
        rejected: Dict[str, str] = {}
        for key, value in data.items():
            if key not in _RULES:
                rejected[key] = "unknown key"
                continue
            if isinstance(value, str) and key != "currency":
                try:
                    value = _RULES[key][0](value)
                except ValueError:
                    rejected[key] = f"malformed value {value!r}"
                    continue
            if not self.set(key, value):
                rejected[key] = f"value {value!r} out of range"
        return rejected

    # ------------------------------------------------------------------
    # Typed properties
    # ------------------------------------------------------------------
    @property
    def electricity_cost_per_hour(self) -> float:
        return self._values["electricity_cost_per_hour"]

    @electricity_cost_per_hour.setter
    def electricity_cost_per_hour(self, cost: float) -> None:
        self.set("electricity_cost_per_hour", cost)

    @property
    def machine_time_cost_per_hour(self) -> float:
        return self._values["machine_time_cost_per_hour"]

    @machine_time_cost_per_hour.setter
    def machine_time_cost_per_hour(self, cost: float) -> None:
        self.set("machine_time_cost_per_hour", cost)

    @property
    def base_setup_cost(self) -> float:
        return self._values["base_setup_cost"]

    @base_setup_cost.setter
    def base_setup_cost(self, cost: float) -> None:
        self.set("base_setup_cost", cost)

    @property
    def tax_rate(self) -> float:
        return self._values["tax_rate"]

    @tax_rate.setter
    def tax_rate(self, rate: float) -> None:
        self.set("tax_rate", rate)

    @property
    def currency(self) -> str:
        return self._values["currency"]

    @currency.setter
    def currency(self, code: str) -> None:
        self.set("currency", code)

    @property
    def max_order_quantity(self) -> int:
        return self._values["max_order_quantity"]

    @max_order_quantity.setter
    def max_order_quantity(self, quantity: int) -> None:
        self.set("max_order_quantity", quantity)

    @property
    def max_order_value(self) -> float:
        return self._values["max_order_value"]

    @max_order_value.setter
    def max_order_value(self, value: float) -> None:
        self.set("max_order_value", value)

    @property
    def allow_rush_orders(self) -> bool:
        return self._values["allow_rush_orders"]

    @allow_rush_orders.setter
    def allow_rush_orders(self, allow: bool) -> None:
        self.set("allow_rush_orders", allow)

    @property
    def rush_order_surcharge(self) -> float:
        return self._values["rush_order_surcharge"]

    @rush_order_surcharge.setter
    def rush_order_surcharge(self, surcharge: float) -> None:
        self.set("rush_order_surcharge", surcharge)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    def summary(self) -> str:
        v = self.to_dict()
        return (
            "SYSTEM CONFIGURATION SUMMARY\n"
            "=============================\n"
            "\n"
            "PRICING CONSTANTS:\n"
            f"- Electricity Cost: ${v['electricity_cost_per_hour']:.2f} per hour\n"
            f"- Machine Time Cost: ${v['machine_time_cost_per_hour']:.2f} per hour\n"
            f"- Base Setup Cost: ${v['base_setup_cost']:.2f}\n"
            "\n"
            "TAX & CURRENCY:\n"
            f"- Tax Rate: {v['tax_rate'] * 100:.1f}%\n"
            f"- Currency: {v['currency']}\n"
            "\n"
            "ORDER LIMITS:\n"
            f"- Max Order Quantity: {v['max_order_quantity']} items\n"
            f"- Max Order Value: ${v['max_order_value']:.2f}\n"
            "\n"
            "RUSH ORDER SETTINGS:\n"
            f"- Rush Orders Allowed: {'Yes' if v['allow_rush_orders'] else 'No'}\n"
            f"- Rush Order Surcharge: {v['rush_order_surcharge'] * 100:.1f}%\n"
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def to_text(self) -> str:
        """Render the configuration in system_config.txt format."""
        values = self.to_dict()
        lines = [
            "# System Configuration File",
            "# Format: key=value (one per line)",
            "# Lines starting with # are comments",
            f"# Generated: {datetime.now().isoformat(timespec='seconds')}",
        ]
        for title, keys in SECTIONS:
            lines.append("")
            lines.append(f"# {title}")
            for key in keys:
                lines.append(f"{key}{KEY_VALUE_SEPARATOR}{_format_value(values[key])}")
        return "\n".join(lines) + "\n"

    def apply_text(self, text: str) -> ConfigLoadReport:
        """Apply every well-formed line of a configuration file."""
        report = ConfigLoadReport(found=True)

        for key, raw_value in parse_config_lines(text, report):
            rule = _RULES.get(key)
            if rule is None:
                logger.warning(f"Unknown configuration key skipped: {key}")
                report.rejected[key] = "unknown key"
                continue

            try:
                value = rule[0](raw_value)
            except ValueError:
                logger.warning(f"Invalid value for {key} skipped: {raw_value!r}")
                report.rejected[key] = f"malformed value {raw_value!r}"
                continue

            if self.set(key, value):
                report.applied.append(key)
            else:
                logger.warning(f"Out-of-range value for {key} skipped: {raw_value!r}")
                report.rejected[key] = f"value {raw_value!r} out of range"

        return report

    def save_to_file(self, path: Union[str, Path]) -> bool:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.to_text(), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to save configuration to {path}: {e}")
            return False
        logger.info(f"Configuration saved to {path}")
        return True

    def load_report(self, path: Union[str, Path]) -> ConfigLoadReport:
        """
        Load configuration and describe the outcome.

        Raises:
            OSError: If the file exists but cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        path = Path(path)
        if not path.exists():
            logger.info(f"Configuration file {path} not found, using current settings")
            return ConfigLoadReport(found=False)

        report = self.apply_text(path.read_text(encoding="utf-8"))
        if report.rejected:
            logger.warning(
                f"Configuration loaded from {path} with {len(report.rejected)} rejected entries"
            )
        else:
            logger.info(f"Configuration loaded from {path}")
        return report

    def load_from_file(self, path: Union[str, Path]) -> bool:
        """
        Load configuration from a file.

        Returns True when the file is absent or was parsed, even if some
        entries were rejected; use load_report() to tell those apart.
        Returns False only when the file could not be read.
        """
        try:
            self.load_report(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read configuration from {path}: {e}")
            return False
        return True

    def validate_file(self, path: Union[str, Path]) -> bool:
        """True if the file exists, has every key and every value parses."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read configuration file {path}: {e}")
            return False

        entries = dict(parse_config_lines(text))
        missing = [key for key in DEFAULTS if key not in entries]
        if missing:
            logger.warning(f"Configuration file missing keys: {', '.join(missing)}")
            return False

        for key, raw_value in entries.items():
            rule = _RULES.get(key)
            if rule is None:
                continue
            try:
                rule[0](raw_value)
            except ValueError:
                logger.warning(f"Configuration file has invalid value for {key}: {raw_value!r}")
                return False
        return True


def parse_config_lines(text: str, report: Optional[ConfigLoadReport] = None) -> List[Tuple[str, str]]:
    """Split configuration text into (key, raw_value) pairs."""
    entries: List[Tuple[str, str]] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        if line.startswith("[") and line.endswith("]"):
            continue
        if KEY_VALUE_SEPARATOR not in line:
            logger.warning(f"Configuration line without '=' skipped: {line!r}")
            if report is not None:
                report.rejected[line] = "missing '='"
            continue

        key, value = line.split(KEY_VALUE_SEPARATOR, 1)
        key = key.strip()
        if not VALID_KEY_PATTERN.match(key):
            logger.warning(f"Invalid configuration key skipped: {key!r}")
            if report is not None:
                report.rejected[key] = "invalid key"
            continue
        entries.append((key, value.strip()))
    return entries


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        # repr is the shortest string that round-trips exactly
        return repr(value)
    return str(value)
