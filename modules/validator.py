"""
Input validation for accounts and orders.

Every check appends human-readable messages to a ValidationResult instead
of raising, so a form can show all problems at once. Free text is cleaned
with bleach before it is stored.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, Any, Optional

import bleach

from models.account import Role
from models.material import Material
from models.order import OrderPriority, parse_dimensions
from models.results import ValidationResult
from modules.password_security import validate_password_strength

if TYPE_CHECKING:
    from modules.system_config import SystemConfig

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{3,30}$")
EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
MAX_EMAIL_LENGTH = 254
MAX_INSTRUCTIONS_LENGTH = 500

# Characters that would break a pipe-delimited record
_RECORD_BREAKERS = re.compile(r"[|\r\n]+")


def _is_finite(value: Any) -> bool:
    """False for NaN, infinities and integers too large for a float."""
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def sanitize_text(text: Optional[str], max_length: Optional[int] = None) -> str:
    """
    Strip markup and record separators from user text.

    Args:
        text: Raw user input
        max_length: Truncate to this many characters if given

    Returns:
        Cleaned text (empty string for None)
    """
    if not text:
        return ""
    text = bleach.clean(text, tags=[], strip=True)
    text = _RECORD_BREAKERS.sub(" ", text).strip()
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text


def validate_username(username: Optional[str]) -> ValidationResult:
    result = ValidationResult()
    if not username or not username.strip():
        result.add_error("Username is required")
    elif not USERNAME_PATTERN.match(username):
        result.add_error(
            "Username must be 3-30 characters: letters, digits, '_', '.' or '-'"
        )
    return result


def validate_email(email: Optional[str]) -> ValidationResult:
    result = ValidationResult()
    if not email or not email.strip():
        result.add_error("Email is required")
    elif len(email) > MAX_EMAIL_LENGTH or not EMAIL_PATTERN.match(email):
        result.add_error("Email address is not valid")
    return result


def validate_role(role: Any) -> ValidationResult:
    result = ValidationResult()
    if Role.parse(role) is None:
        allowed = ", ".join(r.value for r in Role)
        result.add_error(f"Role must be one of: {allowed}")
    return result


def validate_account_request(
    username: Optional[str],
    email: Optional[str],
    role: Any,
    password: Optional[str],
) -> ValidationResult:
    """Validate every field of a new account."""
    result = ValidationResult()
    result.merge(validate_username(username))
    result.merge(validate_email(email))
    result.merge(validate_role(role))
    result.merge(validate_password_strength(password))
    return result


def validate_material(material: Optional[Material]) -> ValidationResult:
    result = ValidationResult()
    if material is None:
        result.add_error("Material must be selected")
    elif not _is_finite(material.cost_per_gram):
        result.add_error("Material cost per gram must be a finite number")
    elif material.cost_per_gram < 0:
        result.add_error("Material cost per gram cannot be negative")
    return result


def validate_dimensions(dimensions: Optional[str]) -> ValidationResult:
    result = ValidationResult()
    if not dimensions or not dimensions.strip():
        result.add_error("Dimensions are required")
    elif parse_dimensions(dimensions) is None:
        result.add_error("Dimensions must be in the format LxWxH with positive numbers (e.g., 10x10x5)")
    return result


def validate_quantity(quantity: Any, max_quantity: int) -> ValidationResult:
    result = ValidationResult()
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        result.add_error("Quantity must be a whole number")
    elif quantity <= 0:
        result.add_error("Quantity must be greater than 0")
    elif quantity > max_quantity:
        result.add_error(f"Quantity cannot exceed {max_quantity}")
    return result


def validate_material_grams(grams: Any) -> ValidationResult:
    result = ValidationResult()
    if not isinstance(grams, (int, float)) or isinstance(grams, bool):
        result.add_error("Material grams must be a number")
    elif not _is_finite(grams):
        result.add_error("Material grams must be a finite number")
    elif grams <= 0:
        result.add_error("Material grams must be greater than 0")
    return result


def validate_instructions(instructions: Optional[str]) -> ValidationResult:
    result = ValidationResult()
    if instructions and len(instructions) > MAX_INSTRUCTIONS_LENGTH:
        result.add_error(
            f"Special instructions cannot exceed {MAX_INSTRUCTIONS_LENGTH} characters"
        )
    return result


def validate_priority(priority: Any, config: "SystemConfig") -> ValidationResult:
    result = ValidationResult()
    if priority is None:
        return result
    parsed = OrderPriority.parse(priority)
    if parsed is None:
        allowed = ", ".join(p.value for p in OrderPriority)
        result.add_error(f"Priority must be one of: {allowed}")
    elif parsed is OrderPriority.RUSH and not config.allow_rush_orders:
        result.add_error("Rush orders are currently not available")
    return result


def validate_order_request(
    material: Optional[Material],
    dimensions: Optional[str],
    quantity: Any,
    material_grams: Any,
    special_instructions: Optional[str],
    priority: Any,
    config: "SystemConfig",
) -> ValidationResult:
    """Validate every field of an order submission against the shop settings."""
    result = ValidationResult()
    result.merge(validate_material(material))
    result.merge(validate_dimensions(dimensions))
    result.merge(validate_quantity(quantity, config.max_order_quantity))
    result.merge(validate_material_grams(material_grams))
    if result.is_valid and not _is_finite(material_grams * quantity):
        result.add_error("Total material for this order is too large")
    result.merge(validate_instructions(special_instructions))
    result.merge(validate_priority(priority, config))
    return result
