"""
Order data models.

An Order is one print job: an account, a material, the part dimensions and
how many copies to print. It computes its own price from a SystemConfig and
carries a small status/priority state machine.

Status flow:
    pending -> processing -> completed

Priority (normal, rush, vip) is independent of status and may change at any
time. Whether rush is allowed at all is a shop setting checked by
OrderService, not by the order itself.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple, Union

from models.account import Account
from models.material import Material

if TYPE_CHECKING:
    from modules.system_config import SystemConfig

# Nominal extrusion rate used for the print time estimate
GRAMS_PER_HOUR = 12.0
MIN_HOURS_PER_UNIT = 0.1

DIMENSIONS_PATTERN = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*[xX]\s*(\d+(?:\.\d+)?)\s*[xX]\s*(\d+(?:\.\d+)?)\s*$"
)


class OrderStatus(str, Enum):
    """Order lifecycle states, in forward order."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    @classmethod
    def parse(cls, value: Any) -> Optional["OrderStatus"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_STATUS_RANK = {
    OrderStatus.PENDING: 0,
    OrderStatus.PROCESSING: 1,
    OrderStatus.COMPLETED: 2,
}


class OrderPriority(str, Enum):
    """Order handling priority."""

    NORMAL = "normal"
    RUSH = "rush"
    VIP = "vip"

    @classmethod
    def parse(cls, value: Any) -> Optional["OrderPriority"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


def parse_dimensions(dimensions: Optional[str]) -> Optional[Tuple[float, float, float]]:
    """
    Parse an 'LxWxH' string into three positive numbers.

    Returns:
        (length, width, height), or None if the string is malformed or any
        side is zero
    """
    if not dimensions:
        return None
    match = DIMENSIONS_PATTERN.match(dimensions)
    if not match:
        return None
    sides = tuple(float(part) for part in match.groups())
    if any(side <= 0 for side in sides):
        return None
    return sides  # type: ignore[return-value]


@dataclass
class Order:
    """
    A customer's print order.

    order_id is assigned by the OrderRegistry and never changes afterwards.
    """

    order_id: int
    """Unique sequential id (first order is 1000)."""

    account: Account
    """Ordering account."""

    material: Material
    """Material to print with."""

    dimensions: str
    """Part dimensions as 'LxWxH'."""

    quantity: int
    """Number of copies (> 0)."""

    material_grams: float
    """Grams of material per copy (> 0)."""

    special_instructions: str = ""
    """Free text notes from the customer (sanitized)."""

    status: OrderStatus = OrderStatus.PENDING
    priority: OrderPriority = OrderPriority.NORMAL
    created_at: datetime = field(default_factory=datetime.now)

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    @property
    def material_cost(self) -> float:
        return self.material.cost_per_gram * self.material_grams * self.quantity

    @property
    def required_grams(self) -> int:
        """Whole grams to reserve from inventory (rounded up)."""
        return int(math.ceil(self.material_grams * self.quantity))

    def calculate_price(self, config: "SystemConfig") -> float:
        """
        Total price including setup cost, tax and rush surcharge.

            (material_cost + base_setup_cost) * (1 + tax_rate)
            then * (1 + rush_order_surcharge) for rush orders
        """
        base = self.material_cost + config.base_setup_cost
        total = base * (1 + config.tax_rate)
        if self.priority is OrderPriority.RUSH:
            total *= 1 + config.rush_order_surcharge
        return total

    def estimate_print_time_hours(self) -> float:
        return max(MIN_HOURS_PER_UNIT, self.material_grams / GRAMS_PER_HOUR) * self.quantity

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def update_status(self, status: Union[OrderStatus, str], strict: bool = False) -> bool:
        """
        Move the order to a new status.

        Args:
            status: Target status (enum or its string value)
            strict: If True, only forward moves are accepted
                    (pending -> processing -> completed)

        Returns:
            True if the status was applied
        """
        target = OrderStatus.parse(status)
        if target is None:
            return False
        if strict and target.rank <= self.status.rank:
            return False
        self.status = target
        return True

    def set_priority(self, priority: Union[OrderPriority, str]) -> bool:
        target = OrderPriority.parse(priority)
        if target is None:
            return False
        self.priority = target
        return True

    @property
    def is_completed(self) -> bool:
        return self.status is OrderStatus.COMPLETED

    def parsed_dimensions(self) -> Optional[Tuple[float, float, float]]:
        return parse_dimensions(self.dimensions)

    def to_dict(self, config: Optional["SystemConfig"] = None) -> Dict[str, Any]:
        """Serialize for the API. The price is included when a config is given."""
        data = {
            "order_id": self.order_id,
            "username": self.account.username,
            "material": self.material.display_name,
            "dimensions": self.dimensions,
            "quantity": self.quantity,
            "material_grams": self.material_grams,
            "required_grams": self.required_grams,
            "special_instructions": self.special_instructions,
            "status": self.status.value,
            "priority": self.priority.value,
            "created_at": self.created_at.isoformat(),
            "estimated_hours": round(self.estimate_print_time_hours(), 2),
        }
        if config is not None:
            data["total_price"] = round(self.calculate_price(config), 2)
            data["currency"] = config.currency
        return data

    def __str__(self) -> str:
        return (
            f"Order #{self.order_id} - {self.account.username} - "
            f"{self.material.display_name} x{self.quantity} [{self.status.value}]"
        )
