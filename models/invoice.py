"""Invoice snapshot of an order's billing total."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from models.order import Order, OrderPriority, OrderStatus

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
RULE = "=" * 40


@dataclass(frozen=True)
class Invoice:
    """
    Billing snapshot for one order.

    total_cost, quantity, priority, material_cost and status are captured
    when the invoice is issued. Later changes to the order or to the shop's
    pricing do not alter the printed invoice.
    """

    invoice_id: int
    order: Order
    total_cost: float
    date_issued: datetime = field(default_factory=datetime.now)
    currency: str = "USD"
    base_setup_cost: Optional[float] = None
    quantity: Optional[int] = None
    priority: Optional[OrderPriority] = None
    material_cost: Optional[float] = None
    status: Optional[OrderStatus] = None

    def __post_init__(self):
        snapshot = {
            "quantity": self.order.quantity,
            "priority": self.order.priority,
            "material_cost": self.order.material_cost,
            "status": self.order.status,
        }
        for name, value in snapshot.items():
            if getattr(self, name) is None:
                object.__setattr__(self, name, value)

    @property
    def customer(self) -> str:
        return self.order.account.username

    def generate_summary(self) -> str:
        """One-line summary for lists and logs."""
        return (
            f"Invoice #{self.invoice_id} | {self.date_issued.strftime(DATE_FORMAT)} | "
            f"Order #{self.order.order_id} | Customer: {self.customer} | "
            f"Material: {self.order.material.name} | Quantity: {self.quantity} | "
            f"Total: {self._money(self.total_cost)} | Status: {self.status.value}"
        )

    def export_text(self) -> str:
        """Full printable invoice."""
        order = self.order
        instructions = order.special_instructions or "None"
        lines = [
            RULE,
            "3D PRINTING SERVICE INVOICE",
            RULE,
            "",
            f"Invoice ID: {self.invoice_id}",
            f"Date Issued: {self.date_issued.strftime(DATE_FORMAT)}",
            "",
            "ORDER DETAILS:",
            "--------------",
            f"Order ID: {order.order_id}",
            f"Customer: {order.account.username}",
            f"Email: {order.account.email}",
            f"Material: {order.material.display_name}",
            f"Dimensions: {order.dimensions}",
            f"Quantity: {self.quantity}",
            f"Priority: {self.priority.value}",
            f"Special Instructions: {instructions}",
            "",
            "COST BREAKDOWN:",
            "---------------",
            f"Material Cost: {self._money(self.material_cost)}",
        ]
        if self.base_setup_cost is not None:
            lines.append(f"Base Setup Cost: {self._money(self.base_setup_cost)}")
        lines.extend([
            f"Total Cost: {self._money(self.total_cost)}",
            "",
            f"ORDER STATUS: {self.status.value.upper()}",
            "",
            RULE,
            "Thank you for your business!",
            RULE,
        ])
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "order_id": self.order.order_id,
            "customer": self.customer,
            "total_cost": round(self.total_cost, 2),
            "currency": self.currency,
            "date_issued": self.date_issued.isoformat(),
            "summary": self.generate_summary(),
        }

    def _money(self, amount: float) -> str:
        if self.currency == "USD":
            return f"${amount:.2f}"
        return f"{amount:.2f} {self.currency}"
