"""
Order intake, print queue handling and invoicing.

Submission pipeline (all or nothing):
    1. Resolve priority (explicit, VIP default, or "rush" in the notes)
    2. Validate every field against the shop settings
    3. Check stock for quantity * grams per unit
    4. Check the total against the maximum order value
    5. Consume stock, assign the next order id, register and enqueue

Steps 3-5 run while holding the registry lock, so two submissions cannot
both pass the stock check on the same grams. Any failure leaves the
registry, the queue and the inventory untouched.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from core.exceptions import (
    InsufficientMaterialError,
    InvalidOrderError,
    OrderNotFoundError,
    OrderSubmissionError,
)
from logging_config import get_logger
from models.account import Account, Role
from models.invoice import Invoice
from models.material import Material
from models.order import Order, OrderPriority, OrderStatus
from modules.inventory import InventoryLedger
from modules.order_registry import OrderRegistry
from modules.system_config import SystemConfig
from modules.validator import MAX_INSTRUCTIONS_LENGTH, sanitize_text, validate_order_request

logger = get_logger(__name__)

RUSH_KEYWORD = "rush"


@dataclass
class OrderSubmission:
    """Outcome of submit_order: the new order, or every reason it was refused."""

    success: bool
    order: Optional[Order] = None
    errors: List[str] = field(default_factory=list)
    total_price: Optional[float] = None

    @property
    def message(self) -> str:
        if self.success and self.order is not None:
            return f"Order #{self.order.order_id} submitted"
        return "; ".join(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.order is not None:
            data["order_id"] = self.order.order_id
        if self.total_price is not None:
            data["total_price"] = round(self.total_price, 2)
        if self.errors:
            data["errors"] = list(self.errors)
        return data


class OrderService:
    """Business operations on orders."""

    def __init__(
        self,
        registry: OrderRegistry,
        inventory: InventoryLedger,
        config: SystemConfig,
        strict_status_transitions: bool = False,
    ):
        self._registry = registry
        self._inventory = inventory
        self._config = config
        self.strict_status_transitions = strict_status_transitions
        self._invoices: Dict[int, List[Invoice]] = {}
        self._invoice_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def resolve_priority(
        self,
        account: Optional[Account],
        special_instructions: Optional[str],
        priority: Any = None,
    ) -> Any:
        """
        Pick the priority for a new order.

        An explicit priority wins. Otherwise VIP accounts get vip, notes that
        mention "rush" get rush when the shop allows it, and everyone else
        gets normal.
        """
        if priority is not None:
            return priority
        if account is not None and account.role is Role.VIP:
            return OrderPriority.VIP
        if (
            special_instructions
            and RUSH_KEYWORD in special_instructions.lower()
            and self._config.allow_rush_orders
        ):
            return OrderPriority.RUSH
        return OrderPriority.NORMAL

    def submit_order(
        self,
        account: Optional[Account],
        material: Optional[Material],
        dimensions: Optional[str],
        quantity: Any,
        material_grams: Any,
        special_instructions: Optional[str] = "",
        priority: Any = None,
    ) -> OrderSubmission:
        """
        Validate, price and register a new order.

        Returns:
            OrderSubmission with the registered order, or success=False and
            the full list of error messages (nothing is changed)
        """
        try:
            order = self._submit(
                account, material, dimensions, quantity,
                material_grams, special_instructions, priority,
            )
        except InvalidOrderError as e:
            return OrderSubmission(False, errors=e.errors)
        except OrderSubmissionError as e:
            return OrderSubmission(False, errors=[e.message])

        total = order.calculate_price(self._config)
        logger.info(
            f"Order #{order.order_id} submitted by {order.account.username}: "
            f"{order.quantity} x {order.material.display_name}, {order.required_grams}g, "
            f"{total:.2f} {self._config.currency}"
        )
        return OrderSubmission(True, order=order, total_price=total)

    def _submit(
        self,
        account: Optional[Account],
        material: Optional[Material],
        dimensions: Optional[str],
        quantity: Any,
        material_grams: Any,
        special_instructions: Optional[str],
        priority: Any,
    ) -> Order:
        priority = self.resolve_priority(account, special_instructions, priority)
        validation = validate_order_request(
            material, dimensions, quantity, material_grams,
            special_instructions, priority, self._config,
        )
        if account is None:
            validation.errors.insert(0, "A logged-in account is required")
        if not validation.is_valid:
            raise InvalidOrderError(validation.errors)

        order = Order(
            order_id=0,
            account=account,
            material=material,
            dimensions=dimensions.strip(),
            quantity=quantity,
            material_grams=float(material_grams),
            special_instructions=sanitize_text(special_instructions, MAX_INSTRUCTIONS_LENGTH),
            priority=OrderPriority.parse(priority),
        )
        required = order.required_grams

        with self._registry.lock:
            available = self._inventory.get_stock(material)
            if available < required:
                raise InsufficientMaterialError(material.display_name, required, available)

            total = order.calculate_price(self._config)
            if total > self._config.max_order_value:
                raise InvalidOrderError([
                    f"Order total {total:.2f} exceeds the maximum order value "
                    f"of {self._config.max_order_value:.2f}"
                ])

            if not self._inventory.consume(material, required):
                raise InsufficientMaterialError(
                    material.display_name, required, self._inventory.get_stock(material)
                )
            order.order_id = self._registry.next_order_id()
            order.created_at = datetime.now()
            self._registry.register(order)
        return order

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_order(self, order_id: int) -> Optional[Order]:
        return self._registry.get(order_id)

    def get_order_or_raise(self, order_id: int) -> Order:
        order = self._registry.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def list_orders(self, account: Optional[Account] = None) -> List[Order]:
        """All orders, or only the given account's unless it is an admin."""
        if account is None or account.is_admin:
            return self._registry.list()
        return self._registry.for_account(account.username)

    def calculate_price(self, order: Order) -> float:
        return order.calculate_price(self._config)

    # ------------------------------------------------------------------
    # Status and priority
    # ------------------------------------------------------------------

    def update_status(self, order_id: int, status: Union[OrderStatus, str]) -> bool:
        """
        Change an order's status and keep the queue in step.

        Leaving pending takes the order off the queue; moving back to pending
        puts it at the back of the queue.
        """
        order = self._registry.get(order_id)
        if order is None:
            return False
        with self._registry.lock:
            previous = order.status
            if not order.update_status(status, strict=self.strict_status_transitions):
                logger.info(f"Order #{order_id}: status change {previous.value} -> {status} rejected")
                return False
            if order.status is OrderStatus.PENDING:
                if previous is not OrderStatus.PENDING:
                    self._registry.enqueue(order_id)
            else:
                self._registry.remove_from_queue(order_id)
        logger.info(f"Order #{order_id}: {previous.value} -> {order.status.value}")
        return True

    def set_priority(self, order_id: int, priority: Union[OrderPriority, str]) -> bool:
        """Change an order's priority. Rush is refused while the shop disallows it."""
        order = self._registry.get(order_id)
        if order is None:
            return False
        if OrderPriority.parse(priority) is OrderPriority.RUSH and not self._config.allow_rush_orders:
            return False
        return order.set_priority(priority)

    # ------------------------------------------------------------------
    # Queue
    # ------------------------------------------------------------------

    def dequeue_next(self) -> Optional[Order]:
        return self._registry.dequeue_next()

    def peek_queue(self) -> Optional[Order]:
        return self._registry.peek_queue()

    def queue_size(self) -> int:
        return self._registry.queue_size()

    def queued_orders(self) -> List[Order]:
        return self._registry.queued_orders()

    def start_next_order(self) -> Optional[Order]:
        """Take the oldest queued order and mark it processing."""
        with self._registry.lock:
            order = self._registry.dequeue_next()
            if order is None:
                return None
            order.update_status(OrderStatus.PROCESSING)
        logger.info(f"Order #{order.order_id} started")
        return order

    def complete_order(self, order_id: int) -> bool:
        order = self._registry.get(order_id)
        if order is None:
            return False
        with self._registry.lock:
            order.update_status(OrderStatus.COMPLETED)
            self._registry.remove_from_queue(order_id)
        logger.info(f"Order #{order_id} completed")
        return True

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------

    def generate_invoice(self, order_id: int) -> Optional[Invoice]:
        """Issue a new invoice capturing the order's current total."""
        order = self._registry.get(order_id)
        if order is None:
            return None
        invoice = Invoice(
            invoice_id=self._registry.next_invoice_id(),
            order=order,
            total_cost=order.calculate_price(self._config),
            currency=self._config.currency,
            base_setup_cost=self._config.base_setup_cost,
        )
        with self._invoice_lock:
            self._invoices.setdefault(order_id, []).append(invoice)
        logger.info(f"Invoice #{invoice.invoice_id} issued for order #{order_id}")
        return invoice

    def view_invoice(self, order_id: int) -> Optional[Invoice]:
        """Latest invoice for an order, or None if none was issued."""
        with self._invoice_lock:
            invoices = self._invoices.get(order_id)
            return invoices[-1] if invoices else None

    def invoices_for(self, order_id: int) -> List[Invoice]:
        with self._invoice_lock:
            return list(self._invoices.get(order_id, []))

    def clear_invoices(self) -> None:
        with self._invoice_lock:
            self._invoices.clear()
