"""
Order registry and FIFO print queue.

The registry holds every known order by id. The queue holds the ids of
orders waiting to be printed, oldest first. Order ids start at 1000 and
invoice ids at 2000; both sequences only move forward.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Dict, Iterable, List, Optional

from logging_config import get_logger
from models.order import Order, OrderStatus

logger = get_logger(__name__)

FIRST_ORDER_ID = 1000
FIRST_INVOICE_ID = 2000


class OrderRegistry:
    """All orders plus the queue of work not yet started."""

    def __init__(self) -> None:
        self._orders: Dict[int, Order] = {}
        self._queue: Deque[int] = deque()
        self._next_order_id = FIRST_ORDER_ID
        self._next_invoice_id = FIRST_INVOICE_ID
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """Held by OrderService across a whole submission."""
        return self._lock

    def __len__(self) -> int:
        return len(self._orders)

    # ------------------------------------------------------------------
    # Id sequences
    # ------------------------------------------------------------------

    def next_order_id(self) -> int:
        with self._lock:
            order_id = self._next_order_id
            self._next_order_id += 1
            return order_id

    def next_invoice_id(self) -> int:
        with self._lock:
            invoice_id = self._next_invoice_id
            self._next_invoice_id += 1
            return invoice_id

    def peek_next_order_id(self) -> int:
        return self._next_order_id

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def register(self, order: Order, enqueue: bool = True) -> None:
        """
        Store an order and optionally append it to the queue.

        Registering an id at or beyond the sequence moves the sequence past
        it, so ids loaded from orders.txt are never handed out again.
        """
        with self._lock:
            self._orders[order.order_id] = order
            if order.order_id >= self._next_order_id:
                self._next_order_id = order.order_id + 1
            if enqueue and order.order_id not in self._queue:
                self._queue.append(order.order_id)

    def get(self, order_id: int) -> Optional[Order]:
        return self._orders.get(order_id)

    def list(self) -> List[Order]:
        with self._lock:
            return sorted(self._orders.values(), key=lambda o: o.order_id)

    def for_account(self, username: str) -> List[Order]:
        return [o for o in self.list() if o.account.username == username]

    def by_status(self, status: OrderStatus) -> List[Order]:
        return [o for o in self.list() if o.status is status]

    # ------------------------------------------------------------------
    # Queue
    # ------------------------------------------------------------------

    def dequeue_next(self) -> Optional[Order]:
        """Remove and return the oldest queued order, or None if the queue is empty."""
        with self._lock:
            while self._queue:
                order = self._orders.get(self._queue.popleft())
                if order is not None:
                    return order
            return None

    def peek_queue(self) -> Optional[Order]:
        with self._lock:
            for order_id in self._queue:
                order = self._orders.get(order_id)
                if order is not None:
                    return order
            return None

    def queue_size(self) -> int:
        return len(self._queue)

    def queued_orders(self) -> List[Order]:
        with self._lock:
            return [self._orders[i] for i in self._queue if i in self._orders]

    def queued_ids(self) -> List[int]:
        with self._lock:
            return list(self._queue)

    def enqueue(self, order_id: int) -> bool:
        """Append a registered order to the back of the queue unless already queued."""
        with self._lock:
            if order_id not in self._orders or order_id in self._queue:
                return False
            self._queue.append(order_id)
            return True

    def remove_from_queue(self, order_id: int) -> bool:
        with self._lock:
            try:
                self._queue.remove(order_id)
            except ValueError:
                return False
            return True

    def restore_queue(self, order_ids: Iterable[int]) -> None:
        """Replace the queue with the given ids (unknown ids are dropped)."""
        with self._lock:
            self._queue = deque(i for i in order_ids if i in self._orders)

    def clear(self) -> None:
        """Drop every order and reset both id sequences."""
        with self._lock:
            self._orders.clear()
            self._queue.clear()
            self._next_order_id = FIRST_ORDER_ID
            self._next_invoice_id = FIRST_INVOICE_ID
        logger.info("Order registry cleared")
