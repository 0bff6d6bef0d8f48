"""
Services layer for PrintShop Desk.

This module contains the business logic services:
- SessionManager: Login, session tokens, idle expiry, per-user cap
- AccountService: Registration and password change/reset
- OrderService: Order submission, queue, status, invoices
- DataManager: Saving, loading, backups and factory reset

Thread Model:
    Flask request threads call into the services concurrently; each
    registry guards its own state with a lock, and OrderService holds the
    registry lock across the stock check and the order registration.
"""

from .session_manager import SessionManager
from .account_service import AccountService
from .order_service import OrderService, OrderSubmission
from .data_manager import DataManager

__all__ = [
    "SessionManager",
    "AccountService",
    "OrderService",
    "OrderSubmission",
    "DataManager",
]
