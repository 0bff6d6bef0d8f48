"""
Data models for PrintShop Desk.

This module contains the dataclasses for:
- Material / MaterialKey: Catalog entries and their identity key
- Account / Role: Logins and their roles
- Order / OrderStatus / OrderPriority: Print jobs and their state
- Invoice: Frozen billing snapshot of an order
- UserSession / SessionResult / SessionStatistics: Authentication state
- ValidationResult / PasswordValidationResult / OperationResult: Outcomes

Invoice is frozen so a snapshot cannot be edited after it is issued.
"""

from .material import Material, MaterialKey
from .results import OperationResult, PasswordValidationResult, ValidationResult
from .account import Account, Role
from .order import Order, OrderPriority, OrderStatus
from .invoice import Invoice
from .session import SessionResult, SessionStatistics, UserSession

__all__ = [
    # Catalog models
    "Material",
    "MaterialKey",
    # Result models
    "OperationResult",
    "PasswordValidationResult",
    "ValidationResult",
    # Account models
    "Account",
    "Role",
    # Order models
    "Order",
    "OrderPriority",
    "OrderStatus",
    "Invoice",
    # Session models
    "SessionResult",
    "SessionStatistics",
    "UserSession",
]
