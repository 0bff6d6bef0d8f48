"""
Core module for PrintShop Desk.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- context: ShopContext owning the registries and services
"""

from .exceptions import (
    PrintShopError,
    DataFileError,
    InvalidSessionError,
    PermissionDeniedError,
    OrderNotFoundError,
    OrderSubmissionError,
    InvalidOrderError,
    InsufficientMaterialError,
)

__all__ = [
    "PrintShopError",
    "DataFileError",
    "InvalidSessionError",
    "PermissionDeniedError",
    "OrderNotFoundError",
    "OrderSubmissionError",
    "InvalidOrderError",
    "InsufficientMaterialError",
]
