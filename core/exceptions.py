"""
Custom exceptions for PrintShop Desk.

Exception Hierarchy:
    PrintShopError (base)
    ├── DataFileError            - A data file could not be read or written
    ├── InvalidSessionError      - Session token unknown or expired
    ├── PermissionDeniedError    - Session valid but role insufficient
    ├── OrderNotFoundError       - No order with the requested id
    └── OrderSubmissionError     - Order could not be accepted
        ├── InvalidOrderError        - Order failed validation
        └── InsufficientMaterialError - Not enough stock for the order

Usage:
    The domain layer reports validation failures as message lists and
    not-found conditions as None. These exceptions are raised where a caller
    explicitly asks for an "or raise" variant (the HTTP layer) or inside a
    pipeline that converts them back into a structured result.
"""

from typing import Optional, Dict, Any, List


class PrintShopError(Exception):
    """
    Base exception for all PrintShop Desk errors.

    Carries a human-readable message plus an optional details dictionary
    that the API layer returns alongside the message.
    """

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}


class DataFileError(PrintShopError):
    """A data file could not be read or written."""

    status_code = 500

    def __init__(self, filename: str, operation: str, reason: str):
        message = f"Could not {operation} {filename}: {reason}"
        details = {"filename": filename, "operation": operation}
        super().__init__(message, details)
        self.filename = filename
        self.operation = operation


class InvalidSessionError(PrintShopError):
    """The session token is missing, unknown or has expired."""

    status_code = 401

    def __init__(self, message: str = "Invalid or expired session"):
        super().__init__(message, {"resolution": "Log in again to obtain a new session"})


class PermissionDeniedError(PrintShopError):
    """The session is valid but its account lacks the required role."""

    status_code = 403

    def __init__(self, required_role: str):
        super().__init__(
            f"{required_role.title()} privileges required",
            {"required_role": required_role},
        )
        self.required_role = required_role


class OrderNotFoundError(PrintShopError):
    """No order is registered under the requested id."""

    status_code = 404

    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found", {"order_id": order_id})
        self.order_id = order_id


class OrderSubmissionError(PrintShopError):
    """
    Base class for order submission failures.

    Subclasses are raised inside the submission pipeline and converted into
    the error list of an OrderSubmission result.
    """


class InvalidOrderError(OrderSubmissionError):
    """The order request failed one or more validation rules."""

    def __init__(self, errors: List[str]):
        message = "Order validation failed: " + "; ".join(errors)
        super().__init__(message, {"errors": list(errors)})
        self.errors = list(errors)


class InsufficientMaterialError(OrderSubmissionError):
    """
    Not enough material in stock to fulfil the order.

    The customer should reduce the quantity or wait for the material to be
    restocked.
    """

    def __init__(self, material_name: str, required: int, available: int):
        message = (
            f"Insufficient {material_name}: "
            f"need {required}g, only {available}g available"
        )
        details = {
            "material": material_name,
            "required": required,
            "available": available,
            "resolution": "Reduce order quantity or wait for material restock",
        }
        super().__init__(message, details)
        self.material_name = material_name
        self.required = required
        self.available = available
