"""
Result objects returned by validation and service operations.

Validation never raises: every rule that fails appends a message so the
caller can show all problems at once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional


@dataclass
class ValidationResult:
    """Accumulated outcome of one or more validation rules."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_errors(self, messages: Iterable[str]) -> None:
        self.errors.extend(messages)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def summary(self) -> str:
        lines = ["Input Validation Result:", f"Valid: {'Yes' if self.is_valid else 'No'}"]
        if self.errors:
            lines.append("Errors:")
            lines.extend(f"  - {error}" for error in self.errors)
        if self.warnings:
            lines.append("Warnings:")
            lines.extend(f"  - {warning}" for warning in self.warnings)
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.is_valid, "errors": list(self.errors), "warnings": list(self.warnings)}


@dataclass
class PasswordValidationResult(ValidationResult):
    """Password policy outcome plus a 0-100 strength score and label."""

    strength_score: int = 0
    strength_level: str = "Unknown"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["strength_score"] = self.strength_score
        data["strength_level"] = self.strength_level
        return data


@dataclass
class OperationResult:
    """Success flag plus a message, used by account operations."""

    success: bool
    message: str
    payload: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "message": self.message}
