"""
Account data models.

An Account is a customer or staff login. The password is only ever held as
a salted hash; an empty hash means the account has no usable password (as
happens for accounts restored from a users.txt line with no hash field).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import modules.password_security as password_security


class Role(str, Enum):
    """Account roles."""

    CUSTOMER = "customer"
    VIP = "vip"
    ADMIN = "admin"
    USER = "user"

    @classmethod
    def parse(cls, value: Any) -> Optional["Role"]:
        """Return the Role for a string (case-insensitive) or None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass
class Account:
    """A registered account."""

    username: str
    email: str
    role: Role = Role.CUSTOMER
    password_hash: str = ""

    @classmethod
    def create(cls, username: str, email: str, role: Role, password: str) -> "Account":
        """Create an account from a plain text password (hashed immediately)."""
        return cls(
            username=username,
            email=email,
            role=role,
            password_hash=password_security.hash_password(password) or "",
        )

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash and self.password_hash.strip())

    def verify_password(self, password: Optional[str]) -> bool:
        if not self.has_password:
            return False
        return password_security.verify_password(password, self.password_hash)

    def change_password(self, old_password: str, new_password: str) -> bool:
        """Replace the password after checking the current one and the policy."""
        if not self.verify_password(old_password):
            return False
        return self.set_password(new_password)

    def set_password(self, new_password: str) -> bool:
        """Replace the password without the old one (admin reset)."""
        if not password_security.validate_password_strength(new_password).is_valid:
            return False
        self.password_hash = password_security.hash_password(new_password) or ""
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Public view of the account (never includes the hash)."""
        return {
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "has_password": self.has_password,
        }

    def __repr__(self) -> str:
        return f"Account(username={self.username!r}, email={self.email!r}, role={self.role.value!r})"
