"""
Account registration and password management.

Operations that act on behalf of a logged-in user take a session id and
check it through the SessionManager. Results are OperationResult objects
carrying a message for the caller to display.
"""

from __future__ import annotations

from typing import Any, Optional

from logging_config import get_logger
from models.account import Account, Role
from models.results import OperationResult
from modules.accounts import AccountRegistry
from modules.password_security import validate_password_strength
from modules.validator import validate_account_request
from services.session_manager import SessionManager

logger = get_logger(__name__)


class AccountService:
    """Creates accounts and changes or resets passwords."""

    def __init__(self, accounts: AccountRegistry, sessions: SessionManager):
        self._accounts = accounts
        self._sessions = sessions

    def create_account(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role: Any = Role.CUSTOMER,
    ) -> OperationResult:
        """
        Register a new account.

        Returns:
            OperationResult whose payload is the new Account on success, or
            the list of validation errors on failure
        """
        validation = validate_account_request(username, email, role, password)
        if not validation.is_valid:
            return OperationResult(False, "; ".join(validation.errors), validation.errors)

        account = Account.create(username.strip(), email.strip(), Role.parse(role), password)
        if not self._accounts.add(account):
            return OperationResult(False, f"Username '{account.username}' is already taken")
        return OperationResult(True, "Account created", account)

    def change_password(
        self,
        session_id: Optional[str],
        current_password: str,
        new_password: str,
    ) -> OperationResult:
        """Change the session owner's password after checking the current one."""
        account = self._sessions.validate_session(session_id)
        if account is None:
            return OperationResult(False, "Invalid or expired session")

        if not account.verify_password(current_password):
            logger.info(f"Password change for {account.username} rejected: wrong current password")
            return OperationResult(False, "Current password is incorrect")

        strength = validate_password_strength(new_password)
        if not strength.is_valid:
            return OperationResult(False, "; ".join(strength.errors), strength.errors)

        if not account.change_password(current_password, new_password):
            return OperationResult(False, "Password could not be changed")
        logger.info(f"Password changed for {account.username}")
        return OperationResult(True, "Password changed")

    def reset_password(
        self,
        admin_session_id: Optional[str],
        target_username: str,
        new_password: str,
    ) -> OperationResult:
        """
        Set another user's password (admin only).

        All of the target's sessions are invalidated so the old password
        cannot keep a session alive.
        """
        if not self._sessions.is_admin_session(admin_session_id):
            return OperationResult(False, "Admin privileges required")

        target = self._accounts.get(target_username)
        if target is None:
            return OperationResult(False, f"User '{target_username}' not found")

        strength = validate_password_strength(new_password)
        if not strength.is_valid:
            return OperationResult(False, "; ".join(strength.errors), strength.errors)

        target.set_password(new_password)
        self._sessions.invalidate_all_user_sessions(target.username)
        logger.info(f"Password reset for {target.username}")
        return OperationResult(True, f"Password reset for {target.username}")

    def remove_account(self, admin_session_id: Optional[str], username: str) -> OperationResult:
        """Remove an account and end its sessions (admin only). Orders are kept."""
        admin = self._sessions.validate_session(admin_session_id)
        if admin is None or not admin.is_admin:
            return OperationResult(False, "Admin privileges required")
        if admin.username == username:
            return OperationResult(False, "Administrators cannot remove their own account")
        if self._accounts.remove(username) is None:
            return OperationResult(False, f"User '{username}' not found")
        self._sessions.invalidate_all_user_sessions(username)
        return OperationResult(True, f"Account {username} removed")
