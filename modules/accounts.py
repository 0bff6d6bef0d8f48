"""Registry of known accounts, keyed by username."""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from logging_config import get_logger
from models.account import Account, Role

logger = get_logger(__name__)


class AccountRegistry:
    """
    In-memory account store.

    Usernames are unique and compared exactly (case-sensitive), matching how
    users.txt records are keyed.
    """

    def __init__(self) -> None:
        self._accounts: Dict[str, Account] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, username: object) -> bool:
        return username in self._accounts

    def add(self, account: Account) -> bool:
        """Register an account. Returns False if the username is taken."""
        with self._lock:
            if account.username in self._accounts:
                return False
            self._accounts[account.username] = account
        logger.info(f"Registered account {account.username} ({account.role.value})")
        return True

    def put(self, account: Account) -> None:
        """Insert or replace (used when loading users.txt)."""
        with self._lock:
            self._accounts[account.username] = account

    def get(self, username: Optional[str]) -> Optional[Account]:
        if username is None:
            return None
        return self._accounts.get(username)

    def remove(self, username: str) -> Optional[Account]:
        with self._lock:
            account = self._accounts.pop(username, None)
        if account is not None:
            logger.info(f"Removed account {username}")
        return account

    def list(self) -> List[Account]:
        with self._lock:
            return list(self._accounts.values())

    def admins(self) -> List[Account]:
        return [account for account in self.list() if account.role is Role.ADMIN]

    def clear(self) -> None:
        with self._lock:
            self._accounts.clear()
