"""Session models used by the SessionManager."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from models.account import Account


@dataclass
class UserSession:
    """An authenticated session token bound to one account."""

    session_id: str
    account: Account
    created_at: datetime
    last_activity: datetime

    def is_expired(self, now: datetime, timeout: timedelta) -> bool:
        return now - self.last_activity > timeout

    def touch(self, now: datetime) -> None:
        self.last_activity = now

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.account.username,
            "role": self.account.role.value,
            "created_at": self.created_at.isoformat(),
            "last_activity": self.last_activity.isoformat(),
        }


@dataclass
class SessionResult:
    """Outcome of an authentication attempt."""

    success: bool
    message: str
    session_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.session_id:
            data["session_id"] = self.session_id
        return data


@dataclass
class SessionStatistics:
    total_sessions: int = 0
    active_users: int = 0
    sessions_by_user: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_sessions": self.total_sessions,
            "active_users": self.active_users,
            "sessions_by_user": dict(self.sessions_by_user),
        }
