"""
Session authentication and token lifecycle.

Sessions are opaque tokens bound to an account. A session dies when:
    - the user logs out (invalidate_session)
    - all of the user's sessions are revoked (password reset, account removal)
    - the user opens more than max_sessions_per_user sessions; the OLDEST
      one is evicted first (FIFO by creation, not by last use)
    - it sits idle longer than the timeout; this is noticed lazily on the
      next validate_session() call, nothing sweeps idle sessions

Thread Safety:
    All bookkeeping runs under one lock, so the "count sessions, maybe
    evict, then insert" step of authentication is atomic.

Usage:
    manager = SessionManager(accounts)
    result = manager.authenticate_user("alice", "Secret#123")
    if result.success:
        account = manager.validate_session(result.session_id)
"""

from __future__ import annotations

import secrets
import string
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from core.exceptions import InvalidSessionError, PermissionDeniedError
from logging_config import get_logger
from models.account import Account
from models.session import SessionResult, SessionStatistics, UserSession
from modules.accounts import AccountRegistry

logger = get_logger(__name__)

SESSION_ID_ALPHABET = string.ascii_letters + string.digits
DEFAULT_SESSION_ID_LENGTH = 32
DEFAULT_TIMEOUT_MINUTES = 30
DEFAULT_MAX_SESSIONS_PER_USER = 3

Clock = Callable[[], datetime]


def generate_session_id(length: int = DEFAULT_SESSION_ID_LENGTH) -> str:
    """Random alphanumeric token from a cryptographically strong source."""
    return "".join(secrets.choice(SESSION_ID_ALPHABET) for _ in range(length))


class SessionManager:
    """Issues, validates and expires session tokens."""

    def __init__(
        self,
        accounts: AccountRegistry,
        timeout_minutes: int = DEFAULT_TIMEOUT_MINUTES,
        max_sessions_per_user: int = DEFAULT_MAX_SESSIONS_PER_USER,
        session_id_length: int = DEFAULT_SESSION_ID_LENGTH,
        clock: Clock = datetime.now,
    ):
        """
        Args:
            accounts: Account registry to authenticate against
            timeout_minutes: Idle time after which a session expires
            max_sessions_per_user: Concurrent session cap per account
            session_id_length: Token length in characters
            clock: Source of "now" (tests pass a controllable clock)
        """
        self._accounts = accounts
        self.timeout = timedelta(minutes=timeout_minutes)
        self.max_sessions_per_user = max(1, max_sessions_per_user)
        self.session_id_length = session_id_length
        self._clock = clock

        self._sessions: Dict[str, UserSession] = {}
        # username -> session ids in creation order
        self._user_sessions: Dict[str, List[str]] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def authenticate_user(self, username: Optional[str], password: Optional[str]) -> SessionResult:
        """
        Check credentials and open a new session.

        A failed attempt never creates a session and never locks the account.
        """
        if not username or not password:
            return SessionResult(False, "Username and password are required")

        account = self._accounts.get(username)
        if account is None or not account.verify_password(password):
            logger.info(f"Failed login for {username}")
            return SessionResult(False, "Invalid username or password")

        now = self._clock()
        with self._lock:
            owned = self._user_sessions.setdefault(account.username, [])
            while len(owned) >= self.max_sessions_per_user:
                oldest = owned.pop(0)
                self._sessions.pop(oldest, None)
                logger.info(f"Session cap reached for {account.username}, evicted oldest session")

            session_id = self._new_session_id()
            self._sessions[session_id] = UserSession(
                session_id=session_id,
                account=account,
                created_at=now,
                last_activity=now,
            )
            owned.append(session_id)

        logger.info(f"User {account.username} logged in")
        return SessionResult(True, "Login successful", session_id)

    def validate_session(self, session_id: Optional[str]) -> Optional[Account]:
        """
        Return the session's account and renew its idle clock.

        Unknown tokens return None. Expired tokens are removed and return None.
        """
        if not session_id:
            return None
        now = self._clock()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if session.is_expired(now, self.timeout):
                self._remove_unlocked(session_id)
                logger.info(f"Session for {session.account.username} expired")
                return None
            session.touch(now)
            return session.account

    def require_session(self, session_id: Optional[str]) -> Account:
        """validate_session() that raises InvalidSessionError instead of returning None."""
        account = self.validate_session(session_id)
        if account is None:
            raise InvalidSessionError()
        return account

    def require_admin(self, session_id: Optional[str]) -> Account:
        account = self.require_session(session_id)
        if not account.is_admin:
            raise PermissionDeniedError("admin")
        return account

    def is_admin_session(self, session_id: Optional[str]) -> bool:
        account = self.validate_session(session_id)
        return account is not None and account.is_admin

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def invalidate_session(self, session_id: Optional[str]) -> bool:
        if not session_id:
            return False
        with self._lock:
            removed = self._remove_unlocked(session_id)
        if removed:
            logger.info(f"Session ended for {removed.account.username}")
        return removed is not None

    def invalidate_all_user_sessions(self, username: str) -> int:
        """Remove every session for a user. Returns how many were removed."""
        with self._lock:
            session_ids = self._user_sessions.pop(username, [])
            for session_id in session_ids:
                self._sessions.pop(session_id, None)
        if session_ids:
            logger.info(f"Invalidated {len(session_ids)} session(s) for {username}")
        return len(session_ids)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
            self._user_sessions.clear()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def active_session_count(self, username: Optional[str] = None) -> int:
        """Sessions currently held (idle ones included until next validated)."""
        with self._lock:
            if username is None:
                return len(self._sessions)
            return len(self._user_sessions.get(username, []))

    def user_session_ids(self, username: str) -> List[str]:
        with self._lock:
            return list(self._user_sessions.get(username, []))

    def get_session(self, session_id: str) -> Optional[UserSession]:
        return self._sessions.get(session_id)

    def statistics(self) -> SessionStatistics:
        with self._lock:
            return SessionStatistics(
                total_sessions=len(self._sessions),
                active_users=len(self._user_sessions),
                sessions_by_user={user: len(ids) for user, ids in self._user_sessions.items()},
            )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _new_session_id(self) -> str:
        while True:
            session_id = generate_session_id(self.session_id_length)
            if session_id not in self._sessions:
                return session_id

    def _remove_unlocked(self, session_id: str) -> Optional[UserSession]:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return None
        username = session.account.username
        owned = self._user_sessions.get(username)
        if owned is not None:
            if session_id in owned:
                owned.remove(session_id)
            if not owned:
                del self._user_sessions[username]
        return session
