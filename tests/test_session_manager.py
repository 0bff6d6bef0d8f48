"""
Unit tests for the SessionManager.

A controllable clock replaces datetime.now so idle expiry can be tested
without sleeping.
"""

import string
from datetime import datetime, timedelta

import pytest

from core.exceptions import InvalidSessionError, PermissionDeniedError
from models.account import Account, Role
from modules.accounts import AccountRegistry
from services.session_manager import SessionManager, generate_session_id

PASSWORD = "Str0ng!Pass"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self):
        self.now = datetime(2024, 1, 1, 9, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


# Fixtures

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def accounts():
    registry = AccountRegistry()
    registry.add(Account.create("alice", "alice@example.com", Role.CUSTOMER, PASSWORD))
    registry.add(Account.create("root", "root@example.com", Role.ADMIN, PASSWORD))
    return registry


@pytest.fixture
def manager(accounts, clock):
    return SessionManager(accounts, clock=clock)


class TestAuthentication:

    def test_success_returns_token(self, manager):
        result = manager.authenticate_user("alice", PASSWORD)
        assert result.success
        assert manager.validate_session(result.session_id).username == "alice"

    def test_tokens_are_unique_alphanumeric_32(self, manager):
        alphabet = set(string.ascii_letters + string.digits)
        tokens = set()
        for _ in range(20):
            manager.invalidate_all_user_sessions("alice")
            token = manager.authenticate_user("alice", PASSWORD).session_id
            assert len(token) == 32
            assert set(token) <= alphabet
            tokens.add(token)
        assert len(tokens) == 20

    def test_generate_session_id_length(self):
        assert len(generate_session_id(8)) == 8

    @pytest.mark.parametrize("username,password", [
        ("alice", "wrong"),
        ("nobody", PASSWORD),
        ("", PASSWORD),
        ("alice", None),
    ])
    def test_failures_create_no_session(self, manager, username, password):
        result = manager.authenticate_user(username, password)
        assert not result.success
        assert result.session_id is None
        assert manager.active_session_count() == 0

    def test_three_wrong_passwords_do_not_lock_account(self, manager):
        for _ in range(3):
            assert not manager.authenticate_user("alice", "Wr0ng!Pass").success
        assert manager.active_session_count() == 0
        assert manager.authenticate_user("alice", PASSWORD).success

    def test_account_without_password_cannot_log_in(self, manager, accounts):
        accounts.add(Account("ghost", "ghost@example.com", Role.CUSTOMER, ""))
        assert not manager.authenticate_user("ghost", "anything").success


class TestSessionCap:

    def test_oldest_session_evicted(self, manager):
        tokens = [manager.authenticate_user("alice", PASSWORD).session_id for _ in range(4)]

        assert manager.validate_session(tokens[0]) is None
        for token in tokens[1:]:
            assert manager.validate_session(token) is not None
        assert manager.active_session_count("alice") == 3

    def test_eviction_is_fifo_not_lru(self, manager):
        first, second, third = (manager.authenticate_user("alice", PASSWORD).session_id for _ in range(3))
        # Using the first session does not protect it
        manager.validate_session(first)
        manager.authenticate_user("alice", PASSWORD)
        assert manager.validate_session(first) is None
        assert manager.validate_session(second) is not None

    def test_cap_is_per_user(self, manager):
        for _ in range(3):
            manager.authenticate_user("alice", PASSWORD)
        root_token = manager.authenticate_user("root", PASSWORD).session_id
        manager.authenticate_user("alice", PASSWORD)
        assert manager.validate_session(root_token) is not None


class TestIdleExpiry:

    def test_expired_session_removed(self, manager, clock):
        token = manager.authenticate_user("alice", PASSWORD).session_id
        clock.advance(minutes=31)

        assert manager.validate_session(token) is None
        assert manager.get_session(token) is None
        assert manager.user_session_ids("alice") == []
        assert "alice" not in manager.statistics().sessions_by_user

    def test_sliding_expiration(self, manager, clock):
        token = manager.authenticate_user("alice", PASSWORD).session_id
        for _ in range(5):
            clock.advance(minutes=20)
            assert manager.validate_session(token) is not None
        assert manager.get_session(token).last_activity == clock.now

    def test_exactly_at_timeout_still_valid(self, manager, clock):
        token = manager.authenticate_user("alice", PASSWORD).session_id
        clock.advance(minutes=30)
        assert manager.validate_session(token) is not None

    def test_idle_sessions_not_swept(self, manager, clock):
        manager.authenticate_user("alice", PASSWORD)
        clock.advance(hours=5)
        assert manager.active_session_count() == 1


class TestInvalidation:

    def test_logout(self, manager):
        token = manager.authenticate_user("alice", PASSWORD).session_id
        assert manager.invalidate_session(token)
        assert manager.validate_session(token) is None
        assert not manager.invalidate_session(token)
        assert manager.statistics().active_users == 0

    def test_invalidate_all_user_sessions(self, manager):
        for _ in range(2):
            manager.authenticate_user("alice", PASSWORD)
        root_token = manager.authenticate_user("root", PASSWORD).session_id

        assert manager.invalidate_all_user_sessions("alice") == 2
        assert manager.active_session_count("alice") == 0
        assert manager.validate_session(root_token) is not None
        assert manager.invalidate_all_user_sessions("alice") == 0


class TestRoles:

    def test_is_admin_session(self, manager):
        admin = manager.authenticate_user("root", PASSWORD).session_id
        user = manager.authenticate_user("alice", PASSWORD).session_id
        assert manager.is_admin_session(admin)
        assert not manager.is_admin_session(user)
        assert not manager.is_admin_session("bogus")

    def test_require_helpers(self, manager):
        user = manager.authenticate_user("alice", PASSWORD).session_id
        with pytest.raises(InvalidSessionError):
            manager.require_session("bogus")
        with pytest.raises(PermissionDeniedError):
            manager.require_admin(user)

    def test_statistics(self, manager):
        manager.authenticate_user("alice", PASSWORD)
        manager.authenticate_user("alice", PASSWORD)
        manager.authenticate_user("root", PASSWORD)
        stats = manager.statistics()
        assert stats.total_sessions == 3
        assert stats.active_users == 2
        assert stats.sessions_by_user == {"alice": 2, "root": 1}
