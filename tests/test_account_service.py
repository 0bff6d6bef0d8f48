"""
Unit tests for AccountService and the Account model.
"""

import pytest

from models.account import Account, Role
from modules.accounts import AccountRegistry
from services.account_service import AccountService
from services.session_manager import SessionManager

PASSWORD = "Str0ng!Pass"
NEW_PASSWORD = "N3w!Passphrase"


# Fixtures

@pytest.fixture
def accounts():
    registry = AccountRegistry()
    registry.add(Account.create("root", "root@example.com", Role.ADMIN, PASSWORD))
    return registry


@pytest.fixture
def sessions(accounts):
    return SessionManager(accounts)


@pytest.fixture
def service(accounts, sessions):
    return AccountService(accounts, sessions)


@pytest.fixture
def alice(service):
    return service.create_account("alice", "alice@example.com", PASSWORD).payload


@pytest.fixture
def admin_token(sessions):
    return sessions.authenticate_user("root", PASSWORD).session_id


class TestAccountModel:

    def test_create_hashes_password(self):
        account = Account.create("bob", "bob@example.com", Role.VIP, PASSWORD)
        assert account.password_hash != PASSWORD
        assert account.verify_password(PASSWORD)
        assert not account.verify_password("other")

    def test_to_dict_hides_hash(self):
        data = Account.create("bob", "bob@example.com", Role.VIP, PASSWORD).to_dict()
        assert data == {"username": "bob", "email": "bob@example.com", "role": "vip", "has_password": True}

    def test_change_password_requires_old(self):
        account = Account.create("bob", "bob@example.com", Role.CUSTOMER, PASSWORD)
        assert not account.change_password("wrong", NEW_PASSWORD)
        assert not account.change_password(PASSWORD, "weak")
        assert account.change_password(PASSWORD, NEW_PASSWORD)
        assert account.verify_password(NEW_PASSWORD)

    def test_role_parse(self):
        assert Role.parse("ADMIN") is Role.ADMIN
        assert Role.parse(" vip ") is Role.VIP
        assert Role.parse("superuser") is None
        assert Role.parse(None) is None


class TestCreateAccount:

    def test_create(self, service, accounts):
        result = service.create_account("alice", "alice@example.com", PASSWORD)
        assert result.success
        assert accounts.get("alice").role is Role.CUSTOMER

    def test_duplicate_username(self, service, alice):
        result = service.create_account("alice", "other@example.com", PASSWORD)
        assert not result.success
        assert "already taken" in result.message

    def test_validation_errors_collected(self, service, accounts):
        result = service.create_account("a", "not-an-email", "weak", "wizard")
        assert not result.success
        assert len(result.payload) >= 4
        assert accounts.get("a") is None


class TestChangePassword:

    def test_change_own_password(self, service, sessions, alice):
        token = sessions.authenticate_user("alice", PASSWORD).session_id
        result = service.change_password(token, PASSWORD, NEW_PASSWORD)
        assert result.success
        assert sessions.authenticate_user("alice", NEW_PASSWORD).success

    def test_wrong_current_password(self, service, sessions, alice):
        token = sessions.authenticate_user("alice", PASSWORD).session_id
        result = service.change_password(token, "nope", NEW_PASSWORD)
        assert not result.success
        assert alice.verify_password(PASSWORD)

    def test_weak_new_password(self, service, sessions, alice):
        token = sessions.authenticate_user("alice", PASSWORD).session_id
        assert not service.change_password(token, PASSWORD, "short").success

    def test_invalid_session(self, service):
        assert not service.change_password("bogus", PASSWORD, NEW_PASSWORD).success


class TestResetPassword:

    def test_admin_reset_invalidates_sessions(self, service, sessions, alice, admin_token):
        alice_token = sessions.authenticate_user("alice", PASSWORD).session_id

        result = service.reset_password(admin_token, "alice", NEW_PASSWORD)

        assert result.success
        assert sessions.validate_session(alice_token) is None
        assert alice.verify_password(NEW_PASSWORD)

    def test_non_admin_cannot_reset(self, service, sessions, alice):
        token = sessions.authenticate_user("alice", PASSWORD).session_id
        assert not service.reset_password(token, "root", NEW_PASSWORD).success

    def test_unknown_target(self, service, admin_token):
        assert not service.reset_password(admin_token, "ghost", NEW_PASSWORD).success


class TestRemoveAccount:

    def test_remove(self, service, accounts, alice, admin_token):
        assert service.remove_account(admin_token, "alice").success
        assert accounts.get("alice") is None

    def test_cannot_remove_self(self, service, admin_token):
        assert not service.remove_account(admin_token, "root").success
