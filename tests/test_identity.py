"""Tests for SessionIdentityProvider."""

import pytest
from flask import session

from jobwise.app import get_identity
from jobwise.domain import Role
from jobwise.errors import PermissionDenied, ValidationError


@pytest.fixture
def identity(app):
    with app.test_request_context():
        yield get_identity(app)


class TestSignup:
    def test_signup_starts_session(self, identity):
        user = identity.signup("alice", "Alice@Example.com", "s3cret", "candidate")
        assert user.role is Role.CANDIDATE
        assert user.email == "alice@example.com"
        assert session["user_id"] == user.id
        assert identity.current_user() == user

    def test_password_is_hashed(self, identity, store):
        user = identity.signup("alice", "alice@example.com", "s3cret", "employer")
        assert store.get("user", user.id)["password"] != "s3cret"

    def test_duplicate_email(self, identity):
        identity.signup("alice", "alice@example.com", "s3cret", "candidate")
        with pytest.raises(ValidationError, match="already exists"):
            identity.signup("alice2", "alice@example.com", "other", "employer")

    def test_invalid_input(self, identity):
        with pytest.raises(ValidationError) as exc_info:
            identity.signup("al", "not-an-email", "pw", "admin")
        assert set(exc_info.value.errors) == {"username", "email", "role"}


class TestLogin:
    def test_login_and_logout(self, identity):
        user = identity.signup("bob", "bob@example.com", "pw123", "employer")
        identity.logout()
        assert identity.current_user() is None

        assert identity.login("bob@example.com", "pw123") == user
        assert session["role"] == "employer"

    def test_wrong_password(self, identity):
        identity.signup("bob", "bob@example.com", "pw123", "employer")
        identity.logout()
        with pytest.raises(PermissionDenied):
            identity.login("bob@example.com", "nope")
        assert identity.current_user() is None

    def test_unknown_email(self, identity):
        with pytest.raises(PermissionDenied):
            identity.login("nobody@example.com", "pw")


class TestAuthChanges:
    def test_listeners(self, identity):
        seen = []
        unsubscribe = identity.on_auth_change(seen.append)
        user = identity.signup("cat", "cat@example.com", "pw", "candidate")
        identity.logout()
        unsubscribe()
        identity.login("cat@example.com", "pw")
        assert seen == [user, None]

    def test_update_profile(self, identity):
        identity.signup("dana", "dana@example.com", "pw", "candidate")
        updated = identity.update_profile("dana k")
        assert updated.display_name == "dana k"
        assert session["username"] == "dana k"

    def test_update_profile_requires_login(self, identity):
        with pytest.raises(PermissionDenied):
            identity.update_profile("someone")
