"""
test_user_manager.py
--------------------
Unit tests for UserManager and the password helpers.

Usage:
    python -m pytest tests/unit/managers/test_user_manager.py -v
"""
import pytest

from folio.core.exceptions import ConflictError, ValidationError
from folio.database.managers.user_manager import hash_password, verify_password
from folio.database.models import UserRole

PASSWORD = "Str0ng!pass"


@pytest.fixture
def editor(user_manager):
    """Active editor account."""
    return user_manager.create(
        {"email": "Writer@Folio.Test", "password": PASSWORD, "name": "Writer"}
    )


class TestPasswordHelpers:
    """Test hash_password and verify_password."""

    def test_hash_and_verify(self):
        """Test a hash verifies its own password only."""
        hashed = hash_password(PASSWORD)
        assert hashed != PASSWORD
        assert verify_password(PASSWORD, hashed)
        assert not verify_password("wrong", hashed)

    def test_malformed_hash(self):
        """Test a malformed hash never matches."""
        assert verify_password(PASSWORD, "not-a-hash") is False


class TestUserCreate:
    """Test UserManager.create()."""

    def test_defaults(self, editor):
        """Test lowercase email, editor role and active state."""
        assert editor.email == "writer@folio.test"
        assert editor.role == UserRole.EDITOR
        assert editor.is_active is True
        assert editor.password_hash != PASSWORD

    def test_duplicate_email(self, user_manager, editor):
        """Test emails are unique regardless of case."""
        with pytest.raises(ConflictError) as exc_info:
            user_manager.create(
                {"email": "WRITER@folio.test", "password": PASSWORD, "name": "Copy"}
            )
        assert exc_info.value.message == "User with this email already exists"

    def test_weak_password(self, user_manager):
        """Test the password policy lists unmet rules."""
        with pytest.raises(ValidationError) as exc_info:
            user_manager.create({"email": "a@folio.test", "password": "short", "name": "A"})
        assert exc_info.value.field == "password"
        assert "at least 8 characters" in exc_info.value.message

    def test_weak_password_allowed_when_unchecked(self, user_manager):
        """Test check_strength=False skips the policy."""
        user = user_manager.create(
            {"email": "seed@folio.test", "password": "admin", "name": "Seed"},
            check_strength=False,
        )
        assert user.id is not None

    def test_invalid_email(self, user_manager):
        """Test malformed emails are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            user_manager.create({"email": "nope", "password": PASSWORD, "name": "N"})
        assert exc_info.value.field == "email"

    def test_invalid_role(self, user_manager):
        """Test unknown roles are rejected."""
        with pytest.raises(ValidationError):
            user_manager.create(
                {"email": "r@folio.test", "password": PASSWORD, "name": "R", "role": "owner"}
            )


class TestAuthenticate:
    """Test UserManager.authenticate()."""

    def test_success_sets_last_login(self, user_manager, editor):
        """Test valid credentials return the user and stamp last_login."""
        assert editor.last_login is None
        user = user_manager.authenticate("writer@folio.test", PASSWORD)
        assert user is editor
        assert user.last_login is not None

    def test_email_is_case_insensitive(self, user_manager, editor):
        """Test login accepts any email casing."""
        assert user_manager.authenticate("WRITER@FOLIO.TEST", PASSWORD) is editor

    def test_wrong_password(self, user_manager, editor):
        """Test a wrong password returns None."""
        assert user_manager.authenticate("writer@folio.test", "Wrong!pass1") is None
        assert user_manager.authenticate("writer@folio.test", "") is None

    def test_unknown_email(self, user_manager):
        """Test an unknown email returns None."""
        assert user_manager.authenticate("ghost@folio.test", PASSWORD) is None

    def test_inactive_user(self, user_manager, editor):
        """Test deactivated users cannot log in or be looked up."""
        assert user_manager.deactivate(editor) is True
        assert user_manager.authenticate("writer@folio.test", PASSWORD) is None
        assert user_manager.get_by_id(editor.id) is None
        assert user_manager.get_by_email("writer@folio.test") is None
        assert user_manager.get_all() == []
        assert user_manager.get_all(include_inactive=True) == [editor]


class TestUserUpdate:
    """Test update and update_password."""

    def test_update_fields(self, user_manager, editor):
        """Test name and role changes."""
        user_manager.update(editor.id, {"name": "Lead", "role": "admin"})
        assert editor.name == "Lead"
        assert editor.is_admin

    def test_update_email_conflict(self, user_manager, editor):
        """Test moving onto another account's email raises."""
        other = user_manager.create(
            {"email": "other@folio.test", "password": PASSWORD, "name": "Other"}
        )
        with pytest.raises(ConflictError):
            user_manager.update(other, {"email": "writer@folio.test"})

    def test_update_password(self, user_manager, editor):
        """Test the new password works and the old one does not."""
        assert user_manager.update_password(editor, "N3w!password") is True
        assert user_manager.authenticate("writer@folio.test", "N3w!password") is editor
        assert user_manager.authenticate("writer@folio.test", PASSWORD) is None

    def test_update_password_policy(self, user_manager, editor):
        """Test the new password must satisfy the policy."""
        with pytest.raises(ValidationError):
            user_manager.update_password(editor, "weak")

    def test_missing_user(self, user_manager):
        """Test operations on a missing user report failure."""
        assert user_manager.update(999, {"name": "Ghost"}) is None
        assert user_manager.update_password(999, "N3w!password") is False
        assert user_manager.deactivate(999) is False
        assert user_manager.update_last_login(999) is False
