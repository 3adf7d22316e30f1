#!/usr/bin/env python3
"""
user_manager.py
--------------------
Manages admin accounts: creation, password hashing and authentication.

Passwords are hashed with bcrypt (12 rounds) through passlib. Lookups by
email or id only return active accounts, so deactivating a user is
enough to lock them out.

Usage:
    users = UserManager(session, logger)

    users.create({"email": "me@example.com", "password": "S3cure!pass", "name": "Me"})
    user = users.authenticate("me@example.com", "S3cure!pass")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, List, Optional, Union

# --- Third party imports ---
from passlib.context import CryptContext
from sqlalchemy import func, select

# --- Local imports ---
from folio.core.exceptions import ConflictError, ValidationError
from folio.core.validators import (
    DataValidator,
    validate_email,
    validate_password_strength,
)
from folio.database.decorators import (
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from folio.database.models import User, UserRole, utcnow
from .base_manager import BaseManager

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored hash; malformed hashes never match."""
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        return False


def _normalize_role(value: Any) -> Optional[str]:
    return DataValidator.normalize_enum(value, UserRole.choices(), "role")


def _normalize_email(value: Any) -> Optional[str]:
    email = DataValidator.normalize_string(value)
    if email is None:
        return None
    error = validate_email(email)
    if error:
        raise ValidationError(error, field="email")
    return email.lower()


class UserManager(BaseManager):
    """
    Manages User table operations.
    """

    def _find_by_email(self, email: str) -> Optional[User]:
        normalized = DataValidator.normalize_string(email)
        if not normalized:
            return None
        stmt = select(User).where(func.lower(User.email) == normalized.lower())
        return self.session.execute(stmt).scalars().first()

    @handle_db_errors
    @log_database_operation("get_user_by_email")
    def get_by_email(self, email: str) -> Optional[User]:
        """Active user with the email (case-insensitive)."""
        user = self._find_by_email(email)
        return user if user is not None and user.is_active else None

    @handle_db_errors
    @log_database_operation("get_user_by_id")
    def get_by_id(self, user_id: Any) -> Optional[User]:
        """Active user with the id."""
        user = self._get_by_id(User, user_id)
        return user if user is not None and user.is_active else None

    @handle_db_errors
    def get_all(self, include_inactive: bool = False) -> List[User]:
        stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
        if not include_inactive:
            stmt = stmt.where(User.is_active.is_(True))
        return list(self.session.execute(stmt).scalars())

    @handle_db_errors
    @log_database_operation("authenticate_user")
    def authenticate(self, email: str, password: str) -> Optional[User]:
        """
        Verify credentials.

        Returns:
            The active user, with last_login updated, or None when the
            email is unknown, the account inactive or the password wrong
        """
        user = self.get_by_email(email)
        if user is None or not password:
            return None
        if not verify_password(password, user.password_hash):
            return None

        user.last_login = utcnow()
        self.session.flush()
        return user

    @handle_db_errors
    @log_database_operation("create_user")
    @validate_metadata(["email", "password", "name"])
    def create(self, metadata: Dict[str, Any], check_strength: bool = True) -> User:
        """
        Create an account.

        Args:
            metadata: email, password, name (required); role (default
                editor), is_active (default True)
            check_strength: Enforce the password policy

        Raises:
            ValidationError: Bad email or role, or a weak password (the
                message lists every unmet rule)
            ConflictError: If the email is already registered
        """
        email = _normalize_email(metadata["email"])
        if self._find_by_email(email) is not None:
            raise ConflictError("User with this email already exists")

        password = metadata["password"]
        if check_strength:
            problems = validate_password_strength(password)
            if problems:
                raise ValidationError("; ".join(problems), field="password")

        role = _normalize_role(metadata.get("role")) or UserRole.EDITOR.value
        is_active = DataValidator.normalize_bool(metadata.get("is_active"))

        user = User(
            email=email,
            password_hash=hash_password(password),
            name=DataValidator.normalize_string(metadata["name"]),
            role=role,
            is_active=True if is_active is None else is_active,
        )
        self.session.add(user)
        self.session.flush()

        if self.logger:
            self.logger.log_info(f"Created user: {email}", {"user_id": user.id, "role": role})
        return user

    @handle_db_errors
    @log_database_operation("update_user")
    def update(self, user: Union[User, int], metadata: Dict[str, Any]) -> Optional[User]:
        """Update name, email, role and is_active. Passwords go through update_password."""
        target = self._resolve_optional(user, User)
        if target is None:
            return None

        email = _normalize_email(metadata.get("email"))
        if email and email != target.email:
            other = self._find_by_email(email)
            if other is not None and other.id != target.id:
                raise ConflictError("User with this email already exists")

        changed = self._update_scalar_fields(
            target,
            metadata,
            [
                ("name", DataValidator.normalize_string),
                ("email", _normalize_email),
                ("role", _normalize_role),
                ("is_active", DataValidator.normalize_bool),
            ],
        )
        if changed:
            self.session.flush()
        return target

    @handle_db_errors
    @log_database_operation("update_user_password")
    def update_password(
        self, user: Union[User, int], new_password: str, check_strength: bool = True
    ) -> bool:
        target = self._resolve_optional(user, User)
        if target is None:
            return False
        if check_strength:
            problems = validate_password_strength(new_password)
            if problems:
                raise ValidationError("; ".join(problems), field="password")

        target.password_hash = hash_password(new_password)
        self.session.flush()
        return True

    @handle_db_errors
    def update_last_login(self, user: Union[User, int]) -> bool:
        target = self._resolve_optional(user, User)
        if target is None:
            return False
        target.last_login = utcnow()
        self.session.flush()
        return True

    @handle_db_errors
    @log_database_operation("deactivate_user")
    def deactivate(self, user: Union[User, int]) -> bool:
        target = self._resolve_optional(user, User)
        if target is None:
            return False
        target.is_active = False
        self.session.flush()
        return True
