"""
Account Models
--------------

Admin accounts for the CMS.

Models:
    - User: Login identity with a bcrypt password hash and a role
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from typing import Optional

# --- Third party ---
from sqlalchemy import Boolean, CheckConstraint, DateTime, Enum as SQLEnum, String
from sqlalchemy.orm import Mapped, mapped_column

# --- Local imports ---
from .base import Base, TimestampMixin
from .enums import UserRole


class User(TimestampMixin, Base):
    """
    An admin or editor account.

    Attributes:
        id: Primary key
        email: Login email (unique, stored lowercase)
        password_hash: bcrypt hash, never returned by the API
        name: Display name
        role: UserRole
        is_active: Deactivated users cannot log in
        last_login: Time of the last successful login
    """

    __tablename__ = "users"
    __table_args__ = (CheckConstraint("email != ''", name="ck_user_non_empty_email"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(
            UserRole,
            values_callable=lambda x: [e.value for e in x],
            native_enum=False,
            create_constraint=True,
            name="user_role",
        ),
        nullable=False,
        default=UserRole.EDITOR.value,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r}, role={self.role})>"
