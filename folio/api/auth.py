#!/usr/bin/env python3
"""
auth.py
-------
Signed admin tokens and the dependencies that check them.

Login issues an HS256 JWT carrying the user id (sub), email, role,
issue time and expiry. Every protected request presents it as
"Authorization: Bearer <token>"; the signature and expiry are checked
and the account must still exist and be active.

    401  missing, malformed, tampered or expired token; inactive user
    403  valid token whose role is not allowed on the route
"""
# --- Standard library imports ---
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

# --- Third-party imports ---
from fastapi import Depends, Header
from jose import ExpiredSignatureError, JWTError, jwt

# --- Local imports ---
from folio.api.deps import get_settings, get_users
from folio.core.config import Settings
from folio.core.exceptions import ForbiddenError, UnauthorizedError
from folio.database.managers import UserManager
from folio.database.models import User, UserRole


def create_access_token(
    user: User,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Sign a token for user.

    Args:
        user: Authenticated account
        settings: Supplies the secret, algorithm and default lifetime
        expires_delta: Lifetime override
        now: Issue time (default: current UTC time)
    """
    issued = now or datetime.now(timezone.utc)
    expire = issued + (expires_delta or timedelta(minutes=settings.token_expire_minutes))
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "role": getattr(user.role, "value", user.role),
        "iat": int(issued.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Verify a token and return its claims.

    Raises:
        UnauthorizedError: Bad signature, malformed token or expired
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except JWTError:
        raise UnauthorizedError("Invalid token")


def bearer_token(authorization: Optional[str]) -> str:
    """Token part of an Authorization header."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise UnauthorizedError("Not authenticated")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise UnauthorizedError("Not authenticated")
    return token


def get_current_user(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
    users: UserManager = Depends(get_users),
) -> User:
    """Active account named by the bearer token."""
    claims = decode_access_token(bearer_token(authorization), settings)
    user = users.get_by_id(claims.get("sub"))
    if user is None:
        raise UnauthorizedError("User no longer exists or is inactive")
    return user


def require_role(*roles: UserRole) -> Callable[..., User]:
    """Dependency allowing only the given roles."""
    allowed = {role.value for role in roles}

    def dependency(user: User = Depends(get_current_user)) -> User:
        if getattr(user.role, "value", user.role) not in allowed:
            raise ForbiddenError("Insufficient permissions")
        return user

    return dependency


require_admin = require_role(UserRole.ADMIN)
require_editor = require_role(UserRole.ADMIN, UserRole.EDITOR)
