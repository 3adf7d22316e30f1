#!/usr/bin/env python3
"""
auth.py
-------
/api/auth: login and the current account.

Login attempts are rate limited per client address.
"""
# --- Standard library imports ---
from typing import Any, Dict, Optional

# --- Third-party imports ---
from fastapi import APIRouter, Depends, Request

# --- Local imports ---
from folio.api.auth import create_access_token, get_current_user
from folio.api.deps import get_logger, get_settings, get_users
from folio.api.schemas import LoginRequest, UserOut, dump, ok
from folio.core.config import Settings
from folio.core.exceptions import UnauthorizedError, ValidationError
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.database.managers import UserManager
from folio.database.models import User

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _client_id(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@router.post("/login")
def login(
    body: LoginRequest,
    request: Request,
    users: UserManager = Depends(get_users),
    settings: Settings = Depends(get_settings),
    logger: Optional[FolioLogger] = Depends(get_logger),
) -> Dict[str, Any]:
    if not body.email or not body.password:
        raise ValidationError("Email and password are required")

    client = _client_id(request)
    request.app.state.login_limiter.check(client)

    user = users.authenticate(body.email, body.password)
    if user is None:
        safe_logger(logger).log_warning("Failed login", {"email": body.email, "client": client})
        raise UnauthorizedError("Invalid email or password")

    request.app.state.login_limiter.reset(client)
    token = create_access_token(user, settings)
    safe_logger(logger).log_operation("login", {"user_id": user.id})
    return {
        "success": True,
        "user": dump(UserOut, user),
        "token": token,
        "expires_in": settings.token_expire_minutes * 60,
    }


@router.get("/me")
def me(user: User = Depends(get_current_user)) -> Dict[str, Any]:
    return ok(dump(UserOut, user))
