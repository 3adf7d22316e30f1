#!/usr/bin/env python3
"""
config.py
---------
Runtime settings for the Folio application.

Settings are read once from the environment by the entry point (CLI or
ASGI factory) and passed down explicitly. Nothing reads the environment
at request time.

Environment variables:
    SITE_NAME, SITE_URL, SITE_AUTHOR, TWITTER_HANDLE
    JWT_SECRET, JWT_EXPIRE_MINUTES (without JWT_SECRET a random per-process
        secret is used, so tokens stop working on restart)
    CORS_ORIGINS (comma separated)
    ADMIN_EMAIL, ADMIN_PASSWORD (seed override for the admin account)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

# --- Local imports ---
from folio.core.paths import UPLOAD_DIR


@dataclass
class Settings:
    """
    Application settings.

    Attributes:
        site_name: Public name of the site
        site_url: Canonical base URL, without trailing slash
        site_author: Author shown in meta tags and structured data
        twitter_handle: Twitter/X handle used for twitter:creator
        jwt_secret: HMAC key used to sign admin tokens; a random one is
            generated when none is given
        secret_generated: True when jwt_secret was generated
        jwt_algorithm: JWT signing algorithm
        token_expire_minutes: Lifetime of an admin token
        cors_origins: Allowed CORS origins
        upload_dir: Directory where uploaded media is written
        admin_email: Email of the seeded admin account
        admin_password: Password of the seeded admin account
    """

    site_name: str = "Leechy.dev"
    site_url: str = "https://leechy.dev"
    site_author: str = "Leechy"
    twitter_handle: Optional[str] = "leechy"
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    token_expire_minutes: int = 60 * 24
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    upload_dir: Path = UPLOAD_DIR
    admin_email: str = "admin@leechy.dev"
    admin_password: str = "admin123!"
    secret_generated: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        if not self.jwt_secret:
            self.jwt_secret = secrets.token_urlsafe(32)
            self.secret_generated = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        defaults = cls()
        origins = os.environ.get("CORS_ORIGINS")
        return cls(
            site_name=os.environ.get("SITE_NAME", defaults.site_name),
            site_url=os.environ.get("SITE_URL", defaults.site_url).rstrip("/"),
            site_author=os.environ.get("SITE_AUTHOR", defaults.site_author),
            twitter_handle=os.environ.get("TWITTER_HANDLE", defaults.twitter_handle),
            jwt_secret=os.environ.get("JWT_SECRET") or None,
            token_expire_minutes=int(
                os.environ.get("JWT_EXPIRE_MINUTES", defaults.token_expire_minutes)
            ),
            cors_origins=(
                [o.strip() for o in origins.split(",") if o.strip()]
                if origins
                else defaults.cors_origins
            ),
            upload_dir=Path(os.environ.get("UPLOAD_DIR", str(defaults.upload_dir))),
            admin_email=os.environ.get("ADMIN_EMAIL", defaults.admin_email),
            admin_password=os.environ.get("ADMIN_PASSWORD", defaults.admin_password),
        )
