#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants for the Folio project.

All paths are Path objects relative to the project root, so the CLI,
the API and the tests agree on where the database, logs and uploads
live. Two locations can be overridden from the environment:

    DATABASE_PATH   SQLite database file (default: data/portfolio.db)
    UPLOAD_DIR      Directory for uploaded media (default: static/uploads)

The project structure:
    ROOT/
    ├── folio/         # Package code, migrations and templates
    ├── data/          # SQLite database
    ├── logs/          # Application logs
    └── static/        # Public files (uploads, optimized images)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path


def _get_project_root() -> Path:
    """
    Determine project root directory.

    Assumes this file is at ROOT/folio/core/paths.py and navigates up
    the directory tree to find ROOT.

    Returns:
        Path object for project root
    """
    current_file = Path(__file__).resolve()

    # paths.py -> core/ -> folio/ -> ROOT/
    return current_file.parent.parent.parent


def _env_path(variable: str, default: Path) -> Path:
    """Return the path named by an environment variable, or the default."""
    value = os.environ.get(variable)
    if value:
        return Path(value).expanduser().resolve()
    return default


# ----- Project directory -----
ROOT: Path = _get_project_root()
PACKAGE_DIR = ROOT / "folio"
DATA_DIR = ROOT / "data"

# --- Database ---
ALEMBIC_DIR = PACKAGE_DIR / "migrations"
DB_PATH = _env_path("DATABASE_PATH", DATA_DIR / "portfolio.db")
SEED_FILE = PACKAGE_DIR / "database" / "seeds" / "seed_data.yaml"

# --- Templates ---
TEMPLATES_DIR = PACKAGE_DIR / "templates"

# ---- Static files ----
STATIC_DIR = ROOT / "static"
UPLOAD_DIR = _env_path("UPLOAD_DIR", STATIC_DIR / "uploads")
OPTIMIZED_IMAGES_DIR = STATIC_DIR / "images" / "optimized"

# ---- Logs ----
LOG_DIR = ROOT / "logs"

# ---- Client ----
TOKEN_FILE = Path("~/.config/folio/auth.json").expanduser()
