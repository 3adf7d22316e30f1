"""
Folio Portfolio Package
=======================

Backend for a personal portfolio site: projects, blog posts, skills and
media managed through an admin CMS and served through a JSON API.

The package keeps all content in a single SQLite database accessed
through SQLAlchemy entity managers, exposes it over a FastAPI
application, and ships utilities for SEO metadata, responsive images
and markdown rendering.

Main Components:
    - database: SQLAlchemy ORM models, entity managers, seeds and CLI
    - api: FastAPI application, routers, page loaders and sitemap
    - client: httpx API client and state stores mirroring the API
    - core: Logging, exceptions, validation, paths and settings
    - utils: SEO, images, markdown, slugify and sitemap rendering

Primary Interfaces:
    - folio.database.cli: Database management CLI (`folio`)
    - folio.database.manager.FolioDB: Main database interface
    - folio.api.app.create_app: Application factory

Example Usage:
    >>> from folio import FolioDB
    >>> from folio.core.paths import DB_PATH, ALEMBIC_DIR
    >>> db = FolioDB(db_path=DB_PATH, alembic_dir=ALEMBIC_DIR)
    >>> db.initialize()
    >>> with db.session_scope():
    ...     featured = db.projects.get_featured()
"""

__version__ = "0.3.0"
__author__ = "Folio Project"

from folio.database.manager import FolioDB
from folio.core.paths import DATA_DIR, DB_PATH, LOG_DIR, UPLOAD_DIR

__all__ = [
    "FolioDB",
    "DATA_DIR",
    "DB_PATH",
    "LOG_DIR",
    "UPLOAD_DIR",
]
