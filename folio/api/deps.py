#!/usr/bin/env python3
"""
deps.py
-------
FastAPI dependencies: database handle, per-request session, managers.

Each request gets its own Session, committed when the handler returns
and rolled back when it raises. Managers are built on that session, so
every write a handler makes (including join-row replacement) lands in
one transaction.

Sync dependencies may be entered and exited on different worker
threads, so the session is not taken from FolioDB.session_scope(),
whose managers are thread-local.
"""
# --- Standard library imports ---
from typing import Iterator, Optional

# --- Third-party imports ---
from fastapi import Depends, Request
from sqlalchemy.orm import Session

# --- Local imports ---
from folio.core.config import Settings
from folio.core.logging_manager import FolioLogger
from folio.database import FolioDB
from folio.database.managers import (
    BlogPostManager,
    ContentStatsManager,
    MediaManager,
    ProjectManager,
    SkillManager,
    TagManager,
    UserManager,
)


def get_db(request: Request) -> FolioDB:
    return request.app.state.db


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_logger(request: Request) -> Optional[FolioLogger]:
    return request.app.state.logger


def get_session(db: FolioDB = Depends(get_db)) -> Iterator[Session]:
    """Session for one request: commit on success, rollback on error."""
    session = db.get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ----- Managers -----
def get_projects(
    session: Session = Depends(get_session), db: FolioDB = Depends(get_db)
) -> ProjectManager:
    return ProjectManager(session, db.logger)


def get_blog_posts(
    session: Session = Depends(get_session), db: FolioDB = Depends(get_db)
) -> BlogPostManager:
    return BlogPostManager(session, db.logger)


def get_skills(
    session: Session = Depends(get_session), db: FolioDB = Depends(get_db)
) -> SkillManager:
    return SkillManager(session, db.logger)


def get_tags(
    session: Session = Depends(get_session), db: FolioDB = Depends(get_db)
) -> TagManager:
    return TagManager(session, db.logger)


def get_media(
    session: Session = Depends(get_session), db: FolioDB = Depends(get_db)
) -> MediaManager:
    return MediaManager(session, db.logger, upload_dir=db.upload_dir)


def get_users(
    session: Session = Depends(get_session), db: FolioDB = Depends(get_db)
) -> UserManager:
    return UserManager(session, db.logger)


def get_stats(
    session: Session = Depends(get_session), db: FolioDB = Depends(get_db)
) -> ContentStatsManager:
    return ContentStatsManager(session, db.logger)
