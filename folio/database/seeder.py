#!/usr/bin/env python3
"""
seeder.py
--------------------
Inserts the default content of a fresh database.

Seed content lives in database/seeds/seed_data.yaml. Every section is
written only when its table is still empty, so seeding is safe to repeat.

Usage:
    with db.session_scope() as session:
        counts = Seeder(session, settings, logger).run(include_samples=True)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path
from typing import Any, Dict, List, Optional

# --- Third party imports ---
import yaml
from sqlalchemy.orm import Session

# --- Local imports ---
from folio.core.config import Settings
from folio.core.exceptions import DatabaseError
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.core.paths import SEED_FILE
from folio.database.managers import (
    BlogPostManager,
    ProjectManager,
    SkillManager,
    UserManager,
)
from folio.database.models import (
    BlogPost,
    Project,
    SiteConfig,
    Skill,
    User,
    UserRole,
)


def load_seed_data(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read the seed YAML file.

    Raises:
        DatabaseError: If the file is missing or not a mapping
    """
    seed_path = Path(path) if path else SEED_FILE
    if not seed_path.is_file():
        raise DatabaseError(f"Seed file not found: {seed_path}")

    with seed_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise DatabaseError(f"Seed file must contain a mapping: {seed_path}")
    return data


class Seeder:
    """Writes seed sections into empty tables."""

    def __init__(
        self,
        session: Session,
        settings: Optional[Settings] = None,
        logger: Optional[FolioLogger] = None,
        seed_file: Optional[Path] = None,
    ):
        self.session = session
        self.settings = settings or Settings.from_env()
        self.logger = logger
        self.data = load_seed_data(seed_file)

    def _is_empty(self, model) -> bool:
        return self.session.query(model.id).first() is None

    def run(self, include_samples: bool = True) -> Dict[str, int]:
        """
        Seed every empty table.

        Args:
            include_samples: Also seed the sample projects and posts

        Returns:
            Rows inserted per table
        """
        counts = {
            "site_config": self.seed_site_config(),
            "skills": self.seed_skills(),
            "users": self.seed_admin(),
            "projects": 0,
            "blog_posts": 0,
        }
        if include_samples:
            counts["projects"] = self.seed_projects()
            counts["blog_posts"] = self.seed_blog_posts()

        safe_logger(self.logger).log_operation("seed_complete", counts)
        return counts

    def seed_site_config(self) -> int:
        if not self._is_empty(SiteConfig):
            return 0
        entries: List[Dict[str, Any]] = self.data.get("site_config") or []
        overrides = {
            "site_title": self.settings.site_name,
            "site_url": self.settings.site_url,
            "author_name": self.settings.site_author,
        }
        for entry in entries:
            self.session.add(
                SiteConfig(
                    key=entry["key"],
                    value=overrides.get(entry["key"], entry.get("value")),
                    description=entry.get("description"),
                )
            )
        self.session.flush()
        return len(entries)

    def seed_skills(self) -> int:
        if not self._is_empty(Skill):
            return 0
        skills = SkillManager(self.session, self.logger)
        entries = self.data.get("skills") or []
        for entry in entries:
            skills.create(dict(entry))
        return len(entries)

    def seed_admin(self) -> int:
        """Create the admin account from settings when no user exists."""
        if not self._is_empty(User):
            return 0
        UserManager(self.session, self.logger).create(
            {
                "email": self.settings.admin_email,
                "password": self.settings.admin_password,
                "name": "Admin User",
                "role": UserRole.ADMIN.value,
            },
            check_strength=False,
        )
        return 1

    def seed_projects(self) -> int:
        if not self._is_empty(Project):
            return 0
        skills = SkillManager(self.session, self.logger)
        projects = ProjectManager(self.session, self.logger)
        entries = self.data.get("projects") or []
        for entry in entries:
            metadata = dict(entry)
            skill_names = metadata.pop("skills", []) or []
            metadata["skill_ids"] = [
                skill.id
                for skill in (skills.get_by_name(name) for name in skill_names)
                if skill is not None
            ]
            projects.create(metadata)
        return len(entries)

    def seed_blog_posts(self) -> int:
        if not self._is_empty(BlogPost):
            return 0
        posts = BlogPostManager(self.session, self.logger)
        entries = self.data.get("blog_posts") or []
        for entry in entries:
            posts.create(dict(entry))
        return len(entries)
