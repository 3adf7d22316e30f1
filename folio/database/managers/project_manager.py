#!/usr/bin/env python3
"""
project_manager.py
--------------------
Manages Project entities and their links to skills.

Key Features:
    - Filtered, paginated listing (status, featured, skill, technology, search)
    - Slug lookup and automatic slug generation
    - Skill association through project_skills, replaced atomically
    - Featured/related helpers and status statistics

Usage:
    projects = ProjectManager(session, logger)

    project = projects.create({
        "title": "Weather Analytics Platform",
        "description": "Real-time weather dashboards",
        "technologies": ["Python", "FastAPI"],
        "skill_ids": [1, 4],
    })
    page = projects.get_all(status="completed", limit=6)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, List, Optional, Union

# --- Third party imports ---
from sqlalchemy import Text, func, select, type_coerce

# --- Local imports ---
from folio.core.exceptions import ConflictError, ValidationError
from folio.core.validators import DataValidator, validate_slug
from folio.database.decorators import (
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from folio.database.models import Project, ProjectStatus, Skill, project_skills
from folio.database.pagination import PaginatedResult, paginate
from folio.utils.slugify import slugify, title_slug
from .base_manager import BaseManager

ORDERABLE_FIELDS = (
    "created_at",
    "updated_at",
    "title",
    "start_date",
    "completion_date",
    "status",
)


def _normalize_status(value: Any) -> Optional[str]:
    return DataValidator.normalize_enum(value, ProjectStatus.choices(), "status")


SCALAR_FIELDS = [
    ("title", DataValidator.normalize_string),
    ("description", DataValidator.normalize_text),
    ("long_description", DataValidator.normalize_text, True),
    ("short_description", DataValidator.normalize_text, True),
    ("technologies", DataValidator.normalize_string_list),
    ("github_url", DataValidator.normalize_string, True),
    ("demo_url", DataValidator.normalize_string, True),
    ("image_url", DataValidator.normalize_string, True),
    ("status", _normalize_status),
    ("featured", DataValidator.normalize_bool),
    ("start_date", DataValidator.normalize_date, True),
    ("completion_date", DataValidator.normalize_date, True),
    ("challenges", DataValidator.normalize_string_list),
    ("solutions", DataValidator.normalize_string_list),
    ("skills_demonstrated", DataValidator.normalize_string_list),
    ("meta_description", DataValidator.normalize_text, True),
]


class ProjectManager(BaseManager):
    """
    Manages Project table operations and the project_skills links.
    """

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_all_projects")
    def get_all(
        self,
        status: Optional[str] = None,
        featured: Optional[bool] = None,
        skill_slug: Optional[str] = None,
        technology: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = 10,
        offset: Optional[int] = 0,
        order_by: str = "created_at",
        order_direction: str = "desc",
    ) -> PaginatedResult[Project]:
        """
        List projects matching every given filter.

        Args:
            status: One of ProjectStatus
            featured: Only featured (True) or non-featured (False)
            skill_slug: Skill name or slugified name linked to the project
            technology: Technology name contained in the technologies list
            search: Substring of title, description or long_description
            limit: Page size
            offset: Rows to skip
            order_by: Column to order by (whitelisted)
            order_direction: 'asc' or 'desc'

        Returns:
            PaginatedResult of Project
        """
        stmt = select(Project)

        if status:
            stmt = stmt.where(Project.status == _normalize_status(status))
        if featured is not None:
            stmt = stmt.where(Project.featured.is_(bool(featured)))
        if skill_slug:
            skill_ids = self._skill_ids_for(skill_slug)
            stmt = stmt.where(
                Project.id.in_(
                    select(project_skills.c.project_id).where(
                        project_skills.c.skill_id.in_(skill_ids)
                    )
                )
            )
        if technology:
            stmt = stmt.where(
                type_coerce(Project.technologies, Text).like(f'%"{technology.strip()}"%')
            )

        stmt = self._apply_search(
            stmt,
            search,
            [Project.title, Project.description, Project.long_description],
        )
        stmt = self._apply_ordering(
            stmt, Project, order_by, order_direction, ORDERABLE_FIELDS
        )
        return paginate(self.session, stmt, limit, offset)

    def _skill_ids_for(self, skill_ref: str) -> List[int]:
        """Ids of skills whose name or slugified name matches skill_ref."""
        ref = skill_ref.strip().lower()
        return [
            skill.id
            for skill in self.session.query(Skill).all()
            if skill.name.lower() == ref or slugify(skill.name) == ref
        ]

    @handle_db_errors
    @log_database_operation("get_project_by_id")
    def get_by_id(self, project_id: Any) -> Optional[Project]:
        """Retrieve a project by id, None when missing."""
        return self._get_by_id(Project, project_id)

    @handle_db_errors
    @log_database_operation("get_project_by_slug")
    def get_by_slug(self, slug: str) -> Optional[Project]:
        """Retrieve a project by slug, None when missing."""
        return self._get_by_field(Project, "slug", slug)

    def exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        return self._exists(Project, "slug", slug, exclude_id=exclude_id)

    @handle_db_errors
    def get_featured(self, limit: int = 3) -> List[Project]:
        """Featured projects, newest first."""
        stmt = (
            select(Project)
            .where(Project.featured.is_(True))
            .order_by(Project.created_at.desc(), Project.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    @handle_db_errors
    def get_by_status(self, status: str) -> List[Project]:
        """All projects with the given status, newest first."""
        stmt = (
            select(Project)
            .where(Project.status == _normalize_status(status))
            .order_by(Project.created_at.desc(), Project.id.desc())
        )
        return list(self.session.execute(stmt).scalars())

    @handle_db_errors
    def list_all(self) -> List[Project]:
        """Every project, newest first (unpaginated)."""
        stmt = select(Project).order_by(Project.created_at.desc(), Project.id.desc())
        return list(self.session.execute(stmt).scalars())

    def search(self, query: str, limit: int = 10) -> List[Project]:
        """Projects whose title or descriptions contain query."""
        return self.get_all(search=query, limit=limit).data

    @handle_db_errors
    def get_related(self, project: Union[Project, int], limit: int = 3) -> List[Project]:
        """
        Other projects sharing at least one technology, most overlap first.
        """
        target = self._resolve_optional(project, Project)
        if target is None:
            return []
        wanted = {tech.lower() for tech in target.technologies}
        if not wanted:
            return []

        scored = []
        for other in self.list_all():
            if other.id == target.id:
                continue
            overlap = len(wanted & {tech.lower() for tech in other.technologies})
            if overlap:
                scored.append((overlap, other))

        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [other for _, other in scored[:limit]]

    @handle_db_errors
    def list_technologies(self) -> List[str]:
        """Sorted distinct technology names across all projects."""
        names = set()
        for technologies in self.session.execute(select(Project.technologies)).scalars():
            names.update(technologies)
        return sorted(names, key=str.lower)

    @handle_db_errors
    def get_status_counts(self) -> Dict[str, int]:
        """Count of projects per status, every status present."""
        counts = {status: 0 for status in ProjectStatus.choices()}
        stmt = select(Project.status, func.count()).group_by(Project.status)
        for status, count in self.session.execute(stmt):
            counts[getattr(status, "value", status)] = count
        return counts

    @handle_db_errors
    @log_database_operation("project_stats")
    def get_stats(self) -> Dict[str, int]:
        """Totals for the admin dashboard and /api/projects/stats."""
        counts = self.get_status_counts()
        return {
            "total": sum(counts.values()),
            "completed": counts[ProjectStatus.COMPLETED.value],
            "in_progress": counts[ProjectStatus.IN_PROGRESS.value],
            "planning": counts[ProjectStatus.PLANNING.value],
            "on_hold": counts[ProjectStatus.ON_HOLD.value],
            "featured": self._count(Project, Project.featured.is_(True)),
        }

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def generate_slug(self, title: str, exclude_id: Optional[int] = None) -> str:
        """Slug from title, suffixed -1, -2... until unused."""
        base = title_slug(title) or "project"
        slug, counter = base, 1
        while self.exists(slug, exclude_id=exclude_id):
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    def _check_slug(self, slug: str, exclude_id: Optional[int] = None) -> str:
        error = validate_slug(slug)
        if error:
            raise ValidationError(error, field="slug")
        if self.exists(slug, exclude_id=exclude_id):
            raise ConflictError(f"Project slug '{slug}' is already taken")
        return slug

    @handle_db_errors
    @log_database_operation("create_project")
    @validate_metadata(["title"])
    def create(self, metadata: Dict[str, Any]) -> Project:
        """
        Create a project.

        Args:
            metadata: Project fields. Required: title. Optional: slug
                (derived from title when missing), status (default
                planning), skill_ids (skills to link), every other column.

        Returns:
            The flushed Project with its skills loaded

        Raises:
            ValidationError: Missing title, bad slug or status
            ConflictError: Slug already used
        """
        slug = DataValidator.normalize_string(metadata.get("slug"))
        slug = self._check_slug(slug) if slug else self.generate_slug(metadata["title"])

        project = Project(
            slug=slug,
            description="",
            status=ProjectStatus.PLANNING.value,
            featured=False,
            technologies=[],
            challenges=[],
            solutions=[],
            skills_demonstrated=[],
        )
        self._update_scalar_fields(project, metadata, SCALAR_FIELDS)

        self.session.add(project)
        self._execute_with_retry(self.session.flush)

        if metadata.get("skill_ids") is not None:
            self._replace_collection(project, "skills", metadata["skill_ids"], Skill)

        self.session.refresh(project)
        if self.logger:
            self.logger.log_debug(
                f"Created project: {project.slug}", {"project_id": project.id}
            )
        return project

    @handle_db_errors
    @log_database_operation("update_project")
    def update(
        self, project: Union[Project, int], metadata: Dict[str, Any]
    ) -> Optional[Project]:
        """
        Update the fields present in metadata.

        Keys with None values are ignored. skill_ids, when present,
        replaces the linked skills in the same transaction.

        Returns:
            Updated project, or None when it does not exist
        """
        target = self._resolve_optional(project, Project)
        if target is None:
            return None

        slug = DataValidator.normalize_string(metadata.get("slug"))
        if slug and slug != target.slug:
            target.slug = self._check_slug(slug, exclude_id=target.id)

        changed = self._update_scalar_fields(target, metadata, SCALAR_FIELDS)

        if metadata.get("skill_ids") is not None:
            self._replace_collection(target, "skills", metadata["skill_ids"], Skill)
            changed.append("skills")

        if changed:
            self._execute_with_retry(self.session.flush)
            if self.logger:
                self.logger.log_debug(
                    f"Updated project: {target.slug}",
                    {"project_id": target.id, "fields": changed},
                )
        return target

    @handle_db_errors
    @log_database_operation("delete_project")
    def delete(self, project: Union[Project, int]) -> bool:
        """
        Delete a project and its skill links.

        Returns:
            True when a row was deleted
        """
        target = self._resolve_optional(project, Project)
        if target is None:
            return False

        target.skills = []
        self.session.delete(target)
        self._execute_with_retry(self.session.flush)
        return True
