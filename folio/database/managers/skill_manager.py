#!/usr/bin/env python3
"""
skill_manager.py
--------------------
Manages Skill entities shown on the about page and linked to projects.

Usage:
    skills = SkillManager(session, logger)

    skills.create({"name": "TypeScript", "category": "language", "proficiency": 4})
    frontend = skills.get_by_category("frontend")
    top = skills.get_top_skills(limit=5)
"""
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select

from folio.core.exceptions import ConflictError, ValidationError
from folio.core.validators import DataValidator
from folio.database.decorators import (
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from folio.database.models import Skill, SkillCategory
from folio.database.pagination import PaginatedResult, paginate
from .base_manager import BaseManager


def _normalize_category(value: Any) -> Optional[str]:
    return DataValidator.normalize_enum(value, SkillCategory.choices(), "category")


def _normalize_proficiency(value: Any) -> Optional[int]:
    level = DataValidator.normalize_int(value)
    if level is None and value is not None:
        raise ValidationError(f"Invalid proficiency '{value}'", field="proficiency")
    if level is not None and not 1 <= level <= 5:
        raise ValidationError("Proficiency must be between 1 and 5", field="proficiency")
    return level


SCALAR_FIELDS = [
    ("name", DataValidator.normalize_string),
    ("category", _normalize_category),
    ("proficiency", _normalize_proficiency),
    ("description", DataValidator.normalize_text, True),
    ("icon_url", DataValidator.normalize_string, True),
    ("years_experience", DataValidator.normalize_int, True),
]


class SkillManager(BaseManager):
    """
    Manages Skill table operations.
    """

    @handle_db_errors
    @log_database_operation("get_all_skills")
    def get_all(
        self,
        category: Optional[str] = None,
        min_proficiency: Optional[int] = None,
        search: Optional[str] = None,
        limit: Optional[int] = 100,
        offset: Optional[int] = 0,
    ) -> PaginatedResult[Skill]:
        """
        List skills ordered by name.

        Args:
            category: One of SkillCategory
            min_proficiency: Lowest proficiency to include
            search: Substring of name or description
            limit: Page size
            offset: Rows to skip
        """
        stmt = select(Skill)
        if category:
            stmt = stmt.where(Skill.category == _normalize_category(category))
        if min_proficiency is not None:
            stmt = stmt.where(Skill.proficiency >= int(min_proficiency))
        stmt = self._apply_search(stmt, search, [Skill.name, Skill.description])
        stmt = stmt.order_by(Skill.name.asc(), Skill.id.asc())
        return paginate(self.session, stmt, limit, offset)

    @handle_db_errors
    @log_database_operation("get_skill_by_id")
    def get_by_id(self, skill_id: Any) -> Optional[Skill]:
        return self._get_by_id(Skill, skill_id)

    @handle_db_errors
    @log_database_operation("get_skill_by_name")
    def get_by_name(self, name: str) -> Optional[Skill]:
        return self._get_by_field(Skill, "name", name)

    @handle_db_errors
    def get_by_category(self, category: str) -> List[Skill]:
        """Skills in a category, strongest first."""
        stmt = (
            select(Skill)
            .where(Skill.category == _normalize_category(category))
            .order_by(Skill.proficiency.desc(), Skill.name.asc())
        )
        return list(self.session.execute(stmt).scalars())

    @handle_db_errors
    def get_categories(self) -> List[str]:
        """Distinct categories in use, sorted."""
        stmt = select(Skill.category).distinct()
        return sorted(
            getattr(category, "value", category)
            for category in self.session.execute(stmt).scalars()
        )

    @handle_db_errors
    def get_top_skills(self, limit: int = 5) -> List[Skill]:
        stmt = (
            select(Skill)
            .order_by(Skill.proficiency.desc(), Skill.name.asc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    @handle_db_errors
    @log_database_operation("create_skill")
    @validate_metadata(["name"])
    def create(self, metadata: Dict[str, Any]) -> Skill:
        """
        Create a skill.

        Args:
            metadata: name (required), category (default other),
                proficiency 1-5 (default 3), description, icon_url,
                years_experience

        Raises:
            ConflictError: If the name is taken
            ValidationError: On a bad category or proficiency
        """
        name = DataValidator.normalize_string(metadata["name"])
        if self._exists(Skill, "name", name):
            raise ConflictError(f"Skill already exists: {name}")

        skill = Skill(category=SkillCategory.OTHER.value, proficiency=3)
        self._update_scalar_fields(skill, metadata, SCALAR_FIELDS)
        self.session.add(skill)
        self.session.flush()
        return skill

    @handle_db_errors
    @log_database_operation("update_skill")
    def update(
        self, skill: Union[Skill, int], metadata: Dict[str, Any]
    ) -> Optional[Skill]:
        target = self._resolve_optional(skill, Skill)
        if target is None:
            return None

        name = DataValidator.normalize_string(metadata.get("name"))
        if name and name != target.name and self._exists(
            Skill, "name", name, exclude_id=target.id
        ):
            raise ConflictError(f"Skill already exists: {name}")

        if self._update_scalar_fields(target, metadata, SCALAR_FIELDS):
            self.session.flush()
        return target

    @handle_db_errors
    @log_database_operation("delete_skill")
    def delete(self, skill: Union[Skill, int]) -> bool:
        """Delete a skill and unlink it from every project."""
        target = self._resolve_optional(skill, Skill)
        if target is None:
            return False

        target.projects = []
        self.session.delete(target)
        self.session.flush()
        return True
