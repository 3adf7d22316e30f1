"""
test_skill_manager.py
---------------------
Unit tests for SkillManager.

Usage:
    python -m pytest tests/unit/managers/test_skill_manager.py -v
"""
import pytest

from folio.core.exceptions import ConflictError, ValidationError
from folio.database.models import SkillCategory


class TestSkillCreate:
    """Test SkillManager.create()."""

    def test_defaults(self, skill_manager):
        """Test category and proficiency defaults."""
        skill = skill_manager.create({"name": "Git"})
        assert skill.category == SkillCategory.OTHER
        assert skill.proficiency == 3

    def test_full(self, skill_manager):
        """Test optional columns are stored."""
        skill = skill_manager.create(
            {
                "name": "TypeScript",
                "category": "language",
                "proficiency": "4",
                "icon_url": "/icons/ts.svg",
                "years_experience": 5,
            }
        )
        assert skill.category == SkillCategory.LANGUAGE
        assert skill.proficiency == 4
        assert skill.icon_url == "/icons/ts.svg"
        assert skill.years_experience == 5

    def test_duplicate_name(self, skill_manager):
        """Test names are unique."""
        skill_manager.create({"name": "HTML"})
        with pytest.raises(ConflictError):
            skill_manager.create({"name": "HTML"})

    @pytest.mark.parametrize("proficiency", [0, 6, "expert"])
    def test_invalid_proficiency(self, skill_manager, proficiency):
        """Test proficiency must be an integer from 1 to 5."""
        with pytest.raises(ValidationError) as exc_info:
            skill_manager.create({"name": "Rust", "proficiency": proficiency})
        assert exc_info.value.field == "proficiency"

    def test_invalid_category(self, skill_manager):
        """Test unknown categories are rejected."""
        with pytest.raises(ValidationError):
            skill_manager.create({"name": "Rust", "category": "systems"})


class TestSkillQueries:
    """Test SkillManager listing helpers."""

    @pytest.fixture
    def skill_set(self, skill_manager):
        for name, category, level in [
            ("SvelteKit", "frontend", 4),
            ("CSS/SCSS", "frontend", 5),
            ("Node.js", "backend", 4),
            ("SQLite", "database", 3),
        ]:
            skill_manager.create({"name": name, "category": category, "proficiency": level})

    def test_get_all_ordered_by_name(self, skill_manager, skill_set):
        """Test listing is alphabetical."""
        assert [s.name for s in skill_manager.get_all()] == [
            "CSS/SCSS",
            "Node.js",
            "SQLite",
            "SvelteKit",
        ]

    def test_get_all_filters(self, skill_manager, skill_set):
        """Test category and proficiency filters."""
        assert skill_manager.get_all(category="frontend").total == 2
        assert skill_manager.get_all(min_proficiency=4).total == 3
        assert skill_manager.get_all(search="node").total == 1

    def test_get_by_category(self, skill_manager, skill_set):
        """Test category listing is strongest first."""
        assert [s.name for s in skill_manager.get_by_category("frontend")] == [
            "CSS/SCSS",
            "SvelteKit",
        ]

    def test_get_categories(self, skill_manager, skill_set):
        """Test distinct categories in use."""
        assert skill_manager.get_categories() == ["backend", "database", "frontend"]

    def test_get_top_skills(self, skill_manager, skill_set):
        """Test top skills by proficiency."""
        assert skill_manager.get_top_skills(limit=1)[0].name == "CSS/SCSS"


class TestSkillUpdateDelete:
    """Test SkillManager.update() and delete()."""

    def test_update(self, skill_manager):
        """Test fields change in place."""
        skill = skill_manager.create({"name": "Docker"})
        skill_manager.update(skill.id, {"proficiency": 5, "category": "tool"})
        assert skill.proficiency == 5
        assert skill.category == SkillCategory.TOOL

    def test_update_name_conflict(self, skill_manager):
        """Test renaming onto an existing name raises."""
        skill_manager.create({"name": "Vue"})
        react = skill_manager.create({"name": "React"})
        with pytest.raises(ConflictError):
            skill_manager.update(react, {"name": "Vue"})

    def test_update_missing(self, skill_manager):
        """Test updating a missing skill returns None."""
        assert skill_manager.update(999, {"name": "Ghost"}) is None

    def test_delete_unlinks_projects(self, skill_manager, project_manager):
        """Test deleting a linked skill keeps the project."""
        skill = skill_manager.create({"name": "Go"})
        project = project_manager.create({"title": "Service", "skill_ids": [skill.id]})

        assert skill_manager.delete(skill) is True
        assert project_manager.get_by_id(project.id) is not None
        assert skill_manager.delete(skill.id) is False
