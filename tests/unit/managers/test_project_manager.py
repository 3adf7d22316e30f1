"""
test_project_manager.py
-----------------------
Unit tests for ProjectManager CRUD, filtering and related-project queries.

Usage:
    python -m pytest tests/unit/managers/test_project_manager.py -v
"""
import pytest
from sqlalchemy import event

from folio.core.exceptions import ConflictError, ValidationError
from folio.database.models import Project, ProjectStatus


@pytest.fixture
def skills(skill_manager):
    """Two persisted skills."""
    return {
        "svelte": skill_manager.create({"name": "SvelteKit", "category": "frontend"}),
        "sqlite": skill_manager.create({"name": "SQLite", "category": "database"}),
    }


class TestProjectCreate:
    """Test ProjectManager.create()."""

    def test_create_minimal(self, project_manager):
        """Test defaults for a project with only a title."""
        project = project_manager.create({"title": "Weather Analytics Platform"})

        assert project.id is not None
        assert project.slug == "weather-analytics-platform"
        assert project.status == ProjectStatus.PLANNING
        assert project.featured is False
        assert project.technologies == []
        assert project.skills == []

    def test_create_full(self, project_manager, skills):
        """Test every field and skill links."""
        project = project_manager.create(
            {
                "title": "E-commerce Dashboard",
                "description": "Admin dashboard",
                "technologies": "SvelteKit, TypeScript",
                "status": "completed",
                "featured": "true",
                "start_date": "2023-06-01",
                "completion_date": "2023-09-15",
                "challenges": ["Real-time stock"],
                "skill_ids": [skills["svelte"].id, skills["sqlite"].id],
            }
        )

        assert project.technologies == ["SvelteKit", "TypeScript"]
        assert project.status == ProjectStatus.COMPLETED
        assert project.featured is True
        assert project.start_date.isoformat() == "2023-06-01"
        assert project.challenges == ["Real-time stock"]
        assert project.skill_names == ["SQLite", "SvelteKit"]

    def test_list_fields_round_trip_exactly(self, test_db):
        """Test list columns read back as written in a new session."""
        lists = {
            "technologies": ["Go", "Go", " Rust "],
            "challenges": ["Latency", "latency"],
            "solutions": ["Cache "],
            "skills_demonstrated": ["Go"],
        }
        with test_db.session_scope():
            project_id = test_db.projects.create({"title": "Proxy", **lists}).id

        with test_db.session_scope():
            project = test_db.projects.get_by_id(project_id)
            for field_name, expected in lists.items():
                assert getattr(project, field_name) == expected

    def test_create_requires_title(self, project_manager):
        """Test a missing title is rejected."""
        with pytest.raises(ValidationError):
            project_manager.create({"description": "No title"})

    def test_duplicate_title_gets_suffix(self, project_manager):
        """Test generated slugs are made unique with -1, -2."""
        project_manager.create({"title": "Portfolio Website"})
        second = project_manager.create({"title": "Portfolio Website"})
        third = project_manager.create({"title": "Portfolio Website"})

        assert second.slug == "portfolio-website-1"
        assert third.slug == "portfolio-website-2"

    def test_generated_slug_drops_symbols(self, project_manager):
        """Test generated slugs drop '&' and accented letters."""
        project = project_manager.create({"title": "Svelte & Café"})
        again = project_manager.create({"title": "Svelte & Café"})

        assert project.slug == "svelte-caf"
        assert again.slug == "svelte-caf-1"

    def test_explicit_slug_conflict(self, project_manager):
        """Test an explicit slug that is taken raises ConflictError."""
        project_manager.create({"title": "One", "slug": "shared"})
        with pytest.raises(ConflictError):
            project_manager.create({"title": "Two", "slug": "shared"})

    def test_invalid_slug(self, project_manager):
        """Test an explicit slug must be lowercase and hyphenated."""
        with pytest.raises(ValidationError) as exc_info:
            project_manager.create({"title": "Bad", "slug": "Not A Slug"})
        assert exc_info.value.field == "slug"

    def test_invalid_status(self, project_manager):
        """Test unknown statuses are rejected."""
        with pytest.raises(ValidationError):
            project_manager.create({"title": "Bad", "status": "done"})

    def test_unknown_skill_id(self, project_manager):
        """Test linking a missing skill raises ValidationError."""
        with pytest.raises(ValidationError):
            project_manager.create({"title": "Orphan", "skill_ids": [999]})


class TestProjectQueries:
    """Test ProjectManager listing and lookups."""

    @pytest.fixture
    def catalog(self, project_manager, skills):
        """Three projects with different states."""
        return [
            project_manager.create(
                {
                    "title": "Task Manager",
                    "status": "completed",
                    "featured": True,
                    "technologies": ["SvelteKit", "SQLite"],
                    "skill_ids": [skills["svelte"].id],
                }
            ),
            project_manager.create(
                {
                    "title": "Weather Platform",
                    "status": "in-progress",
                    "description": "Charts of weather data",
                    "technologies": ["Python", "SQLite"],
                    "skill_ids": [skills["sqlite"].id],
                }
            ),
            project_manager.create(
                {"title": "CLI Toolkit", "technologies": ["Python", "click"]}
            ),
        ]

    def test_get_all_paginates(self, project_manager, catalog):
        """Test limit and total."""
        page = project_manager.get_all(limit=2)
        assert page.total == 3
        assert len(page.data) == 2
        assert page.has_next is True

    def test_filter_status(self, project_manager, catalog):
        """Test status filter."""
        page = project_manager.get_all(status="in-progress")
        assert [p.title for p in page] == ["Weather Platform"]

    def test_filter_featured(self, project_manager, catalog):
        """Test featured filter in both directions."""
        assert project_manager.get_all(featured=True).total == 1
        assert project_manager.get_all(featured=False).total == 2

    def test_filter_skill(self, project_manager, catalog):
        """Test skill filter by name or slugified name."""
        assert [p.title for p in project_manager.get_all(skill_slug="sveltekit")] == [
            "Task Manager"
        ]
        assert project_manager.get_all(skill_slug="SQLite").total == 1

    def test_filter_technology(self, project_manager, catalog):
        """Test technology filter matches whole list entries."""
        assert project_manager.get_all(technology="Python").total == 2
        assert project_manager.get_all(technology="Pyth").total == 0

    def test_search(self, project_manager, catalog):
        """Test search across title and description."""
        assert [p.title for p in project_manager.search("weather data")] == [
            "Weather Platform"
        ]
        assert project_manager.get_all(search="toolkit").total == 1

    def test_ordering(self, project_manager, catalog):
        """Test whitelisted ordering by title."""
        page = project_manager.get_all(order_by="title", order_direction="asc")
        assert [p.title for p in page] == ["CLI Toolkit", "Task Manager", "Weather Platform"]

    def test_get_by_slug_and_id(self, project_manager, catalog):
        """Test lookups and misses."""
        project = project_manager.get_by_slug("task-manager")
        assert project_manager.get_by_id(project.id) is project
        assert project_manager.get_by_id("abc") is None
        assert project_manager.get_by_slug("missing") is None

    def test_get_featured(self, project_manager, catalog):
        """Test only featured projects are returned."""
        assert [p.slug for p in project_manager.get_featured()] == ["task-manager"]

    def test_get_related_by_overlap(self, project_manager, catalog):
        """Test related projects share technologies, most overlap first."""
        weather = catalog[1]
        related = project_manager.get_related(weather)
        assert {p.title for p in related} == {"Task Manager", "CLI Toolkit"}
        assert weather not in related

    def test_get_related_without_technologies(self, project_manager):
        """Test projects without technologies have no related projects."""
        lonely = project_manager.create({"title": "Lonely"})
        assert project_manager.get_related(lonely) == []

    def test_list_technologies(self, project_manager, catalog):
        """Test distinct technologies sorted case-insensitively."""
        assert project_manager.list_technologies() == ["click", "Python", "SQLite", "SvelteKit"]

    def test_stats(self, project_manager, catalog):
        """Test status counts."""
        assert project_manager.get_stats() == {
            "total": 3,
            "completed": 1,
            "in_progress": 1,
            "planning": 1,
            "on_hold": 0,
            "featured": 1,
        }


class TestProjectUpdateDelete:
    """Test ProjectManager.update() and delete()."""

    def test_update_fields(self, project_manager):
        """Test present keys change and absent keys are kept."""
        project = project_manager.create({"title": "Draft", "description": "Old"})

        updated = project_manager.update(
            project.id, {"description": "New", "github_url": None, "status": "on-hold"}
        )

        assert updated.description == "New"
        assert updated.status == ProjectStatus.ON_HOLD
        assert updated.title == "Draft"

    def test_update_with_same_values_issues_no_update(self, project_manager, db_session):
        """Test an update that changes nothing sends no UPDATE statement."""
        values = {
            "title": "Unchanged",
            "slug": "unchanged",
            "description": "Same text",
            "technologies": ["Go", "SQLite"],
            "status": "completed",
            "featured": True,
            "start_date": "2024-02-01",
        }
        project = project_manager.create(dict(values))
        before = project.updated_at
        statements = []

        def record(conn, cursor, statement, parameters, context, executemany):
            statements.append(statement)

        engine = db_session.get_bind()
        event.listen(engine, "before_cursor_execute", record)
        try:
            assert project_manager.update(project.id, dict(values)) is project
        finally:
            event.remove(engine, "before_cursor_execute", record)

        assert not [s for s in statements if s.lstrip().upper().startswith("UPDATE")]
        assert project.updated_at == before

    def test_update_replaces_skills(self, project_manager, skills):
        """Test skill_ids replaces the linked skills."""
        project = project_manager.create(
            {"title": "Linked", "skill_ids": [skills["svelte"].id]}
        )
        project_manager.update(project, {"skill_ids": [skills["sqlite"].id]})
        assert project.skill_names == ["SQLite"]

    def test_update_slug_conflict(self, project_manager):
        """Test renaming to a taken slug raises ConflictError."""
        project_manager.create({"title": "First"})
        second = project_manager.create({"title": "Second"})
        with pytest.raises(ConflictError):
            project_manager.update(second, {"slug": "first"})

    def test_update_missing(self, project_manager):
        """Test updating a missing project returns None."""
        assert project_manager.update(404, {"title": "Ghost"}) is None

    def test_delete(self, project_manager, skills, db_session):
        """Test deletion removes the row but keeps linked skills."""
        project = project_manager.create(
            {"title": "Doomed", "skill_ids": [skills["svelte"].id]}
        )
        project_id = project.id

        assert project_manager.delete(project_id) is True
        assert db_session.get(Project, project_id) is None
        assert skills["svelte"].id is not None
        assert project_manager.delete(project_id) is False
