"""Tests for PaginatedResult and paginate()."""
import pytest
from sqlalchemy import select

from folio.database.models import Skill, SkillCategory
from folio.database.pagination import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    PaginatedResult,
    clamp_limit,
    paginate,
)


class TestPaginatedResult:
    """Tests for derived paging fields."""

    def test_middle_page(self):
        """Second page of three."""
        result = PaginatedResult(data=[1] * 10, total=25, limit=10, offset=10)
        assert result.page == 2
        assert result.per_page == 10
        assert result.total_pages == 3
        assert result.has_next is True
        assert result.has_prev is True

    def test_last_page(self):
        """The last page has no next page."""
        result = PaginatedResult(data=[1] * 5, total=25, limit=10, offset=20)
        assert result.page == 3
        assert result.has_next is False

    def test_empty_result(self):
        """No rows means zero pages."""
        result = PaginatedResult(total=0)
        assert result.total_pages == 0
        assert result.has_next is False
        assert result.has_prev is False
        assert len(result) == 0

    def test_map_and_to_dict(self):
        """map() converts items and keeps metadata; to_dict() serializes."""
        result = PaginatedResult(data=[1, 2], total=2, limit=10, offset=0)
        doubled = result.map(lambda x: x * 2)

        assert list(doubled) == [2, 4]
        assert doubled.total == 2
        assert result.to_dict(str) == {
            "data": ["1", "2"],
            "total": 2,
            "page": 1,
            "per_page": 10,
            "total_pages": 1,
            "has_next": False,
            "has_prev": False,
        }


class TestClampLimit:
    """Tests for clamp_limit()."""

    @pytest.mark.parametrize(
        "limit, offset, expected",
        [
            (None, None, (DEFAULT_LIMIT, 0)),
            (0, -5, (DEFAULT_LIMIT, 0)),
            (500, 3, (MAX_LIMIT, 3)),
            (25, 50, (25, 50)),
        ],
    )
    def test_clamping(self, limit, offset, expected):
        """Limits are bounded and offsets never negative."""
        assert clamp_limit(limit, offset) == expected


class TestPaginate:
    """Tests for paginate() against a real session."""

    def test_pages_through_rows(self, db_session):
        """COUNT covers every row, data only the requested slice."""
        for name in ["Alpha", "Beta", "Gamma", "Delta", "Epsilon"]:
            db_session.add(Skill(name=name, category=SkillCategory.TOOL, proficiency=3))
        db_session.flush()

        result = paginate(db_session, select(Skill).order_by(Skill.name), limit=2, offset=2)

        assert result.total == 5
        assert [skill.name for skill in result.data] == ["Delta", "Epsilon"]
        assert result.page == 2
        assert result.total_pages == 3

    def test_filtered_count(self, db_session):
        """The count respects the statement's filters."""
        db_session.add(Skill(name="Python", category=SkillCategory.LANGUAGE, proficiency=5))
        db_session.add(Skill(name="Docker", category=SkillCategory.TOOL, proficiency=3))
        db_session.flush()

        statement = select(Skill).where(Skill.category == SkillCategory.LANGUAGE)
        result = paginate(db_session, statement)

        assert result.total == 1
        assert result.data[0].name == "Python"
