"""
conftest.py
-----------
Helpers for API integration tests.

Rows are created in their own committed session so the request
sessions opened by the test client can see them.
"""
import pytest


def _create(db, manager_name, metadata):
    with db.session_scope():
        return getattr(db, manager_name).create(metadata).id


@pytest.fixture
def make_project(test_db):
    """Factory committing a project and returning its id."""
    def factory(**fields):
        fields.setdefault("title", "Sample Project")
        fields.setdefault("description", "A sample project")
        return _create(test_db, "projects", fields)
    return factory


@pytest.fixture
def make_post(test_db):
    """Factory committing a blog post and returning its id."""
    def factory(**fields):
        fields.setdefault("title", "Sample Post")
        fields.setdefault("content", "# Sample\n\nBody text.")
        return _create(test_db, "blog_posts", fields)
    return factory


@pytest.fixture
def make_skill(test_db):
    """Factory committing a skill and returning its id."""
    def factory(**fields):
        fields.setdefault("name", "Python")
        fields.setdefault("category", "language")
        fields.setdefault("proficiency", 4)
        return _create(test_db, "skills", fields)
    return factory
