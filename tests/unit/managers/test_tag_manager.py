"""
test_tag_manager.py
-------------------
Unit tests for TagManager.

Usage:
    python -m pytest tests/unit/managers/test_tag_manager.py -v
"""
import pytest

from folio.core.exceptions import ConflictError, ValidationError


class TestTagCreate:
    """Test create and get_or_create."""

    def test_create_derives_slug(self, tag_manager):
        """Test the slug is derived from the name."""
        tag = tag_manager.create({"name": "Web Development", "description": "All things web"})
        assert tag.slug == "web-development"
        assert tag.description == "All things web"

    def test_create_duplicate_name(self, tag_manager):
        """Test names are unique regardless of case."""
        tag_manager.create({"name": "Python"})
        with pytest.raises(ConflictError):
            tag_manager.create({"name": "python"})

    def test_create_duplicate_slug(self, tag_manager):
        """Test an explicit slug already in use raises."""
        tag_manager.create({"name": "Go", "slug": "golang"})
        with pytest.raises(ConflictError):
            tag_manager.create({"name": "Golang", "slug": "golang"})

    def test_get_or_create_reuses(self, tag_manager):
        """Test a second lookup returns the same row."""
        first = tag_manager.get_or_create("SvelteKit")
        assert tag_manager.get_or_create("sveltekit") is first

    def test_get_or_create_unique_slug(self, tag_manager):
        """Test names that slugify alike get suffixed slugs."""
        tag_manager.get_or_create("C")
        cpp = tag_manager.get_or_create("C++")
        assert cpp.slug == "c-1"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_get_or_create_blank(self, tag_manager, name):
        """Test blank names are rejected."""
        with pytest.raises(ValidationError):
            tag_manager.get_or_create(name)


class TestTagQueries:
    """Test lookups and counts."""

    def test_lookups(self, tag_manager):
        """Test id, slug and case-insensitive name lookups."""
        tag = tag_manager.create({"name": "TypeScript"})
        assert tag_manager.get_by_id(tag.id) is tag
        assert tag_manager.get_by_slug("typescript") is tag
        assert tag_manager.get_by_name("TYPESCRIPT") is tag
        assert tag_manager.get_by_name("") is None

    def test_get_with_post_counts(self, tag_manager, blog_post_manager):
        """Test only published posts are counted."""
        blog_post_manager.create(
            {"title": "One", "tags": ["Svelte", "CSS"], "status": "published"}
        )
        blog_post_manager.create({"title": "Two", "tags": ["Svelte"], "status": "published"})
        blog_post_manager.create({"title": "Draft", "tags": ["CSS", "Hidden"]})

        counts = [(tag.name, count) for tag, count in tag_manager.get_with_post_counts()]

        assert counts == [("Svelte", 2), ("CSS", 1)]


class TestTagUpdateDelete:
    """Test update and delete."""

    def test_update(self, tag_manager):
        """Test rename, new slug and description."""
        tag = tag_manager.create({"name": "JS"})
        tag_manager.update(tag.id, {"name": "JavaScript", "slug": "javascript", "description": None})
        assert tag.name == "JavaScript"
        assert tag.slug == "javascript"
        assert tag.description is None

    def test_update_conflict(self, tag_manager):
        """Test renaming onto another tag raises."""
        tag_manager.create({"name": "React"})
        vue = tag_manager.create({"name": "Vue"})
        with pytest.raises(ConflictError):
            tag_manager.update(vue, {"name": "react"})

    def test_update_missing(self, tag_manager):
        """Test a missing tag returns None."""
        assert tag_manager.update(999, {"name": "Ghost"}) is None

    def test_delete_strips_name_from_posts(self, tag_manager, blog_post_manager):
        """Test posts lose the deleted tag from their tag list."""
        post = blog_post_manager.create({"title": "Post", "tags": ["Keep", "Drop"]})
        drop = tag_manager.get_by_name("Drop")

        assert tag_manager.delete(drop) is True
        assert post.tags == ["Keep"]
        assert [tag.name for tag in post.linked_tags] == ["Keep"]
        assert tag_manager.delete(999) is False
