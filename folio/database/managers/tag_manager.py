#!/usr/bin/env python3
"""
tag_manager.py
--------------------
Manages Tag entities and their links to blog posts.

A tag is a display name plus a unique URL slug. Blog posts keep their tag
names as a JSON list; BlogPostManager mirrors that list into Tag rows
through get_or_create().

Key Features:
    - CRUD operations for tags
    - Slug lookup and slug derivation from the name
    - Get-or-create semantics for tag lookup
    - Published post counts per tag

Usage:
    tags = TagManager(session, logger)

    tag = tags.get_or_create("SvelteKit")   # slug "sveltekit"
    popular = tags.get_with_post_counts()
"""
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import func, select

from folio.core.exceptions import ConflictError, ValidationError
from folio.core.validators import DataValidator
from folio.database.decorators import (
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from folio.database.models import BlogPost, PostStatus, Tag, blog_post_tags, utcnow
from folio.utils.slugify import slugify
from .base_manager import BaseManager


class TagManager(BaseManager):
    """
    Manages Tag table operations.
    """

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_tag_by_id")
    def get_by_id(self, tag_id: Any) -> Optional[Tag]:
        return self._get_by_id(Tag, tag_id)

    @handle_db_errors
    @log_database_operation("get_tag_by_slug")
    def get_by_slug(self, slug: str) -> Optional[Tag]:
        return self._get_by_field(Tag, "slug", slug)

    @handle_db_errors
    @log_database_operation("get_tag_by_name")
    def get_by_name(self, name: str) -> Optional[Tag]:
        """Case-insensitive lookup by display name."""
        normalized = DataValidator.normalize_string(name)
        if not normalized:
            return None
        stmt = select(Tag).where(func.lower(Tag.name) == normalized.lower())
        return self.session.execute(stmt).scalars().first()

    @handle_db_errors
    @log_database_operation("get_all_tags")
    def get_all(self) -> List[Tag]:
        """All tags ordered by name."""
        return list(self.session.execute(select(Tag).order_by(Tag.name)).scalars())

    @handle_db_errors
    @log_database_operation("tags_with_post_counts")
    def get_with_post_counts(self) -> List[Tuple[Tag, int]]:
        """
        Tags with the number of published posts carrying them.

        Returns:
            (tag, count) pairs, highest count first, then by name.
            Tags without published posts are left out.
        """
        count = func.count(BlogPost.id).label("post_count")
        stmt = (
            select(Tag, count)
            .join(blog_post_tags, blog_post_tags.c.tag_id == Tag.id)
            .join(BlogPost, BlogPost.id == blog_post_tags.c.blog_post_id)
            .where(BlogPost.status == PostStatus.PUBLISHED.value)
            .where(BlogPost.published_at <= utcnow())
            .group_by(Tag.id)
            .order_by(count.desc(), Tag.name)
        )
        return [(tag, post_count) for tag, post_count in self.session.execute(stmt)]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _unique_slug(self, name: str, exclude_id: Optional[int] = None) -> str:
        base = slugify(name) or "tag"
        slug, counter = base, 1
        while self._exists(Tag, "slug", slug, exclude_id=exclude_id):
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    @handle_db_errors
    @log_database_operation("create_tag")
    @validate_metadata(["name"])
    def create(self, metadata: Dict[str, Any]) -> Tag:
        """
        Create a tag.

        Args:
            metadata: name (required), slug, description

        Raises:
            ConflictError: If the name or slug is taken
        """
        name = DataValidator.normalize_string(metadata["name"])
        if self.get_by_name(name):
            raise ConflictError(f"Tag already exists: {name}")

        slug = DataValidator.normalize_string(metadata.get("slug"))
        if slug and self._exists(Tag, "slug", slug):
            raise ConflictError(f"Tag slug '{slug}' is already taken")

        tag = Tag(
            name=name,
            slug=slug or self._unique_slug(name),
            description=DataValidator.normalize_text(metadata.get("description")),
        )
        self.session.add(tag)
        self.session.flush()

        if self.logger:
            self.logger.log_debug(f"Created tag: {name}", {"tag_id": tag.id})
        return tag

    @handle_db_errors
    @log_database_operation("get_or_create_tag")
    def get_or_create(self, name: str) -> Tag:
        """
        Get a tag by name, creating it with a derived slug when missing.

        Raises:
            ValidationError: If name is blank
        """
        normalized = DataValidator.normalize_string(name)
        if not normalized:
            raise ValidationError("Tag cannot be empty", field="name")

        existing = self.get_by_name(normalized)
        if existing:
            return existing
        return self._get_or_create(
            Tag, {"name": normalized}, {"slug": self._unique_slug(normalized)}
        )

    @handle_db_errors
    @log_database_operation("update_tag")
    def update(self, tag: Union[Tag, int], metadata: Dict[str, Any]) -> Optional[Tag]:
        """Rename or re-describe a tag. Returns None when it does not exist."""
        target = self._resolve_optional(tag, Tag)
        if target is None:
            return None

        name = DataValidator.normalize_string(metadata.get("name"))
        if name and name != target.name:
            other = self.get_by_name(name)
            if other is not None and other.id != target.id:
                raise ConflictError(f"Tag already exists: {name}")
            target.name = name

        slug = DataValidator.normalize_string(metadata.get("slug"))
        if slug and slug != target.slug:
            if self._exists(Tag, "slug", slug, exclude_id=target.id):
                raise ConflictError(f"Tag slug '{slug}' is already taken")
            target.slug = slug

        if "description" in metadata:
            target.description = DataValidator.normalize_text(metadata["description"])

        self.session.flush()
        return target

    @handle_db_errors
    @log_database_operation("delete_tag")
    def delete(self, tag: Union[Tag, int]) -> bool:
        """Delete a tag and unlink it from every post."""
        target = self._resolve_optional(tag, Tag)
        if target is None:
            return False

        for post in list(target.posts):
            post.tags = [name for name in post.tags if name.lower() != target.name.lower()]
        target.posts = []
        self.session.delete(target)
        self.session.flush()
        return True
