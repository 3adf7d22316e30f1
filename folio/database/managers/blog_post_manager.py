#!/usr/bin/env python3
"""
blog_post_manager.py
--------------------
Manages BlogPost entities, their tags and publication state.

The tags JSON list on a post is what editors write. Every write mirrors
that list into Tag rows (blog_post_tags) in the same transaction, so tag
pages and tag counts always agree with the post.

Key Features:
    - Filtered, paginated listing (status, featured, published, category,
      tag name, tag slug, search)
    - Publication helpers (published/featured/recent, view counter)
    - Related posts ranked by shared tags
    - Slug availability and generation

Usage:
    posts = BlogPostManager(session, logger)

    post = posts.create({
        "title": "Building a Portfolio",
        "content": "# Hello",
        "tags": ["SvelteKit", "SQLite"],
        "status": "published",
    })
    related = posts.get_related(post.id)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

# --- Third party imports ---
from sqlalchemy import Text, func, select, type_coerce, update

# --- Local imports ---
from folio.core.exceptions import ConflictError, ValidationError
from folio.core.validators import DataValidator, validate_slug
from folio.database.decorators import (
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from folio.database.models import (
    BlogPost,
    PostStatus,
    Tag,
    as_utc,
    blog_post_tags,
    utcnow,
)
from folio.database.pagination import PaginatedResult, paginate
from folio.utils.slugify import title_slug
from .base_manager import BaseManager
from .tag_manager import TagManager

ORDERABLE_FIELDS = (
    "created_at",
    "updated_at",
    "published_at",
    "title",
    "view_count",
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _normalize_status(value: Any) -> Optional[str]:
    return DataValidator.normalize_enum(value, PostStatus.choices(), "status")


SCALAR_FIELDS = [
    ("title", DataValidator.normalize_string),
    ("content", DataValidator.normalize_text),
    ("excerpt", DataValidator.normalize_text, True),
    ("category", DataValidator.normalize_string, True),
    ("featured_image", DataValidator.normalize_string, True),
    ("status", _normalize_status),
    ("featured", DataValidator.normalize_bool),
    ("published_at", DataValidator.normalize_datetime, True),
    ("meta_description", DataValidator.normalize_text, True),
]


def _published_key(post: BlogPost) -> datetime:
    return as_utc(post.published_at) or as_utc(post.created_at) or _EPOCH


class BlogPostManager(BaseManager):
    """
    Manages BlogPost table operations and the blog_post_tags links.
    """

    @property
    def tags(self) -> TagManager:
        return TagManager(self.session, self.logger)

    @staticmethod
    def _published_criteria() -> List[Any]:
        return [
            BlogPost.status == PostStatus.PUBLISHED.value,
            BlogPost.published_at.is_not(None),
            BlogPost.published_at <= utcnow(),
        ]

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_all_posts")
    def get_all(
        self,
        status: Optional[str] = None,
        featured: Optional[bool] = None,
        published: Optional[bool] = None,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        tag_slug: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = 10,
        offset: Optional[int] = 0,
        order_by: str = "created_at",
        order_direction: str = "desc",
    ) -> PaginatedResult[BlogPost]:
        """
        List posts matching every given filter.

        Args:
            status: One of PostStatus
            featured: Only featured (True) or non-featured (False)
            published: Only posts that are published and whose
                published_at has passed
            category: Exact category name
            tag: Tag name contained in the post's tags list
            tag_slug: Slug of a linked Tag row
            search: Substring of title, excerpt or content
            limit: Page size
            offset: Rows to skip
            order_by: Column to order by (whitelisted)
            order_direction: 'asc' or 'desc'

        Returns:
            PaginatedResult of BlogPost
        """
        stmt = select(BlogPost)

        if status:
            stmt = stmt.where(BlogPost.status == _normalize_status(status))
        if featured is not None:
            stmt = stmt.where(BlogPost.featured.is_(bool(featured)))
        if published:
            stmt = stmt.where(*self._published_criteria())
        if category:
            stmt = stmt.where(BlogPost.category == category.strip())
        if tag:
            stmt = stmt.where(
                type_coerce(BlogPost.tags, Text).like(f'%"{tag.strip()}"%')
            )
        if tag_slug:
            stmt = stmt.where(
                BlogPost.id.in_(
                    select(blog_post_tags.c.blog_post_id)
                    .join(Tag, Tag.id == blog_post_tags.c.tag_id)
                    .where(Tag.slug == tag_slug.strip())
                )
            )

        stmt = self._apply_search(
            stmt, search, [BlogPost.title, BlogPost.excerpt, BlogPost.content]
        )
        stmt = self._apply_ordering(
            stmt, BlogPost, order_by, order_direction, ORDERABLE_FIELDS
        )
        return paginate(self.session, stmt, limit, offset)

    @handle_db_errors
    @log_database_operation("get_post_by_id")
    def get_by_id(self, post_id: Any) -> Optional[BlogPost]:
        return self._get_by_id(BlogPost, post_id)

    @handle_db_errors
    @log_database_operation("get_post_by_slug")
    def get_by_slug(self, slug: str) -> Optional[BlogPost]:
        return self._get_by_field(BlogPost, "slug", slug)

    def get_published(self, limit: int = 10, offset: int = 0) -> PaginatedResult[BlogPost]:
        """Published posts, most recently published first."""
        return self.get_all(
            published=True,
            limit=limit,
            offset=offset,
            order_by="published_at",
            order_direction="desc",
        )

    @handle_db_errors
    def get_featured(self, limit: int = 3) -> List[BlogPost]:
        """Featured published posts, most recently published first."""
        stmt = (
            select(BlogPost)
            .where(BlogPost.featured.is_(True), *self._published_criteria())
            .order_by(BlogPost.published_at.desc(), BlogPost.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    @handle_db_errors
    def get_recent(self, limit: int = 5) -> List[BlogPost]:
        """Most recently published posts."""
        stmt = (
            select(BlogPost)
            .where(*self._published_criteria())
            .order_by(BlogPost.published_at.desc(), BlogPost.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    @handle_db_errors
    def get_by_status(self, status: str) -> List[BlogPost]:
        stmt = (
            select(BlogPost)
            .where(BlogPost.status == _normalize_status(status))
            .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
        )
        return list(self.session.execute(stmt).scalars())

    def get_by_tag(self, tag: str, limit: int = 10, offset: int = 0) -> PaginatedResult[BlogPost]:
        """Published posts carrying a tag name."""
        return self.get_all(
            published=True,
            tag=tag,
            limit=limit,
            offset=offset,
            order_by="published_at",
        )

    @handle_db_errors
    def list_published(self) -> List[BlogPost]:
        """Every published post, most recently published first (unpaginated)."""
        stmt = (
            select(BlogPost)
            .where(*self._published_criteria())
            .order_by(BlogPost.published_at.desc(), BlogPost.id.desc())
        )
        return list(self.session.execute(stmt).scalars())

    @handle_db_errors
    @log_database_operation("get_related_posts")
    def get_related(self, post: Union[BlogPost, int], limit: int = 3) -> List[BlogPost]:
        """
        Published posts related to a post.

        Posts are ranked by the number of shared tags, ties broken by
        publication date. When no post shares a tag, posts from the same
        category are used, then the most recent posts.
        """
        target = self._resolve_optional(post, BlogPost)
        if target is None:
            return []

        candidates = [p for p in self.list_published() if p.id != target.id]
        wanted = {name.lower() for name in target.tags}

        scored = []
        for candidate in candidates:
            shared = len(wanted & {name.lower() for name in candidate.tags})
            if shared:
                scored.append((shared, _published_key(candidate), candidate))
        if scored:
            scored.sort(key=lambda item: (item[0], item[1]), reverse=True)
            return [candidate for _, _, candidate in scored[:limit]]

        if target.category:
            same_category = [p for p in candidates if p.category == target.category]
            if same_category:
                return same_category[:limit]

        return candidates[:limit]

    @handle_db_errors
    def get_most_viewed(self, limit: int = 5) -> List[BlogPost]:
        stmt = (
            select(BlogPost)
            .where(*self._published_criteria())
            .order_by(BlogPost.view_count.desc(), BlogPost.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    @handle_db_errors
    def list_tags(self) -> List[str]:
        """Sorted distinct tag names used by published posts."""
        names = set()
        stmt = select(BlogPost.tags).where(*self._published_criteria())
        for tags in self.session.execute(stmt).scalars():
            names.update(tags)
        return sorted(names, key=str.lower)

    @handle_db_errors
    def list_categories(self) -> List[str]:
        """Sorted distinct categories of published posts."""
        stmt = (
            select(BlogPost.category)
            .where(BlogPost.category.is_not(None), *self._published_criteria())
            .distinct()
        )
        return sorted(self.session.execute(stmt).scalars(), key=str.lower)

    @handle_db_errors
    @log_database_operation("post_stats")
    def get_stats(self) -> Dict[str, int]:
        """Counts for /api/blogs/stats and the dashboard."""
        counts = {status: 0 for status in PostStatus.choices()}
        stmt = select(BlogPost.status, func.count()).group_by(BlogPost.status)
        for status, count in self.session.execute(stmt):
            counts[getattr(status, "value", status)] = count

        total_views = self.session.execute(
            select(func.coalesce(func.sum(BlogPost.view_count), 0))
        ).scalar_one()
        return {
            "total": sum(counts.values()),
            "published": counts[PostStatus.PUBLISHED.value],
            "draft": counts[PostStatus.DRAFT.value],
            "archived": counts[PostStatus.ARCHIVED.value],
            "featured": self._count(BlogPost, BlogPost.featured.is_(True)),
            "total_views": total_views,
        }

    # -------------------------------------------------------------------------
    # Slugs
    # -------------------------------------------------------------------------

    def is_slug_available(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        return not self._exists(BlogPost, "slug", slug, exclude_id=exclude_id)

    def generate_slug(self, title: str, exclude_id: Optional[int] = None) -> str:
        """Slug from title, suffixed -1, -2... until unused."""
        base = title_slug(title) or "post"
        slug, counter = base, 1
        while not self.is_slug_available(slug, exclude_id=exclude_id):
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    def _check_slug(self, slug: str, exclude_id: Optional[int] = None) -> str:
        error = validate_slug(slug)
        if error:
            raise ValidationError(error, field="slug")
        if not self.is_slug_available(slug, exclude_id=exclude_id):
            raise ConflictError(f"Blog post slug '{slug}' is already taken")
        return slug

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _sync_tags(
        self,
        post: BlogPost,
        names: Optional[List[str]] = None,
        tag_ids: Optional[List[Any]] = None,
    ) -> None:
        """
        Make tags (names) and linked_tags (rows) describe the same set.

        names replaces the tag list and is stored as written; Tag rows are
        matched case-insensitively. tag_ids adds tags by id, appending the
        names not already in the list.
        """
        tag_manager = self.tags
        tag_names = list(post.tags if names is None else names)
        linked: List[Tag] = []
        for name in tag_names:
            tag = tag_manager.get_or_create(name)
            if tag not in linked:
                linked.append(tag)

        for item in tag_ids or []:
            try:
                tag = self._resolve_object(item, Tag)
            except (ValueError, TypeError) as e:
                raise ValidationError(str(e), field="tag_ids") from e
            if tag not in linked:
                linked.append(tag)
            if tag.name.lower() not in {name.strip().lower() for name in tag_names}:
                tag_names.append(tag.name)

        post.tags = tag_names
        self._replace_collection(post, "linked_tags", linked, Tag)

    def _stamp_publication(self, post: BlogPost) -> None:
        if post.status == PostStatus.PUBLISHED and post.published_at is None:
            post.published_at = utcnow()

    @handle_db_errors
    @log_database_operation("create_post")
    @validate_metadata(["title"])
    def create(self, metadata: Dict[str, Any]) -> BlogPost:
        """
        Create a blog post.

        Args:
            metadata: Post fields. Required: title. Optional: content,
                slug (derived from title when missing), status (default
                draft), tags (names), tag_ids, every other column.

        Returns:
            The flushed BlogPost with linked tags

        Raises:
            ValidationError: Missing field, bad slug or status
            ConflictError: Slug already used
        """
        slug = DataValidator.normalize_string(metadata.get("slug"))
        slug = self._check_slug(slug) if slug else self.generate_slug(metadata["title"])

        post = BlogPost(
            slug=slug,
            content="",
            status=PostStatus.DRAFT.value,
            featured=False,
            view_count=0,
            tags=[],
        )
        self._update_scalar_fields(post, metadata, SCALAR_FIELDS)
        self._stamp_publication(post)

        self.session.add(post)
        self._execute_with_retry(self.session.flush)

        self._sync_tags(
            post,
            names=DataValidator.normalize_string_list(metadata.get("tags")),
            tag_ids=metadata.get("tag_ids"),
        )
        self.session.refresh(post)

        if self.logger:
            self.logger.log_debug(f"Created post: {post.slug}", {"post_id": post.id})
        return post

    @handle_db_errors
    @log_database_operation("update_post")
    def update(
        self, post: Union[BlogPost, int], metadata: Dict[str, Any]
    ) -> Optional[BlogPost]:
        """
        Update the fields present in metadata.

        tags and tag_ids, when present, replace the post's tags in the
        same transaction. Switching to published without a publication
        time stamps the current time.

        Returns:
            Updated post, or None when it does not exist
        """
        target = self._resolve_optional(post, BlogPost)
        if target is None:
            return None

        slug = DataValidator.normalize_string(metadata.get("slug"))
        if slug and slug != target.slug:
            target.slug = self._check_slug(slug, exclude_id=target.id)

        changed = self._update_scalar_fields(target, metadata, SCALAR_FIELDS)
        self._stamp_publication(target)

        if metadata.get("tags") is not None or metadata.get("tag_ids") is not None:
            names = (
                DataValidator.normalize_string_list(metadata["tags"])
                if metadata.get("tags") is not None
                else []
            )
            self._sync_tags(target, names=names, tag_ids=metadata.get("tag_ids"))
            changed.append("tags")

        if changed:
            self._execute_with_retry(self.session.flush)
            if self.logger:
                self.logger.log_debug(
                    f"Updated post: {target.slug}",
                    {"post_id": target.id, "fields": changed},
                )
        return target

    @handle_db_errors
    @log_database_operation("increment_view_count")
    def increment_view_count(self, post: Union[BlogPost, int]) -> bool:
        """
        Add one view to a post without touching updated_at.

        Returns:
            True when the post exists
        """
        post_id = post.id if isinstance(post, BlogPost) else DataValidator.normalize_int(post)
        if post_id is None:
            return False
        result = self.session.execute(
            update(BlogPost)
            .where(BlogPost.id == post_id)
            .values(view_count=BlogPost.view_count + 1, updated_at=BlogPost.updated_at)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount > 0

    @handle_db_errors
    @log_database_operation("delete_post")
    def delete(self, post: Union[BlogPost, int]) -> bool:
        """Delete a post and its tag links."""
        target = self._resolve_optional(post, BlogPost)
        if target is None:
            return False

        target.linked_tags = []
        self.session.delete(target)
        self._execute_with_retry(self.session.flush)
        return True
