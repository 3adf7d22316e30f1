#!/usr/bin/env python3
"""
blogs.py
--------
/api/blogs: list, detail by id or slug, related posts, stats and
admin writes.

Fetching a post by slug counts as a view.
"""
# --- Standard library imports ---
from typing import Any, Dict, Optional

# --- Third-party imports ---
from fastapi import APIRouter, Depends

# --- Local imports ---
from folio.api.auth import require_admin, require_editor
from folio.api.deps import get_blog_posts
from folio.api.schemas import BlogPostIn, BlogPostOut, dump, dump_all, ok, paginated
from folio.core.exceptions import NotFoundError
from folio.database.managers import BlogPostManager
from folio.database.models import User

router = APIRouter(prefix="/api/blogs", tags=["blogs"])


@router.get("")
def list_posts(
    status: Optional[str] = None,
    search: Optional[str] = None,
    tag: Optional[str] = None,
    category: Optional[str] = None,
    featured: Optional[bool] = None,
    published: Optional[bool] = None,
    limit: int = 10,
    offset: int = 0,
    order_by: str = "created_at",
    order: str = "desc",
    posts: BlogPostManager = Depends(get_blog_posts),
) -> Dict[str, Any]:
    page = posts.get_all(
        status=status,
        featured=featured,
        published=published,
        category=category,
        tag=tag,
        search=search,
        limit=limit,
        offset=offset,
        order_by=order_by,
        order_direction=order,
    )
    return paginated(BlogPostOut, page)


@router.post("", status_code=201)
def create_post(
    body: BlogPostIn,
    posts: BlogPostManager = Depends(get_blog_posts),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    post = posts.create(body.model_dump(exclude_unset=True))
    return ok(dump(BlogPostOut, post))


@router.get("/stats")
def post_stats(posts: BlogPostManager = Depends(get_blog_posts)) -> Dict[str, Any]:
    stats = posts.get_stats()
    stats["categories"] = posts.list_categories()
    stats["tags"] = posts.list_tags()
    return ok(stats)


@router.get("/slug/{slug}")
def get_post_by_slug(
    slug: str, posts: BlogPostManager = Depends(get_blog_posts)
) -> Dict[str, Any]:
    post = posts.get_by_slug(slug)
    if post is None:
        raise NotFoundError("Blog post")
    posts.increment_view_count(post)
    return ok(dump(BlogPostOut, post))


@router.get("/slug/{slug}/related")
def get_related_posts(
    slug: str,
    limit: int = 3,
    posts: BlogPostManager = Depends(get_blog_posts),
) -> Dict[str, Any]:
    post = posts.get_by_slug(slug)
    if post is None:
        raise NotFoundError("Blog post")
    return ok(dump_all(BlogPostOut, posts.get_related(post, limit=limit)))


@router.get("/{post_id}")
def get_post(
    post_id: int, posts: BlogPostManager = Depends(get_blog_posts)
) -> Dict[str, Any]:
    post = posts.get_by_id(post_id)
    if post is None:
        raise NotFoundError("Blog post", post_id)
    return ok(dump(BlogPostOut, post))


@router.put("/{post_id}")
def update_post(
    post_id: int,
    body: BlogPostIn,
    posts: BlogPostManager = Depends(get_blog_posts),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    post = posts.update(post_id, body.model_dump(exclude_unset=True))
    if post is None:
        raise NotFoundError("Blog post", post_id)
    return ok(dump(BlogPostOut, post))


@router.delete("/{post_id}")
def delete_post(
    post_id: int,
    posts: BlogPostManager = Depends(get_blog_posts),
    user: User = Depends(require_admin),
) -> Dict[str, Any]:
    if not posts.delete(post_id):
        raise NotFoundError("Blog post", post_id)
    return ok({"deleted": True, "id": post_id})
