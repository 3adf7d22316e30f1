#!/usr/bin/env python3
"""
pages.py
--------
/api/pages: everything a page of the site needs in one response.

Public list pages degrade to empty content when the database fails, so
the site still renders. Detail pages answer 404 for unknown or
unpublished items. Every page carries `meta`, the SEO tag set for its
<head>. Admin pages require an editor and are marked noindex.

Routes:
    /api/pages/blog                    published posts, featured, tags
    /api/pages/blog/{slug}             post, rendered HTML, related posts
    /api/pages/projects                projects and technologies
    /api/pages/projects/{id}           project and related projects
    /api/pages/admin/dashboard         counters and recent activity
    /api/pages/admin/blog[/{id}]       post management
    /api/pages/admin/projects[/{id}]   project management
"""
# --- Standard library imports ---
from typing import Any, Dict, Optional

# --- Third-party imports ---
from fastapi import APIRouter, Depends

# --- Local imports ---
from folio.api.auth import require_editor
from folio.api.deps import (
    get_blog_posts,
    get_logger,
    get_projects,
    get_settings,
    get_skills,
    get_stats,
)
from folio.api.schemas import BlogPostOut, ProjectOut, SkillOut, dump, dump_all, ok
from folio.core.config import Settings
from folio.core.exceptions import DatabaseError, NotFoundError
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.database.managers import (
    BlogPostManager,
    ContentStatsManager,
    ProjectManager,
    SkillManager,
)
from folio.database.models import PostStatus, ProjectStatus, User
from folio.utils.markdown import (
    estimate_reading_time,
    extract_headings,
    markdown_to_html,
    markdown_to_plain_text,
)
from folio.utils.seo import (
    generate_article_structured_data,
    generate_blog_post_meta,
    generate_breadcrumb_structured_data,
    generate_meta_tags,
    generate_project_meta,
    generate_robots_meta,
)

router = APIRouter(prefix="/api/pages", tags=["pages"])

BLOG_TITLE = "Leechy's Dev Thoughts"
BLOG_DESCRIPTION = (
    "Read articles about web development, programming, and technology. "
    "Tips, tutorials, and insights from a full-stack developer."
)
PROJECTS_TITLE = "Projects"
PROJECTS_DESCRIPTION = (
    "Explore my development projects, technologies used, "
    "and the challenges I've solved."
)
FEATURED_POSTS = 3
RELATED_ITEMS = 3
ADMIN_LIST_LIMIT = 100


def _page_meta(settings: Settings, title: str, description: str, path: str) -> Dict[str, str]:
    return generate_meta_tags(
        {
            "title": title,
            "description": description,
            "site_name": settings.site_name,
            "site_url": settings.site_url,
            "canonical": f"{settings.site_url}{path}",
            "author": settings.site_author,
            "twitter_handle": settings.twitter_handle,
        }
    )


def _admin_meta(settings: Settings, title: str) -> Dict[str, str]:
    meta = generate_meta_tags({"title": title, "site_name": settings.site_name})
    meta["robots"] = generate_robots_meta(index=False, follow=False)
    return meta


# ----- Public pages -----
@router.get("/blog")
def blog_page(
    posts: BlogPostManager = Depends(get_blog_posts),
    settings: Settings = Depends(get_settings),
    logger: Optional[FolioLogger] = Depends(get_logger),
) -> Dict[str, Any]:
    meta = _page_meta(settings, BLOG_TITLE, BLOG_DESCRIPTION, "/blog")
    try:
        published = dump_all(BlogPostOut, posts.list_published())
        featured = dump_all(BlogPostOut, posts.get_featured(FEATURED_POSTS))
        tags = posts.list_tags()
        categories = posts.list_categories()
    except DatabaseError as e:
        safe_logger(logger).log_warning(f"Blog page served empty: {e}")
        published, featured, tags, categories = [], [], [], []

    return ok(
        {
            "blogs": published,
            "featured_blogs": featured,
            "all_tags": tags,
            "categories": categories,
            "total": len(published),
            "meta": meta,
        }
    )


@router.get("/blog/{slug}")
def blog_post_page(
    slug: str,
    posts: BlogPostManager = Depends(get_blog_posts),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    post = posts.get_by_slug(slug)
    if post is None or not post.is_published:
        raise NotFoundError("Blog post")

    posts.increment_view_count(post)
    data = dump(BlogPostOut, post)
    description = (
        post.meta_description
        or post.excerpt
        or markdown_to_plain_text(post.content, max_length=160)
    )
    url = f"{settings.site_url}/blog/{post.slug}"

    meta = generate_blog_post_meta(
        {
            "title": post.title,
            "slug": post.slug,
            "description": description,
            "tags": post.tags,
            "image": post.featured_image,
            "author": settings.site_author,
            "site_name": settings.site_name,
            "twitter_handle": settings.twitter_handle,
            "published_time": data["published_at"],
            "modified_time": data["updated_at"],
        },
        settings.site_url,
    )
    structured_data = [
        generate_article_structured_data(
            title=post.title,
            description=description,
            url=url,
            author=settings.site_author,
            published_time=data["published_at"],
            modified_time=data["updated_at"],
            image=post.featured_image,
            tags=post.tags,
            word_count=len(markdown_to_plain_text(post.content).split()),
        ),
        generate_breadcrumb_structured_data(
            [
                {"name": "Home", "url": settings.site_url},
                {"name": "Blog", "url": f"{settings.site_url}/blog"},
                {"name": post.title, "url": url},
            ]
        ),
    ]

    return ok(
        {
            "blog": data,
            "html": markdown_to_html(post.content),
            "toc": extract_headings(post.content),
            "reading_time": estimate_reading_time(post.content),
            "related_blogs": dump_all(BlogPostOut, posts.get_related(post, RELATED_ITEMS)),
            "structured_data": structured_data,
            "meta": meta,
        }
    )


@router.get("/projects")
def projects_page(
    projects: ProjectManager = Depends(get_projects),
    settings: Settings = Depends(get_settings),
    logger: Optional[FolioLogger] = Depends(get_logger),
) -> Dict[str, Any]:
    meta = _page_meta(settings, PROJECTS_TITLE, PROJECTS_DESCRIPTION, "/projects")
    try:
        items = dump_all(ProjectOut, projects.list_all())
        technologies = projects.list_technologies()
    except DatabaseError as e:
        safe_logger(logger).log_warning(f"Projects page served empty: {e}")
        items, technologies = [], []

    return ok(
        {
            "projects": items,
            "all_technologies": technologies,
            "total": len(items),
            "meta": meta,
        }
    )


@router.get("/projects/{project_id}")
def project_page(
    project_id: int,
    projects: ProjectManager = Depends(get_projects),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    project = projects.get_by_id(project_id)
    if project is None:
        raise NotFoundError("Project", project_id)

    description = (
        project.meta_description or project.short_description or project.description
    )
    meta = generate_project_meta(
        {
            "title": project.title,
            # Project pages are addressed by id
            "slug": str(project.id),
            "description": description,
            "technologies": project.technologies,
            "image": project.image_url,
            "author": settings.site_author,
            "site_name": settings.site_name,
            "twitter_handle": settings.twitter_handle,
        },
        settings.site_url,
    )

    return ok(
        {
            "project": dump(ProjectOut, project),
            "html": markdown_to_html(project.long_description),
            "related_projects": dump_all(
                ProjectOut, projects.get_related(project, RELATED_ITEMS)
            ),
            "meta": meta,
        }
    )


# ----- Admin pages -----
@router.get("/admin/dashboard")
def dashboard_page(
    stats: ContentStatsManager = Depends(get_stats),
    settings: Settings = Depends(get_settings),
    logger: Optional[FolioLogger] = Depends(get_logger),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    try:
        dashboard = stats.get_dashboard()
    except DatabaseError as e:
        safe_logger(logger).log_warning(f"Dashboard served empty: {e}")
        dashboard = {
            "stats": {
                "total_projects": 0,
                "published_projects": 0,
                "total_blog_posts": 0,
                "published_blog_posts": 0,
                "draft_posts": 0,
                "total_views": 0,
            },
            "recent_activity": [],
        }
    dashboard["meta"] = _admin_meta(settings, "Dashboard")
    return ok(dashboard)


@router.get("/admin/blog")
def admin_blog_page(
    status: Optional[str] = None,
    search: Optional[str] = None,
    posts: BlogPostManager = Depends(get_blog_posts),
    settings: Settings = Depends(get_settings),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    page = posts.get_all(status=status, search=search, limit=ADMIN_LIST_LIMIT)
    return ok(
        {
            "posts": dump_all(BlogPostOut, page.data),
            "total": page.total,
            "stats": posts.get_stats(),
            "statuses": PostStatus.choices(),
            "meta": _admin_meta(settings, "Manage Blog"),
        }
    )


@router.get("/admin/blog/{post_id}")
def admin_blog_edit_page(
    post_id: int,
    posts: BlogPostManager = Depends(get_blog_posts),
    settings: Settings = Depends(get_settings),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    post = posts.get_by_id(post_id)
    if post is None:
        raise NotFoundError("Blog post", post_id)
    return ok(
        {
            "post": dump(BlogPostOut, post),
            "statuses": PostStatus.choices(),
            "categories": posts.list_categories(),
            "tags": posts.list_tags(),
            "meta": _admin_meta(settings, f"Edit: {post.title}"),
        }
    )


@router.get("/admin/projects")
def admin_projects_page(
    status: Optional[str] = None,
    search: Optional[str] = None,
    projects: ProjectManager = Depends(get_projects),
    settings: Settings = Depends(get_settings),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    page = projects.get_all(status=status, search=search, limit=ADMIN_LIST_LIMIT)
    return ok(
        {
            "projects": dump_all(ProjectOut, page.data),
            "total": page.total,
            "stats": projects.get_stats(),
            "statuses": ProjectStatus.choices(),
            "meta": _admin_meta(settings, "Manage Projects"),
        }
    )


@router.get("/admin/projects/{project_id}")
def admin_project_edit_page(
    project_id: int,
    projects: ProjectManager = Depends(get_projects),
    skills: SkillManager = Depends(get_skills),
    settings: Settings = Depends(get_settings),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    project = projects.get_by_id(project_id)
    if project is None:
        raise NotFoundError("Project", project_id)
    return ok(
        {
            "project": dump(ProjectOut, project),
            "statuses": ProjectStatus.choices(),
            "skills": dump_all(SkillOut, skills.get_all(limit=100).data),
            "meta": _admin_meta(settings, f"Edit: {project.title}"),
        }
    )
