#!/usr/bin/env python3
"""
sitemap.py
----------
/sitemap.xml: static pages, published posts and projects.

When the database cannot be read a minimal sitemap of the main pages is
served with a shorter cache lifetime.
"""
# --- Standard library imports ---
from typing import Optional

# --- Third-party imports ---
from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

# --- Local imports ---
from folio.api.deps import get_blog_posts, get_logger, get_projects, get_settings
from folio.core.config import Settings
from folio.core.exceptions import AppError
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.database.managers import BlogPostManager, ProjectManager
from folio.utils.sitemap import (
    CACHE_MAX_AGE,
    FALLBACK_CACHE_MAX_AGE,
    build_sitemap_entries,
)

router = APIRouter(tags=["sitemap"])

XML_MEDIA_TYPE = "application/xml"


@router.get("/sitemap.xml")
def sitemap(
    request: Request,
    posts: BlogPostManager = Depends(get_blog_posts),
    projects: ProjectManager = Depends(get_projects),
    settings: Settings = Depends(get_settings),
    logger: Optional[FolioLogger] = Depends(get_logger),
) -> Response:
    renderer = request.app.state.sitemap_renderer
    try:
        entries = build_sitemap_entries(
            settings.site_url, posts.list_published(), projects.list_all()
        )
    except AppError as e:
        safe_logger(logger).log_error(e, {"operation": "sitemap"})
        return Response(
            content=renderer.render_fallback(settings.site_url),
            media_type=XML_MEDIA_TYPE,
            headers={"Cache-Control": f"max-age={FALLBACK_CACHE_MAX_AGE}"},
        )

    return Response(
        content=renderer.render(entries),
        media_type=XML_MEDIA_TYPE,
        headers={"Cache-Control": f"max-age={CACHE_MAX_AGE}"},
    )
