#!/usr/bin/env python3
"""
search.py
---------
/api/search: published posts and projects matching a query.
"""
# --- Standard library imports ---
from typing import Any, Dict, Optional

# --- Third-party imports ---
from fastapi import APIRouter, Depends

# --- Local imports ---
from folio.api.deps import get_stats
from folio.api.schemas import BlogPostOut, ProjectOut, dump_all, ok
from folio.database.managers import ContentStatsManager

router = APIRouter(prefix="/api", tags=["search"])


@router.get("/search")
def search_content(
    q: Optional[str] = None,
    limit: int = 10,
    stats: ContentStatsManager = Depends(get_stats),
) -> Dict[str, Any]:
    results = stats.search_content(q or "", limit=limit)
    posts = dump_all(BlogPostOut, results["blog_posts"])
    projects = dump_all(ProjectOut, results["projects"])
    return ok(
        {
            "query": q,
            "blog_posts": posts,
            "projects": projects,
            "total": len(posts) + len(projects),
        }
    )
