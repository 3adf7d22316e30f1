#!/usr/bin/env python3
"""
stats_manager.py
--------------------
Cross-entity queries: dashboard counters, site search and related content.

These read from several tables at once, so they live apart from the
per-entity managers and reuse them for the single-table parts.

Usage:
    stats = ContentStatsManager(session, logger)

    stats.get_database_stats()
    stats.search_content("svelte", limit=10)
    stats.get_dashboard()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import math
from typing import Any, Dict, List

# --- Third party imports ---
from sqlalchemy import case, func, or_, select

# --- Local imports ---
from folio.core.exceptions import ValidationError
from folio.core.validators import DataValidator
from folio.database.decorators import handle_db_errors, log_database_operation
from folio.database.models import (
    BlogPost,
    PostStatus,
    Project,
    ProjectStatus,
    Skill,
    as_utc,
    project_skills,
    utcnow,
)
from .base_manager import BaseManager
from .blog_post_manager import BlogPostManager
from .project_manager import ProjectManager

BLOG_SHARE = 0.7
PROJECT_SHARE = 0.3
RECENT_PROJECTS = 3
RECENT_POSTS = 2
MAX_ACTIVITY = 5


class ContentStatsManager(BaseManager):
    """
    Read-only queries spanning projects, posts and skills.
    """

    @property
    def posts(self) -> BlogPostManager:
        return BlogPostManager(self.session, self.logger)

    @property
    def projects(self) -> ProjectManager:
        return ProjectManager(self.session, self.logger)

    @handle_db_errors
    @log_database_operation("database_stats")
    def get_database_stats(self) -> Dict[str, Any]:
        """
        Counters for every content table.

        Returns:
            {
                "blog_posts": {total, published, drafts, archived, featured},
                "projects": {total, completed, in_progress, planning,
                             on_hold, featured},
                "skills": {total, by_category},
                "total_views": int,
            }
        """
        post_stats = self.posts.get_stats()
        featured_published = self._count(
            BlogPost,
            BlogPost.featured.is_(True),
            BlogPost.status == PostStatus.PUBLISHED.value,
        )
        project_stats = self.projects.get_stats()

        by_category: Dict[str, int] = {}
        stmt = select(Skill.category, func.count()).group_by(Skill.category)
        for category, count in self.session.execute(stmt):
            by_category[getattr(category, "value", category)] = count

        return {
            "blog_posts": {
                "total": post_stats["total"],
                "published": post_stats["published"],
                "drafts": post_stats["draft"],
                "archived": post_stats["archived"],
                "featured": featured_published,
            },
            "projects": {
                "total": project_stats["total"],
                "completed": project_stats["completed"],
                "in_progress": project_stats["in_progress"],
                "planning": project_stats["planning"],
                "on_hold": project_stats["on_hold"],
                "featured": project_stats["featured"],
            },
            "skills": {
                "total": sum(by_category.values()),
                "by_category": by_category,
            },
            "total_views": post_stats["total_views"],
        }

    @handle_db_errors
    @log_database_operation("search_content")
    def search_content(self, query: str, limit: int = 10) -> Dict[str, List[Any]]:
        """
        Search published posts and projects.

        Posts take 70% of the limit and projects 30% (at least one each).
        Title matches rank first, then excerpt/description matches, then
        body matches; ties go to the newest.

        Raises:
            ValidationError: If query is blank
        """
        term = DataValidator.normalize_string(query)
        if not term:
            raise ValidationError("Search query is required", field="q")
        pattern = f"%{term}%"

        post_limit = max(1, math.floor(limit * BLOG_SHARE))
        project_limit = max(1, math.floor(limit * PROJECT_SHARE))

        post_rank = case(
            (BlogPost.title.ilike(pattern), 1),
            (BlogPost.excerpt.ilike(pattern), 2),
            else_=3,
        )
        post_stmt = (
            select(BlogPost)
            .where(
                BlogPost.status == PostStatus.PUBLISHED.value,
                BlogPost.published_at <= utcnow(),
                or_(
                    BlogPost.title.ilike(pattern),
                    BlogPost.excerpt.ilike(pattern),
                    BlogPost.content.ilike(pattern),
                ),
            )
            .order_by(post_rank, BlogPost.published_at.desc())
            .limit(post_limit)
        )

        project_rank = case((Project.title.ilike(pattern), 1), else_=2)
        project_stmt = (
            select(Project)
            .where(
                or_(
                    Project.title.ilike(pattern),
                    Project.description.ilike(pattern),
                    Project.long_description.ilike(pattern),
                )
            )
            .order_by(project_rank, Project.created_at.desc())
            .limit(project_limit)
        )

        return {
            "blog_posts": list(self.session.execute(post_stmt).scalars()),
            "projects": list(self.session.execute(project_stmt).scalars()),
        }

    @handle_db_errors
    def get_related_content(
        self, item_id: int, content_type: str, limit: int = 3
    ) -> Dict[str, List[Any]]:
        """
        Related posts and projects for a post ('blog') or project ('project').

        Posts relate through shared tags, projects through shared skills;
        the other kind is filled with recent items.
        """
        if content_type not in ("blog", "project"):
            raise ValidationError(
                "Content type must be 'blog' or 'project'", field="content_type"
            )

        if content_type == "blog":
            related_posts = self.posts.get_related(item_id, limit=limit)
            stmt = (
                select(Project)
                .order_by(Project.created_at.desc(), Project.id.desc())
                .limit(min(limit, 2))
            )
            return {
                "blog_posts": related_posts,
                "projects": list(self.session.execute(stmt).scalars()),
            }

        shared_skills = select(project_skills.c.skill_id).where(
            project_skills.c.project_id == item_id
        )
        stmt = (
            select(Project)
            .where(
                Project.id != item_id,
                Project.id.in_(
                    select(project_skills.c.project_id).where(
                        project_skills.c.skill_id.in_(shared_skills)
                    )
                ),
            )
            .order_by(Project.created_at.desc(), Project.id.desc())
            .limit(limit)
        )
        return {
            "blog_posts": self.posts.get_recent(limit=min(limit, 2)),
            "projects": list(self.session.execute(stmt).scalars()),
        }

    @handle_db_errors
    @log_database_operation("dashboard")
    def get_dashboard(self) -> Dict[str, Any]:
        """
        Admin dashboard data.

        Returns:
            {
                "stats": {total_projects, published_projects,
                          total_blog_posts, published_blog_posts,
                          draft_posts, total_views},
                "recent_activity": [{type, action, title, date}, ...]
            }

            published_projects counts completed projects. Activity holds
            the three newest projects and two newest posts, newest
            first.
        """
        project_stats = self.projects.get_stats()
        post_stats = self.posts.get_stats()

        recent_projects = self.session.execute(
            select(Project)
            .order_by(Project.created_at.desc(), Project.id.desc())
            .limit(RECENT_PROJECTS)
        ).scalars()
        recent_posts = self.session.execute(
            select(BlogPost)
            .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
            .limit(RECENT_POSTS)
        ).scalars()

        activity = [
            {
                "type": "project",
                "action": "updated",
                "title": project.title,
                "date": as_utc(project.updated_at or project.created_at),
            }
            for project in recent_projects
        ]
        activity.extend(
            {
                "type": "blog",
                "action": "published" if post.status == PostStatus.PUBLISHED else "updated",
                "title": post.title,
                "date": as_utc(post.updated_at or post.created_at),
            }
            for post in recent_posts
        )
        activity.sort(key=lambda item: item["date"], reverse=True)

        return {
            "stats": {
                "total_projects": project_stats["total"],
                "published_projects": project_stats[ProjectStatus.COMPLETED.value],
                "total_blog_posts": post_stats["total"],
                "published_blog_posts": post_stats["published"],
                "draft_posts": post_stats["draft"],
                "total_views": post_stats["total_views"],
            },
            "recent_activity": activity[:MAX_ACTIVITY],
        }
