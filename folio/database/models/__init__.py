"""
Database Models Package
------------------------

SQLAlchemy ORM models for the Folio database.

- base: Base class, timestamp mixin, JSON list column type
- associations: Many-to-many pair tables
- enums: Enumeration types
- content: Project, BlogPost
- entities: Skill, Tag
- accounts: User
- media: MediaFile, SiteConfig

Usage:
    from folio.database.models import Project, BlogPost, Tag
"""
from .base import Base, JSONList, TimestampMixin, as_utc, utcnow

from .enums import MediaType, PostStatus, ProjectStatus, SkillCategory, UserRole

from .associations import blog_post_tags, project_skills

from .content import BlogPost, Project
from .entities import Skill, Tag
from .accounts import User
from .media import MediaFile, SiteConfig

__all__ = [
    # Base
    "Base",
    "JSONList",
    "TimestampMixin",
    "as_utc",
    "utcnow",
    # Enums
    "MediaType",
    "PostStatus",
    "ProjectStatus",
    "SkillCategory",
    "UserRole",
    # Associations
    "blog_post_tags",
    "project_skills",
    # Models
    "BlogPost",
    "MediaFile",
    "Project",
    "SiteConfig",
    "Skill",
    "Tag",
    "User",
]
