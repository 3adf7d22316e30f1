#!/usr/bin/env python3
"""
managers package
--------------------
Entity managers for the Folio database.

Each manager handles the operations of one entity type on a session it
is given, and inherits the shared helpers of BaseManager.

Available Managers:
    BaseManager: Abstract base class with common utilities
    ProjectManager: Projects and their skill links
    BlogPostManager: Blog posts, publication state and tag links
    SkillManager: Skills
    TagManager: Blog tags
    MediaManager: Uploaded media files
    UserManager: Admin accounts and authentication
    ContentStatsManager: Dashboard, search and related content

Usage:
    from folio.database.managers import ProjectManager

    projects = ProjectManager(session, logger)
"""
from .base_manager import BaseManager
from .project_manager import ProjectManager
from .tag_manager import TagManager
from .blog_post_manager import BlogPostManager
from .skill_manager import SkillManager
from .media_manager import MediaManager
from .user_manager import UserManager, hash_password, verify_password
from .stats_manager import ContentStatsManager

__all__ = [
    "BaseManager",
    "ProjectManager",
    "TagManager",
    "BlogPostManager",
    "SkillManager",
    "MediaManager",
    "UserManager",
    "ContentStatsManager",
    "hash_password",
    "verify_password",
]
