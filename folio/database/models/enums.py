"""
Enumeration Types
------------------

Enum classes for the Folio database models.

Enums:
    - ProjectStatus: Lifecycle of a portfolio project
    - PostStatus: Publication state of a blog post
    - SkillCategory: Grouping for skills on the about page
    - UserRole: Permission level of an admin account
    - MediaType: Broad kind of an uploaded file
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum
from typing import List, Optional


class ProjectStatus(str, Enum):
    """
    Enumeration of project states.
    - PLANNING: Idea stage, not started
    - IN_PROGRESS: Actively being built
    - COMPLETED: Shipped
    - ON_HOLD: Paused
    """

    PLANNING = "planning"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available status values."""
        return [status.value for status in cls]

    @property
    def display_name(self) -> str:
        """Get human-readable display name."""
        return self.value.replace("-", " ").title()


class PostStatus(str, Enum):
    """
    Enumeration of blog post states.
    - DRAFT: Visible to admins only
    - PUBLISHED: Public once published_at has passed
    - ARCHIVED: Hidden from listings, kept for reference
    """

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available status values."""
        return [status.value for status in cls]


class SkillCategory(str, Enum):
    """Enumeration of skill groups."""

    FRONTEND = "frontend"
    BACKEND = "backend"
    DATABASE = "database"
    TOOL = "tool"
    LANGUAGE = "language"
    OTHER = "other"

    @classmethod
    def choices(cls) -> List[str]:
        return [category.value for category in cls]


class UserRole(str, Enum):
    """
    Enumeration of account roles.
    - ADMIN: Full access, including user management
    - EDITOR: Content management only
    """

    ADMIN = "admin"
    EDITOR = "editor"

    @classmethod
    def choices(cls) -> List[str]:
        return [role.value for role in cls]


class MediaType(str, Enum):
    """Enumeration of media kinds, derived from the MIME type prefix."""

    IMAGE = "image"
    VIDEO = "video"
    DOCUMENT = "document"

    @classmethod
    def choices(cls) -> List[str]:
        return [media_type.value for media_type in cls]

    @classmethod
    def from_mime(cls, mime_type: Optional[str]) -> "MediaType":
        """Classify a MIME type: image/*, video/*, anything else is a document."""
        mime = (mime_type or "").lower()
        if mime.startswith("image/"):
            return cls.IMAGE
        if mime.startswith("video/"):
            return cls.VIDEO
        return cls.DOCUMENT

    @classmethod
    def from_filter(cls, value: Optional[str]) -> Optional["MediaType"]:
        """Accept singular or plural filter names ('image', 'images')."""
        if not value:
            return None
        key = value.strip().lower().rstrip("s")
        for media_type in cls:
            if media_type.value == key:
                return media_type
        return None
