"""
Content Models
--------------

Public content of the portfolio.

Models:
    - Project: Portfolio project with technologies and linked skills
    - BlogPost: Markdown article with tags and publication state
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, List, Optional

# --- Third party ---
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum as SQLEnum,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from .associations import blog_post_tags, project_skills
from .base import Base, JSONList, TimestampMixin
from .enums import PostStatus, ProjectStatus

if TYPE_CHECKING:
    from .entities import Skill, Tag


class Project(TimestampMixin, Base):
    """
    A portfolio project.

    Attributes:
        id: Primary key
        title: Display title
        slug: URL identifier (unique)
        description: One-paragraph summary used on cards
        long_description: Full markdown write-up
        short_description: Teaser text
        technologies: Technology names (JSON list)
        github_url: Repository link
        demo_url: Live demo link
        image_url: Cover image
        status: ProjectStatus
        featured: Shown on the home page
        start_date / completion_date: Project time span
        challenges / solutions / skills_demonstrated: Case-study lists
        meta_description: SEO description override

    Relationships:
        skills: Many-to-many with Skill via project_skills
    """

    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("title != ''", name="ck_project_non_empty_title"),
        CheckConstraint("slug != ''", name="ck_project_non_empty_slug"),
    )

    # ---- Primary fields ----
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    long_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    short_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    technologies: Mapped[List[str]] = mapped_column(JSONList, nullable=False, default=list)

    # ---- Links ----
    github_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    demo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # ---- State ----
    status: Mapped[ProjectStatus] = mapped_column(
        SQLEnum(
            ProjectStatus,
            values_callable=lambda x: [e.value for e in x],
            native_enum=False,
            create_constraint=True,
            name="project_status",
        ),
        nullable=False,
        default=ProjectStatus.PLANNING.value,
        index=True,
    )
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    completion_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # ---- Case study ----
    challenges: Mapped[List[str]] = mapped_column(JSONList, nullable=False, default=list)
    solutions: Mapped[List[str]] = mapped_column(JSONList, nullable=False, default=list)
    skills_demonstrated: Mapped[List[str]] = mapped_column(
        JSONList, nullable=False, default=list
    )
    meta_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ---- Relationships ----
    skills: Mapped[List["Skill"]] = relationship(
        "Skill",
        secondary=project_skills,
        back_populates="projects",
        lazy="selectin",
        order_by="Skill.name",
    )

    @property
    def end_date(self) -> Optional[date]:
        """Alias kept for older API clients."""
        return self.completion_date

    @property
    def skill_names(self) -> List[str]:
        return [skill.name for skill in self.skills]

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, slug={self.slug!r}, status={self.status})>"


class BlogPost(TimestampMixin, Base):
    """
    A blog article written in markdown.

    Attributes:
        id: Primary key
        title: Headline
        slug: URL identifier (unique)
        content: Markdown body
        excerpt: Short summary for listings
        category: Free-form category name
        featured_image: Cover image URL
        tags: Tag names (JSON list, mirrors linked_tags)
        status: PostStatus
        featured: Highlighted on the blog page
        published_at: Publication time; future values schedule the post
        view_count: Number of detail page views
        meta_description: SEO description override

    Relationships:
        linked_tags: Many-to-many with Tag via blog_post_tags
    """

    __tablename__ = "blog_posts"
    __table_args__ = (
        CheckConstraint("title != ''", name="ck_post_non_empty_title"),
        CheckConstraint("slug != ''", name="ck_post_non_empty_slug"),
        CheckConstraint("view_count >= 0", name="ck_post_view_count_positive"),
    )

    # ---- Primary fields ----
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    excerpt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    featured_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    tags: Mapped[List[str]] = mapped_column(JSONList, nullable=False, default=list)

    # ---- Publication ----
    status: Mapped[PostStatus] = mapped_column(
        SQLEnum(
            PostStatus,
            values_callable=lambda x: [e.value for e in x],
            native_enum=False,
            create_constraint=True,
            name="post_status",
        ),
        nullable=False,
        default=PostStatus.DRAFT.value,
        index=True,
    )
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    published_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    meta_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ---- Relationships ----
    linked_tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        secondary=blog_post_tags,
        back_populates="posts",
        lazy="selectin",
        order_by="Tag.name",
    )

    @property
    def is_published(self) -> bool:
        """Published status with a publication time that has passed."""
        if self.status != PostStatus.PUBLISHED or self.published_at is None:
            return False
        published = self.published_at
        if published.tzinfo is None:
            published = published.replace(tzinfo=timezone.utc)
        return published <= datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return f"<BlogPost(id={self.id}, slug={self.slug!r}, status={self.status})>"
