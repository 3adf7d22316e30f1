"""
Entity Models
-------------

Lookup entities attached to content.

Models:
    - Skill: A technology or competence with a 1-5 proficiency
    - Tag: Normalized blog tag with a unique slug
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import TYPE_CHECKING, List, Optional

# --- Third party ---
from sqlalchemy import CheckConstraint, Enum as SQLEnum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from .associations import blog_post_tags, project_skills
from .base import Base, TimestampMixin
from .enums import SkillCategory

if TYPE_CHECKING:
    from .content import BlogPost, Project


class Skill(TimestampMixin, Base):
    """
    A skill shown on the about page and linked to projects.

    Attributes:
        id: Primary key
        name: Skill name (unique)
        category: SkillCategory
        proficiency: 1 (beginner) to 5 (expert)
        description: Optional details
        icon_url: Optional icon
        years_experience: Optional years of use

    Relationships:
        projects: Many-to-many with Project via project_skills
    """

    __tablename__ = "skills"
    __table_args__ = (
        CheckConstraint("name != ''", name="ck_skill_non_empty_name"),
        CheckConstraint(
            "proficiency >= 1 AND proficiency <= 5", name="ck_skill_proficiency_range"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    category: Mapped[SkillCategory] = mapped_column(
        SQLEnum(
            SkillCategory,
            values_callable=lambda x: [e.value for e in x],
            native_enum=False,
            create_constraint=True,
            name="skill_category",
        ),
        nullable=False,
        default=SkillCategory.OTHER.value,
        index=True,
    )
    proficiency: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    years_experience: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    projects: Mapped[List["Project"]] = relationship(
        "Project", secondary=project_skills, back_populates="skills"
    )

    @property
    def project_count(self) -> int:
        return len(self.projects)

    def __repr__(self) -> str:
        return f"<Skill(id={self.id}, name={self.name!r}, proficiency={self.proficiency})>"


class Tag(TimestampMixin, Base):
    """
    Keyword tag for blog posts.

    Attributes:
        id: Primary key
        name: Display name (unique)
        slug: URL identifier (unique)
        description: Optional description

    Relationships:
        posts: Many-to-many with BlogPost via blog_post_tags
    """

    __tablename__ = "tags"
    __table_args__ = (CheckConstraint("name != ''", name="ck_non_empty_tag"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    posts: Mapped[List["BlogPost"]] = relationship(
        "BlogPost", secondary=blog_post_tags, back_populates="linked_tags"
    )

    @property
    def usage_count(self) -> int:
        """Number of posts carrying this tag."""
        return len(self.posts)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, slug={self.slug!r})>"
