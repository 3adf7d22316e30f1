"""
Association Tables
-------------------

Many-to-many relationship tables for the Folio database.

- project_skills: Projects with the skills they demonstrate
- blog_post_tags: Blog posts with their Tag rows

Both are pure pair tables. Deleting either side removes the pair
through ON DELETE CASCADE (foreign keys are enabled per connection).
"""
# --- Third party imports ---
from sqlalchemy import Column, ForeignKey, Integer, Table

# --- Local imports ---
from .base import Base

project_skills = Table(
    "project_skills",
    Base.metadata,
    Column(
        "project_id",
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("skill_id", Integer, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True),
)

blog_post_tags = Table(
    "blog_post_tags",
    Base.metadata,
    Column(
        "blog_post_id",
        Integer,
        ForeignKey("blog_posts.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)
