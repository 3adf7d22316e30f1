#!/usr/bin/env python3
"""
schemas.py
----------
Pydantic models for request bodies and response payloads.

Output models read straight from ORM rows (from_attributes) and are
dumped in JSON mode, so enums become their values and datetimes become
ISO strings with a UTC offset. Input models are deliberately loose:
they only shape the JSON, and the managers own validation (status
values, slugs, required fields), so both the API and the CLI reject bad
data with the same messages.

Response envelope:
    {"success": true, "data": ...}
    {"success": true, "data": [...], "pagination": {...}}
    {"success": false, "error": "...", "code": "..."}
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date, datetime
from typing import Annotated, Any, Dict, List, Optional, Type

# --- Third-party imports ---
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

# --- Local imports ---
from folio.database.models import (
    MediaType,
    PostStatus,
    ProjectStatus,
    SkillCategory,
    UserRole,
    as_utc,
)
from folio.database.pagination import PaginatedResult

# SQLite hands back naive datetimes; every stored value is UTC
UTCDateTime = Annotated[datetime, BeforeValidator(as_utc)]


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ----- Output -----
class SkillRef(ORMModel):
    """Skill as embedded in a project."""

    id: int
    name: str
    category: SkillCategory


class TagOut(ORMModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None


class SkillOut(ORMModel):
    id: int
    name: str
    category: SkillCategory
    proficiency: int
    description: Optional[str] = None
    icon_url: Optional[str] = None
    years_experience: Optional[int] = None
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None


class ProjectOut(ORMModel):
    id: int
    title: str
    slug: str
    description: str
    long_description: Optional[str] = None
    short_description: Optional[str] = None
    technologies: List[str] = Field(default_factory=list)
    github_url: Optional[str] = None
    demo_url: Optional[str] = None
    image_url: Optional[str] = None
    status: ProjectStatus
    featured: bool = False
    start_date: Optional[date] = None
    completion_date: Optional[date] = None
    end_date: Optional[date] = None
    challenges: List[str] = Field(default_factory=list)
    solutions: List[str] = Field(default_factory=list)
    skills_demonstrated: List[str] = Field(default_factory=list)
    meta_description: Optional[str] = None
    skills: List[SkillRef] = Field(default_factory=list)
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None


class BlogPostOut(ORMModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    category: Optional[str] = None
    featured_image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    status: PostStatus
    featured: bool = False
    published_at: Optional[UTCDateTime] = None
    view_count: int = 0
    meta_description: Optional[str] = None
    linked_tags: List[TagOut] = Field(default_factory=list)
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None


class MediaOut(ORMModel):
    id: int
    filename: str
    original_filename: str
    file_path: str
    file_url: str
    file_type: MediaType
    file_size: int
    mime_type: str
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[float] = None
    alt_text: Optional[str] = None
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None


class UserOut(ORMModel):
    """Account as shown to clients; never carries the password hash."""

    id: int
    email: str
    name: str
    role: UserRole
    is_active: bool = True
    last_login: Optional[UTCDateTime] = None


# ----- Input -----
class ProjectIn(BaseModel):
    """Body of POST and PUT /api/projects."""

    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    long_description: Optional[str] = None
    short_description: Optional[str] = None
    technologies: Optional[List[str]] = None
    github_url: Optional[str] = None
    demo_url: Optional[str] = None
    image_url: Optional[str] = None
    status: Optional[str] = None
    featured: Optional[bool] = None
    start_date: Optional[date] = None
    completion_date: Optional[date] = None
    challenges: Optional[List[str]] = None
    solutions: Optional[List[str]] = None
    skills_demonstrated: Optional[List[str]] = None
    meta_description: Optional[str] = None
    skill_ids: Optional[List[int]] = None


class SkillIn(BaseModel):
    """Body of POST and PUT /api/skills."""

    name: Optional[str] = None
    category: Optional[str] = None
    proficiency: Optional[int] = None
    description: Optional[str] = None
    icon_url: Optional[str] = None
    years_experience: Optional[int] = None


class BlogPostIn(BaseModel):
    """Body of POST and PUT /api/blogs."""

    title: Optional[str] = None
    slug: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    category: Optional[str] = None
    featured_image: Optional[str] = None
    tags: Optional[List[str]] = None
    tag_ids: Optional[List[int]] = None
    status: Optional[str] = None
    featured: Optional[bool] = None
    published_at: Optional[datetime] = None
    meta_description: Optional[str] = None


class MediaPatch(BaseModel):
    """Body of PATCH /api/media/{id}."""

    filename: Optional[str] = None
    alt_text: Optional[str] = None
    original_filename: Optional[str] = None


class MediaBulkDelete(BaseModel):
    ids: List[Any] = Field(default_factory=list)


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


# ----- Envelope helpers -----
def dump(schema: Type[BaseModel], obj: Any) -> Dict[str, Any]:
    """Serialize one ORM row through an output schema."""
    return schema.model_validate(obj).model_dump(mode="json")


def dump_all(schema: Type[BaseModel], objs: Any) -> List[Dict[str, Any]]:
    return [dump(schema, obj) for obj in objs]


def ok(data: Any = None, **extra: Any) -> Dict[str, Any]:
    """Success envelope."""
    body: Dict[str, Any] = {"success": True, "data": data}
    body.update(extra)
    return body


def paginated(schema: Type[BaseModel], page: PaginatedResult) -> Dict[str, Any]:
    """Success envelope for a list page, with its paging metadata."""
    payload = page.to_dict(lambda item: dump(schema, item))
    return ok(payload.pop("data"), pagination=payload)


def error_body(message: str, code: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Failure envelope."""
    body: Dict[str, Any] = {"success": False, "error": message, "code": code}
    if details:
        body["details"] = details
    return body
