#!/usr/bin/env python3
"""
skills.py
---------
/api/skills: skill list, categories, and admin writes.
"""
# --- Standard library imports ---
from typing import Any, Dict, Optional

# --- Third-party imports ---
from fastapi import APIRouter, Depends

# --- Local imports ---
from folio.api.auth import require_admin, require_editor
from folio.api.deps import get_skills
from folio.api.schemas import SkillIn, SkillOut, dump, dump_all, ok, paginated
from folio.core.exceptions import NotFoundError
from folio.database.managers import SkillManager
from folio.database.models import User

router = APIRouter(prefix="/api/skills", tags=["skills"])


@router.get("")
def list_skills(
    category: Optional[str] = None,
    min_proficiency: Optional[int] = None,
    search: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
    skills: SkillManager = Depends(get_skills),
) -> Dict[str, Any]:
    page = skills.get_all(
        category=category,
        min_proficiency=min_proficiency,
        search=search,
        limit=limit,
        offset=offset,
    )
    return paginated(SkillOut, page)


@router.get("/categories")
def list_categories(skills: SkillManager = Depends(get_skills)) -> Dict[str, Any]:
    """Categories in use, each with its skills strongest first."""
    categories = skills.get_categories()
    grouped = {
        category: dump_all(SkillOut, skills.get_by_category(category))
        for category in categories
    }
    return ok({"categories": categories, "skills": grouped})


@router.post("", status_code=201)
def create_skill(
    body: SkillIn,
    skills: SkillManager = Depends(get_skills),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    return ok(dump(SkillOut, skills.create(body.model_dump(exclude_unset=True))))


@router.get("/{skill_id}")
def get_skill(skill_id: int, skills: SkillManager = Depends(get_skills)) -> Dict[str, Any]:
    skill = skills.get_by_id(skill_id)
    if skill is None:
        raise NotFoundError("Skill", skill_id)
    return ok(dump(SkillOut, skill))


@router.put("/{skill_id}")
def update_skill(
    skill_id: int,
    body: SkillIn,
    skills: SkillManager = Depends(get_skills),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    skill = skills.update(skill_id, body.model_dump(exclude_unset=True))
    if skill is None:
        raise NotFoundError("Skill", skill_id)
    return ok(dump(SkillOut, skill))


@router.delete("/{skill_id}")
def delete_skill(
    skill_id: int,
    skills: SkillManager = Depends(get_skills),
    user: User = Depends(require_admin),
) -> Dict[str, Any]:
    if not skills.delete(skill_id):
        raise NotFoundError("Skill", skill_id)
    return ok({"deleted": True, "id": skill_id})
