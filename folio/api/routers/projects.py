#!/usr/bin/env python3
"""
projects.py
-----------
/api/projects: list, detail, stats and admin writes.
"""
# --- Standard library imports ---
from typing import Any, Dict, Optional

# --- Third-party imports ---
from fastapi import APIRouter, Depends

# --- Local imports ---
from folio.api.auth import require_admin, require_editor
from folio.api.deps import get_projects
from folio.api.schemas import ProjectIn, ProjectOut, dump, ok, paginated
from folio.core.exceptions import NotFoundError
from folio.database.managers import ProjectManager
from folio.database.models import User

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("")
def list_projects(
    status: Optional[str] = None,
    search: Optional[str] = None,
    featured: Optional[bool] = None,
    skill: Optional[str] = None,
    technology: Optional[str] = None,
    limit: int = 10,
    offset: int = 0,
    order_by: str = "created_at",
    order: str = "desc",
    projects: ProjectManager = Depends(get_projects),
) -> Dict[str, Any]:
    page = projects.get_all(
        status=status,
        featured=featured,
        skill_slug=skill,
        technology=technology,
        search=search,
        limit=limit,
        offset=offset,
        order_by=order_by,
        order_direction=order,
    )
    return paginated(ProjectOut, page)


@router.post("", status_code=201)
def create_project(
    body: ProjectIn,
    projects: ProjectManager = Depends(get_projects),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    project = projects.create(body.model_dump(exclude_unset=True))
    return ok(dump(ProjectOut, project))


@router.get("/stats")
def project_stats(projects: ProjectManager = Depends(get_projects)) -> Dict[str, Any]:
    stats = projects.get_stats()
    stats["technologies"] = projects.list_technologies()
    return ok(stats)


@router.get("/{project_id}")
def get_project(
    project_id: int, projects: ProjectManager = Depends(get_projects)
) -> Dict[str, Any]:
    project = projects.get_by_id(project_id)
    if project is None:
        raise NotFoundError("Project", project_id)
    return ok(dump(ProjectOut, project))


@router.put("/{project_id}")
def update_project(
    project_id: int,
    body: ProjectIn,
    projects: ProjectManager = Depends(get_projects),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    project = projects.update(project_id, body.model_dump(exclude_unset=True))
    if project is None:
        raise NotFoundError("Project", project_id)
    return ok(dump(ProjectOut, project))


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    projects: ProjectManager = Depends(get_projects),
    user: User = Depends(require_admin),
) -> Dict[str, Any]:
    if not projects.delete(project_id):
        raise NotFoundError("Project", project_id)
    return ok({"deleted": True, "id": project_id})
