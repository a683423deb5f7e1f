"""
Project routes: lifecycle, membership and labels.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from taskboard.api.dependencies import (
    get_caller_id,
    get_label_service,
    get_project_service,
)
from taskboard.core.models import Label, Project
from taskboard.core.schemas import LabelCreate, MemberAdd, ProjectCreate, ProjectUpdate
from taskboard.services import LabelService, ProjectService

router = APIRouter(prefix="/api/projects", tags=["projects"])


# =============================================================================
# Lifecycle
# =============================================================================


@router.get("", response_model=list[Project])
async def list_projects(
    user_id: str = Depends(get_caller_id),
    projects: ProjectService = Depends(get_project_service),
):
    """Projects the caller is a member of, newest first."""
    return await projects.list_projects(user_id)


@router.post("", response_model=Project, status_code=201)
async def create_project(
    data: ProjectCreate,
    user_id: str = Depends(get_caller_id),
    projects: ProjectService = Depends(get_project_service),
):
    return await projects.create_project(user_id, data)


@router.get("/{project_id}")
async def get_project(
    project_id: str,
    user_id: str = Depends(get_caller_id),
    projects: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    """Get a project, with the caller's permissions on it."""
    project = await projects.get_project(user_id, project_id)
    ctx = projects.context(user_id, project)
    return {
        **project.model_dump(mode="json", by_alias=True),
        "permissions": ctx.permissions(),
    }


@router.patch("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    user_id: str = Depends(get_caller_id),
    projects: ProjectService = Depends(get_project_service),
):
    return await projects.update_project(user_id, project_id, data)


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    user_id: str = Depends(get_caller_id),
    projects: ProjectService = Depends(get_project_service),
):
    await projects.delete_project(user_id, project_id)
    return {"message": "Project deleted"}


# =============================================================================
# Membership
# =============================================================================


@router.post("/{project_id}/members", response_model=Project)
async def add_member(
    project_id: str,
    data: MemberAdd,
    user_id: str = Depends(get_caller_id),
    projects: ProjectService = Depends(get_project_service),
):
    return await projects.add_member(user_id, project_id, data)


@router.delete("/{project_id}/members/{member_id}", response_model=Project)
async def remove_member(
    project_id: str,
    member_id: str,
    user_id: str = Depends(get_caller_id),
    projects: ProjectService = Depends(get_project_service),
):
    return await projects.remove_member(user_id, project_id, member_id)


@router.post("/{project_id}/admins", response_model=Project)
async def add_admin(
    project_id: str,
    data: MemberAdd,
    user_id: str = Depends(get_caller_id),
    projects: ProjectService = Depends(get_project_service),
):
    return await projects.add_admin(user_id, project_id, data)


@router.delete("/{project_id}/admins/{admin_id}", response_model=Project)
async def remove_admin(
    project_id: str,
    admin_id: str,
    user_id: str = Depends(get_caller_id),
    projects: ProjectService = Depends(get_project_service),
):
    return await projects.remove_admin(user_id, project_id, admin_id)


# =============================================================================
# Labels
# =============================================================================


@router.get("/{project_id}/labels", response_model=list[Label])
async def list_labels(
    project_id: str,
    user_id: str = Depends(get_caller_id),
    labels: LabelService = Depends(get_label_service),
):
    return await labels.list_labels(user_id, project_id)


@router.post("/{project_id}/labels", response_model=Label, status_code=201)
async def create_label(
    project_id: str,
    data: LabelCreate,
    user_id: str = Depends(get_caller_id),
    labels: LabelService = Depends(get_label_service),
):
    return await labels.create_label(user_id, project_id, data)


@router.delete("/{project_id}/labels/{label_id}")
async def delete_label(
    project_id: str,
    label_id: str,
    user_id: str = Depends(get_caller_id),
    labels: LabelService = Depends(get_label_service),
):
    await labels.delete_label(user_id, project_id, label_id)
    return {"message": "Label deleted"}
