"""Project API routes."""
from fastapi import APIRouter, status

from sprintboard.auth.deps import CurrentUser, DbSession
from sprintboard.schemas.project import (
    ProjectCreate,
    ProjectDetail,
    ProjectMemberAdd,
    ProjectResponse,
    ProjectUpdate,
)
from sprintboard.services import project_service

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post("", response_model=ProjectDetail, status_code=status.HTTP_201_CREATED)
async def create_project(data: ProjectCreate, db: DbSession, user: CurrentUser):
    project = await project_service.create_project(db, user, data)
    return await project_service.project_to_detail(db, project)


@router.get("", response_model=list[ProjectResponse])
async def list_projects(db: DbSession, user: CurrentUser, name: str | None = None):
    projects = await project_service.list_projects(db, user, name)
    return [project_service.project_to_response(p) for p in projects]


@router.get("/{project_id}", response_model=ProjectDetail)
async def get_project(project_id: int, db: DbSession, user: CurrentUser):
    project = await project_service.get_project(db, project_id, with_members=True)
    return await project_service.project_to_detail(db, project)


@router.patch("/{project_id}", response_model=ProjectDetail)
async def update_project(project_id: int, data: ProjectUpdate, db: DbSession, user: CurrentUser):
    project = await project_service.update_project(db, user, project_id, data)
    return await project_service.project_to_detail(db, project)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: int, db: DbSession, user: CurrentUser):
    await project_service.delete_project(db, user, project_id)


@router.post("/{project_id}/users", response_model=ProjectDetail)
async def add_member(project_id: int, data: ProjectMemberAdd, db: DbSession, user: CurrentUser):
    project = await project_service.add_member(db, user, project_id, data.user_id)
    return await project_service.project_to_detail(db, project)


@router.delete("/{project_id}/users/{user_id}", response_model=ProjectDetail)
async def remove_member(project_id: int, user_id: int, db: DbSession, user: CurrentUser):
    project = await project_service.remove_member(db, user, project_id, user_id)
    return await project_service.project_to_detail(db, project)
