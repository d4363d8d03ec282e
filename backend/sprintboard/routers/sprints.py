"""Sprint API routes."""
from fastapi import APIRouter, status

from sprintboard.auth.deps import CurrentUser, DbSession
from sprintboard.schemas.sprint import SprintBurndown, SprintCreate, SprintResponse, SprintUpdate
from sprintboard.services import sprint_service
from sprintboard.services.project_service import get_project

project_router = APIRouter(prefix="/projects", tags=["sprints"])
router = APIRouter(prefix="/sprints", tags=["sprints"])


@project_router.post(
    "/{project_id}/sprints",
    response_model=list[SprintResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_sprints(project_id: int, data: SprintCreate, db: DbSession, user: CurrentUser):
    project = await get_project(db, project_id)
    sprints = await sprint_service.create_sprints(db, user, project, data)
    return await sprint_service.sprints_to_responses(db, sprints)


@project_router.get("/{project_id}/sprints", response_model=list[SprintResponse])
async def list_sprints(project_id: int, db: DbSession, user: CurrentUser):
    project = await get_project(db, project_id)
    sprints = await sprint_service.list_sprints(db, project.id)
    return await sprint_service.sprints_to_responses(db, sprints)


@project_router.get("/{project_id}/sprints/{indicator}", response_model=SprintResponse)
async def get_sprint_by_indicator(project_id: int, indicator: int, db: DbSession, user: CurrentUser):
    project = await get_project(db, project_id)
    sprint = await sprint_service.get_sprint_by_indicator(db, project.id, indicator)
    return await sprint_service.sprint_to_response(db, sprint)


@router.get("/{sprint_id}", response_model=SprintResponse)
async def get_sprint(sprint_id: int, db: DbSession, user: CurrentUser):
    sprint = await sprint_service.get_sprint(db, sprint_id)
    return await sprint_service.sprint_to_response(db, sprint)


@router.get("/{sprint_id}/burndown", response_model=SprintBurndown)
async def get_burndown(sprint_id: int, db: DbSession, user: CurrentUser):
    sprint = await sprint_service.get_sprint(db, sprint_id)
    return sprint_service.sprint_burndown(sprint)


@router.patch("/{sprint_id}", response_model=SprintResponse)
async def update_sprint(sprint_id: int, data: SprintUpdate, db: DbSession, user: CurrentUser):
    sprint = await sprint_service.update_sprint(db, sprint_id, data)
    return await sprint_service.sprint_to_response(db, sprint)


@router.delete("/{sprint_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sprint(sprint_id: int, db: DbSession, user: CurrentUser):
    await sprint_service.delete_sprint(db, sprint_id)
