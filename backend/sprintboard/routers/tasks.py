"""Task API routes."""
from fastapi import APIRouter, status

from sprintboard.auth.deps import CurrentUser, DbSession
from sprintboard.schemas.work_item import TaskCreate, TaskResponse, TaskUpdate
from sprintboard.services import task_service
from sprintboard.services.work_item_service import task_to_response

story_router = APIRouter(prefix="/stories", tags=["tasks"])
router = APIRouter(prefix="/tasks", tags=["tasks"])


@story_router.post("/{story_id}/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(story_id: int, data: TaskCreate, db: DbSession, user: CurrentUser):
    task = await task_service.create_task(db, user, story_id, data)
    return task_to_response(task)


@story_router.get("/{story_id}/tasks", response_model=list[TaskResponse])
async def list_tasks(story_id: int, db: DbSession, user: CurrentUser):
    tasks = await task_service.list_tasks(db, story_id)
    return [task_to_response(t) for t in tasks]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: int, db: DbSession, user: CurrentUser):
    return task_to_response(await task_service.get_task(db, task_id))


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(task_id: int, data: TaskUpdate, db: DbSession, user: CurrentUser):
    task = await task_service.update_task(db, user, task_id, data)
    return task_to_response(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int, db: DbSession, user: CurrentUser):
    await task_service.delete_task(db, task_id)
