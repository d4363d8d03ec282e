"""Task service."""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.engine import time_value
from sprintboard.engine.codes import next_code, project_prefix
from sprintboard.errors import NotFoundError
from sprintboard.models.user import User
from sprintboard.models.work_item import Task, WorkItemKind
from sprintboard.schemas.work_item import TaskCreate, TaskUpdate
from sprintboard.services.work_item_service import get_item, resolve_assignee, story_tasks

logger = logging.getLogger(__name__)


async def get_task(db: AsyncSession, task_id: int) -> Task:
    task = await db.get(Task, task_id)
    if not task:
        raise NotFoundError("Task does not exist")
    return task


async def list_tasks(db: AsyncSession, story_id: int) -> list[Task]:
    story = await get_item(db, story_id, WorkItemKind.STORY)
    return await story_tasks(db, story.id)


async def create_task(db: AsyncSession, user: User, story_id: int, data: TaskCreate) -> Task:
    story = await get_item(db, story_id, WorkItemKind.STORY)
    assignee_id = await resolve_assignee(db, user, data.assignee_id)
    siblings = await db.execute(select(Task.code).where(Task.story_id == story.id))
    code = next_code(project_prefix(story.code), siblings.scalars().all(), "T")
    task = Task(
        story_id=story.id,
        code=code,
        name=data.name,
        description=data.description,
        state=data.state,
        priority=data.priority.value,
        creator_id=user.id,
        assignee_id=assignee_id,
        estimated_time=data.estimated_time.model_dump() if data.estimated_time else None,
    )
    db.add(task)
    await db.flush()
    logger.info("Created task %s under story %s", code, story.code)
    return task


async def update_task(db: AsyncSession, user: User, task_id: int, data: TaskUpdate) -> Task:
    """Update a task. logged_time is an increment booked on the task and its story."""
    task = await get_task(db, task_id)
    fields = data.model_dump(exclude_unset=True, mode="json")

    if "assignee_id" in fields:
        task.assignee_id = await resolve_assignee(db, user, fields.pop("assignee_id"))

    logged = fields.pop("logged_time", None)
    if logged:
        story = await get_item(db, task.story_id, WorkItemKind.STORY)
        task.logged_time = time_value.add(task.logged_time, logged).as_dict()
        story.logged_time = time_value.add(story.logged_time, logged).as_dict()
        logger.debug("Logged %s on task %s", logged, task.code)

    for key, value in fields.items():
        if key in ("name", "priority", "state") and value is None:
            continue
        setattr(task, key, value)
    await db.flush()
    return task


async def delete_task(db: AsyncSession, task_id: int) -> None:
    task = await get_task(db, task_id)
    await db.delete(task)
    await db.flush()
