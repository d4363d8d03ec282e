"""Stories and bugs share one service, parameterized by WorkItemKind."""
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.engine.codes import next_code
from sprintboard.errors import NotFoundError
from sprintboard.models.sprint import Sprint
from sprintboard.models.user import User
from sprintboard.models.work_item import Task, WorkItem, WorkItemKind
from sprintboard.schemas.common import SprintRef, TimeValueSchema, UserRef
from sprintboard.schemas.work_item import (
    TaskResponse,
    WorkItemCreate,
    WorkItemDetail,
    WorkItemSummary,
    WorkItemUpdate,
)
from sprintboard.services import sprint_service
from sprintboard.services.project_service import get_project

logger = logging.getLogger(__name__)


async def resolve_assignee(db: AsyncSession, user: User, assignee_id: int | None) -> int:
    """Explicit assignee must exist; no assignee means the current user."""
    if assignee_id is None:
        return user.id
    if not await db.get(User, assignee_id):
        raise NotFoundError("Assignee does not exist")
    return assignee_id


async def get_item(db: AsyncSession, item_id: int, kind: WorkItemKind) -> WorkItem:
    item = await db.get(WorkItem, item_id)
    if not item or item.kind != kind.value:
        raise NotFoundError(f"{kind.value.capitalize()} does not exist")
    return item


async def list_items(db: AsyncSession, project_id: int, kind: WorkItemKind) -> list[WorkItem]:
    await get_project(db, project_id)
    result = await db.execute(
        select(WorkItem)
        .where(WorkItem.project_id == project_id, WorkItem.kind == kind.value)
        .order_by(WorkItem.created_at.desc(), WorkItem.id.desc())
    )
    return list(result.scalars().all())


async def create_item(
    db: AsyncSession,
    user: User,
    project_id: int,
    kind: WorkItemKind,
    data: WorkItemCreate,
) -> WorkItem:
    project = await get_project(db, project_id)
    assignee_id = await resolve_assignee(db, user, data.assignee_id)
    siblings = await db.execute(
        select(WorkItem.code).where(WorkItem.project_id == project.id, WorkItem.kind == kind.value)
    )
    code = next_code(project.code, siblings.scalars().all(), kind.code_marker)
    item = WorkItem(
        kind=kind.value,
        project_id=project.id,
        code=code,
        name=data.name,
        description=data.description,
        state=data.state.value,
        priority=data.priority.value,
        point_size=data.point_size.value,
        creator_id=user.id,
        assignee_id=assignee_id,
        estimated_time=data.estimated_time.model_dump() if data.estimated_time else None,
    )
    db.add(item)
    await db.flush()
    logger.info("Created %s %s in project %s", kind.value, code, project.id)
    return item


async def update_item(
    db: AsyncSession,
    user: User,
    item_id: int,
    kind: WorkItemKind,
    data: WorkItemUpdate,
) -> WorkItem:
    item = await get_item(db, item_id, kind)
    fields = data.model_dump(exclude_unset=True, mode="json")

    if "assignee_id" in fields:
        item.assignee_id = await resolve_assignee(db, user, fields.pop("assignee_id"))

    new_state = fields.pop("state", None) or item.state
    new_size = fields.pop("point_size", None) or item.point_size
    # Burndown is booked against the state the item is leaving
    await sprint_service.on_work_item_change(db, item, new_state, new_size)
    item.state = new_state
    item.point_size = new_size

    for key, value in fields.items():
        if key in ("name", "priority") and value is None:
            continue
        setattr(item, key, value)
    await db.flush()
    return item


async def delete_item(db: AsyncSession, item_id: int, kind: WorkItemKind) -> None:
    item = await get_item(db, item_id, kind)
    sprint_id = item.sprint_id
    if kind is WorkItemKind.STORY:
        await db.execute(delete(Task).where(Task.story_id == item.id))
    await db.delete(item)
    await db.flush()
    logger.info("Deleted %s %s", kind.value, item.code)
    if sprint_id is not None:
        await sprint_service.recompute_sprint(db, await sprint_service.get_sprint(db, sprint_id))


async def story_tasks(db: AsyncSession, story_id: int, assignee_id: int | None = None) -> list[Task]:
    query = select(Task).where(Task.story_id == story_id).order_by(Task.id)
    if assignee_id is not None:
        query = query.where(Task.assignee_id == assignee_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def scrumboard(
    db: AsyncSession,
    sprint_id: int,
    kind: WorkItemKind,
    assignee_id: int | None = None,
) -> list[WorkItemDetail]:
    """Items of a sprint for the board.

    For stories the assignee filter applies to their tasks, for bugs to the
    bugs themselves.
    """
    sprint = await sprint_service.get_sprint(db, sprint_id)
    items = await sprint_service.sprint_items(db, sprint.id, kind)
    if kind is WorkItemKind.BUG and assignee_id is not None:
        items = [i for i in items if i.assignee_id == assignee_id]
    return [await item_to_detail(db, i, task_assignee_id=assignee_id) for i in items]


def _time(value: dict | None) -> TimeValueSchema | None:
    return TimeValueSchema(**value) if value else None


def item_to_summary(item: WorkItem) -> WorkItemSummary:
    return WorkItemSummary(
        id=item.id,
        kind=item.kind,
        code=item.code,
        name=item.name,
        description=item.description,
        state=item.state,
        priority=item.priority,
        point_size=item.point_size,
        sprint_id=item.sprint_id,
        creator_id=item.creator_id,
        assignee_id=item.assignee_id,
    )


def task_to_response(task: Task) -> TaskResponse:
    return TaskResponse(
        id=task.id,
        story_id=task.story_id,
        code=task.code,
        name=task.name,
        description=task.description,
        state=task.state,
        priority=task.priority,
        estimated_time=_time(task.estimated_time),
        logged_time=_time(task.logged_time),
        creator_id=task.creator_id,
        assignee_id=task.assignee_id,
        created_at=task.created_at,
    )


async def item_to_detail(
    db: AsyncSession,
    item: WorkItem,
    task_assignee_id: int | None = None,
) -> WorkItemDetail:
    creator = await db.get(User, item.creator_id)
    assignee = await db.get(User, item.assignee_id) if item.assignee_id else None
    sprint = await db.get(Sprint, item.sprint_id) if item.sprint_id else None
    tasks = []
    if item.kind == WorkItemKind.STORY.value:
        tasks = [task_to_response(t) for t in await story_tasks(db, item.id, task_assignee_id)]
    return WorkItemDetail(
        **item_to_summary(item).model_dump(),
        estimated_time=_time(item.estimated_time),
        logged_time=_time(item.logged_time),
        created_at=item.created_at,
        creator=UserRef.model_validate(creator) if creator else None,
        assignee=UserRef.model_validate(assignee) if assignee else None,
        sprint=SprintRef.model_validate(sprint) if sprint else None,
        tasks=tasks,
    )
