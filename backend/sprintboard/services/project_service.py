"""Project service."""
import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sprintboard.auth.rbac import can_manage_project
from sprintboard.errors import ConflictError, ForbiddenError, InvalidOperationError, NotFoundError
from sprintboard.models.project import Project, project_members
from sprintboard.models.sprint import Sprint
from sprintboard.models.user import User
from sprintboard.models.work_item import Task, WorkItem, WorkItemKind
from sprintboard.schemas.common import UserRef
from sprintboard.schemas.project import ProjectCreate, ProjectDetail, ProjectResponse, ProjectUpdate

logger = logging.getLogger(__name__)


async def get_project(db: AsyncSession, project_id: int, with_members: bool = False) -> Project:
    query = select(Project).where(Project.id == project_id)
    if with_members:
        query = query.options(selectinload(Project.members))
    project = (await db.execute(query)).scalar_one_or_none()
    if not project:
        raise NotFoundError("Project does not exist")
    return project


async def _get_users(db: AsyncSession, user_ids: list[int]) -> list[User]:
    if not user_ids:
        return []
    result = await db.execute(select(User).where(User.id.in_(user_ids)))
    users = list(result.scalars().all())
    missing = set(user_ids) - {u.id for u in users}
    if missing:
        raise NotFoundError(f"Users do not exist: {sorted(missing)}")
    return users


async def create_project(db: AsyncSession, user: User, data: ProjectCreate) -> Project:
    code = data.code.upper()
    existing = await db.execute(select(Project.id).where(Project.code == code))
    if existing.first():
        raise ConflictError("Project code already exists")
    members = {user.id: user}
    for member in await _get_users(db, data.users):
        members.setdefault(member.id, member)
    project = Project(
        code=code,
        name=data.name,
        description=data.description,
        picture=data.picture,
        creator_id=user.id,
        members=list(members.values()),
    )
    if data.start_date:
        project.start_date = data.start_date
    db.add(project)
    await db.flush()
    logger.info("Project %s (%s) created by user %s", project.id, project.code, user.id)
    return project


async def list_projects(db: AsyncSession, user: User, name: str | None = None) -> list[Project]:
    query = (
        select(Project)
        .join(project_members, project_members.c.project_id == Project.id)
        .where(project_members.c.user_id == user.id)
        .order_by(Project.created_at.desc(), Project.id.desc())
    )
    if name:
        query = query.where(Project.name == name)
    result = await db.execute(query)
    return list(result.scalars().all())


async def update_project(db: AsyncSession, user: User, project_id: int, data: ProjectUpdate) -> Project:
    project = await get_project(db, project_id, with_members=True)
    if not can_manage_project(user, project):
        raise ForbiddenError("Only the project creator can edit the project")
    for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(project, key, value)
    await db.flush()
    return project


async def delete_project(db: AsyncSession, user: User, project_id: int) -> None:
    """Delete a project with its sprints, stories, bugs and tasks."""
    # Members are loaded so the ORM removes the membership rows itself
    project = await get_project(db, project_id, with_members=True)
    if not can_manage_project(user, project):
        raise ForbiddenError("Only the project creator can delete the project")
    item_ids = select(WorkItem.id).where(WorkItem.project_id == project_id)
    await db.execute(delete(Task).where(Task.story_id.in_(item_ids)))
    await db.execute(delete(WorkItem).where(WorkItem.project_id == project_id))
    await db.execute(delete(Sprint).where(Sprint.project_id == project_id))
    await db.delete(project)
    await db.flush()
    logger.info("Project %s deleted by user %s", project_id, user.id)


async def add_member(db: AsyncSession, user: User, project_id: int, member_id: int) -> Project:
    project = await get_project(db, project_id, with_members=True)
    if not can_manage_project(user, project):
        raise ForbiddenError("Only the project creator can change members")
    member = (await _get_users(db, [member_id]))[0]
    if member not in project.members:
        project.members.append(member)
        await db.flush()
    return project


async def remove_member(db: AsyncSession, user: User, project_id: int, member_id: int) -> Project:
    project = await get_project(db, project_id, with_members=True)
    if not can_manage_project(user, project):
        raise ForbiddenError("Only the project creator can change members")
    if member_id == project.creator_id:
        raise InvalidOperationError("The project creator cannot be removed")
    member = next((m for m in project.members if m.id == member_id), None)
    if member is None:
        raise NotFoundError("User is not a member of the project")
    project.members.remove(member)
    await db.flush()
    return project


def project_to_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        code=project.code,
        name=project.name,
        description=project.description,
        start_date=project.start_date,
        picture=project.picture,
        creator_id=project.creator_id,
        created_at=project.created_at,
    )


async def project_to_detail(db: AsyncSession, project: Project) -> ProjectDetail:
    """Detailed view; project must be loaded with members."""
    indicators = await db.execute(
        select(Sprint.indicator).where(Sprint.project_id == project.id).order_by(Sprint.indicator)
    )
    counts = dict(
        (await db.execute(
            select(WorkItem.kind, func.count(WorkItem.id))
            .where(WorkItem.project_id == project.id)
            .group_by(WorkItem.kind)
        )).all()
    )
    return ProjectDetail(
        **project_to_response(project).model_dump(),
        members=[UserRef.model_validate(m) for m in project.members],
        sprints=list(indicators.scalars().all()),
        story_count=counts.get(WorkItemKind.STORY.value, 0),
        bug_count=counts.get(WorkItemKind.BUG.value, 0),
    )
