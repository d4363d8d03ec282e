"""Sprint service: sprint lifecycle and burndown bookkeeping.

All figures are computed by BurndownEngine; this module loads and stores
them. Sprint rows are versioned, so two requests adjusting the same sprint
concurrently make the later flush fail with StaleDataError instead of
losing an update.
"""
import logging
from collections import defaultdict
from datetime import date, datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.config import get_settings
from sprintboard.engine import time_value
from sprintboard.engine.burndown import (
    BurndownEngine,
    SPRINT_IN_PROGRESS,
    SizedItem,
    apply_delta,
    can_transition,
    dump_series,
    load_series,
    remaining_delta,
)
from sprintboard.engine.story_points import point_value
from sprintboard.errors import InvalidOperationError, NotFoundError
from sprintboard.models.project import Project
from sprintboard.models.sprint import Sprint
from sprintboard.models.user import User
from sprintboard.models.work_item import WorkItem, WorkItemKind
from sprintboard.schemas.common import TimeValueSchema
from sprintboard.schemas.sprint import (
    SprintBurndown,
    SprintChartData,
    SprintCreate,
    SprintPeriod,
    SprintResponse,
    SprintTime,
    SprintUpdate,
)

logger = logging.getLogger(__name__)


def _today() -> date:
    return datetime.now(timezone.utc).date()


def current_day(sprint: Sprint, engine: BurndownEngine | None = None, today: date | None = None) -> int:
    engine = engine or BurndownEngine()
    start = sprint.sprint_start_date.date() if sprint.sprint_start_date else None
    return engine.current_day_index(start, sprint.days, today or _today())


async def get_sprint(db: AsyncSession, sprint_id: int) -> Sprint:
    sprint = await db.get(Sprint, sprint_id)
    if not sprint:
        raise NotFoundError("Sprint does not exist")
    return sprint


async def get_sprint_by_indicator(db: AsyncSession, project_id: int, indicator: int) -> Sprint:
    result = await db.execute(
        select(Sprint).where(Sprint.project_id == project_id, Sprint.indicator == indicator)
    )
    sprint = result.scalar_one_or_none()
    if not sprint:
        raise NotFoundError("Sprint does not exist")
    return sprint


async def list_sprints(db: AsyncSession, project_id: int) -> list[Sprint]:
    result = await db.execute(
        select(Sprint).where(Sprint.project_id == project_id).order_by(Sprint.indicator.desc())
    )
    return list(result.scalars().all())


async def sprint_items(db: AsyncSession, sprint_id: int, kind: WorkItemKind | None = None) -> list[WorkItem]:
    query = select(WorkItem).where(WorkItem.sprint_id == sprint_id).order_by(WorkItem.id)
    if kind is not None:
        query = query.where(WorkItem.kind == kind.value)
    result = await db.execute(query)
    return list(result.scalars().all())


async def create_sprints(db: AsyncSession, user: User, project: Project, data: SprintCreate) -> list[Sprint]:
    """Create data.count sprints continuing the project's indicator sequence."""
    limit = get_settings().max_sprints_per_request
    if data.count > limit:
        raise InvalidOperationError(f"At most {limit} sprints can be created at once")
    latest = (await db.execute(
        select(func.max(Sprint.indicator)).where(Sprint.project_id == project.id)
    )).scalar_one_or_none()
    first = 0 if latest is None else latest + 1
    sprints = [
        Sprint(
            project_id=project.id,
            indicator=first + offset,
            days=data.time.days,
            state="todo",
            remaining_size=dump_series({1: 0}),
            ideal_size={},
            creator_id=user.id,
        )
        for offset in range(data.count)
    ]
    db.add_all(sprints)
    await db.flush()
    logger.info(
        "Created sprints %s..%s for project %s",
        first, first + data.count - 1, project.id,
    )
    return sprints


async def recompute_sprint(
    db: AsyncSession,
    sprint: Sprint,
    engine: BurndownEngine | None = None,
    today: date | None = None,
) -> None:
    """Rebuild the ideal curve and today's remaining size from attached items."""
    engine = engine or BurndownEngine()
    items = await sprint_items(db, sprint.id)
    day = current_day(sprint, engine, today)
    ideal, remaining = engine.recompute(
        [SizedItem(i.point_size, i.state) for i in items],
        sprint.days,
        load_series(sprint.remaining_size),
        day,
    )
    sprint.ideal_size = dump_series(ideal)
    sprint.remaining_size = dump_series(remaining)
    await db.flush()
    logger.debug("Sprint %s recomputed on day %s: remaining=%s", sprint.id, day, remaining[day])


async def add_items_to_sprint(
    db: AsyncSession,
    sprint: Sprint,
    item_ids: list[int],
    kind: WorkItemKind,
    recompute: bool = True,
) -> set[int]:
    """Attach stories or bugs of the sprint's project to the sprint.

    Unknown ids are NotFound, ids of another project are rejected. Items
    already in the sprint stay as they are. Returns the ids of other sprints
    the items were moved from. With recompute, today's remaining size is
    refreshed afterwards.
    """
    wanted = set(item_ids)
    if not wanted:
        return set()
    result = await db.execute(
        select(WorkItem).where(WorkItem.id.in_(wanted), WorkItem.kind == kind.value)
    )
    items = list(result.scalars().all())
    missing = wanted - {i.id for i in items}
    if missing:
        raise NotFoundError(f"{kind.value.capitalize()} ids {sorted(missing)} do not exist")
    foreign = sorted(i.id for i in items if i.project_id != sprint.project_id)
    if foreign:
        raise InvalidOperationError(
            f"{kind.value.capitalize()} ids {foreign} do not belong to the sprint's project"
        )
    moved_from = set()
    for item in items:
        if item.sprint_id is not None and item.sprint_id != sprint.id:
            moved_from.add(item.sprint_id)
        item.sprint_id = sprint.id
    await db.flush()
    if recompute:
        await recompute_sprint(db, sprint)
    return moved_from


async def remove_items_from_sprint(
    db: AsyncSession,
    sprint: Sprint,
    item_ids: list[int],
    kind: WorkItemKind,
) -> None:
    unwanted = set(item_ids)
    if not unwanted:
        return
    attached = {i.id: i for i in await sprint_items(db, sprint.id, kind)}
    missing = unwanted - attached.keys()
    if missing:
        raise InvalidOperationError(f"{kind.value.capitalize()} ids {sorted(missing)} are not in the sprint")
    for item_id in unwanted:
        attached[item_id].sprint_id = None
    await db.flush()


async def update_sprint(db: AsyncSession, sprint_id: int, data: SprintUpdate) -> Sprint:
    sprint = await get_sprint(db, sprint_id)
    if data.state is not None and data.state != sprint.state:
        if not can_transition(sprint.state, data.state):
            raise InvalidOperationError(f"Sprint cannot move from {sprint.state} to {data.state}")
        if data.state == SPRINT_IN_PROGRESS:
            sprint.sprint_start_date = datetime.now(timezone.utc)
        logger.info("Sprint %s: %s -> %s", sprint.id, sprint.state, data.state)
        sprint.state = data.state

    moved_from: set[int] = set()
    moved_from |= await add_items_to_sprint(db, sprint, data.stories, WorkItemKind.STORY, recompute=False)
    moved_from |= await add_items_to_sprint(db, sprint, data.bugs, WorkItemKind.BUG, recompute=False)
    await remove_items_from_sprint(db, sprint, data.removed_stories, WorkItemKind.STORY)
    await remove_items_from_sprint(db, sprint, data.removed_bugs, WorkItemKind.BUG)

    engine = BurndownEngine()
    await recompute_sprint(db, sprint, engine)
    for other_id in moved_from:
        await recompute_sprint(db, await get_sprint(db, other_id), engine)
    return sprint


async def delete_sprint(db: AsyncSession, sprint_id: int) -> None:
    sprint = await get_sprint(db, sprint_id)
    await db.execute(
        update(WorkItem).where(WorkItem.sprint_id == sprint.id).values(sprint_id=None)
    )
    await db.delete(sprint)
    await db.flush()
    logger.info("Sprint %s (indicator %s) deleted", sprint.id, sprint.indicator)


async def on_work_item_change(
    db: AsyncSession,
    item: WorkItem,
    new_state: str,
    new_point_size: str,
    engine: BurndownEngine | None = None,
    today: date | None = None,
) -> float:
    """Book a state and/or size change of item against its sprint.

    Must run before the new values are written to item, since the direction
    of the adjustment is read from the item's current state. Returns the
    delta applied to today's remaining size.
    """
    if item.sprint_id is None:
        return 0
    delta = remaining_delta(
        point_value(item.point_size), item.state,
        point_value(new_point_size), new_state,
    )
    if delta == 0:
        return 0
    sprint = await get_sprint(db, item.sprint_id)
    day = current_day(sprint, engine, today)
    remaining = apply_delta(load_series(sprint.remaining_size), day, delta)
    sprint.remaining_size = dump_series(remaining)
    await db.flush()
    logger.info(
        "%s %s: %s -> %s, sprint %s day %s remaining %+d -> %s",
        item.kind, item.code, item.state, new_state, sprint.id, day, delta, remaining[day],
    )
    return delta


def _time_or_none(value: time_value.TimeValue | None) -> TimeValueSchema | None:
    return TimeValueSchema(**value.as_dict()) if value is not None else None


def _to_response(sprint: Sprint, items: list[WorkItem]) -> SprintResponse:
    estimated = logged = None
    if items:
        estimated = time_value.total(i.estimated_time for i in items)
        logged = time_value.total(i.logged_time for i in items)
    return SprintResponse(
        id=sprint.id,
        project_id=sprint.project_id,
        indicator=sprint.indicator,
        time=SprintTime(days=sprint.days),
        state=sprint.state,
        sprint_start_date=sprint.sprint_start_date,
        creator_id=sprint.creator_id,
        created_at=sprint.created_at,
        stories=[i.id for i in items if i.kind == WorkItemKind.STORY.value],
        bugs=[i.id for i in items if i.kind == WorkItemKind.BUG.value],
        period=SprintPeriod(
            start_time=sprint.days * sprint.indicator,
            end_time=sprint.days * (sprint.indicator + 1),
        ),
        chart_data=SprintChartData(
            total_estimated_time=_time_or_none(estimated),
            total_logged_time=_time_or_none(logged),
        ),
    )


async def sprints_to_responses(db: AsyncSession, sprints: list[Sprint]) -> list[SprintResponse]:
    if not sprints:
        return []
    result = await db.execute(
        select(WorkItem)
        .where(WorkItem.sprint_id.in_([s.id for s in sprints]))
        .order_by(WorkItem.id)
    )
    by_sprint: dict[int, list[WorkItem]] = defaultdict(list)
    for item in result.scalars().all():
        by_sprint[item.sprint_id].append(item)
    return [_to_response(s, by_sprint[s.id]) for s in sprints]


async def sprint_to_response(db: AsyncSession, sprint: Sprint) -> SprintResponse:
    return _to_response(sprint, await sprint_items(db, sprint.id))


def sprint_burndown(sprint: Sprint, today: date | None = None) -> SprintBurndown:
    return SprintBurndown(
        sprint_id=sprint.id,
        indicator=sprint.indicator,
        days=sprint.days,
        state=sprint.state,
        current_day=current_day(sprint, today=today),
        ideal_size=load_series(sprint.ideal_size),
        remaining_size=load_series(sprint.remaining_size),
    )
