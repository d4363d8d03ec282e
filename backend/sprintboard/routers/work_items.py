"""Story and bug API routes.

Both resources behave the same, so one router is built per WorkItemKind.
"""
from fastapi import APIRouter, status

from sprintboard.auth.deps import CurrentUser, DbSession
from sprintboard.models.work_item import WorkItemKind
from sprintboard.schemas.work_item import WorkItemCreate, WorkItemDetail, WorkItemSummary, WorkItemUpdate
from sprintboard.services import work_item_service


def build_router(kind: WorkItemKind) -> APIRouter:
    plural = f"{kind.value}s" if kind is WorkItemKind.BUG else "stories"
    router = APIRouter(tags=[plural])

    @router.post(
        f"/projects/{{project_id}}/{plural}",
        response_model=WorkItemDetail,
        status_code=status.HTTP_201_CREATED,
        name=f"create_{kind.value}",
    )
    async def create_item(project_id: int, data: WorkItemCreate, db: DbSession, user: CurrentUser):
        item = await work_item_service.create_item(db, user, project_id, kind, data)
        return await work_item_service.item_to_detail(db, item)

    @router.get(
        f"/projects/{{project_id}}/{plural}",
        response_model=list[WorkItemSummary],
        name=f"list_{plural}",
    )
    async def list_items(project_id: int, db: DbSession, user: CurrentUser):
        items = await work_item_service.list_items(db, project_id, kind)
        return [work_item_service.item_to_summary(i) for i in items]

    @router.get(
        f"/sprints/{{sprint_id}}/{plural}",
        response_model=list[WorkItemDetail],
        name=f"scrumboard_{plural}",
    )
    async def scrumboard(sprint_id: int, db: DbSession, user: CurrentUser, assignee_id: int | None = None):
        return await work_item_service.scrumboard(db, sprint_id, kind, assignee_id)

    @router.get(f"/{plural}/{{item_id}}", response_model=WorkItemDetail, name=f"get_{kind.value}")
    async def get_item(item_id: int, db: DbSession, user: CurrentUser):
        item = await work_item_service.get_item(db, item_id, kind)
        return await work_item_service.item_to_detail(db, item)

    @router.patch(f"/{plural}/{{item_id}}", response_model=WorkItemDetail, name=f"update_{kind.value}")
    async def update_item(item_id: int, data: WorkItemUpdate, db: DbSession, user: CurrentUser):
        item = await work_item_service.update_item(db, user, item_id, kind, data)
        return await work_item_service.item_to_detail(db, item)

    @router.delete(
        f"/{plural}/{{item_id}}",
        status_code=status.HTTP_204_NO_CONTENT,
        name=f"delete_{kind.value}",
    )
    async def delete_item(item_id: int, db: DbSession, user: CurrentUser):
        await work_item_service.delete_item(db, item_id, kind)

    return router


stories_router = build_router(WorkItemKind.STORY)
bugs_router = build_router(WorkItemKind.BUG)
