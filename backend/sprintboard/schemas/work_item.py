"""Story, bug and task schemas."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from sprintboard.engine.story_points import PointSize
from sprintboard.models.work_item import ItemState, Priority
from sprintboard.schemas.common import SprintRef, TimeValueSchema, UserRef


class WorkItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    priority: Priority
    point_size: PointSize
    state: ItemState = ItemState.TODO
    assignee_id: int | None = None
    estimated_time: TimeValueSchema | None = None


class WorkItemUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = None
    priority: Priority | None = None
    point_size: PointSize | None = None
    state: ItemState | None = None
    assignee_id: int | None = None
    estimated_time: TimeValueSchema | None = None
    logged_time: TimeValueSchema | None = None


class TaskCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    priority: Priority
    state: Literal["todo", "inProgress", "done"] = "todo"
    assignee_id: int | None = None
    estimated_time: TimeValueSchema | None = None


class TaskUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = None
    priority: Priority | None = None
    state: Literal["todo", "inProgress", "done"] | None = None
    assignee_id: int | None = None
    estimated_time: TimeValueSchema | None = None
    # Added to the logged time of the task and of its story
    logged_time: TimeValueSchema | None = None


class TaskResponse(BaseModel):
    id: int
    story_id: int
    code: str
    name: str
    description: str | None
    state: str
    priority: str
    estimated_time: TimeValueSchema | None
    logged_time: TimeValueSchema | None
    creator_id: int
    assignee_id: int | None
    created_at: datetime

    class Config:
        from_attributes = True


class WorkItemSummary(BaseModel):
    id: int
    kind: str
    code: str
    name: str
    description: str | None
    state: str
    priority: str
    point_size: str
    sprint_id: int | None
    creator_id: int
    assignee_id: int | None


class WorkItemDetail(WorkItemSummary):
    estimated_time: TimeValueSchema | None
    logged_time: TimeValueSchema | None
    created_at: datetime
    creator: UserRef | None = None
    assignee: UserRef | None = None
    sprint: SprintRef | None = None
    tasks: list[TaskResponse] = []
