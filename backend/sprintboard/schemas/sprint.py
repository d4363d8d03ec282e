"""Sprint schemas."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from sprintboard.engine.burndown import ALLOWED_SPRINT_DAYS
from sprintboard.schemas.common import TimeValueSchema


class SprintTime(BaseModel):
    days: Literal[ALLOWED_SPRINT_DAYS]


class SprintCreate(BaseModel):
    time: SprintTime
    count: int = Field(default=1, ge=1)


class SprintUpdate(BaseModel):
    state: Literal["todo", "inProgress", "done"] | None = None
    stories: list[int] = []
    bugs: list[int] = []
    removed_stories: list[int] = []
    removed_bugs: list[int] = []


class SprintPeriod(BaseModel):
    start_time: int
    end_time: int


class SprintChartData(BaseModel):
    total_estimated_time: TimeValueSchema | None = None
    total_logged_time: TimeValueSchema | None = None


class SprintResponse(BaseModel):
    id: int
    project_id: int
    indicator: int
    time: SprintTime
    state: str
    sprint_start_date: datetime | None
    creator_id: int | None
    created_at: datetime
    stories: list[int] = []
    bugs: list[int] = []
    period: SprintPeriod
    chart_data: SprintChartData


class SprintBurndown(BaseModel):
    sprint_id: int
    indicator: int
    days: int
    state: str
    current_day: int
    ideal_size: dict[int, float]
    remaining_size: dict[int, float]
