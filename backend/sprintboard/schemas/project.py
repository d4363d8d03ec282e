"""Project schemas."""
from datetime import date, datetime

from pydantic import BaseModel, Field

from sprintboard.schemas.common import UserRef


class ProjectCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=4, pattern=r"^[A-Za-z0-9]+$")
    name: str = Field(..., min_length=1, max_length=128)
    description: str | None = Field(None, max_length=500)
    start_date: date | None = None
    picture: str | None = None
    users: list[int] = []


class ProjectUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=128)
    description: str | None = Field(None, max_length=500)
    start_date: date | None = None
    picture: str | None = None


class ProjectMemberAdd(BaseModel):
    user_id: int


class ProjectResponse(BaseModel):
    id: int
    code: str
    name: str
    description: str | None
    start_date: date
    picture: str | None
    creator_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class ProjectDetail(ProjectResponse):
    members: list[UserRef] = []
    sprints: list[int] = []
    story_count: int = 0
    bug_count: int = 0
