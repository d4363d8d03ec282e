"""Pydantic schemas."""
from sprintboard.schemas.auth import PasswordChange, Token, UserCreate, UserLogin, UserResponse, UserUpdate
from sprintboard.schemas.common import SprintRef, TimeValueSchema, UserRef
from sprintboard.schemas.project import (
    ProjectCreate,
    ProjectDetail,
    ProjectMemberAdd,
    ProjectResponse,
    ProjectUpdate,
)
from sprintboard.schemas.sprint import (
    SprintBurndown,
    SprintCreate,
    SprintResponse,
    SprintTime,
    SprintUpdate,
)
from sprintboard.schemas.work_item import (
    TaskCreate,
    TaskResponse,
    TaskUpdate,
    WorkItemCreate,
    WorkItemDetail,
    WorkItemSummary,
    WorkItemUpdate,
)

__all__ = [
    "PasswordChange",
    "Token",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserUpdate",
    "SprintRef",
    "TimeValueSchema",
    "UserRef",
    "ProjectCreate",
    "ProjectDetail",
    "ProjectMemberAdd",
    "ProjectResponse",
    "ProjectUpdate",
    "SprintBurndown",
    "SprintCreate",
    "SprintResponse",
    "SprintTime",
    "SprintUpdate",
    "TaskCreate",
    "TaskResponse",
    "TaskUpdate",
    "WorkItemCreate",
    "WorkItemDetail",
    "WorkItemSummary",
    "WorkItemUpdate",
]
