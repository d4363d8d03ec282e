"""SQLAlchemy models."""
from sprintboard.models.project import Project, project_members
from sprintboard.models.sprint import Sprint
from sprintboard.models.user import User
from sprintboard.models.work_item import ItemState, Priority, Task, WorkItem, WorkItemKind

__all__ = [
    "ItemState",
    "Priority",
    "Project",
    "project_members",
    "Sprint",
    "Task",
    "User",
    "WorkItem",
    "WorkItemKind",
]
