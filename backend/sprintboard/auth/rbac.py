"""Role-based access control."""
from enum import Enum

from sprintboard.models.project import Project
from sprintboard.models.user import User


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


def is_admin(user: User) -> bool:
    return (user.role or "").lower() == Role.ADMIN.value


def can_delete_user(user: User) -> bool:
    return is_admin(user)


def can_manage_project(user: User, project: Project) -> bool:
    """Deleting a project or changing its members: creator or admin."""
    return is_admin(user) or project.creator_id == user.id
