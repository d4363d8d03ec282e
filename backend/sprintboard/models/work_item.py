"""Story, bug and task models."""
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from sprintboard.database import Base, JSONType
from sprintboard.engine.time_value import normalize
from sprintboard.models.user import utcnow


class WorkItemKind(str, PyEnum):
    STORY = "story"
    BUG = "bug"

    @property
    def code_marker(self) -> str:
        return "B" if self is WorkItemKind.BUG else ""


class ItemState(str, PyEnum):
    TODO = "todo"
    IN_PROGRESS = "inProgress"
    TESTING = "testing"
    DONE = "done"


class Priority(str, PyEnum):
    BLOCKER = "blocker"
    CRITICAL = "critical"
    MAJOR = "major"
    MEDIUM = "medium"
    MINOR = "minor"


class _TimeTracked:
    """Estimated/logged time columns, normalized whenever they are assigned."""

    estimated_time: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    logged_time: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    @validates("estimated_time", "logged_time")
    def _normalize_time(self, key, value):
        if value is None:
            return None
        return normalize(value).as_dict()


class WorkItem(_TimeTracked, Base):
    """A story or a bug. Both carry a point size and count towards burndown."""

    __tablename__ = "work_items"
    __table_args__ = (UniqueConstraint("project_id", "code", name="uq_work_item_project_code"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    kind: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    sprint_id: Mapped[int | None] = mapped_column(ForeignKey("sprints.id", ondelete="SET NULL"), nullable=True, index=True)
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    state: Mapped[str] = mapped_column(String(20), nullable=False, default=ItemState.TODO.value)
    priority: Mapped[str] = mapped_column(String(20), nullable=False)
    point_size: Mapped[str] = mapped_column(String(20), nullable=False)
    creator_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    assignee_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Task(_TimeTracked, Base):
    """Task under a story. No point size and no testing state."""

    __tablename__ = "tasks"
    __table_args__ = (UniqueConstraint("story_id", "code", name="uq_task_story_code"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    story_id: Mapped[int] = mapped_column(ForeignKey("work_items.id", ondelete="CASCADE"), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    state: Mapped[str] = mapped_column(String(20), nullable=False, default=ItemState.TODO.value)
    priority: Mapped[str] = mapped_column(String(20), nullable=False)
    creator_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    assignee_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
