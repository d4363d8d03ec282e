"""Sprint model."""
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from sprintboard.database import Base, JSONType
from sprintboard.models.user import utcnow


class Sprint(Base):
    """Sprint of a project with its burndown series.

    remaining_size and ideal_size map day index ("1".."N") to points. Every
    write bumps version_id; a write based on a stale read fails instead of
    silently overwriting a concurrent change.
    """

    __tablename__ = "sprints"
    __table_args__ = (UniqueConstraint("project_id", "indicator", name="uq_sprint_project_indicator"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    indicator: Mapped[int] = mapped_column(Integer, nullable=False)
    days: Mapped[int] = mapped_column(Integer, nullable=False)
    state: Mapped[str] = mapped_column(String(20), nullable=False, default="todo")
    sprint_start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    remaining_size: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    ideal_size: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    creator_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}
