"""Sprint burndown accounting - deterministic, no database access.

Series (ideal and remaining size) are keyed by sprint day index starting at 1.
They are persisted as JSON objects, so keys are strings at rest and ints here.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping

from sprintboard.config import get_settings
from sprintboard.engine.story_points import point_value

DONE = "done"

SPRINT_TODO = "todo"
SPRINT_IN_PROGRESS = "inProgress"
SPRINT_DONE = "done"

# Sprints only move forward
SPRINT_TRANSITIONS: dict[str, list[str]] = {
    SPRINT_TODO: [SPRINT_IN_PROGRESS],
    SPRINT_IN_PROGRESS: [SPRINT_DONE],
    SPRINT_DONE: [],
}

ALLOWED_SPRINT_DAYS = (2, 4, 5, 10, 20)


@dataclass(frozen=True)
class SizedItem:
    """Point size and state of a story or bug attached to a sprint."""

    point_size: str
    state: str

    @property
    def points(self) -> int:
        return point_value(self.point_size)

    @property
    def is_done(self) -> bool:
        return self.state == DONE


def load_series(raw: Mapping[Any, Any] | None) -> dict[int, float]:
    if not raw:
        return {}
    return {int(k): v for k, v in raw.items()}


def dump_series(series: Mapping[int, float]) -> dict[str, float]:
    return {str(k): v for k, v in sorted(series.items())}


def can_transition(current: str, target: str) -> bool:
    return current == target or target in SPRINT_TRANSITIONS.get(current, [])


def ideal_curve(total_points: float, days: int) -> dict[int, float]:
    """Straight line from total_points on day 1 down to 0 on the last day."""
    if days <= 1:
        return {1: total_points}
    return {
        day: total_points - (day - 1) * total_points / (days - 1)
        for day in range(1, days + 1)
    }


def remaining_delta(old_points: int, old_state: str, new_points: int, new_state: str) -> int:
    """Change in remaining size when an item's state and/or size changes.

    Done items do not count towards the remaining size, so moving into done
    subtracts the item's points and moving out of done adds them back.
    """
    before = 0 if old_state == DONE else old_points
    after = 0 if new_state == DONE else new_points
    return after - before


def state_change_delta(points: int, old_state: str, new_state: str) -> int:
    return remaining_delta(points, old_state, points, new_state)


def apply_delta(remaining: Mapping[int, float], day: int, delta: float) -> dict[int, float]:
    """Return a copy of remaining with delta added on day (missing day is 0)."""
    updated = dict(remaining)
    updated[day] = updated.get(day, 0) + delta
    return updated


def total_points(items: Iterable[SizedItem], include_done: bool = True) -> int:
    return sum(i.points for i in items if include_done or not i.is_done)


class BurndownEngine:
    """Day indexing and sprint recomputation, configured from settings."""

    def __init__(self, day_index_mode: str | None = None) -> None:
        self.day_index_mode = day_index_mode or get_settings().burndown_day_index

    def current_day_index(self, sprint_start: date | None, days: int, today: date) -> int:
        """Day of the sprint that today's changes are booked against.

        Before the sprint starts everything goes to day 1. The "weekday" mode
        keeps the legacy formula, which only holds within a single week.
        """
        if sprint_start is None:
            return 1
        if self.day_index_mode == "weekday":
            # Sunday = 0 ... Saturday = 6
            return (today.isoweekday() % 7) - (sprint_start.isoweekday() % 7) + 1
        elapsed = (today - sprint_start).days + 1
        return max(1, min(elapsed, max(days, 1)))

    def recompute(
        self,
        items: list[SizedItem],
        days: int,
        remaining: Mapping[int, float],
        day: int,
    ) -> tuple[dict[int, float], dict[int, float]]:
        """Ideal curve over every attached item and remaining size for day.

        Returns (ideal, remaining). Only the given day of remaining changes.
        """
        ideal = ideal_curve(total_points(items), days)
        updated = dict(remaining)
        updated[day] = total_points(items, include_done=False)
        return ideal, updated
