"""Work time arithmetic. A working day is 8 hours (480 minutes)."""
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Mapping

MINUTES_PER_HOUR = 60
HOURS_PER_DAY = 8
MINUTES_PER_DAY = HOURS_PER_DAY * MINUTES_PER_HOUR


@dataclass(frozen=True)
class TimeValue:
    days: int = 0
    hours: int = 0
    minutes: int = 0

    @property
    def total_minutes(self) -> int:
        return self.days * MINUTES_PER_DAY + self.hours * MINUTES_PER_HOUR + self.minutes

    def as_dict(self) -> dict[str, int]:
        return asdict(self)

    @classmethod
    def from_raw(cls, raw: "TimeValue | Mapping[str, Any]") -> "TimeValue":
        """Build from a mapping with optional days/hours/minutes keys."""
        if isinstance(raw, TimeValue):
            return raw
        return cls(
            days=int(raw.get("days") or 0),
            hours=int(raw.get("hours") or 0),
            minutes=int(raw.get("minutes") or 0),
        )


ZERO = TimeValue()


def normalize(raw: "TimeValue | Mapping[str, Any]") -> TimeValue:
    """Carry minutes into hours and hours into working days.

    Negative totals collapse to zero, there is no negative time.
    """
    total = TimeValue.from_raw(raw).total_minutes
    if total < 0:
        return ZERO
    days, rest = divmod(total, MINUTES_PER_DAY)
    hours, minutes = divmod(rest, MINUTES_PER_HOUR)
    return TimeValue(days=days, hours=hours, minutes=minutes)


def add(a: "TimeValue | Mapping[str, Any] | None", b: "TimeValue | Mapping[str, Any] | None") -> TimeValue:
    """Field-wise sum of two values, a missing side counts as zero."""
    left = TimeValue.from_raw(a) if a is not None else ZERO
    right = TimeValue.from_raw(b) if b is not None else ZERO
    return normalize(TimeValue(
        days=left.days + right.days,
        hours=left.hours + right.hours,
        minutes=left.minutes + right.minutes,
    ))


def total(values: Iterable["TimeValue | Mapping[str, Any] | None"]) -> TimeValue:
    """Sum a collection of time values.

    All or nothing: an empty collection, or one with a missing element,
    yields zero rather than a partial sum.
    """
    items = list(values)
    if not items or any(v is None for v in items):
        return ZERO
    parsed = [TimeValue.from_raw(v) for v in items]
    return normalize(TimeValue(
        days=sum(v.days for v in parsed),
        hours=sum(v.hours for v in parsed),
        minutes=sum(v.minutes for v in parsed),
    ))
