"""
Timeline value objects.

Objects:
- TaskRecord (read-only snapshot of one task row)
- ResolvedInterval (a task's effective start/end and duration figures)
- TimeWindow (project extent or viewport)
- BarPosition (normalized bar geometry)
- TickMarker (one labeled time-axis position)

Invariants:
- ResolvedInterval.end >= ResolvedInterval.start
- TimeWindow.start < TimeWindow.end
- Nothing is mutated after construction; recompute and replace instead
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

HOUR = timedelta(hours=1)
DAY = timedelta(days=1)

MIN_INSTANT = datetime.min.replace(tzinfo=timezone.utc)
MAX_INSTANT = datetime.max.replace(tzinfo=timezone.utc)


def shift_instant(instant: datetime, delta: timedelta) -> datetime:
    """instant + delta, pinned to the representable range instead of overflowing."""
    try:
        return instant + delta
    except OverflowError:
        return MAX_INSTANT if delta > timedelta(0) else MIN_INSTANT


class TaskStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class TaskPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ProjectPhase(Enum):
    """Construction lifecycle phase a task belongs to."""

    CONCEPT = "concept"
    DESIGN = "design"
    PRE_CONSTRUCTION = "pre_construction"
    EXECUTION = "execution"
    HANDOVER = "handover"
    OPERATIONS_MAINTENANCE = "operations_maintenance"


@dataclass(frozen=True)
class TaskRecord:
    """
    One task as supplied by the record store.

    id, status, priority and created_at are always present. Every other
    field may be missing; the duration resolver defaults them.
    """

    id: str
    status: TaskStatus
    priority: TaskPriority
    created_at: datetime
    title: str = ""
    phase: ProjectPhase | None = None
    start_date: datetime | None = None
    due_date: datetime | None = None
    completed_date: datetime | None = None
    updated_at: datetime | None = None
    estimated_hours: float | None = None
    planned_hours: float | None = None
    actual_hours: float | None = None
    progress_percentage: float | None = None

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED


@dataclass(frozen=True)
class ResolvedInterval:
    start: datetime
    end: datetime
    planned_hours: float
    actual_hours: float
    efficiency_percent: int
    is_overtime: bool
    end_source: str  # "completed" | "last_modified" | "due" | "duration" | "default"
    clamped: bool = False  # end was before start in the source data

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class TimeWindow:
    """A [start, end] span of time. Used for both the extent and the viewport."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end <= self.start:
            raise ValueError(f"TimeWindow end must be after start: {self.start} .. {self.end}")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def center(self) -> datetime:
        return self.start + self.duration / 2

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end

    def percent_of(self, instant: datetime) -> float:
        """Offset of an instant within the window, unclamped (0 = start, 100 = end)."""
        return (instant - self.start) / self.duration * 100

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class BarPosition:
    start_percent: float
    width_percent: float


@dataclass(frozen=True)
class TickMarker:
    position_percent: float
    label: str
    is_major: bool
    instant: datetime

    def to_dict(self) -> dict:
        return {
            "position_percent": self.position_percent,
            "label": self.label,
            "is_major": self.is_major,
            "instant": self.instant.isoformat(),
        }
