"""
Task record boundary parsing.

Rows arrive from the record store as loosely typed mappings (ISO strings,
numbers stored as text, unknown enum values). This module turns them into
TaskRecord values once, so the engine never deals with raw rows.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timezone

from timeline.errors import InvalidTaskRecord
from timeline.models import ProjectPhase, TaskPriority, TaskRecord, TaskStatus

logger = logging.getLogger(__name__)

ALL_PHASES = "all"


def parse_instant(value) -> datetime | None:
    """
    Parse an instant from the record store.

    Accepts datetime, date (midnight UTC) and ISO-8601 strings, including a
    trailing "Z". Naive values are taken as UTC. Returns None for empty or
    unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if s.endswith("Z") or s.endswith("z"):
            s = s[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(s)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_hours(value) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def parse_status(value) -> TaskStatus:
    if isinstance(value, TaskStatus):
        return value
    try:
        return TaskStatus(str(value).strip().lower())
    except ValueError:
        logger.warning(f"Unknown task status {value!r}, treating as pending")
        return TaskStatus.PENDING


def parse_priority(value) -> TaskPriority:
    if isinstance(value, TaskPriority):
        return value
    try:
        return TaskPriority(str(value).strip().lower())
    except ValueError:
        logger.warning(f"Unknown task priority {value!r}, treating as medium")
        return TaskPriority.MEDIUM


def parse_phase(value) -> ProjectPhase | None:
    if value is None or value == "":
        return None
    if isinstance(value, ProjectPhase):
        return value
    try:
        return ProjectPhase(str(value).strip().lower())
    except ValueError:
        logger.warning(f"Unknown project phase {value!r}, ignoring")
        return None


def task_from_row(row: Mapping) -> TaskRecord:
    """
    Build a TaskRecord from a record-store row.

    Raises:
        InvalidTaskRecord if the row has no id or no parseable created_at.
    """
    task_id = row.get("id")
    if task_id is None or str(task_id).strip() == "":
        raise InvalidTaskRecord("task row has no id")
    task_id = str(task_id)

    created_at = parse_instant(row.get("created_at"))
    if created_at is None:
        raise InvalidTaskRecord(f"task {task_id} has no valid created_at: {row.get('created_at')!r}")

    optional_instants = {}
    for field_name in ("start_date", "due_date", "completed_date", "updated_at"):
        raw = row.get(field_name)
        parsed = parse_instant(raw)
        if raw not in (None, "") and parsed is None:
            logger.warning(f"Ignoring invalid {field_name} on task {task_id}: {raw!r}")
        optional_instants[field_name] = parsed

    optional_hours = {}
    for field_name in ("estimated_hours", "planned_hours", "actual_hours", "progress_percentage"):
        raw = row.get(field_name)
        parsed = _parse_hours(raw)
        if raw not in (None, "") and parsed is None:
            logger.warning(f"Ignoring invalid {field_name} on task {task_id}: {raw!r}")
        optional_hours[field_name] = parsed

    return TaskRecord(
        id=task_id,
        status=parse_status(row.get("status")),
        priority=parse_priority(row.get("priority")),
        created_at=created_at,
        title=str(row.get("title") or ""),
        phase=parse_phase(row.get("phase")),
        **optional_instants,
        **optional_hours,
    )


def tasks_from_rows(rows: Iterable[Mapping]) -> list[TaskRecord]:
    return [task_from_row(row) for row in rows]


def filter_by_phase(tasks: Iterable[TaskRecord], phase) -> list[TaskRecord]:
    """Keep tasks in the given phase. None or "all" keeps everything."""
    if phase is None or phase == ALL_PHASES:
        return list(tasks)
    wanted = phase if isinstance(phase, ProjectPhase) else ProjectPhase(str(phase).strip().lower())
    return [t for t in tasks if t.phase is wanted]
