"""
Gantt assembly - task records in, rendering-ready geometry out.

    tasks -> phase filter -> resolve intervals -> extent
          -> window (viewport re-clamped, else extent)
          -> bar positions, efficiency, overdue flags
          -> ticks, now marker

Everything here is a pure function of its arguments. "now" is passed in by
the caller; the clock is never read.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from timeline.axis import Granularity, generate_ticks, parse_granularity
from timeline.config import TimelineSettings, get_settings
from timeline.durations import resolve_interval
from timeline.efficiency import (
    EfficiencyReport,
    EfficiencySummary,
    classify_efficiency,
    summarize_efficiency,
)
from timeline.extent import compute_extent
from timeline.models import BarPosition, ResolvedInterval, TaskRecord, TickMarker, TimeWindow
from timeline.navigator import fit_viewport
from timeline.positions import is_overdue, map_position, now_marker_position
from timeline.records import filter_by_phase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GanttRow:
    task: TaskRecord
    interval: ResolvedInterval
    position: BarPosition
    efficiency: EfficiencyReport
    overdue: bool

    def to_dict(self) -> dict:
        t = self.task
        return {
            "task_id": t.id,
            "title": t.title,
            "status": t.status.value,
            "priority": t.priority.value,
            "phase": t.phase.value if t.phase else None,
            "progress_percentage": t.progress_percentage,
            "start": self.interval.start.isoformat(),
            "end": self.interval.end.isoformat(),
            "end_source": self.interval.end_source,
            "planned_hours": self.interval.planned_hours,
            "actual_hours": self.interval.actual_hours,
            "start_percent": self.position.start_percent,
            "width_percent": self.position.width_percent,
            "efficiency": self.efficiency.to_dict(),
            "overdue": self.overdue,
            "clamped": self.interval.clamped,
        }


@dataclass(frozen=True)
class TimelineView:
    """Everything a renderer needs for one (tasks, filter, granularity, viewport) input."""

    granularity: Granularity
    extent: TimeWindow | None
    viewport: TimeWindow | None
    window: TimeWindow | None
    rows: tuple[GanttRow, ...] = ()
    ticks: tuple[TickMarker, ...] = ()
    now_percent: float | None = None
    summary: EfficiencySummary = field(default_factory=EfficiencySummary)
    warnings: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.extent is None

    def to_dict(self) -> dict:
        return {
            "granularity": self.granularity.value,
            "extent": self.extent.to_dict() if self.extent else None,
            "viewport": self.viewport.to_dict() if self.viewport else None,
            "window": self.window.to_dict() if self.window else None,
            "rows": [row.to_dict() for row in self.rows],
            "ticks": [tick.to_dict() for tick in self.ticks],
            "now_percent": self.now_percent,
            "summary": self.summary.to_dict(),
            "warnings": list(self.warnings),
        }


def build_timeline(
    tasks,
    *,
    granularity=None,
    viewport: TimeWindow | None = None,
    phase=None,
    now: datetime | None = None,
    settings: TimelineSettings | None = None,
) -> TimelineView:
    """
    Lay out a task set.

    Args:
        tasks: Iterable of TaskRecord (a snapshot; not mutated)
        granularity: Granularity or its name; defaults to settings.default_granularity
        viewport: Current viewport, or None for the full extent
        phase: ProjectPhase, its name, "all" or None
        now: Current instant for the now marker and overdue flags
        settings: Engine settings

    Returns:
        TimelineView. With no tasks left after filtering, extent is None and
        there is nothing to render.
    """
    settings = settings or get_settings()
    granularity = parse_granularity(granularity or settings.default_granularity)

    selected = filter_by_phase(tasks, phase)
    resolved = [(task, resolve_interval(task, settings)) for task in selected]

    extent = compute_extent((iv for _, iv in resolved), settings)
    if extent is None:
        return TimelineView(granularity=granularity, extent=None, viewport=None, window=None)

    viewport = fit_viewport(viewport, extent)
    window = viewport or extent

    rows = []
    warnings = []
    for task, interval in resolved:
        if interval.clamped:
            warnings.append(f"Task {task.id}: end precedes start, shown as zero-length")
        rows.append(
            GanttRow(
                task=task,
                interval=interval,
                position=map_position(interval, window),
                efficiency=classify_efficiency(interval, task.status, settings),
                overdue=is_overdue(task, interval, now),
            )
        )

    logger.debug(
        f"Laid out {len(rows)} tasks over {extent.duration} ({granularity.value} axis)"
    )

    return TimelineView(
        granularity=granularity,
        extent=extent,
        viewport=viewport,
        window=window,
        rows=tuple(rows),
        ticks=tuple(generate_ticks(window, granularity, settings)),
        now_percent=now_marker_position(now, window),
        summary=summarize_efficiency(row.efficiency for row in rows),
        warnings=tuple(warnings),
    )
