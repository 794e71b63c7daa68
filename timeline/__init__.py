"""
Site Timeline Engine

Places construction-project tasks on a Gantt timeline.

Objects:
- TaskRecord (snapshot of a task row)
- ResolvedInterval (effective start/end, planned/actual hours)
- TimeWindow (project extent or viewport)
- TickMarker (time-axis label)
- TimelineView (rows + ticks + now marker for one render)

Invariants:
- Every task resolves to an interval with end >= start
- Bars are at least 1% wide and start inside [0, 100]
- The viewport never leaves the extent
- At most max_ticks (100) tick markers per axis
"""

from .axis import Granularity, generate_ticks, suggest_granularity
from .config import TimelineSettings, get_settings, load_settings
from .durations import resolve_interval
from .efficiency import EfficiencyClass, EfficiencyReport, classify_efficiency, summarize_efficiency
from .errors import ConfigError, InvalidTaskRecord, TaskSourceError, TimelineError
from .extent import compute_extent
from .gantt import GanttRow, TimelineView, build_timeline
from .models import (
    BarPosition,
    ProjectPhase,
    ResolvedInterval,
    TaskPriority,
    TaskRecord,
    TaskStatus,
    TickMarker,
    TimeWindow,
)
from .navigator import PanDirection, ViewportNavigator, ZoomDirection, pan_window, zoom_window
from .positions import is_overdue, map_position, now_marker_position
from .records import filter_by_phase, parse_instant, task_from_row
from .task_source import InMemoryTaskSource, SQLiteTaskSource, TaskSource

__all__ = [
    # Models
    "TaskRecord",
    "TaskStatus",
    "TaskPriority",
    "ProjectPhase",
    "ResolvedInterval",
    "TimeWindow",
    "BarPosition",
    "TickMarker",
    # Engine
    "resolve_interval",
    "compute_extent",
    "map_position",
    "now_marker_position",
    "is_overdue",
    "Granularity",
    "generate_ticks",
    "suggest_granularity",
    "ViewportNavigator",
    "PanDirection",
    "ZoomDirection",
    "pan_window",
    "zoom_window",
    "EfficiencyClass",
    "EfficiencyReport",
    "classify_efficiency",
    "summarize_efficiency",
    "GanttRow",
    "TimelineView",
    "build_timeline",
    # Records
    "task_from_row",
    "parse_instant",
    "filter_by_phase",
    "TaskSource",
    "InMemoryTaskSource",
    "SQLiteTaskSource",
    # Config / errors
    "TimelineSettings",
    "get_settings",
    "load_settings",
    "TimelineError",
    "ConfigError",
    "InvalidTaskRecord",
    "TaskSourceError",
]
