"""
Timeline API Router - Gantt layout and viewport navigation.

Endpoints:
- POST /gantt                 lay out an inline task set
- POST /navigate              apply pan/zoom/reset to a viewport
- GET  /projects/{project_id} lay out a project's tasks from the record store
- GET  /health

The engine is stateless per request: the client keeps the viewport and
sends it back with each call.

Usage in server.py:
    from api.timeline_router import timeline_router
    app.include_router(timeline_router, prefix="/api/timeline")
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query

from api.response_models import (
    GanttRequest,
    HealthResponse,
    NavigateRequest,
    NavigateResponse,
    TaskIn,
    TimelineResponse,
)
from timeline.config import TimelineSettings, get_settings
from timeline.durations import resolve_interval
from timeline.errors import InvalidTaskRecord, TaskSourceError
from timeline.extent import compute_extent
from timeline.gantt import TimelineView, build_timeline
from timeline.models import TaskRecord, TimeWindow
from timeline.navigator import ViewportNavigator
from timeline.records import filter_by_phase, parse_instant, task_from_row
from timeline.task_source import SQLiteTaskSource, TaskSource

logger = logging.getLogger(__name__)

timeline_router = APIRouter(tags=["Timeline"])

# Singleton task source
_source: TaskSource | None = None


def get_task_source() -> TaskSource:
    """Get or create the record store used by project endpoints."""
    global _source
    if _source is None:
        _source = SQLiteTaskSource()
    return _source


def _tasks(rows: list[TaskIn]) -> list[TaskRecord]:
    try:
        return [task_from_row(row.model_dump()) for row in rows]
    except InvalidTaskRecord as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _window(start, end) -> TimeWindow | None:
    """Build a viewport from request values; both bounds or neither."""
    if start is None and end is None:
        return None
    if start is None or end is None:
        raise HTTPException(status_code=422, detail="viewport needs both start and end")
    try:
        return TimeWindow(start=parse_instant(start), end=parse_instant(end))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _window_model(window: TimeWindow | None) -> dict | None:
    return window.to_dict() if window else None


def _timeline_response(view: TimelineView) -> dict:
    payload = view.to_dict()
    payload["status"] = "ok"
    payload["computed_at"] = datetime.now().isoformat()
    return payload


def _layout(tasks, *, granularity, viewport, phase, now, settings) -> dict:
    try:
        view = build_timeline(
            tasks,
            granularity=granularity,
            viewport=viewport,
            phase=phase,
            now=parse_instant(now),
            settings=settings,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _timeline_response(view)


@timeline_router.post("/gantt", response_model=TimelineResponse)
def gantt(body: GanttRequest, settings: TimelineSettings = Depends(get_settings)):
    """
    Lay out an inline task set.

    Returns rows (bar geometry, efficiency, overdue flags), ticks for the
    requested granularity, and the now marker. extent is null when no task
    survives the phase filter.
    """
    viewport = _window(body.viewport.start, body.viewport.end) if body.viewport else None
    return _layout(
        _tasks(body.tasks),
        granularity=body.granularity,
        viewport=viewport,
        phase=body.phase,
        now=body.now,
        settings=settings,
    )


@timeline_router.post("/navigate", response_model=NavigateResponse)
def navigate(body: NavigateRequest, settings: TimelineSettings = Depends(get_settings)):
    """
    Apply one navigation action to a viewport.

    The extent is recomputed from the tasks on every call, so a stale
    viewport is clamped back into the current project window.
    """
    tasks = _tasks(body.tasks)
    try:
        selected = filter_by_phase(tasks, body.phase)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    extent = compute_extent((resolve_interval(t, settings) for t in selected), settings)
    viewport = _window(body.viewport.start, body.viewport.end) if body.viewport else None
    nav = ViewportNavigator(viewport=viewport, settings=settings)

    kind, _, direction = body.action.partition("_")
    if kind == "pan":
        nav.pan(direction, extent)
    elif kind == "zoom":
        nav.zoom(direction, extent)
    else:
        nav.reset()

    logger.info(f"navigate {body.action}: {len(selected)} tasks")
    return {
        "status": "ok",
        "action": body.action,
        "extent": _window_model(extent),
        "viewport": _window_model(nav.viewport),
    }


@timeline_router.get("/projects/{project_id}", response_model=TimelineResponse)
def project_timeline(
    project_id: str,
    granularity: str | None = Query(None, description="hourly, daily, weekly, monthly, yearly"),
    phase: str | None = Query(None, description="Project phase filter, or 'all'"),
    viewport_start: datetime | None = Query(None, description="Viewport start (ISO)"),
    viewport_end: datetime | None = Query(None, description="Viewport end (ISO)"),
    now: datetime | None = Query(None, description="Current instant for the now marker"),
    source: TaskSource = Depends(get_task_source),
    settings: TimelineSettings = Depends(get_settings),
):
    """Lay out a project's tasks fetched from the record store."""
    try:
        tasks = source.list_tasks(project_id, phase)
    except TaskSourceError as e:
        logger.error(f"Task source unavailable for project {project_id}: {e}")
        raise HTTPException(status_code=503, detail=str(e)) from e
    except InvalidTaskRecord as e:
        logger.error(f"Bad task record in project {project_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return _layout(
        tasks,
        granularity=granularity,
        viewport=_window(viewport_start, viewport_end),
        phase=None,
        now=now,
        settings=settings,
    )


@timeline_router.get("/health", response_model=HealthResponse)
def health():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}
