"""
Pydantic request/response models for the timeline API.

These models give FastAPI the type information it needs to generate
accurate OpenAPI schemas instead of empty `schema: {}`.

Usage:
    from api.response_models import GanttRequest, TimelineResponse

    @router.post("/gantt", response_model=TimelineResponse)
    def gantt(body: GanttRequest): ...
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

# ==== Requests ====


class TaskIn(BaseModel):
    """A task row as the record store returns it. Unknown statuses/priorities are coerced."""

    id: str
    created_at: datetime
    status: str = "pending"
    priority: str = "medium"
    title: str = ""
    phase: str | None = None
    start_date: datetime | None = None
    due_date: datetime | None = None
    completed_date: datetime | None = None
    updated_at: datetime | None = None
    estimated_hours: float | None = None
    planned_hours: float | None = None
    actual_hours: float | None = None
    progress_percentage: float | None = None


class WindowModel(BaseModel):
    start: datetime
    end: datetime


class GanttRequest(BaseModel):
    tasks: list[TaskIn] = Field(default_factory=list)
    granularity: str | None = Field(default=None, description="hourly, daily, weekly, monthly, yearly")
    viewport: WindowModel | None = Field(default=None, description="Omit for the full extent")
    phase: str | None = Field(default=None, description="Project phase filter, or 'all'")
    now: datetime | None = Field(default=None, description="Current instant for the now marker")


NavigationAction = Literal["pan_prev", "pan_next", "zoom_in", "zoom_out", "reset"]


class NavigateRequest(BaseModel):
    tasks: list[TaskIn] = Field(default_factory=list)
    viewport: WindowModel | None = None
    phase: str | None = None
    action: NavigationAction


# ==== Responses ====


class EfficiencyModel(BaseModel):
    classification: str = Field(description="not_applicable, fast, on_time or slow")
    efficiency_percent: int
    is_overtime: bool


class RowModel(BaseModel):
    task_id: str
    title: str
    status: str
    priority: str
    phase: str | None = None
    progress_percentage: float | None = None
    start: datetime
    end: datetime
    end_source: str
    planned_hours: float
    actual_hours: float
    start_percent: float
    width_percent: float
    efficiency: EfficiencyModel
    overdue: bool
    clamped: bool


class TickModel(BaseModel):
    position_percent: float
    label: str
    is_major: bool
    instant: datetime


class SummaryModel(BaseModel):
    counts: dict[str, int] = Field(default_factory=dict)
    overtime_count: int = 0
    average_efficiency: float | None = None


class TimelineResponse(BaseModel):
    """One rendered timeline. extent is null when there is nothing to render."""

    status: str = Field(default="ok")
    granularity: str
    extent: WindowModel | None = None
    viewport: WindowModel | None = None
    window: WindowModel | None = None
    rows: list[RowModel] = Field(default_factory=list)
    ticks: list[TickModel] = Field(default_factory=list)
    now_percent: float | None = None
    summary: SummaryModel = Field(default_factory=SummaryModel)
    warnings: list[str] = Field(default_factory=list)
    computed_at: str = Field(description="ISO timestamp of computation")


class NavigateResponse(BaseModel):
    """New viewport after a navigation action. null viewport means the full extent."""

    status: str = Field(default="ok")
    action: str
    extent: WindowModel | None = None
    viewport: WindowModel | None = None


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or error")
    timestamp: str = Field(description="ISO timestamp")
