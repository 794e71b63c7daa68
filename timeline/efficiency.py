"""
Efficiency Analyzer - planned vs actual duration per task.

Completed tasks land in one of three buckets by efficiency percent
(planned / actual * 100):
    > fast_threshold (120)  -> fast
    < slow_threshold (80)   -> slow
    otherwise               -> on_time

Overtime (actual > planned) is reported separately: a task can be on time
by percentage and still have run over. In-progress tasks get no bucket but
do report overtime once their logged hours pass the plan.
"""

from dataclasses import dataclass, field
from enum import Enum

from timeline.config import TimelineSettings, get_settings
from timeline.models import ResolvedInterval, TaskStatus


class EfficiencyClass(Enum):
    NOT_APPLICABLE = "not_applicable"
    FAST = "fast"
    ON_TIME = "on_time"
    SLOW = "slow"


@dataclass(frozen=True)
class EfficiencyReport:
    classification: EfficiencyClass
    efficiency_percent: int
    is_overtime: bool

    def to_dict(self) -> dict:
        return {
            "classification": self.classification.value,
            "efficiency_percent": self.efficiency_percent,
            "is_overtime": self.is_overtime,
        }


@dataclass(frozen=True)
class EfficiencySummary:
    counts: dict[str, int] = field(default_factory=dict)
    overtime_count: int = 0
    average_efficiency: float | None = None  # completed tasks only

    def to_dict(self) -> dict:
        return {
            "counts": dict(self.counts),
            "overtime_count": self.overtime_count,
            "average_efficiency": self.average_efficiency,
        }


def classify_efficiency(
    interval: ResolvedInterval,
    status: TaskStatus,
    settings: TimelineSettings | None = None,
) -> EfficiencyReport:
    settings = settings or get_settings()

    if status is TaskStatus.COMPLETED:
        pct = interval.efficiency_percent
        if pct > settings.fast_threshold:
            bucket = EfficiencyClass.FAST
        elif pct < settings.slow_threshold:
            bucket = EfficiencyClass.SLOW
        else:
            bucket = EfficiencyClass.ON_TIME
        return EfficiencyReport(bucket, pct, interval.is_overtime)

    if status is TaskStatus.IN_PROGRESS:
        return EfficiencyReport(
            EfficiencyClass.NOT_APPLICABLE, interval.efficiency_percent, interval.is_overtime
        )

    return EfficiencyReport(EfficiencyClass.NOT_APPLICABLE, interval.efficiency_percent, False)


def summarize_efficiency(reports) -> EfficiencySummary:
    """Project-level roll-up of per-task reports."""
    reports = list(reports)
    counts = {c.value: 0 for c in EfficiencyClass}
    scored = []
    for report in reports:
        counts[report.classification.value] += 1
        if report.classification is not EfficiencyClass.NOT_APPLICABLE:
            scored.append(report.efficiency_percent)

    average = round(sum(scored) / len(scored), 1) if scored else None
    return EfficiencySummary(
        counts=counts,
        overtime_count=sum(1 for r in reports if r.is_overtime),
        average_efficiency=average,
    )
