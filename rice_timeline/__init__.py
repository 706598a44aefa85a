"""Rice cultivation timeline: stage progress and task ordering."""

from __future__ import annotations

from typing import Any

from .dashboard import DashboardStageView, get_dashboard_stages, stage_schedule_df
from .errors import InvalidDate, RiceTimelineError, TimelineDataError
from .progress import (
    ProgressResult,
    calculate_progress,
    days_elapsed,
    get_current_stage_index,
)
from .task_gate import CompletionRecord, is_task_enabled, next_enabled_task
from .timeline import Stage, Task, TimelineDefinition, get_timeline

__all__ = [
    "STAGES",
    "TOTAL_DAYS",
    "get_current_stage_index",
    "calculate_progress",
    "get_dashboard_stages",
    "is_task_enabled",
    "next_enabled_task",
    "days_elapsed",
    "stage_schedule_df",
    "get_timeline",
    "CompletionRecord",
    "DashboardStageView",
    "ProgressResult",
    "Stage",
    "Task",
    "TimelineDefinition",
    "RiceTimelineError",
    "InvalidDate",
    "TimelineDataError",
]


def __getattr__(name: str) -> Any:
    # Resolved on every access so they follow ``clear_timeline_cache``.
    if name == "STAGES":
        return get_timeline().stages
    if name == "TOTAL_DAYS":
        return get_timeline().total_days
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted(set(globals()) | set(__all__))
