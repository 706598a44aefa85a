"""Read-only projections of the timeline for dashboard views."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

import pandas as pd

from .timeline import TimelineDefinition, get_timeline
from .utils import to_utc_datetime

__all__ = [
    "DashboardStageView",
    "strip_numbering",
    "get_dashboard_stages",
    "generate_stage_schedule",
    "stage_schedule_df",
]

_ORDINAL_DELIMITER = ". "


@dataclass(slots=True, frozen=True)
class DashboardStageView:
    """Compact stage entry shown on the dashboard progress bar."""

    title: str
    offset: int
    label: str

    def as_dict(self) -> dict[str, Any]:
        return {"title": self.title, "offset": self.offset, "label": self.label}


def strip_numbering(title: str) -> str:
    """Return ``title`` without a leading ``"N. "`` ordinal."""

    _ordinal, sep, rest = title.partition(_ORDINAL_DELIMITER)
    return rest if sep and rest else title


def get_dashboard_stages(
    *, timeline: TimelineDefinition | None = None
) -> list[DashboardStageView]:
    """Return title, offset and label for every stage."""

    if timeline is None:
        timeline = get_timeline()
    return [
        DashboardStageView(strip_numbering(stage.title), stage.offset, stage.dashboard_label)
        for stage in timeline.stages
    ]


def generate_stage_schedule(
    start: date | datetime | str, *, timeline: TimelineDefinition | None = None
) -> list[dict[str, Any]]:
    """Return ordered stage schedule with calendar start and end dates.

    A stage ends when the next one begins; the last stage ends with the
    timeline. ``end_date`` is exclusive.
    """

    if timeline is None:
        timeline = get_timeline()
    day0 = to_utc_datetime(start).date()

    schedule: list[dict[str, Any]] = []
    stages = timeline.stages
    for index, stage in enumerate(stages):
        end_day = stages[index + 1].offset if index + 1 < len(stages) else timeline.total_days
        end_day = max(end_day, stage.offset)
        schedule.append(
            {
                "stage": strip_numbering(stage.title),
                "label": stage.dashboard_label,
                "start_date": day0 + timedelta(days=stage.offset),
                "end_date": day0 + timedelta(days=end_day),
                "duration_days": end_day - stage.offset,
            }
        )
    return schedule


def stage_schedule_df(
    start: date | datetime | str, *, timeline: TimelineDefinition | None = None
) -> "pd.DataFrame":
    """Return stage schedule as a :class:`pandas.DataFrame`."""

    schedule = generate_stage_schedule(start, timeline=timeline)
    if not schedule:
        return pd.DataFrame()
    df = pd.DataFrame(schedule)
    df["start_date"] = pd.to_datetime(df["start_date"])  # type: ignore[arg-type]
    df["end_date"] = pd.to_datetime(df["end_date"])  # type: ignore[arg-type]
    return df
