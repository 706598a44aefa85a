"""Progress and current-stage derivation from a cultivation start date."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Any

from .const import SECONDS_PER_DAY
from .timeline import TimelineDefinition, get_timeline
from .utils import to_utc_datetime

__all__ = [
    "ProgressResult",
    "days_elapsed",
    "stage_index_for_day",
    "get_current_stage_index",
    "calculate_progress",
    "predict_completion_date",
    "days_until_next_stage",
]


@dataclass(slots=True, frozen=True)
class ProgressResult:
    """Derived progress values for a cultivation cycle."""

    percentage: float
    days_elapsed: int
    total_days: int
    is_complete: bool
    current_stage_index: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "percentage": self.percentage,
            "daysElapsed": self.days_elapsed,
            "totalDays": self.total_days,
            "isComplete": self.is_complete,
            "currentStageIndex": self.current_stage_index,
        }


def days_elapsed(start: date | datetime | str, now: date | datetime | str | None = None) -> int:
    """Return whole days between ``start`` and ``now``, never negative.

    ``now`` defaults to the current UTC time. Both arguments accept dates,
    datetimes or ISO-8601 strings; anything else raises
    :class:`~rice_timeline.errors.InvalidDate`.
    """

    start_ts = to_utc_datetime(start)
    now_ts = datetime.now(UTC) if now is None else to_utc_datetime(now)
    seconds = (now_ts - start_ts).total_seconds()
    return max(0, math.floor(seconds / SECONDS_PER_DAY))


def stage_index_for_day(
    days: int, *, timeline: TimelineDefinition | None = None
) -> int:
    """Return the index of the last stage whose offset is ``<= days``."""

    if timeline is None:
        timeline = get_timeline()
    current = 0
    for index, stage in enumerate(timeline.stages):
        if days >= stage.offset:
            current = index
    return current


def get_current_stage_index(
    start: date | datetime | str,
    now: date | datetime | str | None = None,
    *,
    timeline: TimelineDefinition | None = None,
) -> int:
    """Return the current stage index for a cycle started on ``start``."""

    return stage_index_for_day(days_elapsed(start, now), timeline=timeline)


def calculate_progress(
    start: date | datetime | str,
    now: date | datetime | str | None = None,
    *,
    timeline: TimelineDefinition | None = None,
) -> ProgressResult:
    """Return progress through the cultivation timeline.

    ``percentage`` is capped at 100 and left unrounded; callers format it for
    display.
    """

    if timeline is None:
        timeline = get_timeline()
    elapsed = days_elapsed(start, now)
    total = timeline.total_days
    return ProgressResult(
        percentage=min(elapsed / total * 100, 100.0),
        days_elapsed=elapsed,
        total_days=total,
        is_complete=elapsed >= total,
        current_stage_index=stage_index_for_day(elapsed, timeline=timeline),
    )


def predict_completion_date(
    start: date | datetime | str, *, timeline: TimelineDefinition | None = None
) -> date:
    """Return the calendar date on which the timeline ends."""

    if timeline is None:
        timeline = get_timeline()
    return to_utc_datetime(start).date() + timedelta(days=timeline.total_days)


def days_until_next_stage(
    start: date | datetime | str,
    now: date | datetime | str | None = None,
    *,
    timeline: TimelineDefinition | None = None,
) -> int | None:
    """Return days until the next stage begins.

    ``None`` is returned once the last stage has been reached.
    """

    if timeline is None:
        timeline = get_timeline()
    elapsed = days_elapsed(start, now)
    for stage in timeline.stages:
        if stage.offset > elapsed:
            return stage.offset - elapsed
    return None
