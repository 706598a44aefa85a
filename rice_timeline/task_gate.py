"""Global ordering rule deciding which task may be marked complete next.

Only one task in the whole timeline is actionable at a time: the incomplete
task with the smallest offset, ties resolved by declaration order. Offsets
interleave across stages (stage 3 verifies field leveling on day 25, before
stage 2 finishes on day 30), so the rule is applied across all stages rather
than per stage.

Completion records are owned by the caller and passed to every call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Union

from .const import STATUS_ACTIVE, STATUS_COMPLETED, STATUS_PENDING
from .timeline import ScheduledTask, TimelineDefinition, get_timeline

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "CompletionRecord",
    "StageCompletion",
    "ScheduledTask",
    "coerce_completion",
    "completed_keys",
    "pending_tasks",
    "next_enabled_task",
    "is_task_enabled",
    "stage_completion",
]


@dataclass(slots=True, frozen=True)
class CompletionRecord:
    """Marker that the task at ``(stage_index, task_index)`` is done."""

    stage_index: int
    task_index: int

    @property
    def key(self) -> tuple[int, int]:
        return self.stage_index, self.task_index

    def as_dict(self) -> dict[str, int]:
        return {"stageIndex": self.stage_index, "taskIndex": self.task_index}


CompletionLike = Union[CompletionRecord, Mapping[str, Any], tuple[int, int]]

_KEY_PAIRS = (("stageIndex", "taskIndex"), ("stage_index", "task_index"))


def _as_index(value: Any, record: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Invalid completion record {record!r}")
    return value


def coerce_completion(record: CompletionLike) -> CompletionRecord:
    """Return ``record`` as a :class:`CompletionRecord`.

    Accepts records, ``(stage, task)`` pairs and mappings keyed either
    ``stageIndex``/``taskIndex`` or ``stage_index``/``task_index``.
    """

    if isinstance(record, CompletionRecord):
        return record
    if isinstance(record, Mapping):
        for stage_key, task_key in _KEY_PAIRS:
            if stage_key in record and task_key in record:
                return CompletionRecord(
                    _as_index(record[stage_key], record),
                    _as_index(record[task_key], record),
                )
        raise ValueError(f"Invalid completion record {record!r}")
    if isinstance(record, (tuple, list)) and len(record) == 2:
        return CompletionRecord(_as_index(record[0], record), _as_index(record[1], record))
    raise ValueError(f"Invalid completion record {record!r}")


def completed_keys(completions: Iterable[CompletionLike]) -> set[tuple[int, int]]:
    """Return the set of ``(stage_index, task_index)`` pairs marked done."""

    return {coerce_completion(record).key for record in completions}


def pending_tasks(
    completions: Iterable[CompletionLike],
    *,
    timeline: TimelineDefinition | None = None,
) -> list[ScheduledTask]:
    """Return incomplete tasks ordered by offset then declaration order."""

    if timeline is None:
        timeline = get_timeline()
    done = completed_keys(completions)
    # ``sorted`` is stable, so equal offsets keep declaration order.
    return sorted(
        (task for task in timeline.iter_tasks() if task.key not in done),
        key=attrgetter("offset"),
    )


def next_enabled_task(
    completions: Iterable[CompletionLike],
    *,
    timeline: TimelineDefinition | None = None,
) -> ScheduledTask | None:
    """Return the single task that may be completed next, if any."""

    pending = pending_tasks(completions, timeline=timeline)
    return pending[0] if pending else None


def is_task_enabled(
    stage_index: int,
    task_index: int,
    completions: Iterable[CompletionLike],
    *,
    timeline: TimelineDefinition | None = None,
) -> bool:
    """Return ``True`` if the given task may be marked complete now.

    Completed tasks and positions that do not exist in the timeline are never
    enabled.
    """

    if timeline is None:
        timeline = get_timeline()
    records = [coerce_completion(record) for record in completions]
    key = (stage_index, task_index)
    if any(record.key == key for record in records):
        return False

    if timeline.get_task(stage_index, task_index) is None:
        _LOGGER.debug("No task at stage %s index %s", stage_index, task_index)
        return False

    first = next_enabled_task(records, timeline=timeline)
    return first is not None and first.key == key


@dataclass(slots=True, frozen=True)
class StageCompletion:
    """Task completion summary for one stage."""

    stage_index: int
    completed: int
    total: int
    percentage: int
    status: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "stageIndex": self.stage_index,
            "completed": self.completed,
            "total": self.total,
            "percentage": self.percentage,
            "status": self.status,
        }


def stage_completion(
    completions: Iterable[CompletionLike],
    *,
    timeline: TimelineDefinition | None = None,
) -> list[StageCompletion]:
    """Return per-stage completion counts and status.

    Duplicate records and records pointing outside the timeline are ignored.
    """

    if timeline is None:
        timeline = get_timeline()
    done = completed_keys(completions)

    summary: list[StageCompletion] = []
    for s_idx, stage in enumerate(timeline.stages):
        total = len(stage.tasks)
        completed = sum(1 for t_idx in range(total) if (s_idx, t_idx) in done)
        if not total:
            percentage, status = 0, STATUS_PENDING
        else:
            percentage = int(completed / total * 100)
            if completed == total:
                status = STATUS_COMPLETED
            elif completed:
                status = STATUS_ACTIVE
            else:
                status = STATUS_PENDING
        summary.append(StageCompletion(s_idx, completed, total, percentage, status))
    return summary
