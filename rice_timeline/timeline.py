"""Static rice cultivation timeline: stages, tasks and resource plans.

The timeline is authored as a YAML dataset (``data/rice_stages.yaml``) and
validated on load. The resulting :class:`TimelineDefinition` is immutable and
cached for the lifetime of the process; call :func:`clear_timeline_cache`
after pointing ``RICE_TIMELINE_DATA_DIR`` somewhere else.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import voluptuous as vol

from .const import DATA_FILE, TOTAL_CULTIVATION_DAYS
from .errors import TimelineDataError
from .utils import PathType, dataset_file, load_data

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "Task",
    "Stage",
    "ResourcePlan",
    "FertilizerApplication",
    "ScheduledTask",
    "TimelineDefinition",
    "TIMELINE_SCHEMA",
    "build_timeline",
    "load_timeline",
    "get_timeline",
    "clear_timeline_cache",
]

_DAY = vol.All(int, vol.Range(min=0))
_TEXT = vol.All(str, vol.Length(min=1))

_APPLICATION_SCHEMA = vol.Schema(
    {
        vol.Required("day"): _DAY,
        vol.Required("fertilizer"): _TEXT,
    }
)

_RESOURCE_SCHEMA = vol.Schema(
    {
        vol.Required("total_fertilizer"): _TEXT,
        vol.Required("total_pesticide"): _TEXT,
        vol.Optional("applications", default=list): [_APPLICATION_SCHEMA],
    }
)

_TASK_SCHEMA = vol.Schema(
    {
        vol.Required("text"): _TEXT,
        vol.Optional("offset"): vol.Any(None, _DAY),
    }
)

_STAGE_SCHEMA = vol.Schema(
    {
        vol.Required("title"): _TEXT,
        vol.Optional("description", default=""): str,
        vol.Optional("tip", default=""): str,
        vol.Required("offset"): _DAY,
        vol.Required("dashboard_label"): _TEXT,
        vol.Optional("tasks", default=list): [_TASK_SCHEMA],
        vol.Optional("resources_per_hectare"): _RESOURCE_SCHEMA,
    }
)

TIMELINE_SCHEMA = vol.Schema(
    {
        vol.Optional("total_days", default=TOTAL_CULTIVATION_DAYS): vol.All(
            int, vol.Range(min=1)
        ),
        vol.Required("stages"): vol.All([_STAGE_SCHEMA], vol.Length(min=1)),
    }
)


@dataclass(slots=True, frozen=True)
class Task:
    """Single actionable step of a stage.

    ``offset`` is ``None`` when the task inherits its stage's offset.
    """

    text: str
    offset: int | None = None

    def effective_offset(self, stage: Stage) -> int:
        return stage.offset if self.offset is None else self.offset


@dataclass(slots=True, frozen=True)
class FertilizerApplication:
    """Fertilizer quantity applied on a given day."""

    day: int
    fertilizer: str


@dataclass(slots=True, frozen=True)
class ResourcePlan:
    """Per-hectare input totals for a stage."""

    total_fertilizer: str
    total_pesticide: str
    applications: tuple[FertilizerApplication, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {
            "totalFertilizer": self.total_fertilizer,
            "totalPesticide": self.total_pesticide,
            "applications": [
                {"day": app.day, "fertilizer": app.fertilizer}
                for app in self.applications
            ],
        }


@dataclass(slots=True, frozen=True)
class Stage:
    """Named cultivation phase with a scheduled start day."""

    title: str
    description: str
    tip: str
    tasks: tuple[Task, ...]
    offset: int
    dashboard_label: str
    resource_plan: ResourcePlan | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return the stage in the camelCase shape used by web front ends."""

        data: dict[str, Any] = {
            "title": self.title,
            "desc": self.description,
            "tip": self.tip,
            "tasks": [
                {"text": task.text, "offset": task.effective_offset(self)}
                for task in self.tasks
            ],
            "offset": self.offset,
            "dashboardLabel": self.dashboard_label,
        }
        if self.resource_plan is not None:
            data["resourcesPerHectare"] = self.resource_plan.as_dict()
        return data


@dataclass(slots=True, frozen=True)
class ScheduledTask:
    """A task located by position and annotated with its effective offset."""

    stage_index: int
    task_index: int
    offset: int
    text: str

    @property
    def key(self) -> tuple[int, int]:
        return self.stage_index, self.task_index

    def as_dict(self) -> dict[str, Any]:
        return {
            "stageIndex": self.stage_index,
            "taskIndex": self.task_index,
            "offset": self.offset,
            "text": self.text,
        }


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(slots=True, frozen=True)
class TimelineDefinition:
    """Ordered stages of the cultivation timeline."""

    stages: tuple[Stage, ...]
    total_days: int = TOTAL_CULTIVATION_DAYS

    @property
    def task_count(self) -> int:
        return sum(len(stage.tasks) for stage in self.stages)

    def get_stage(self, stage_index: int) -> Stage | None:
        """Return the stage at ``stage_index`` or ``None`` when out of range."""

        if _is_index(stage_index) and 0 <= stage_index < len(self.stages):
            return self.stages[stage_index]
        return None

    def get_task(self, stage_index: int, task_index: int) -> ScheduledTask | None:
        """Return the task at the given position or ``None`` when out of range.

        Negative or non-integer indices never match a task.
        """

        stage = self.get_stage(stage_index)
        if stage is None or not _is_index(task_index):
            return None
        if not 0 <= task_index < len(stage.tasks):
            return None
        task = stage.tasks[task_index]
        return ScheduledTask(
            stage_index, task_index, task.effective_offset(stage), task.text
        )

    def iter_tasks(self) -> Iterator[ScheduledTask]:
        """Yield every task in declaration order."""

        for s_idx, stage in enumerate(self.stages):
            for t_idx, task in enumerate(stage.tasks):
                yield ScheduledTask(s_idx, t_idx, task.effective_offset(stage), task.text)

    def as_list(self) -> list[dict[str, Any]]:
        return [stage.as_dict() for stage in self.stages]


def _build_resource_plan(data: Mapping[str, Any]) -> ResourcePlan:
    return ResourcePlan(
        total_fertilizer=data["total_fertilizer"],
        total_pesticide=data["total_pesticide"],
        applications=tuple(
            FertilizerApplication(app["day"], app["fertilizer"])
            for app in data.get("applications", [])
        ),
    )


def _build_stage(data: Mapping[str, Any]) -> Stage:
    resources = data.get("resources_per_hectare")
    return Stage(
        title=data["title"],
        description=data["description"],
        tip=data["tip"],
        tasks=tuple(Task(t["text"], t.get("offset")) for t in data["tasks"]),
        offset=data["offset"],
        dashboard_label=data["dashboard_label"],
        resource_plan=_build_resource_plan(resources) if resources else None,
    )


def _check_stage_order(stages: tuple[Stage, ...]) -> None:
    # The current-stage scan relies on stages being sorted by offset.
    for prev, stage in zip(stages, stages[1:]):
        if stage.offset < prev.offset:
            raise TimelineDataError(
                f"Stage {stage.title!r} (offset {stage.offset}) is listed after "
                f"{prev.title!r} (offset {prev.offset})"
            )


def build_timeline(data: Mapping[str, Any]) -> TimelineDefinition:
    """Return a validated :class:`TimelineDefinition` built from ``data``."""

    try:
        validated = TIMELINE_SCHEMA(dict(data))
    except vol.Invalid as exc:
        raise TimelineDataError(f"Invalid timeline dataset: {exc}") from exc

    stages = tuple(_build_stage(stage) for stage in validated["stages"])
    _check_stage_order(stages)
    return TimelineDefinition(stages=stages, total_days=validated["total_days"])


def load_timeline(path: PathType | None = None) -> TimelineDefinition:
    """Load the timeline from ``path`` or the active data directory."""

    target = path if path is not None else dataset_file(DATA_FILE)
    try:
        data = load_data(target)
    except (FileNotFoundError, ValueError) as exc:
        raise TimelineDataError(f"Unable to read timeline dataset {target}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise TimelineDataError(f"Timeline dataset {target} must be a mapping")

    timeline = build_timeline(data)
    _LOGGER.debug(
        "Loaded %d stages (%d tasks) from %s",
        len(timeline.stages),
        timeline.task_count,
        target,
    )
    return timeline


@lru_cache(maxsize=None)
def get_timeline() -> TimelineDefinition:
    """Return the process-wide timeline, loading it on first use."""

    return load_timeline()


def clear_timeline_cache() -> None:
    """Forget the cached timeline so the next lookup reloads the dataset."""

    get_timeline.cache_clear()
