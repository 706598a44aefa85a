"""Exceptions raised by :mod:`rice_timeline`."""

from __future__ import annotations


class RiceTimelineError(Exception):
    """Base error for the rice timeline package."""


class InvalidDate(RiceTimelineError, ValueError):
    """Raised when a start date cannot be interpreted as a point in time."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid date: {value!r}")
        self.value = value


class TimelineDataError(RiceTimelineError, ValueError):
    """Raised when the timeline dataset is missing or malformed."""
