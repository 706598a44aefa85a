"""Constants for the rice cultivation timeline."""

from __future__ import annotations

from typing import Final

# Default timeline length measured from Day 0 (last task is scheduled on day 123).
TOTAL_CULTIVATION_DAYS: Final = 123

SECONDS_PER_DAY: Final = 60 * 60 * 24

DATA_FILE: Final = "rice_stages.yaml"

# Environment variable that points at an alternative dataset directory.
DATA_DIR_ENV: Final = "RICE_TIMELINE_DATA_DIR"

STATUS_PENDING: Final = "pending"
STATUS_ACTIVE: Final = "active"
STATUS_COMPLETED: Final = "completed"
