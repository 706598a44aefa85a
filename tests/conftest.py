import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rice_timeline.const import DATA_DIR_ENV
from rice_timeline.timeline import build_timeline, clear_timeline_cache


@pytest.fixture(autouse=True)
def _reset_timeline(monkeypatch):
    """Load the bundled dataset fresh for every test."""
    monkeypatch.delenv(DATA_DIR_ENV, raising=False)
    clear_timeline_cache()
    yield
    clear_timeline_cache()


@pytest.fixture
def make_timeline():
    """Return a factory building small timelines from ``(offset, [task offsets])`` pairs."""

    def _make(*stages, total_days=10):
        return build_timeline(
            {
                "total_days": total_days,
                "stages": [
                    {
                        "title": f"{idx + 1}. Stage {idx}",
                        "offset": offset,
                        "dashboard_label": f"S{idx}",
                        "tasks": [
                            {"text": f"task {idx}.{t_idx}", "offset": t_off}
                            for t_idx, t_off in enumerate(tasks)
                        ],
                    }
                    for idx, (offset, tasks) in enumerate(stages)
                ],
            }
        )

    return _make
