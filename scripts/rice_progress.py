#!/usr/bin/env python3
"""Report cultivation progress and the next actionable task as JSON."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

# Ensure project root on the Python path when executed directly
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
from scripts import ensure_repo_root_on_path

ROOT = ensure_repo_root_on_path()

from rice_timeline.dashboard import get_dashboard_stages
from rice_timeline.errors import RiceTimelineError
from rice_timeline.progress import calculate_progress
from rice_timeline.task_gate import next_enabled_task
from rice_timeline.timeline import get_timeline
from rice_timeline.utils import load_data


def build_report(start: str, completions: list, today: str | None = None) -> dict:
    """Return progress, stages, dashboard view and the next task for ``start``."""

    task = next_enabled_task(completions)
    return {
        "progress": calculate_progress(start, today).as_dict(),
        "stages": get_timeline().as_list(),
        "dashboard": [view.as_dict() for view in get_dashboard_stages()],
        "next_task": task.as_dict() if task else None,
    }


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Show rice cultivation progress for a start date"
    )
    parser.add_argument("start", help="Cultivation start date YYYY-MM-DD")
    parser.add_argument(
        "--completions",
        type=Path,
        help="JSON list of {stageIndex, taskIndex} completion records",
    )
    parser.add_argument("--today", help="Override the current date YYYY-MM-DD")
    parser.add_argument("--output", type=Path, help="Optional output path")
    args = parser.parse_args(argv)

    try:
        completions = load_data(args.completions) if args.completions else []
        if not isinstance(completions, list):
            parser.error("completions file must contain a JSON list")
        report = build_report(args.start, completions, args.today)
    except (FileNotFoundError, RiceTimelineError, ValueError) as exc:
        parser.error(str(exc))

    text = json.dumps(report, indent=2)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text)
    else:
        print(text)


if __name__ == "__main__":  # pragma: no cover
    main()
