"""Utility helpers for reading the timeline dataset and parsing dates."""

from __future__ import annotations

import json
import os
from datetime import UTC, date, datetime
from os import PathLike
from pathlib import Path
from typing import Any, TextIO, Union

import yaml

from .const import DATA_DIR_ENV
from .errors import InvalidDate

__all__ = [
    "load_data",
    "get_data_dir",
    "dataset_file",
    "to_utc_datetime",
]

PathType = Union[str, PathLike]

# Bundled datasets live next to the package modules. ``RICE_TIMELINE_DATA_DIR``
# points the loader at another directory holding files with the same names.
DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"


def _open_text(path: Path) -> TextIO:
    return open(path, encoding="utf-8")


def load_data(path: PathType) -> Any:
    """Return the parsed contents of ``path`` supporting JSON or YAML.

    A :class:`FileNotFoundError` is raised if the file does not exist and a
    :class:`ValueError` naming the file is raised when it cannot be decoded.
    """

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    try:
        with _open_text(p) as f:
            if p.suffix.lower() in {".yaml", ".yml"}:
                return yaml.safe_load(f) or {}
            return json.load(f)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {p}: {exc}") from exc


def get_data_dir() -> Path:
    """Return dataset directory honoring the ``RICE_TIMELINE_DATA_DIR`` env."""

    env = os.getenv(DATA_DIR_ENV)
    return Path(env).expanduser() if env else DEFAULT_DATA_DIR


def dataset_file(filename: str) -> Path:
    """Return the path ``filename`` resolves to in the active data directory."""

    return get_data_dir() / filename


def to_utc_datetime(value: Any) -> datetime:
    """Return ``value`` as an aware UTC :class:`datetime`.

    ``date`` objects map to midnight UTC, naive datetimes are assumed to be
    UTC and strings are parsed as ISO-8601 (a trailing ``Z`` is accepted).
    Anything else raises :class:`InvalidDate`.
    """

    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, date):
        ts = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            ts = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidDate(value) from exc
    else:
        raise InvalidDate(value)

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)
