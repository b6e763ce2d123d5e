# xcollab/utils.py
"""
Small helpers shared by the page layer.

- Template directory resolution (works from a checkout and from an install)
- Date formatting for the hackathon cards
- Comma-separated form input splitting
"""

from __future__ import annotations

import pathlib
from datetime import datetime
from typing import Any, List

PACKAGE_ROOT: pathlib.Path = pathlib.Path(__file__).resolve().parent
TEMPLATES_DIR: pathlib.Path = PACKAGE_ROOT / "templates"


def format_date(value: Any) -> str:
    """
    Render an ISO date or timestamp as "Mar 05, 2025".

    Postgres timestamps arrive as strings, sometimes with a trailing "Z"
    that older `fromisoformat` versions reject. Anything unparsable is
    returned as-is so the page still shows something.
    """
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        return value.strftime("%b %d, %Y")

    raw = str(value).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw).strftime("%b %d, %Y")
    except ValueError:
        return str(value)


def split_csv(raw: str) -> List[str]:
    """"a, b,,c " -> ["a", "b", "c"]"""
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


__all__ = [
    "PACKAGE_ROOT",
    "TEMPLATES_DIR",
    "format_date",
    "split_csv",
]
