"""Utilities to normalize task labels."""

from __future__ import annotations

from typing import Optional

UNCATEGORIZED = "Uncategorized"
OTHER_TASK = "Other"


def normalize_task_name(task: Optional[str]) -> str:
    """Trim a task label, collapsing blank labels to ``Uncategorized``."""
    if not task or not task.strip():
        return UNCATEGORIZED
    return task.strip()


def custom_task_option(name: Optional[str]) -> str:
    """Build the ``Other - <name>`` option used for ad-hoc tasks."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("Custom task name is required")
    return f"{OTHER_TASK} - {cleaned}"
