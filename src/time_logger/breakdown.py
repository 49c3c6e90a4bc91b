"""Group work entries into per-task buckets with percentage weights."""

from __future__ import annotations

from typing import Iterable, Sequence

from .config import FALLBACK_COLOR
from .models import ActivityBucket, WorkEntry, format_minutes
from .normalization import normalize_task_name


def aggregate(
    entries: Iterable[WorkEntry], palette: Sequence[str]
) -> list[ActivityBucket]:
    """Reduce ``entries`` to buckets ordered by minutes desc, then name.

    Colors are assigned by sorted position, cycling through ``palette``.
    Buckets that round to zero minutes are dropped, and an empty list is
    returned when nothing is left.
    """
    totals: dict[str, float] = {}
    for entry in entries:
        name = normalize_task_name(entry.task)
        totals[name] = totals.get(name, 0.0) + entry.duration_minutes

    grouped = [
        (name, minutes)
        for name, minutes in ((name, int(round(total))) for name, total in totals.items())
        if minutes > 0
    ]
    total_minutes = sum(minutes for _, minutes in grouped)
    if total_minutes <= 0:
        return []

    grouped.sort(key=lambda item: (-item[1], item[0]))
    return [
        ActivityBucket(
            name=name,
            color_hex=palette[index % len(palette)] if palette else FALLBACK_COLOR,
            minutes=minutes,
            percentage=minutes * 100.0 / total_minutes,
        )
        for index, (name, minutes) in enumerate(grouped)
    ]


def total_minutes(buckets: Iterable[ActivityBucket]) -> int:
    return sum(bucket.minutes for bucket in buckets)


def total_duration_text(buckets: Iterable[ActivityBucket]) -> str:
    return format_minutes(total_minutes(buckets))
