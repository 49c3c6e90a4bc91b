"""Resolve the inclusive date windows used by the analysis views."""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Union

DateLike = Union[date, datetime]


class RangeMode(str, Enum):
    DAY = "Day"
    WEEK = "Week"
    MONTH = "Month"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"

    @classmethod
    def parse(cls, value: Union[str, "RangeMode"], default: "RangeMode") -> "RangeMode":
        if isinstance(value, RangeMode):
            return value
        lowered = (value or "").strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return default


DETAIL_RANGES: tuple[RangeMode, ...] = (RangeMode.DAY, RangeMode.WEEK, RangeMode.MONTH)
BAR_MODES: tuple[RangeMode, ...] = (RangeMode.WEEKLY, RangeMode.MONTHLY)


def as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def start_of_week(value: DateLike) -> date:
    day = as_date(value)
    delta = (day.weekday() - calendar.MONDAY + 7) % 7
    return day - timedelta(days=delta)


def start_of_month(value: DateLike) -> date:
    return as_date(value).replace(day=1)


def end_of_month(value: DateLike) -> date:
    day = as_date(value)
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def resolve_range(
    anchor: DateLike, mode: Union[str, RangeMode] = RangeMode.DAY
) -> tuple[date, date]:
    """Return ``(start, end_inclusive)`` for the window containing ``anchor``."""
    day = as_date(anchor)
    resolved = RangeMode.parse(mode, RangeMode.DAY)
    if resolved in (RangeMode.WEEK, RangeMode.WEEKLY):
        start = start_of_week(day)
        return start, start + timedelta(days=6)
    if resolved in (RangeMode.MONTH, RangeMode.MONTHLY):
        return start_of_month(day), end_of_month(day)
    return day, day


def resolve_bar_range(
    anchor: DateLike, mode: Union[str, RangeMode] = RangeMode.WEEKLY
) -> tuple[date, date]:
    resolved = RangeMode.parse(mode, RangeMode.WEEKLY)
    if resolved is RangeMode.MONTHLY:
        return resolve_range(anchor, RangeMode.MONTHLY)
    return resolve_range(anchor, RangeMode.WEEKLY)


def detail_heading(anchor: DateLike, mode: Union[str, RangeMode]) -> str:
    resolved = RangeMode.parse(mode, RangeMode.DAY)
    start, end = resolve_range(anchor, resolved)
    if resolved in (RangeMode.WEEK, RangeMode.WEEKLY):
        return f"Week - {_span(start, end)}"
    if resolved in (RangeMode.MONTH, RangeMode.MONTHLY):
        return f"Month - {_span(start, end)}"
    return f"Day - {start:%a, %b} {start.day}, {start.year}"


def bar_heading(anchor: DateLike, mode: Union[str, RangeMode]) -> str:
    resolved = RangeMode.parse(mode, RangeMode.WEEKLY)
    start, end = resolve_bar_range(anchor, resolved)
    label = "Monthly" if resolved is RangeMode.MONTHLY else "Weekly"
    return f"{label} - {_span(start, end)}"


def day_title(anchor: DateLike) -> str:
    day = as_date(anchor)
    return f"{day:%A, %b} {day.day}, {day.year}"


def _span(start: date, end: date) -> str:
    return f"{start:%b} {start.day}-{end:%b} {end.day}, {end.year}"
