"""Domain models for logged work and derived analysis values."""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta


@dataclass(slots=True)
class WorkEntry:
    """A block of work logged against a single calendar day."""

    date: date
    start: timedelta
    end: timedelta
    task: str = ""
    notes: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60.0

    @property
    def date_label(self) -> str:
        return self.date.strftime("%m/%d/%y")

    @property
    def time_range(self) -> str:
        return f"{_clock(self.start)} - {_clock(self.end)}"

    def overlaps(self, other: "WorkEntry") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(slots=True)
class CalEvent:
    """A meeting or block pulled from the calendar feed."""

    subject: str
    location: str
    start: datetime
    end: datetime

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60.0

    @property
    def time_range(self) -> str:
        return f"{self.start:%I:%M}-{self.end:%I:%M %p}"

    @property
    def date_line(self) -> str:
        return f"{self.start:%A, %B} {self.start.day}, {self.start.year}"


@dataclass(frozen=True, slots=True)
class ActivityBucket:
    """Time logged against one normalized task name."""

    name: str
    color_hex: str
    minutes: int
    percentage: float

    @property
    def duration_text(self) -> str:
        return format_minutes(self.minutes)

    @property
    def percent_text(self) -> str:
        return f"{round_half_away(self.percentage)}%"

    @property
    def legend_text(self) -> str:
        return f"{self.name} ({self.percent_text})"


@dataclass(frozen=True, slots=True)
class PieSlice:
    """A drawable pie wedge; ``path_data`` is an SVG path string."""

    color_hex: str
    start_angle: float
    sweep_angle: float
    large_arc: bool
    full_circle: bool
    path_data: str

    @property
    def end_angle(self) -> float:
        return self.start_angle + self.sweep_angle


def format_minutes(minutes: int) -> str:
    hours, remainder = divmod(int(minutes), 60)
    return f"{hours}h {remainder:02d}m"


def round_half_away(value: float) -> int:
    """Round to the nearest integer, moving .5 away from zero."""
    rounded = math.floor(abs(value) + 0.5)
    return int(-rounded if value < 0 else rounded)


def _clock(offset: timedelta) -> str:
    return (datetime.min + offset).strftime("%I:%M %p")
