"""Validation and persistence of daily work entries."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from .models import WorkEntry
from .normalization import OTHER_TASK
from .ranges import as_date
from .storage import TimeLogStorage

logger = logging.getLogger(__name__)

TIME_FORMATS = ("%I:%M %p",)
SLOT_MINUTES = 15

TimeValue = Union[str, timedelta]


class EntryValidationError(ValueError):
    """An entry was rejected; ``title`` is a short heading for the user."""

    def __init__(self, title: str, message: str) -> None:
        super().__init__(message)
        self.title = title
        self.message = message


def parse_time(value: Optional[str]) -> timedelta:
    """Parse ``8:15 AM`` or ``08:15 AM`` into an offset from midnight."""
    if not value or not value.strip():
        raise ValueError("Time is required")
    for fmt in TIME_FORMATS:
        try:
            parsed = datetime.strptime(value.strip().upper(), fmt)
        except ValueError:
            continue
        return timedelta(hours=parsed.hour, minutes=parsed.minute)
    raise ValueError(f"Invalid time: {value!r}")


def format_time(offset: timedelta) -> str:
    return (datetime.min + offset).strftime("%I:%M %p")


def build_time_options() -> list[str]:
    return [format_time(timedelta(minutes=slot * SLOT_MINUTES)) for slot in range(96)]


def has_overlap(
    candidate: WorkEntry,
    entries: Iterable[WorkEntry],
    ignore_id: Optional[uuid.UUID] = None,
) -> bool:
    for existing in entries:
        if ignore_id is not None and existing.id == ignore_id:
            continue
        if existing.date == candidate.date and candidate.overlaps(existing):
            return True
    return False


def total_duration_text(entries: Iterable[WorkEntry]) -> str:
    total = timedelta(minutes=sum(entry.duration_minutes for entry in entries))
    hours, remainder = divmod(int(total.total_seconds()), 3600)
    return f"{hours}h {remainder // 60}m"


class EntryBook:
    """Add, edit and delete entries for a day, saving through storage."""

    def __init__(self, storage: TimeLogStorage) -> None:
        self.storage = storage

    def entries_for(self, day: date) -> list[WorkEntry]:
        return self.storage.load_entries_for_date(day)

    def add_entry(
        self,
        day: date,
        task: Optional[str],
        start: TimeValue,
        end: TimeValue,
        notes: Optional[str],
    ) -> WorkEntry:
        day = as_date(day)
        entry = self._build_entry(day, task, start, end, notes)
        existing = self.entries_for(day)
        if has_overlap(entry, existing):
            raise EntryValidationError(
                "Overlapping Time", "This time range overlaps an existing task entry."
            )
        self._save(day, [*existing, entry])
        logger.info("Added entry %s on %s (%s)", entry.id, day, entry.task)
        return entry

    def edit_entry(
        self,
        day: date,
        entry_id: uuid.UUID,
        task: Optional[str],
        start: TimeValue,
        end: TimeValue,
        notes: Optional[str],
    ) -> WorkEntry:
        day = as_date(day)
        existing = self.entries_for(day)
        current = _find(existing, entry_id)
        candidate = self._build_entry(day, task, start, end, notes, require_task_choice=False)
        candidate.id = current.id
        if has_overlap(candidate, existing, ignore_id=current.id):
            raise EntryValidationError(
                "Overlapping Time", "This time range overlaps an existing task entry."
            )
        updated = [candidate if item.id == current.id else item for item in existing]
        self._save(day, updated)
        logger.info("Updated entry %s on %s", current.id, day)
        return candidate

    def delete_entry(self, day: date, entry_id: uuid.UUID) -> WorkEntry:
        day = as_date(day)
        existing = self.entries_for(day)
        removed = _find(existing, entry_id)
        self._save(day, [item for item in existing if item.id != removed.id])
        logger.info("Deleted entry %s on %s", removed.id, day)
        return removed

    def _save(self, day: date, entries: list[WorkEntry]) -> None:
        if not self.storage.records_directory_exists():
            logger.info("Creating records directory %s", self.storage.records_dir)
            self.storage.create_records_directory()
        self.storage.save_entries_for_date(day, sorted(entries, key=lambda item: item.start))

    @staticmethod
    def _build_entry(
        day: date,
        task: Optional[str],
        start: TimeValue,
        end: TimeValue,
        notes: Optional[str],
        *,
        require_task_choice: bool = True,
    ) -> WorkEntry:
        task_name = (task or "").strip()
        notes_text = (notes or "").strip()
        if require_task_choice:
            if not task_name or task_name == OTHER_TASK:
                raise EntryValidationError(
                    "Missing Task", "Select a task before adding the entry."
                )
            if not notes_text:
                raise EntryValidationError(
                    "Missing Notes", "Notes are required for each entry."
                )
        elif not task_name or not notes_text:
            raise EntryValidationError("Missing Fields", "Task and Notes are required.")

        try:
            start_offset = start if isinstance(start, timedelta) else parse_time(start)
            end_offset = end if isinstance(end, timedelta) else parse_time(end)
        except ValueError as exc:
            raise EntryValidationError(
                "Invalid Time", "Start and End times must be valid."
            ) from exc

        if end_offset <= start_offset:
            raise EntryValidationError(
                "Invalid Time Range", "End time must be later than start time."
            )

        return WorkEntry(
            date=day,
            start=start_offset,
            end=end_offset,
            task=task_name,
            notes=notes_text,
        )


def _find(entries: Iterable[WorkEntry], entry_id: uuid.UUID) -> WorkEntry:
    for entry in entries:
        if entry.id == entry_id:
            return entry
    raise EntryValidationError("Entry Not Found", f"No entry found for id={entry_id}")
