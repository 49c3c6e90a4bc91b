"""Month-bucketed JSON storage for work entries."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Iterable, Optional

from .models import WorkEntry
from .ranges import as_date

logger = logging.getLogger(__name__)

MONTH_FILE_FMT = "%Y-%m"


class StorageError(ValueError):
    """Raised when a month record cannot be read."""


class TimeLogStorage:
    """Read and write entries stored as one JSON file per month."""

    def __init__(self, records_dir: Path) -> None:
        self.records_dir = Path(records_dir)

    def records_directory_exists(self) -> bool:
        return self.records_dir.is_dir()

    def create_records_directory(self) -> None:
        self.records_dir.mkdir(parents=True, exist_ok=True)

    def month_file_path(self, day: date) -> Path:
        return self.records_dir / f"{as_date(day):{MONTH_FILE_FMT}}.json"

    def load_entries_for_date(self, day: date) -> list[WorkEntry]:
        day = as_date(day)
        entries = [entry for entry in self._read_month(day) if entry.date == day]
        return sorted(entries, key=lambda entry: entry.start)

    def load_entries_in_range(self, start: date, end_inclusive: date) -> list[WorkEntry]:
        start = as_date(start)
        end = as_date(end_inclusive)
        if end < start:
            return []

        collected: list[WorkEntry] = []
        cursor = start.replace(day=1)
        last_month = end.replace(day=1)
        while cursor <= last_month:
            collected.extend(
                entry for entry in self._read_month(cursor) if start <= entry.date <= end
            )
            cursor = _next_month(cursor)
        return sorted(collected, key=lambda entry: (entry.date, entry.start))

    def save_entries_for_date(self, day: date, entries: Iterable[WorkEntry]) -> None:
        day = as_date(day)
        kept = [entry for entry in self._read_month(day) if entry.date != day]
        kept.extend(_copy_entry(entry) for entry in entries)
        kept.sort(key=lambda entry: (entry.date, entry.start))

        path = self.month_file_path(day)
        payload = {"entries": [entry_to_record(entry) for entry in kept]}
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.debug("Saved %d entries to %s", len(kept), path)

    def latest_entry_date(self, since: date, until: date) -> Optional[date]:
        entries = self.load_entries_in_range(since, until)
        return max((entry.date for entry in entries), default=None)

    def _read_month(self, day: date) -> list[WorkEntry]:
        path = self.month_file_path(day)
        if not path.exists():
            return []
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            return [entry_from_record(record) for record in payload.get("entries", [])]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise StorageError(f"Could not read month record {path.name}: {exc}") from exc


def entry_to_record(entry: WorkEntry) -> dict[str, Any]:
    return {
        "id": str(entry.id),
        "date": entry.date.isoformat(),
        "start": format_offset(entry.start),
        "end": format_offset(entry.end),
        "task": entry.task,
        "notes": entry.notes,
    }


def entry_from_record(record: dict[str, Any]) -> WorkEntry:
    return WorkEntry(
        id=uuid.UUID(record["id"]) if record.get("id") else uuid.uuid4(),
        date=date.fromisoformat(record["date"][:10]),
        start=parse_offset(record["start"]),
        end=parse_offset(record["end"]),
        task=record.get("task") or "",
        notes=record.get("notes") or "",
    )


def format_offset(offset: timedelta) -> str:
    total_seconds = int(offset.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def parse_offset(value: str) -> timedelta:
    parts = [int(part) for part in value.split(":")]
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid time offset: {value!r}")
    hours, minutes = parts[0], parts[1]
    seconds = parts[2] if len(parts) == 3 else 0
    return timedelta(hours=hours, minutes=minutes, seconds=seconds)


def _next_month(day: date) -> date:
    if day.month == 12:
        return day.replace(year=day.year + 1, month=1, day=1)
    return day.replace(month=day.month + 1, day=1)


def _copy_entry(entry: WorkEntry) -> WorkEntry:
    return WorkEntry(
        id=entry.id,
        date=entry.date,
        start=entry.start,
        end=entry.end,
        task=entry.task,
        notes=entry.notes,
    )
