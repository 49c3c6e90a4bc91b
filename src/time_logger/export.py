"""CSV reports for a single day or a date range."""

from __future__ import annotations

import csv
import io
import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Iterable, Optional, Sequence

from .entries import format_time
from .models import CalEvent, WorkEntry

logger = logging.getLogger(__name__)

ENTRY_COLUMNS = [
    "EntryId",
    "Date",
    "DayOfWeek",
    "StartTime",
    "EndTime",
    "DurationMinutes",
    "Task",
    "Notes",
]
EVENT_COLUMNS = [
    "Subject",
    "Location",
    "Date",
    "StartTime",
    "EndTime",
    "DurationMinutes",
    "TimeRange",
]


def export_day_csv(
    records_dir: Path,
    day: date,
    entries: Sequence[WorkEntry],
    events: Sequence[CalEvent],
    total_duration_text: str,
    calendar_error: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Path:
    now = now or datetime.now()
    sorted_entries = sorted(entries, key=lambda entry: entry.start)
    sorted_events = sorted(events, key=lambda event: event.start)

    export_dir = Path(records_dir) / "Exports" / f"{day:%Y}" / f"{day:%m}"
    path = export_dir / f"timelog-day-{day:%Y-%m-%d}-{now:%H%M%S}.csv"

    buffer, writer = _writer()
    writer.writerow(["ReportType", "DayExport"])
    writer.writerow(["SelectedDate", f"{day:%Y-%m-%d}"])
    writer.writerow(["SelectedDayOfWeek", f"{day:%A}"])
    _write_common_header(writer, now, sorted_entries, sorted_events, total_duration_text, calendar_error)

    writer.writerow([])
    writer.writerow(["Entries"])
    writer.writerow([*ENTRY_COLUMNS, "OverlapsAnotherEntry"])
    for entry in sorted_entries:
        overlaps = any(
            other.id != entry.id and entry.overlaps(other) for other in sorted_entries
        )
        writer.writerow(_clean([*_entry_cells(entry), "Yes" if overlaps else "No"]))
    if not sorted_entries:
        writer.writerow(["", "", "", "", "", "", "No entries", "", ""])

    _write_events(writer, sorted_events)
    return _save(path, buffer)


def export_range_csv(
    records_dir: Path,
    start: date,
    end_inclusive: date,
    entries: Sequence[WorkEntry],
    events: Sequence[CalEvent],
    calendar_error: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Path:
    now = now or datetime.now()
    sorted_entries = sorted(entries, key=lambda entry: (entry.date, entry.start))
    sorted_events = sorted(events, key=lambda event: event.start)

    export_dir = Path(records_dir) / "Exports" / "Range" / f"{start:%Y-%m}-{end_inclusive:%Y-%m}"
    path = export_dir / (
        f"timelog-range-{start:%Y-%m-%d}_to_{end_inclusive:%Y-%m-%d}-{now:%H%M%S}.csv"
    )

    total = timedelta(minutes=sum(entry.duration_minutes for entry in sorted_entries))
    hours, remainder = divmod(int(total.total_seconds()), 3600)

    buffer, writer = _writer()
    writer.writerow(["ReportType", "RangeExport"])
    writer.writerow(["RangeStartDate", f"{start:%Y-%m-%d}"])
    writer.writerow(["RangeEndDateInclusive", f"{end_inclusive:%Y-%m-%d}"])
    writer.writerow(["RangeDays", str((end_inclusive - start).days + 1)])
    _write_common_header(
        writer, now, sorted_entries, sorted_events, f"{hours}h {remainder // 60}m", calendar_error
    )

    writer.writerow([])
    writer.writerow(["DaySummaries"])
    writer.writerow(["Date", "DayOfWeek", "EntryCount", "TotalMinutes", "FirstStart", "LastEnd"])
    by_day: dict[date, list[WorkEntry]] = defaultdict(list)
    for entry in sorted_entries:
        by_day[entry.date].append(entry)
    for day in sorted(by_day):
        day_entries = by_day[day]
        writer.writerow(
            [
                f"{day:%Y-%m-%d}",
                f"{day:%A}",
                str(len(day_entries)),
                _minutes(sum(entry.duration_minutes for entry in day_entries)),
                format_time(min(entry.start for entry in day_entries)),
                format_time(max(entry.end for entry in day_entries)),
            ]
        )
    if not sorted_entries:
        writer.writerow(["", "", "0", "0", "", ""])

    writer.writerow([])
    writer.writerow(["Entries"])
    writer.writerow([*ENTRY_COLUMNS, "OverlapsAnotherEntryOnSameDay"])
    for entry in sorted_entries:
        overlaps = any(
            other.id != entry.id and other.date == entry.date and entry.overlaps(other)
            for other in sorted_entries
        )
        writer.writerow(_clean([*_entry_cells(entry), "Yes" if overlaps else "No"]))
    if not sorted_entries:
        writer.writerow(["", "", "", "", "", "", "No entries in selected range", "", ""])

    _write_events(writer, sorted_events)
    return _save(path, buffer)


def _write_common_header(
    writer,
    now: datetime,
    entries: Sequence[WorkEntry],
    events: Sequence[CalEvent],
    total_duration_text: str,
    calendar_error: Optional[str],
) -> None:
    writer.writerow(["ExportedAtLocal", f"{now:%Y-%m-%d %H:%M:%S}"])
    writer.writerow(["EntryCount", str(len(entries))])
    writer.writerow(["CalendarEventCount", str(len(events))])
    writer.writerow(_clean(["TotalDuration", total_duration_text]))
    has_error = bool(calendar_error and calendar_error.strip())
    writer.writerow(["CalendarFetchStatus", "Fallback" if has_error else "Loaded"])
    if has_error:
        writer.writerow(_clean(["CalendarFetchError", calendar_error or ""]))


def _write_events(writer, events: Sequence[CalEvent]) -> None:
    writer.writerow([])
    writer.writerow(["CalendarEvents"])
    writer.writerow(EVENT_COLUMNS)
    for event in events:
        writer.writerow(
            _clean(
                [
                    event.subject,
                    event.location,
                    f"{event.start:%Y-%m-%d}",
                    f"{event.start:%I:%M %p}",
                    f"{event.end:%I:%M %p}",
                    _minutes(event.duration_minutes),
                    event.time_range,
                ]
            )
        )
    if not events:
        writer.writerow(["No calendar events", "", "", "", "", "", ""])


def _entry_cells(entry: WorkEntry) -> list[str]:
    return [
        str(entry.id),
        f"{entry.date:%Y-%m-%d}",
        f"{entry.date:%A}",
        format_time(entry.start),
        format_time(entry.end),
        _minutes(entry.duration_minutes),
        entry.task,
        entry.notes,
    ]


def _minutes(value: float) -> str:
    return str(int(round(value)))


def _clean(values: Iterable[str]) -> list[str]:
    return [value.replace("\r", " ").replace("\n", " ") for value in values]


def _writer():
    buffer = io.StringIO()
    return buffer, csv.writer(buffer, lineterminator="\n")


def _save(path: Path, buffer: io.StringIO) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(buffer.getvalue(), encoding="utf-8")
    logger.info("Exported CSV report to %s", path)
    return path
