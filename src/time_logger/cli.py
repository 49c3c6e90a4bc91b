"""Command-line interface for the time logger."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import NoReturn, Optional

import typer

from .config import AnalysisSettings
from .paths import get_records_dir, get_settings_path
from .storage import StorageError, TimeLogStorage

app = typer.Typer(help="Local-first daily time log.")


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _records_option():
    return typer.Option(
        None,
        "--records",
        path_type=Path,
        help="Directory holding the monthly JSON records.",
    )


def _date_option(help_text: str = "Date (YYYY-MM-DD). Defaults to today."):
    return typer.Option(None, "--date", help=help_text)


def _parse_day(value: Optional[str]) -> date:
    if not value:
        return date.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid date {value!r}; expected YYYY-MM-DD.") from exc


def _storage(records: Optional[Path]) -> TimeLogStorage:
    return TimeLogStorage(records or get_records_dir())


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


@app.command()
def add(
    task: str = typer.Argument(..., help="Task name, e.g. 'Meeting'."),
    start: str = typer.Argument(..., help="Start time, e.g. '08:00 AM'."),
    end: str = typer.Argument(..., help="End time, e.g. '08:15 AM'."),
    notes: str = typer.Option(..., "--notes", "-n", help="What was done."),
    day: Optional[str] = _date_option(),
    records: Optional[Path] = _records_option(),
) -> None:
    """Log a work entry."""
    from .entries import EntryBook, EntryValidationError

    book = EntryBook(_storage(records))
    try:
        entry = book.add_entry(_parse_day(day), task, start, end, notes)
    except EntryValidationError as exc:
        _fail(f"{exc.title}: {exc.message}")
    typer.echo(f"Added {entry.id} {entry.time_range} {entry.task}")


@app.command("list")
def list_entries(
    day: Optional[str] = _date_option(),
    records: Optional[Path] = _records_option(),
) -> None:
    """List the entries logged on a day."""
    from .entries import total_duration_text

    target = _parse_day(day)
    try:
        entries = _storage(records).load_entries_for_date(target)
    except StorageError as exc:
        _fail(str(exc))
    typer.echo(f"{target:%m/%d/%y}: {len(entries)} entries, {total_duration_text(entries)}")
    for entry in entries:
        typer.echo(f"  {entry.id}  {entry.time_range:<21} {entry.task:<28} {entry.notes}")


@app.command()
def edit(
    entry_id: uuid.UUID = typer.Argument(..., help="Id of the entry to change."),
    day: Optional[str] = _date_option("Day the entry belongs to."),
    task: Optional[str] = typer.Option(None, "--task"),
    start: Optional[str] = typer.Option(None, "--start"),
    end: Optional[str] = typer.Option(None, "--end"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n"),
    records: Optional[Path] = _records_option(),
) -> None:
    """Change an existing entry; omitted fields keep their values."""
    from .entries import EntryBook, EntryValidationError

    book = EntryBook(_storage(records))
    target = _parse_day(day)
    current = next((item for item in book.entries_for(target) if item.id == entry_id), None)
    if current is None:
        _fail(f"No entry found for id={entry_id}")
    try:
        entry = book.edit_entry(
            target,
            entry_id,
            task if task is not None else current.task,
            start if start is not None else current.start,
            end if end is not None else current.end,
            notes if notes is not None else current.notes,
        )
    except EntryValidationError as exc:
        _fail(f"{exc.title}: {exc.message}")
    typer.echo(f"Updated {entry.id} {entry.time_range} {entry.task}")


@app.command()
def delete(
    entry_id: uuid.UUID = typer.Argument(..., help="Id of the entry to delete."),
    day: Optional[str] = _date_option("Day the entry belongs to."),
    records: Optional[Path] = _records_option(),
) -> None:
    """Delete an entry."""
    from .entries import EntryBook, EntryValidationError

    try:
        removed = EntryBook(_storage(records)).delete_entry(_parse_day(day), entry_id)
    except EntryValidationError as exc:
        _fail(f"{exc.title}: {exc.message}")
    typer.echo(f"Deleted {removed.id}")


@app.command()
def summary(
    day: Optional[str] = _date_option("Anchor date (YYYY-MM-DD). Defaults to the latest logged day."),
    detail_range: str = typer.Option("Day", "--range", help="Day, Week or Month."),
    bar_mode: str = typer.Option("Weekly", "--bars", help="Weekly or Monthly."),
    records: Optional[Path] = _records_option(),
) -> None:
    """Print the analysis breakdown for a day and its surrounding range."""
    from .dashboard import AnalysisDashboard
    from .reporting import SummaryPrinter

    dashboard = AnalysisDashboard(_storage(records), AnalysisSettings())
    printer = SummaryPrinter(dashboard)
    printer.print_summary(
        _parse_day(day) if day else None,
        detail_range,
        bar_mode,
        follow_latest=day is None,
    )


@app.command()
def events(
    day: Optional[str] = _date_option(),
    settings_path: Optional[Path] = typer.Option(
        None, "--settings", path_type=Path, help="appsettings.json with a Calendar node."
    ),
) -> None:
    """Show calendar events for a day."""
    from .calendar_feed import create_calendar_service, load_calendar_config

    target = _parse_day(day)
    service = create_calendar_service(load_calendar_config(settings_path or get_settings_path()))
    start = datetime.combine(target, time.min)
    found = service.get_events(start, start + timedelta(days=1))
    typer.echo(f"{len(found)} event(s).")
    for event in found:
        typer.echo(f"  {event.time_range:<16} {event.subject:<20} {event.location}")


@app.command("export-day")
def export_day(
    day: Optional[str] = _date_option(),
    records: Optional[Path] = _records_option(),
) -> None:
    """Write a CSV report for one day."""
    from .calendar_feed import create_calendar_service, load_calendar_config
    from .entries import total_duration_text
    from .export import export_day_csv

    storage = _storage(records)
    target = _parse_day(day)
    try:
        entries = storage.load_entries_for_date(target)
    except StorageError as exc:
        _fail(str(exc))
    service = create_calendar_service(load_calendar_config(get_settings_path()))
    start = datetime.combine(target, time.min)
    found = service.get_events(start, start + timedelta(days=1))
    storage.create_records_directory()
    path = export_day_csv(storage.records_dir, target, entries, found, total_duration_text(entries))
    typer.echo(f"Exported day CSV for {target:%Y-%m-%d}.\n{path}")


@app.command("export-range")
def export_range(
    start: str = typer.Argument(..., help="First day (YYYY-MM-DD)."),
    end: str = typer.Argument(..., help="Last day, inclusive (YYYY-MM-DD)."),
    records: Optional[Path] = _records_option(),
) -> None:
    """Write a CSV report for an inclusive date range."""
    from .calendar_feed import create_calendar_service, load_calendar_config
    from .export import export_range_csv

    first, last = _parse_day(start), _parse_day(end)
    if last < first:
        _fail("End date must be the same or later than start date.")
    storage = _storage(records)
    try:
        entries = storage.load_entries_in_range(first, last)
    except StorageError as exc:
        _fail(str(exc))
    service = create_calendar_service(load_calendar_config(get_settings_path()))
    window_start = datetime.combine(first, time.min)
    found = service.get_events(window_start, datetime.combine(last, time.min) + timedelta(days=1))
    storage.create_records_directory()
    path = export_range_csv(storage.records_dir, first, last, entries, found)
    typer.echo(f"Exported range CSV for {first:%Y-%m-%d} to {last:%Y-%m-%d}.\n{path}")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the dashboard."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the dashboard."
    ),
    records: Optional[Path] = _records_option(),
    open_browser: bool = typer.Option(
        True,
        "--open-browser/--no-open-browser",
        help="Automatically launch the dashboard in your default browser.",
    ),
) -> None:
    """Start the local analysis dashboard."""
    from .server_runner import run_dashboard

    run_dashboard(
        host=host,
        port=port,
        records_dir=records or get_records_dir(),
        settings=AnalysisSettings(),
        open_browser=open_browser,
    )
