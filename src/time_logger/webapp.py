"""FastAPI application that exposes the time log and analysis over HTTP."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict

from .calendar_feed import CalendarConfig, create_calendar_service, load_calendar_config
from .config import DEFAULT_TASK_OPTIONS, AnalysisSettings
from .dashboard import AnalysisDashboard, DashboardSnapshot
from .entries import EntryBook, EntryValidationError, format_time, total_duration_text
from .export import export_day_csv, export_range_csv
from .models import ActivityBucket, CalEvent, WorkEntry
from .pie import render_svg
from .paths import get_records_dir, get_settings_path
from .storage import StorageError, TimeLogStorage

logger = logging.getLogger(__name__)


class EntryPayload(BaseModel):
    date: date
    task: str
    start_time: str
    end_time: str
    notes: str

    model_config = ConfigDict(extra="forbid")


class EntryUpdate(BaseModel):
    date: date
    task: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class RangeExportPayload(BaseModel):
    start: date
    end: date

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    records_dir: Optional[Path] = None,
    settings: Optional[AnalysisSettings] = None,
    calendar_config: Optional[CalendarConfig] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    storage = TimeLogStorage(Path(records_dir or get_records_dir()))
    resolved_settings = settings or AnalysisSettings()
    resolved_calendar = calendar_config or load_calendar_config(get_settings_path())

    app = FastAPI(title="Time Logger", version="0.3.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.storage = storage
    app.state.entry_book = EntryBook(storage)
    app.state.dashboard = AnalysisDashboard(storage, resolved_settings)
    app.state.calendar = create_calendar_service(resolved_calendar)

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        storage: TimeLogStorage = request.app.state.storage
        return {
            "records_path": str(storage.records_dir),
            "records_directory_exists": storage.records_directory_exists(),
            "calendar_provider": resolved_calendar.provider,
            "pie_palette": list(resolved_settings.pie_palette),
            "task_options": list(DEFAULT_TASK_OPTIONS),
        }

    @app.get("/api/entries")
    def list_entries(
        request: Request,
        date: Optional[str] = Query(
            default=None,
            description="Target date in YYYY-MM-DD format.",
        ),
    ) -> Dict[str, Any]:
        target_day = _parse_date(date)
        try:
            entries = request.app.state.entry_book.entries_for(target_day)
        except StorageError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return {
            "date": target_day.isoformat(),
            "entries": [_entry_payload(entry) for entry in entries],
            "entry_count": len(entries),
            "total_duration": total_duration_text(entries),
        }

    @app.post("/api/entries", status_code=201)
    def create_entry(payload: EntryPayload, request: Request) -> Dict[str, Any]:
        book: EntryBook = request.app.state.entry_book
        entry = _apply(
            book.add_entry,
            payload.date,
            payload.task,
            payload.start_time,
            payload.end_time,
            payload.notes,
        )
        return _entry_payload(entry)

    @app.patch("/api/entries/{entry_id}")
    def update_entry(
        entry_id: uuid.UUID, payload: EntryUpdate, request: Request
    ) -> Dict[str, Any]:
        book: EntryBook = request.app.state.entry_book
        current = next(
            (item for item in book.entries_for(payload.date) if item.id == entry_id), None
        )
        if current is None:
            raise HTTPException(status_code=404, detail="Entry not found")
        updates = payload.model_dump(exclude_unset=True)
        entry = _apply(
            book.edit_entry,
            payload.date,
            entry_id,
            updates.get("task", current.task),
            updates.get("start_time", current.start),
            updates.get("end_time", current.end),
            updates.get("notes", current.notes),
        )
        return _entry_payload(entry)

    @app.delete("/api/entries/{entry_id}")
    def delete_entry(
        entry_id: uuid.UUID,
        request: Request,
        date: Optional[str] = Query(default=None, description="Day the entry belongs to."),
    ) -> Dict[str, Any]:
        removed = _apply(request.app.state.entry_book.delete_entry, _parse_date(date), entry_id)
        return {"deleted": str(removed.id)}

    @app.get("/api/analysis")
    def analysis(
        request: Request,
        date: Optional[str] = Query(default=None, description="Anchor date (YYYY-MM-DD)."),
        detail_range: str = Query(default="Day", description="Day, Week or Month."),
        bar_mode: str = Query(default="Weekly", description="Weekly or Monthly."),
        follow_latest: bool = Query(
            default=True, description="Jump to the most recent day with entries."
        ),
    ) -> Dict[str, Any]:
        snapshot = request.app.state.dashboard.refresh(
            _parse_date(date), detail_range, bar_mode, follow_latest=follow_latest
        )
        return _snapshot_payload(snapshot)

    @app.get("/api/analysis/pie.svg")
    def pie_svg(
        request: Request,
        date: Optional[str] = Query(default=None, description="Anchor date (YYYY-MM-DD)."),
        follow_latest: bool = Query(default=True),
    ) -> Response:
        snapshot = request.app.state.dashboard.refresh(
            _parse_date(date), follow_latest=follow_latest
        )
        svg = render_svg(snapshot.pie_slices, resolved_settings.geometry)
        return Response(content=svg, media_type="image/svg+xml")

    @app.get("/api/calendar")
    def calendar_events(
        request: Request,
        date: Optional[str] = Query(default=None, description="Target date (YYYY-MM-DD)."),
    ) -> Dict[str, Any]:
        target_day = _parse_date(date)
        events, error = _fetch_events(request, target_day, target_day)
        return {
            "date": target_day.isoformat(),
            "events": [_event_payload(event) for event in events],
            "event_count": len(events),
            "error": error,
        }

    @app.post("/api/export/day")
    def export_day(
        request: Request,
        date: Optional[str] = Query(default=None, description="Day to export (YYYY-MM-DD)."),
    ) -> Dict[str, Any]:
        target_day = _parse_date(date)
        storage: TimeLogStorage = request.app.state.storage
        entries = _load(storage.load_entries_for_date, target_day)
        events, error = _fetch_events(request, target_day, target_day)
        storage.create_records_directory()
        path = export_day_csv(
            storage.records_dir,
            target_day,
            entries,
            events,
            total_duration_text(entries),
            calendar_error=error,
        )
        return {"path": str(path), "entry_count": len(entries), "calendar_error": error}

    @app.post("/api/export/range")
    def export_range(payload: RangeExportPayload, request: Request) -> Dict[str, Any]:
        if payload.end < payload.start:
            raise HTTPException(
                status_code=400, detail="End date must be the same or later than start date."
            )
        storage: TimeLogStorage = request.app.state.storage
        entries = _load(storage.load_entries_in_range, payload.start, payload.end)
        events, error = _fetch_events(request, payload.start, payload.end)
        storage.create_records_directory()
        path = export_range_csv(
            storage.records_dir,
            payload.start,
            payload.end,
            entries,
            events,
            calendar_error=error,
        )
        return {"path": str(path), "entry_count": len(entries), "calendar_error": error}

    return app


def _parse_date(value: Optional[str]) -> date:
    if not value:
        return date.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid date format") from exc


def _apply(operation, *args):
    try:
        return operation(*args)
    except EntryValidationError as exc:
        code = 404 if exc.title == "Entry Not Found" else 400
        raise HTTPException(status_code=code, detail=f"{exc.title}: {exc.message}") from exc
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def _load(loader, *args) -> list[WorkEntry]:
    try:
        return loader(*args)
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def _fetch_events(
    request: Request, start: date, end_inclusive: date
) -> tuple[list[CalEvent], Optional[str]]:
    window_start = datetime.combine(start, time.min)
    window_end = datetime.combine(end_inclusive, time.min) + timedelta(days=1)
    try:
        return request.app.state.calendar.get_events(window_start, window_end), None
    except Exception as exc:
        logger.exception("Calendar fetch failed for %s..%s", start, end_inclusive)
        return [], str(exc)


def _entry_payload(entry: WorkEntry) -> Dict[str, Any]:
    return {
        "id": str(entry.id),
        "date": entry.date.isoformat(),
        "start_time": format_time(entry.start),
        "end_time": format_time(entry.end),
        "time_range": entry.time_range,
        "task": entry.task,
        "notes": entry.notes,
        "duration_minutes": entry.duration_minutes,
    }


def _event_payload(event: CalEvent) -> Dict[str, Any]:
    return {
        "subject": event.subject,
        "location": event.location,
        "start": event.start.isoformat(),
        "end": event.end.isoformat(),
        "time_range": event.time_range,
        "date_line": event.date_line,
    }


def _bucket_payload(bucket: ActivityBucket) -> Dict[str, Any]:
    return {
        "name": bucket.name,
        "color_hex": bucket.color_hex,
        "minutes": bucket.minutes,
        "percentage": bucket.percentage,
        "duration_text": bucket.duration_text,
        "percent_text": bucket.percent_text,
        "legend_text": bucket.legend_text,
    }


def _snapshot_payload(snapshot: DashboardSnapshot) -> Dict[str, Any]:
    return {
        "date": snapshot.analysis_date.isoformat(),
        "day_title": snapshot.day_title,
        "detail_range": snapshot.detail_range.value,
        "detail_heading": snapshot.detail_heading,
        "bar_mode": snapshot.bar_mode.value,
        "bar_heading": snapshot.bar_heading,
        "total_duration": snapshot.total_duration_text,
        "day_breakdown": [_bucket_payload(item) for item in snapshot.day_breakdown],
        "pie_slices": [
            {
                "color_hex": item.color_hex,
                "start_angle": item.start_angle,
                "sweep_angle": item.sweep_angle,
                "large_arc": item.large_arc,
                "full_circle": item.full_circle,
                "path_data": item.path_data,
            }
            for item in snapshot.pie_slices
        ],
        "detail_items": [_bucket_payload(item) for item in snapshot.detail_items],
        "bar_items": [_bucket_payload(item) for item in snapshot.bar_items],
        "error": snapshot.error,
    }
