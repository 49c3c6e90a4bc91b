"""Analysis dashboard: day breakdown, pie chart, detail and bar views."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from . import ranges
from .breakdown import aggregate, total_duration_text
from .config import AnalysisSettings
from .models import ActivityBucket, PieSlice
from .pie import build_slices
from .ranges import RangeMode
from .storage import StorageError, TimeLogStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DashboardSnapshot:
    """Everything the analysis views render for one refresh."""

    analysis_date: date
    detail_range: RangeMode
    bar_mode: RangeMode
    day_breakdown: list[ActivityBucket] = field(default_factory=list)
    pie_slices: list[PieSlice] = field(default_factory=list)
    detail_items: list[ActivityBucket] = field(default_factory=list)
    bar_items: list[ActivityBucket] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def day_title(self) -> str:
        return ranges.day_title(self.analysis_date)

    @property
    def detail_heading(self) -> str:
        return ranges.detail_heading(self.analysis_date, self.detail_range)

    @property
    def bar_heading(self) -> str:
        return ranges.bar_heading(self.analysis_date, self.bar_mode)

    @property
    def total_duration_text(self) -> str:
        return total_duration_text(self.detail_items)


class AnalysisDashboard:
    """Refresh analysis views from storage, one refresh at a time."""

    def __init__(
        self, storage: TimeLogStorage, settings: Optional[AnalysisSettings] = None
    ) -> None:
        self.storage = storage
        self.settings = settings or AnalysisSettings()
        self._lock = threading.Lock()

    def refresh(
        self,
        anchor: Optional[date] = None,
        detail_range: Union[str, RangeMode] = RangeMode.DAY,
        bar_mode: Union[str, RangeMode] = RangeMode.WEEKLY,
        *,
        follow_latest: bool = True,
    ) -> DashboardSnapshot:
        fallback = ranges.as_date(anchor) if anchor else date.today()
        detail = RangeMode.parse(detail_range, RangeMode.DAY)
        if detail not in ranges.DETAIL_RANGES:
            detail = RangeMode.DAY
        bar = RangeMode.parse(bar_mode, RangeMode.WEEKLY)
        if bar not in ranges.BAR_MODES:
            bar = RangeMode.WEEKLY

        with self._lock:
            try:
                analysis_date = (
                    self.resolve_latest_analysis_date(fallback) if follow_latest else fallback
                )
                return self._build(analysis_date, detail, bar)
            except (OSError, StorageError) as exc:
                logger.exception("Analysis refresh failed; showing no data.")
                return DashboardSnapshot(
                    analysis_date=fallback,
                    detail_range=detail,
                    bar_mode=bar,
                    error=str(exc),
                )

    def resolve_latest_analysis_date(self, fallback: date) -> date:
        """Jump to the most recent logged day, or keep ``fallback``."""
        if not self.storage.records_directory_exists():
            return fallback
        today = date.today()
        since = _years_before(today, self.settings.lookback_years)
        latest = self.storage.latest_entry_date(since, today)
        return latest or fallback

    def _build(
        self, analysis_date: date, detail: RangeMode, bar: RangeMode
    ) -> DashboardSnapshot:
        pie_palette = self.settings.pie_palette
        day_items = aggregate(self.storage.load_entries_for_date(analysis_date), pie_palette)

        detail_start, detail_end = ranges.resolve_range(analysis_date, detail)
        detail_items = aggregate(
            self.storage.load_entries_in_range(detail_start, detail_end), pie_palette
        )

        bar_start, bar_end = ranges.resolve_bar_range(analysis_date, bar)
        bar_items = aggregate(
            self.storage.load_entries_in_range(bar_start, bar_end), self.settings.bar_palette
        )

        logger.debug(
            "Refreshed analysis for %s: %d day buckets, %d detail, %d bar",
            analysis_date,
            len(day_items),
            len(detail_items),
            len(bar_items),
        )
        return DashboardSnapshot(
            analysis_date=analysis_date,
            detail_range=detail,
            bar_mode=bar,
            day_breakdown=day_items,
            pie_slices=build_slices(day_items, self.settings.geometry),
            detail_items=detail_items,
            bar_items=bar_items,
        )


def _years_before(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year.
        return day.replace(year=day.year - years, day=28)
