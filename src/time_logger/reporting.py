"""Simple reporting utilities for CLI output."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from .dashboard import AnalysisDashboard, DashboardSnapshot
from .models import ActivityBucket


class SummaryPrinter:
    """Render human-readable analysis summaries in the console."""

    def __init__(self, dashboard: AnalysisDashboard) -> None:
        self.dashboard = dashboard

    def print_summary(
        self,
        day: Optional[date] = None,
        detail_range: str = "Day",
        bar_mode: str = "Weekly",
        follow_latest: bool = True,
    ) -> DashboardSnapshot:
        snapshot = self.dashboard.refresh(
            day, detail_range, bar_mode, follow_latest=follow_latest
        )
        if snapshot.error:
            print(f"Could not load time log records: {snapshot.error}")
            return snapshot
        if not snapshot.day_breakdown and not snapshot.detail_items:
            print("No activity recorded for the selected period.")
            return snapshot

        print(snapshot.day_title)
        print("-" * 40)
        print_buckets(snapshot.day_breakdown)
        print()

        print(snapshot.detail_heading)
        print("-" * 40)
        print_buckets(snapshot.detail_items)
        print(f"  {'Total':<30} {snapshot.total_duration_text:>9}")

        if snapshot.bar_items:
            print()
            print(snapshot.bar_heading)
            print("-" * 40)
            print_bars(snapshot.bar_items)
        return snapshot


def print_buckets(buckets: Iterable[ActivityBucket]) -> None:
    for bucket in buckets:
        print(f"  {bucket.name[:30]:<30} {bucket.duration_text:>9} {bucket.percent_text:>5}")


def print_bars(buckets: list[ActivityBucket], width: int = 30) -> None:
    longest = max((bucket.minutes for bucket in buckets), default=0)
    for bucket in buckets:
        length = round(width * bucket.minutes / longest) if longest else 0
        print(f"  {bucket.name[:20]:<20} {'#' * length:<{width}} {bucket.duration_text}")
