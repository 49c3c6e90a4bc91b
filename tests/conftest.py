from __future__ import annotations

from datetime import date, timedelta

import pytest

from time_logger.models import WorkEntry
from time_logger.storage import TimeLogStorage


def make_entry(task: str, minutes: float, *, day: date = date(2024, 3, 15), start_hour: int = 8) -> WorkEntry:
    start = timedelta(hours=start_hour)
    return WorkEntry(date=day, start=start, end=start + timedelta(minutes=minutes), task=task, notes="n")


@pytest.fixture
def storage(tmp_path) -> TimeLogStorage:
    store = TimeLogStorage(tmp_path / "Time Log Records")
    store.create_records_directory()
    return store
