import json
from datetime import date, timedelta

import pytest

from time_logger.storage import StorageError, TimeLogStorage, format_offset, parse_offset

from conftest import make_entry


def test_missing_directory_reads_as_empty(tmp_path):
    storage = TimeLogStorage(tmp_path / "nowhere")

    assert not storage.records_directory_exists()
    assert storage.load_entries_for_date(date(2024, 3, 15)) == []
    assert storage.load_entries_in_range(date(2024, 1, 1), date(2024, 12, 31)) == []


def test_save_writes_one_file_per_month(storage):
    day = date(2024, 3, 15)
    entry = make_entry("Meeting", 30, day=day)

    storage.save_entries_for_date(day, [entry])

    path = storage.records_dir / "2024-03.json"
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload == {
        "entries": [
            {
                "id": str(entry.id),
                "date": "2024-03-15",
                "start": "08:00:00",
                "end": "08:30:00",
                "task": "Meeting",
                "notes": "n",
            }
        ]
    }
    assert storage.load_entries_for_date(day) == [entry]


def test_save_replaces_only_the_given_day(storage):
    other = make_entry("Tickets", 45, day=date(2024, 3, 14))
    storage.save_entries_for_date(other.date, [other])
    storage.save_entries_for_date(date(2024, 3, 15), [make_entry("Meeting", 30)])

    replacement = make_entry("QA Testing", 60)
    storage.save_entries_for_date(date(2024, 3, 15), [replacement])

    assert storage.load_entries_for_date(date(2024, 3, 15)) == [replacement]
    assert storage.load_entries_for_date(date(2024, 3, 14)) == [other]


def test_day_entries_are_sorted_by_start(storage):
    day = date(2024, 3, 15)
    late = make_entry("late", 30, start_hour=14)
    early = make_entry("early", 30, start_hour=9)

    storage.save_entries_for_date(day, [late, early])

    assert [entry.task for entry in storage.load_entries_for_date(day)] == ["early", "late"]


def test_range_spans_month_files(storage):
    jan = make_entry("jan", 30, day=date(2024, 1, 31))
    feb = make_entry("feb", 30, day=date(2024, 2, 2))
    outside = make_entry("outside", 30, day=date(2024, 2, 10))
    storage.save_entries_for_date(jan.date, [jan])
    storage.save_entries_for_date(feb.date, [feb])
    storage.save_entries_for_date(outside.date, [outside])

    found = storage.load_entries_in_range(date(2024, 1, 30), date(2024, 2, 5))

    assert [entry.task for entry in found] == ["jan", "feb"]


def test_range_across_year_end(storage):
    dec = make_entry("dec", 30, day=date(2023, 12, 31))
    jan = make_entry("jan", 30, day=date(2024, 1, 1))
    storage.save_entries_for_date(dec.date, [dec])
    storage.save_entries_for_date(jan.date, [jan])

    found = storage.load_entries_in_range(date(2023, 12, 25), date(2024, 1, 7))

    assert [entry.task for entry in found] == ["dec", "jan"]


def test_reversed_range_is_empty(storage):
    storage.save_entries_for_date(date(2024, 3, 15), [make_entry("a", 30)])
    assert storage.load_entries_in_range(date(2024, 3, 16), date(2024, 3, 1)) == []


def test_latest_entry_date(storage):
    for day in (date(2024, 3, 1), date(2024, 3, 20), date(2024, 4, 2)):
        storage.save_entries_for_date(day, [make_entry("a", 30, day=day)])

    assert storage.latest_entry_date(date(2024, 1, 1), date(2024, 3, 31)) == date(2024, 3, 20)
    assert storage.latest_entry_date(date(2023, 1, 1), date(2023, 12, 31)) is None


def test_malformed_month_file_raises(storage):
    (storage.records_dir / "2024-03.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError, match="2024-03.json"):
        storage.load_entries_for_date(date(2024, 3, 15))


def test_offsets_round_trip_through_text():
    assert format_offset(timedelta(hours=13, minutes=5)) == "13:05:00"
    assert parse_offset("13:05:00") == timedelta(hours=13, minutes=5)
    assert parse_offset("07:45") == timedelta(hours=7, minutes=45)
    with pytest.raises(ValueError):
        parse_offset("7")
