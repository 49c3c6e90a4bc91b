import json
from datetime import datetime

from time_logger.calendar_feed import (
    CalendarConfig,
    FakeCalendarService,
    create_calendar_service,
    load_calendar_config,
)


def test_missing_settings_use_fake_provider(tmp_path):
    assert load_calendar_config(tmp_path / "appsettings.json").provider == "Fake"
    assert load_calendar_config(None).is_fake


def test_settings_without_calendar_node(tmp_path):
    path = tmp_path / "appsettings.json"
    path.write_text(json.dumps({"Other": {}}), encoding="utf-8")
    assert load_calendar_config(path).provider == "Fake"


def test_unreadable_settings(tmp_path):
    path = tmp_path / "appsettings.json"
    path.write_text("{", encoding="utf-8")
    assert load_calendar_config(path).provider == "Fake"


def test_calendar_node_is_read_with_defaults(tmp_path):
    path = tmp_path / "appsettings.json"
    path.write_text(
        json.dumps({"Calendar": {"ClientId": "abc", "TimeZoneId": "Europe/Berlin", "TenantId": 7}}),
        encoding="utf-8",
    )

    config = load_calendar_config(path)

    assert config.provider == "Graph"
    assert config.client_id == "abc"
    assert config.tenant_id == "common"
    assert config.redirect_uri == "http://localhost"
    assert config.time_zone_id == "Europe/Berlin"


def test_blank_time_zone_defaults_to_local(tmp_path):
    path = tmp_path / "appsettings.json"
    path.write_text(json.dumps({"Calendar": {"Provider": "Fake", "TimeZoneId": " "}}), encoding="utf-8")
    assert load_calendar_config(path).time_zone_id.strip()


def test_fake_feed_filters_to_window():
    service = FakeCalendarService()

    day = service.get_events(datetime(2024, 3, 15), datetime(2024, 3, 16))
    morning = service.get_events(datetime(2024, 3, 15, 9, 20), datetime(2024, 3, 15, 10))

    assert [event.subject for event in day] == ["Team Sync", "Focus Block", "1:1"]
    assert [event.subject for event in morning] == ["Team Sync", "Focus Block"]
    assert day[1].time_range == "09:45-11:15 AM"
    assert day[0].date_line == "Friday, March 15, 2024"


def test_remote_provider_falls_back_to_fixture():
    assert isinstance(create_calendar_service(CalendarConfig()), FakeCalendarService)
