from datetime import date, datetime

import pytest

from time_logger.ranges import (
    RangeMode,
    bar_heading,
    day_title,
    detail_heading,
    resolve_bar_range,
    resolve_range,
    start_of_week,
)


def test_week_of_a_friday_runs_monday_to_sunday():
    assert resolve_range(date(2024, 3, 15), "Week") == (date(2024, 3, 11), date(2024, 3, 17))


@pytest.mark.parametrize("anchor", [date(2024, 3, 11), date(2024, 3, 13), date(2024, 3, 17)])
def test_every_day_of_a_week_resolves_to_the_same_window(anchor):
    assert resolve_range(anchor, RangeMode.WEEK) == (date(2024, 3, 11), date(2024, 3, 17))


def test_week_crossing_a_year_boundary():
    assert resolve_range(date(2025, 1, 1), "Week") == (date(2024, 12, 30), date(2025, 1, 5))


def test_month_in_a_leap_year():
    assert resolve_range(date(2024, 2, 10), "Month") == (date(2024, 2, 1), date(2024, 2, 29))


def test_month_in_a_common_year():
    assert resolve_range(date(2023, 2, 10), "Month") == (date(2023, 2, 1), date(2023, 2, 28))


def test_day_truncates_datetimes():
    anchor = datetime(2024, 3, 15, 17, 45)
    assert resolve_range(anchor, "Day") == (date(2024, 3, 15), date(2024, 3, 15))


def test_bar_modes_match_week_and_month():
    anchor = date(2024, 3, 15)
    assert resolve_range(anchor, "Weekly") == resolve_range(anchor, "Week")
    assert resolve_range(anchor, "monthly") == resolve_range(anchor, "Month")


def test_unknown_detail_mode_falls_back_to_day():
    assert resolve_range(date(2024, 3, 15), "Quarter") == (date(2024, 3, 15), date(2024, 3, 15))


def test_bar_range_defaults_to_weekly():
    assert resolve_bar_range(date(2024, 3, 15), "Day") == (date(2024, 3, 11), date(2024, 3, 17))
    assert resolve_bar_range(date(2024, 3, 15), "Monthly") == (date(2024, 3, 1), date(2024, 3, 31))


def test_start_of_week_on_monday_is_identity():
    assert start_of_week(date(2024, 3, 11)) == date(2024, 3, 11)


def test_headings():
    anchor = date(2024, 3, 15)
    assert day_title(anchor) == "Friday, Mar 15, 2024"
    assert detail_heading(anchor, "Day") == "Day - Fri, Mar 15, 2024"
    assert detail_heading(anchor, "Week") == "Week - Mar 11-Mar 17, 2024"
    assert detail_heading(date(2024, 2, 10), "Month") == "Month - Feb 1-Feb 29, 2024"
    assert bar_heading(anchor, "Weekly") == "Weekly - Mar 11-Mar 17, 2024"
    assert bar_heading(anchor, "Monthly") == "Monthly - Mar 1-Mar 31, 2024"
