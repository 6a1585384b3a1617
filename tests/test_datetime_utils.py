from datetime import date, datetime, timezone

from washdesk_shared.datetime_utils import (
    date_for_day_of_week,
    day_of_week,
    format_date,
    is_date_in_next_two_weeks,
    next_two_weeks_range,
    parse_date,
)


def test_day_of_week_starts_on_sunday():
    assert day_of_week(date(2024, 6, 2)) == 0  # Sunday
    assert day_of_week(date(2024, 6, 3)) == 1
    assert day_of_week(date(2024, 6, 8)) == 6


def test_format_and_parse_dates():
    assert format_date(datetime(2024, 6, 3, 15, 30, tzinfo=timezone.utc)) == "2024-06-03"
    assert parse_date("2024-06-03T10:00:00Z") == date(2024, 6, 3)
    assert parse_date("2024-06-03") == date(2024, 6, 3)
    assert parse_date("") is None
    assert parse_date("not a date") is None


def test_next_two_weeks_is_inclusive():
    start = date(2024, 6, 3)
    first, last = next_two_weeks_range(start)
    assert (first, last) == (start, date(2024, 6, 16))
    assert is_date_in_next_two_weeks(date(2024, 6, 16), start)
    assert not is_date_in_next_two_weeks(date(2024, 6, 17), start)


def test_date_for_day_of_week_rolls_to_next_week():
    monday = date(2024, 6, 3)
    assert date_for_day_of_week(3, start=monday) == date(2024, 6, 5)
    assert date_for_day_of_week(0, start=monday) == date(2024, 6, 9)
    assert date_for_day_of_week(1, week_offset=1, start=monday) == date(2024, 6, 10)
