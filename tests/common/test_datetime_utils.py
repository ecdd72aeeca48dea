from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from time_leave_system.common.calendar import StaticHolidayCalendar, count_working_days
from time_leave_system.common.datetime_utils import (
    combine_local,
    inclusive_day_count,
    minutes_between,
    minutes_to_hours,
    month_bounds,
    overlap_days,
    parse_any_date,
    parse_timestamp,
    round_timestamp,
    to_canonical,
    week_bounds,
)
from time_leave_system.core.exceptions import InvalidInputError

CEST = timezone(timedelta(hours=2))


def test_parse_any_date_accepts_iso_and_dotted_forms():
    assert parse_any_date("2025-06-01") == date(2025, 6, 1)
    assert parse_any_date("01.06.2025") == date(2025, 6, 1)


def test_parse_any_date_rejects_garbage():
    with pytest.raises(InvalidInputError):
        parse_any_date("2025-13-01")


def test_parse_timestamp_requires_offset():
    assert parse_timestamp("2025-05-01T09:00:00Z") == datetime(2025, 5, 1, 9, 0, tzinfo=timezone.utc)
    with pytest.raises(InvalidInputError):
        parse_timestamp("2025-05-01T09:00:00")


def test_combine_local_uses_zone_offset():
    ts = combine_local(date(2025, 5, 1), "09:00", "Europe/Berlin")
    assert to_canonical(ts) == datetime(2025, 5, 1, 7, 0, tzinfo=timezone.utc)


def test_minutes_between_ignores_offsets():
    start = datetime(2025, 5, 1, 9, 0, tzinfo=CEST)
    end = datetime(2025, 5, 1, 8, 0, tzinfo=timezone.utc)
    assert minutes_between(start, end) == 60


def test_minutes_to_hours_rounds_half_up():
    assert minutes_to_hours(465) == Decimal("7.75")
    assert minutes_to_hours(1) == Decimal("0.02")


@pytest.mark.parametrize(
    "method, expected",
    [
        ("nearest", datetime(2025, 5, 1, 9, 15, tzinfo=CEST)),
        ("up", datetime(2025, 5, 1, 9, 15, tzinfo=CEST)),
        ("down", datetime(2025, 5, 1, 9, 0, tzinfo=CEST)),
    ],
)
def test_round_timestamp_methods(method, expected):
    ts = datetime(2025, 5, 1, 9, 8, tzinfo=CEST)
    assert round_timestamp(ts, 15, method) == expected


def test_round_nearest_half_goes_up_and_exact_values_stay():
    half = datetime(2025, 5, 1, 9, 7, 30, tzinfo=CEST)
    exact = datetime(2025, 5, 1, 9, 30, tzinfo=CEST)
    assert round_timestamp(half, 15, "nearest") == datetime(2025, 5, 1, 9, 15, tzinfo=CEST)
    assert round_timestamp(exact, 15, "up") == exact
    assert round_timestamp(exact, 0, "up") == exact


def test_inclusive_day_count():
    assert inclusive_day_count(date(2025, 6, 1), date(2025, 6, 5)) == 5
    assert inclusive_day_count(date(2025, 6, 1), date(2025, 6, 1)) == 1
    with pytest.raises(InvalidInputError):
        inclusive_day_count(date(2025, 6, 2), date(2025, 6, 1))


def test_overlap_days():
    assert overlap_days(date(2025, 5, 28), date(2025, 6, 3), date(2025, 6, 1), date(2025, 6, 30)) == 3
    assert overlap_days(date(2025, 5, 1), date(2025, 5, 2), date(2025, 6, 1), date(2025, 6, 30)) == 0


def test_week_and_month_bounds():
    assert week_bounds(date(2025, 5, 1)) == (date(2025, 4, 28), date(2025, 5, 4))
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    with pytest.raises(InvalidInputError):
        month_bounds(2025, 13)


def test_static_calendar_skips_weekends_and_holidays():
    calendar = StaticHolidayCalendar.from_iso_dates(["2025-05-01"])
    # May 2025: 22 weekdays, minus Labour Day.
    assert count_working_days(calendar, date(2025, 5, 1), date(2025, 5, 31)) == 21
    assert not calendar.is_working_day(date(2025, 5, 3))
