from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from src.freemeal_tracker.freemeal_tracker.common.datetime_utils import parse_effective_timestamp, previous_week_range
from src.freemeal_tracker.freemeal_tracker.core.exceptions import ValidationError


@pytest.mark.parametrize("value", [None, "", "   "])
def test_empty_override_means_now(value, fixed_now):
    assert parse_effective_timestamp(value, now=fixed_now) is None


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2024-05-31 13:45", datetime(2024, 5, 31, 13, 45)),
        ("2024-05-31 13:45:10", datetime(2024, 5, 31, 13, 45, 10)),
        ("2024-05-31T13:45:10.123", datetime(2024, 5, 31, 13, 45, 10)),
    ],
)
def test_override_with_time(value, expected, fixed_now):
    assert parse_effective_timestamp(value, now=fixed_now) == expected


@pytest.mark.parametrize("value", ["2024-06-03T23:30:00Z", "2024-06-03T23:30:00.500+00:00"])
def test_offset_override_is_converted_to_local_time(value, fixed_now):
    expected = datetime(2024, 6, 3, 23, 30, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)

    parsed = parse_effective_timestamp(value, now=fixed_now)

    assert parsed == expected
    assert parsed.tzinfo is None


def test_same_instant_in_different_offsets_lands_on_the_same_claim_time(fixed_now):
    utc = parse_effective_timestamp("2024-06-03T23:30:00Z", now=fixed_now)
    manila = parse_effective_timestamp("2024-06-04T07:30:00+08:00", now=fixed_now)

    assert utc == manila
    assert manila == datetime(2024, 6, 4, 7, 30, tzinfo=timezone(timedelta(hours=8))).astimezone().replace(tzinfo=None)


def test_bare_date_keeps_the_current_time_of_day(fixed_now):
    assert parse_effective_timestamp("2024-05-31", now=fixed_now) == datetime(2024, 5, 31, 8, 0, 0)


@pytest.mark.parametrize("value", ["yesterday", "2024-13-01", "2024-05-31 25:00"])
def test_garbage_override_is_rejected(value, fixed_now):
    with pytest.raises(ValidationError):
        parse_effective_timestamp(value, now=fixed_now)


@pytest.mark.parametrize(
    "today",
    [date(2024, 6, 3), date(2024, 6, 5), date(2024, 6, 9)],
)
def test_previous_week_is_monday_to_sunday_before_this_week(today):
    assert previous_week_range(today) == (date(2024, 5, 27), date(2024, 6, 2))
