import logging
from datetime import datetime, timedelta, timezone

import pytest

from drivlet.domain.parsing import days_ahead, parse_pickup_time, parse_time_of_day


def test_iso_string_with_offset(now):
    dt = parse_pickup_time("2026-10-21T08:30:00+11:00", now=now)
    assert dt == datetime(2026, 10, 21, 8, 30, tzinfo=now.tzinfo)


def test_iso_string_with_z_suffix(now):
    dt = parse_pickup_time("2026-10-20T22:00:00Z", now=now)
    assert dt == datetime(2026, 10, 20, 22, 0, tzinfo=timezone.utc)


def test_naive_iso_gets_the_booking_zone(now):
    dt = parse_pickup_time("2026-10-21 10:00", now=now)
    assert dt.tzinfo == now.tzinfo
    assert (dt.hour, dt.minute) == (10, 0)


def test_datetime_passes_through(now):
    pickup = now + timedelta(hours=5)
    assert parse_pickup_time(pickup, now=now) is pickup


def test_today_phrase(now):
    dt = parse_pickup_time("Today, 2:30 PM - 3:30 PM", now=now)
    assert dt == now.replace(hour=14, minute=30)


def test_tomorrow_phrase(now):
    dt = parse_pickup_time("Tomorrow, 9:00 AM - 10:00 AM", now=now)
    assert dt == datetime(2026, 10, 20, 9, 0, tzinfo=now.tzinfo)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("12:00 AM", (0, 0)),
        ("12:15 PM", (12, 15)),
        ("1:05 pm", (13, 5)),
        ("11:59AM", (11, 59)),
        ("no time here", None),
    ],
)
def test_time_of_day(text, expected):
    assert parse_time_of_day(text) == expected


def test_weekday_phrases_resolve_to_next_occurrence(now):
    # now is a Monday
    assert days_ahead("Wednesday, 10:00 AM", now) == 2
    assert days_ahead("Sunday", now) == 6
    # same weekday is next week, never today
    assert days_ahead("Monday, 9:00 AM", now) == 7
    assert days_ahead("whenever", now) is None


def test_same_weekday_rolls_a_week_forward(now):
    dt = parse_pickup_time("Monday, 8:00 AM - 9:00 AM", now=now)
    assert dt == datetime(2026, 10, 26, 8, 0, tzinfo=now.tzinfo)


def test_missing_parts_fall_back_to_today_nine_am(now, caplog):
    with caplog.at_level(logging.WARNING, logger="drivlet.domain.parsing"):
        dt = parse_pickup_time("sometime soon", now=now)

    assert dt == now.replace(hour=9, minute=0)
    assert "no time of day" in caplog.text
    assert "no day reference" in caplog.text


def test_weekday_without_time_defaults_to_nine(now):
    dt = parse_pickup_time("Thursday", now=now)
    assert dt == datetime(2026, 10, 22, 9, 0, tzinfo=now.tzinfo)


def test_never_raises_on_garbage(now):
    for junk in (None, "", "   ", "99:99 PM", "2026-13-45"):
        assert isinstance(parse_pickup_time(junk, now=now), datetime)
