# drivlet/domain/parsing.py
from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from typing import Any

log = logging.getLogger(__name__)

DEFAULT_PICKUP_HOUR = 9
DEFAULT_PICKUP_MINUTE = 0

_TIME_OF_DAY = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)", re.IGNORECASE)

# datetime.weekday() order
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _align_tz(dt: datetime, ref: datetime) -> datetime:
    """Give naive `dt` the tzinfo of `ref` so the two can be compared."""
    if dt.tzinfo is None and ref.tzinfo is not None:
        return dt.replace(tzinfo=ref.tzinfo)
    if dt.tzinfo is not None and ref.tzinfo is None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def parse_iso(value: str) -> datetime | None:
    s = value.strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


def parse_time_of_day(text: str) -> tuple[int, int] | None:
    m = _TIME_OF_DAY.search(text)
    if not m:
        return None

    hours = int(m.group(1))
    minutes = int(m.group(2))
    is_pm = m.group(3).upper() == "PM"
    if is_pm and hours != 12:
        hours += 12
    if not is_pm and hours == 12:
        hours = 0
    if hours > 23 or minutes > 59:
        return None
    return hours, minutes


def days_ahead(text: str, today: datetime) -> int | None:
    """
    Day offset named by a free-text phrase: 'today', 'tomorrow' or a weekday.
    A weekday equal to today's means next week (7), never 0.
    """
    lower = text.lower()
    if "today" in lower:
        return 0
    if "tomorrow" in lower:
        return 1
    for idx, name in enumerate(WEEKDAYS):
        if name in lower:
            delta = idx - today.weekday()
            if delta <= 0:
                delta += 7
            return delta
    return None


def parse_pickup_time(value: Any, *, now: datetime | None = None) -> datetime:
    """
    Best-effort adapter over the booking's pickup-time field.

    Accepts a datetime, an ISO-8601 string, or phrases like
    "Tomorrow, 9:00 AM - 10:00 AM" / "Monday, 2:30 PM". Falls back to
    9:00 AM and to today when the phrase has no usable parts. Never raises.
    """
    if now is None:
        now = datetime.now().astimezone()

    if isinstance(value, datetime):
        return _align_tz(value, now)

    text = "" if value is None else str(value)

    parsed = parse_iso(text)
    if parsed is not None:
        return _align_tz(parsed, now)

    tod = parse_time_of_day(text)
    if tod is None:
        log.warning("pickup time %r has no time of day, assuming %02d:%02d", text, DEFAULT_PICKUP_HOUR, DEFAULT_PICKUP_MINUTE)
        tod = (DEFAULT_PICKUP_HOUR, DEFAULT_PICKUP_MINUTE)

    offset = days_ahead(text, now)
    if offset is None:
        log.warning("pickup time %r has no day reference, assuming today", text)
        offset = 0

    target = now + timedelta(days=offset)
    hours, minutes = tod
    return target.replace(hour=hours, minute=minutes, second=0, microsecond=0)
