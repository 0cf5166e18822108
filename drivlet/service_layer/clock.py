# drivlet/service_layer/clock.py
from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from ..config import settings


def booking_now() -> datetime:
    """Current time in the zone bookings are made in."""
    return datetime.now(ZoneInfo(settings.BOOKING_TIMEZONE))
