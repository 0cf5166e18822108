# drivlet/domain/formatting.py
from __future__ import annotations

import math

from .policies import FREE_CANCELLATION_HOURS, LATE_CANCELLATION_PERCENT

CURRENCY_SYMBOLS: dict[str, str] = {
    "AUD": "$",
    "NZD": "$",
    "USD": "$",
    "CAD": "$",
    "GBP": "£",
    "EUR": "€",
}

# Above this a free cancellation is comfortably available
PLENTY_OF_TIME_HOURS = FREE_CANCELLATION_HOURS * 2


def format_refund_amount(amount_cents: int, currency: str = "AUD") -> str:
    """1234550 -> '$12,345.50'"""
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper() + " ")
    sign = "-" if amount_cents < 0 else ""
    return f"{sign}{symbol}{abs(amount_cents) / 100:,.2f}"


def cancellation_policy_message(hours_until_pickup: float) -> str:
    if hours_until_pickup >= PLENTY_OF_TIME_HOURS:
        return "You have plenty of time for a free cancellation."
    if hours_until_pickup >= FREE_CANCELLATION_HOURS:
        remaining = math.floor(hours_until_pickup - FREE_CANCELLATION_HOURS)
        return f"Free cancellation available for the next {remaining} hours."
    if hours_until_pickup > 0:
        return (
            f"Late cancellation fee ({LATE_CANCELLATION_PERCENT}%) applies. "
            "Cancel within this window to receive a partial refund."
        )
    return "The pickup window has passed. No refund available."


def format_response_time(hours: float) -> str:
    if hours < 1:
        return "< 1 hour"
    if hours < 2:
        return "~1 hour"
    if hours < 4:
        return "2-4 hours"
    if hours < 12:
        return "4-12 hours"
    if hours < 24:
        return "< 1 day"
    return "> 1 day"
