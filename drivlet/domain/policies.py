# drivlet/domain/policies.py
"""
Cancellation / refund policy.

  - >= 24h before pickup: free cancellation, 100% refund
  - < 24h before pickup:  late cancellation, 50% refund
  - pickup time passed:   no refund, but cancelling is still allowed
  - service started / finished / already cancelled: cannot cancel
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Any

from .parsing import parse_pickup_time
from .types import BookingStage, BookingStatus, RefundCalculation

FREE_CANCELLATION_HOURS = 24
FULL_REFUND_PERCENT = 100
LATE_CANCELLATION_PERCENT = 50

BLOCKED_STATUS_REASONS: dict[str, str] = {
    BookingStatus.in_progress.value: (
        "Cannot cancel a booking that is in progress. The driver has already picked up your vehicle."
    ),
    BookingStatus.completed.value: "Cannot cancel a booking that has been completed.",
    BookingStatus.cancelled.value: "This booking has already been cancelled.",
}

# Stage can lag status, so it is checked on its own.
BLOCKED_STAGES = frozenset(
    {
        BookingStage.car_picked_up.value,
        BookingStage.at_garage.value,
        BookingStage.service_in_progress.value,
        BookingStage.driver_returning.value,
        BookingStage.delivered.value,
    }
)
SERVICE_STARTED_REASON = "Cannot cancel a booking once service has started."

FREE_CANCELLATION_REASON = "Free cancellation - more than 24 hours before scheduled pickup."
LATE_CANCELLATION_REASON = (
    "Late cancellation - less than 24 hours before pickup. A 50% cancellation fee applies."
)
PICKUP_PASSED_REASON = "No refund available - scheduled pickup time has passed."


def _value(x: Any) -> str | None:
    if x is None:
        return None
    return str(getattr(x, "value", x))


def cancellation_gate(status: Any, stage: Any = None) -> tuple[bool, str | None]:
    """
    Returns (blocked, reason)
    """
    s = _value(status)
    if s in BLOCKED_STATUS_REASONS:
        return True, BLOCKED_STATUS_REASONS[s]

    st = _value(stage)
    if st and st in BLOCKED_STAGES:
        return True, SERVICE_STARTED_REASON

    return False, None


def _blocked(reason: str) -> RefundCalculation:
    return RefundCalculation(
        eligible=False,
        can_cancel=False,
        percentage=0,
        amount=0,
        reason=reason,
        hours_until_pickup=0,
        free_until=None,
    )


def hours_before_pickup(pickup_time: str | datetime, *, now: datetime | None = None) -> float:
    """Unrounded hours from `now` until pickup; negative once it has passed."""
    if now is None:
        now = datetime.now().astimezone()
    pickup = parse_pickup_time(pickup_time, now=now)
    if (pickup.tzinfo is None) != (now.tzinfo is None):
        now = now.replace(tzinfo=pickup.tzinfo)
    return (pickup - now).total_seconds() / 3600


def calculate_refund(
    pickup_time: str | datetime,
    payment_amount: int,
    current_status: BookingStatus | str,
    current_stage: BookingStage | str | None = None,
    *,
    now: datetime | None = None,
) -> RefundCalculation:
    """
    Refund eligibility and amount for cancelling a booking now.

    `payment_amount` is in minor currency units (cents). Never raises:
    callers branch on `can_cancel` / `eligible` rather than exceptions.
    """
    blocked, reason = cancellation_gate(current_status, current_stage)
    if blocked:
        return _blocked(reason or SERVICE_STARTED_REASON)

    if now is None:
        now = datetime.now().astimezone()
    pickup = parse_pickup_time(pickup_time, now=now)
    if (pickup.tzinfo is None) != (now.tzinfo is None):
        now = now.replace(tzinfo=pickup.tzinfo)

    hours_until_pickup = (pickup - now).total_seconds() / 3600
    free_until = pickup - timedelta(hours=FREE_CANCELLATION_HOURS)

    if hours_until_pickup >= FREE_CANCELLATION_HOURS:
        return RefundCalculation(
            eligible=True,
            can_cancel=True,
            percentage=FULL_REFUND_PERCENT,
            amount=payment_amount,
            reason=FREE_CANCELLATION_REASON,
            hours_until_pickup=math.floor(hours_until_pickup),
            free_until=free_until,
        )

    if hours_until_pickup > 0:
        return RefundCalculation(
            eligible=True,
            can_cancel=True,
            percentage=LATE_CANCELLATION_PERCENT,
            amount=math.floor(payment_amount * LATE_CANCELLATION_PERCENT / 100),
            reason=LATE_CANCELLATION_REASON,
            hours_until_pickup=max(0, math.floor(hours_until_pickup)),
            free_until=free_until,
        )

    # eligible=True here means "a determination was reached", not "money is owed"
    return RefundCalculation(
        eligible=True,
        can_cancel=True,
        percentage=0,
        amount=0,
        reason=PICKUP_PASSED_REASON,
        hours_until_pickup=0,
        free_until=None,
    )
