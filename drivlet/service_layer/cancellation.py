# drivlet/service_layer/cancellation.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from ..config import settings
from ..domain.formatting import cancellation_policy_message, format_refund_amount
from ..domain.policies import FULL_REFUND_PERCENT, calculate_refund, hours_before_pickup
from ..domain.types import BookingStage, BookingStatus, RefundCalculation
from .clock import booking_now

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingSnapshot:
    pickup_time: str | datetime
    payment_amount: int  # cents
    status: BookingStatus | str
    stage: BookingStage | str | None = None


@dataclass(frozen=True)
class CancellationQuote:
    allowed: bool
    refund: RefundCalculation
    refund_amount: int
    refund_percentage: int
    refund_amount_formatted: str
    message: str
    policy_message: str
    admin_override: bool = False


def _is_cancelled(status: BookingStatus | str) -> bool:
    return str(getattr(status, "value", status)) == BookingStatus.cancelled.value


def cancellation_message(amount: int, percentage: int, *, currency: str) -> str:
    if amount > 0:
        return (
            f"Booking cancelled. A refund of {format_refund_amount(amount, currency)} "
            f"({percentage}%) will be processed."
        )
    return "Booking cancelled. No refund applicable based on cancellation policy."


def quote_cancellation(
    booking: BookingSnapshot,
    *,
    is_admin: bool = False,
    force_full_refund: bool = False,
    now: datetime | None = None,
) -> CancellationQuote:
    """
    What would happen if this booking were cancelled now.

    Admins may cancel bookings the policy blocks and may force a full refund.
    A booking that is already cancelled can't be cancelled by anyone.
    """
    currency = settings.CURRENCY
    now = now or booking_now()
    refund = calculate_refund(
        booking.pickup_time,
        booking.payment_amount,
        booking.status,
        booking.stage,
        now=now,
    )

    if _is_cancelled(booking.status):
        return CancellationQuote(
            allowed=False,
            refund=refund,
            refund_amount=0,
            refund_percentage=0,
            refund_amount_formatted=format_refund_amount(0, currency),
            message=refund.reason,
            policy_message=refund.reason,
        )

    amount = refund.amount
    percentage = refund.percentage
    override = False

    if is_admin and force_full_refund and booking.payment_amount:
        amount = booking.payment_amount
        percentage = FULL_REFUND_PERCENT
        override = True
        log.info("admin forced full refund of %s (policy: %s%%)", amount, refund.percentage)

    allowed = refund.can_cancel or is_admin
    if not refund.can_cancel and is_admin:
        override = True
        log.info("admin cancellation past policy gate: %s", refund.reason)

    if allowed:
        message = cancellation_message(amount, percentage, currency=currency)
    else:
        message = refund.reason

    if refund.can_cancel:
        # same buckets as the refund itself, so use unrounded hours
        policy_message = cancellation_policy_message(hours_before_pickup(booking.pickup_time, now=now))
    else:
        policy_message = refund.reason

    return CancellationQuote(
        allowed=allowed,
        refund=refund,
        refund_amount=amount,
        refund_percentage=percentage,
        refund_amount_formatted=format_refund_amount(amount, currency),
        message=message,
        policy_message=policy_message,
        admin_override=override,
    )
