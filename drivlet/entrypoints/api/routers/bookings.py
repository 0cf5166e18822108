# drivlet/entrypoints/api/routers/bookings.py
from __future__ import annotations

from fastapi import APIRouter

from ....schemas import CancellationQuoteOut, CancellationQuoteRequest, RefundOut
from ....service_layer.cancellation import BookingSnapshot, quote_cancellation

router = APIRouter(tags=["bookings"])


@router.post("/bookings/cancellation-quote", response_model=CancellationQuoteOut)
def cancellation_quote(body: CancellationQuoteRequest) -> CancellationQuoteOut:
    q = quote_cancellation(
        BookingSnapshot(
            pickup_time=body.pickup_time,
            payment_amount=body.payment_amount,
            status=body.status,
            stage=body.stage,
        ),
        is_admin=body.is_admin,
        force_full_refund=body.force_full_refund,
    )
    r = q.refund
    return CancellationQuoteOut(
        allowed=q.allowed,
        refund=RefundOut(
            eligible=r.eligible,
            can_cancel=r.can_cancel,
            percentage=r.percentage,
            amount=r.amount,
            reason=r.reason,
            hours_until_pickup=r.hours_until_pickup,
            free_until=r.free_until,
        ),
        refund_amount=q.refund_amount,
        refund_percentage=q.refund_percentage,
        refund_amount_formatted=q.refund_amount_formatted,
        message=q.message,
        policy_message=q.policy_message,
        admin_override=q.admin_override,
    )
