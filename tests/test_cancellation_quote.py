from datetime import timedelta

from drivlet.service_layer.cancellation import BookingSnapshot, quote_cancellation


def test_customer_quote_for_late_cancellation(now):
    booking = BookingSnapshot(pickup_time=now + timedelta(hours=5), payment_amount=10000, status="confirmed")
    q = quote_cancellation(booking, now=now)

    assert q.allowed is True
    assert q.refund_amount == 5000
    assert q.refund_percentage == 50
    assert q.refund_amount_formatted == "$50.00"
    assert q.message == "Booking cancelled. A refund of $50.00 (50%) will be processed."
    assert "Late cancellation fee" in q.policy_message
    assert q.admin_override is False


def test_customer_blocked_once_service_started(now):
    booking = BookingSnapshot(
        pickup_time=now + timedelta(days=2),
        payment_amount=10000,
        status="confirmed",
        stage="service_in_progress",
    )
    q = quote_cancellation(booking, now=now)

    assert q.allowed is False
    assert q.refund_amount == 0
    assert q.message == q.refund.reason


def test_admin_can_cancel_past_the_gate(now):
    booking = BookingSnapshot(pickup_time=now + timedelta(days=2), payment_amount=10000, status="in_progress")
    q = quote_cancellation(booking, is_admin=True, now=now)

    assert q.allowed is True
    assert q.admin_override is True
    assert q.refund_amount == 0
    assert "No refund applicable" in q.message


def test_admin_forced_full_refund(now):
    booking = BookingSnapshot(pickup_time=now - timedelta(hours=1), payment_amount=7450, status="confirmed")
    q = quote_cancellation(booking, is_admin=True, force_full_refund=True, now=now)

    assert q.refund.percentage == 0
    assert q.refund_amount == 7450
    assert q.refund_percentage == 100
    assert q.refund_amount_formatted == "$74.50"
    assert q.admin_override is True


def test_force_full_refund_ignored_for_customers(now):
    booking = BookingSnapshot(pickup_time=now + timedelta(hours=2), payment_amount=7450, status="pending")
    q = quote_cancellation(booking, force_full_refund=True, now=now)
    assert q.refund_amount == 3725
    assert q.admin_override is False


def test_already_cancelled_is_final_even_for_admins(now):
    booking = BookingSnapshot(pickup_time=now + timedelta(days=3), payment_amount=10000, status="cancelled")
    q = quote_cancellation(booking, is_admin=True, force_full_refund=True, now=now)

    assert q.allowed is False
    assert q.refund_amount == 0
    assert "already been cancelled" in q.message


def test_free_cancellation_message(now):
    booking = BookingSnapshot(pickup_time=now + timedelta(hours=30), payment_amount=12000, status="pending")
    q = quote_cancellation(booking, now=now)

    assert q.refund_percentage == 100
    assert q.message == "Booking cancelled. A refund of $120.00 (100%) will be processed."
    assert q.policy_message == "Free cancellation available for the next 6 hours."


def test_policy_message_agrees_with_refund_inside_the_last_hour(now):
    booking = BookingSnapshot(pickup_time=now + timedelta(minutes=30), payment_amount=10000, status="pending")
    q = quote_cancellation(booking, now=now)

    assert q.refund.hours_until_pickup == 0
    assert q.refund_percentage == 50
    assert q.refund_amount == 5000
    assert "Late cancellation fee (50%)" in q.policy_message


def test_policy_message_after_pickup_time(now):
    booking = BookingSnapshot(pickup_time=now - timedelta(minutes=30), payment_amount=10000, status="pending")
    q = quote_cancellation(booking, now=now)

    assert q.refund_percentage == 0
    assert q.policy_message == "The pickup window has passed. No refund available."
