import pytest

from drivlet.domain.formatting import (
    cancellation_policy_message,
    format_refund_amount,
    format_response_time,
)
from drivlet.domain.geo import haversine_km, valid_coordinates


def test_format_refund_amount():
    assert format_refund_amount(123456) == "$1,234.56"
    assert format_refund_amount(5000) == "$50.00"
    assert format_refund_amount(5) == "$0.05"
    assert format_refund_amount(0) == "$0.00"
    assert format_refund_amount(1000, "EUR") == "€10.00"
    assert format_refund_amount(1000, "jpy") == "JPY 10.00"


@pytest.mark.parametrize(
    "hours, fragment",
    [
        (72, "plenty of time"),
        (48, "plenty of time"),
        (30, "next 6 hours"),
        (24, "next 0 hours"),
        (10, "Late cancellation fee (50%)"),
        (0.5, "Late cancellation fee (50%)"),
        (0, "pickup window has passed"),
        (-3, "pickup window has passed"),
    ],
)
def test_cancellation_policy_message(hours, fragment):
    assert fragment in cancellation_policy_message(hours)


@pytest.mark.parametrize(
    "hours, label",
    [
        (0.5, "< 1 hour"),
        (1.5, "~1 hour"),
        (3, "2-4 hours"),
        (6, "4-12 hours"),
        (20, "< 1 day"),
        (24, "> 1 day"),
    ],
)
def test_format_response_time(hours, label):
    assert format_response_time(hours) == label


def test_haversine_known_distances():
    sydney = (-33.8688, 151.2093)
    melbourne = (-37.8136, 144.9631)
    assert haversine_km(*sydney, *sydney) == 0
    assert haversine_km(*sydney, *melbourne) == pytest.approx(714, abs=5)


def test_valid_coordinates():
    assert valid_coordinates(-33.8, 151.2)
    assert valid_coordinates(90, -180)
    assert not valid_coordinates(91, 0)
    assert not valid_coordinates(0, 181)
    assert not valid_coordinates(float("nan"), 0)
