from datetime import datetime, timedelta, timezone

import pytest

from drivlet.domain.types import GarageRankingInput, SubscriptionTier

# Fixed offset so tests don't depend on the host tz database
AEDT = timezone(timedelta(hours=11))


@pytest.fixture
def now() -> datetime:
    """Monday 19 Oct 2026, 12:00 local."""
    return datetime(2026, 10, 19, 12, 0, tzinfo=AEDT)


@pytest.fixture
def make_garage():
    def _make(**overrides) -> GarageRankingInput:
        fields = dict(
            garage_id="g1",
            garage_name="Test Garage",
            subscription_tier=SubscriptionTier.free,
            average_rating=4.0,
            total_reviews=10,
            response_time_hours=3.0,
            completion_rate=0.9,
            cancellation_rate=0.05,
            is_available=True,
            total_bookings_completed=10,
        )
        fields.update(overrides)
        return GarageRankingInput(**fields)

    return _make
