# drivlet/domain/types.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class SubscriptionTier(str, Enum):
    free = "free"
    analytics = "analytics"
    premium = "premium"


class PriceLevel(str, Enum):
    budget = "budget"
    mid = "mid"
    premium = "premium"


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    active = "active"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class BookingStage(str, Enum):
    booking_confirmed = "booking_confirmed"
    driver_en_route = "driver_en_route"
    car_picked_up = "car_picked_up"
    at_garage = "at_garage"
    service_in_progress = "service_in_progress"
    driver_returning = "driver_returning"
    delivered = "delivered"
    cancelled = "cancelled"


class Badge(str, Enum):
    premium = "premium"
    top_rated = "top_rated"
    quick_responder = "quick_responder"
    trusted = "trusted"
    reliable = "reliable"
    new = "new"


@dataclass(frozen=True)
class GarageRankingInput:
    garage_id: str
    garage_name: str
    subscription_tier: SubscriptionTier
    average_rating: float  # 0-5, 0 means "no rating yet"
    total_reviews: int
    response_time_hours: float
    completion_rate: float  # 0-1
    cancellation_rate: float  # 0-1
    is_available: bool
    total_bookings_completed: int
    is_featured: bool = False
    distance_km: float | None = None
    next_available_slot: datetime | None = None
    price_level: PriceLevel | None = None
    last_active_at: datetime | None = None


@dataclass(frozen=True)
class ScoreBreakdown:
    tier_score: float
    rating_score: float
    trust_score: float
    response_score: float
    completion_score: float
    distance_score: float
    availability_score: float
    activity_score: float


@dataclass(frozen=True)
class GarageRankingResult:
    garage_id: str
    garage_name: str
    score: float
    breakdown: ScoreBreakdown
    badges: tuple[Badge, ...]
    is_featured: bool


@dataclass(frozen=True)
class RefundCalculation:
    """
    eligible: a refund determination was reached (True even when amount is 0
              because the pickup time has passed).
    can_cancel: cancellation is procedurally allowed at all.
    """

    eligible: bool
    can_cancel: bool
    percentage: int
    amount: int
    reason: str
    hours_until_pickup: int
    free_until: datetime | None

    @property
    def refundable(self) -> bool:
        return self.amount > 0
