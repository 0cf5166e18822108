from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal

Tier = Literal["free", "analytics", "premium"]
PriceLevel = Literal["budget", "mid", "premium"]
SortBy = Literal["relevance", "rating", "distance"]


class GarageRankingIn(BaseModel):
    garage_id: str
    garage_name: str
    subscription_tier: Tier = "free"
    is_featured: bool = False

    average_rating: float = Field(0.0, ge=0, le=5)
    total_reviews: int = Field(0, ge=0)

    response_time_hours: float = Field(24.0, ge=0)
    completion_rate: float = Field(0.5, ge=0, le=1)
    cancellation_rate: float = Field(0.0, ge=0, le=1)

    distance_km: float | None = Field(default=None, ge=0)

    is_available: bool = True
    next_available_slot: datetime | None = None

    price_level: PriceLevel | None = None

    last_active_at: datetime | None = None
    total_bookings_completed: int = Field(0, ge=0)


class ScoreBreakdownOut(BaseModel):
    tier_score: float
    rating_score: float
    trust_score: float
    response_score: float
    completion_score: float
    distance_score: float
    availability_score: float
    activity_score: float


class BadgeOut(BaseModel):
    key: str
    label: str
    icon: str


class GarageRankingOut(BaseModel):
    garage_id: str
    garage_name: str
    score: float
    breakdown: ScoreBreakdownOut
    badges: list[BadgeOut]
    is_featured: bool


class GarageCandidateIn(BaseModel):
    garage_id: str
    garage_name: str
    subscription_tier: Tier = "free"
    featured_placement: bool = False

    average_rating: float = Field(0.0, ge=0, le=5)
    total_reviews: int = Field(0, ge=0)

    total_bookings: int = Field(0, ge=0)
    completed_bookings: int = Field(0, ge=0)
    cancelled_bookings: int = Field(0, ge=0)
    avg_response_hours: float | None = Field(default=None, ge=0)

    lat: float | None = None
    lon: float | None = None

    is_available: bool = True
    next_available_slot: datetime | None = None
    last_active_at: datetime | None = None
    price_level: PriceLevel | None = None


class GarageSearchRequest(BaseModel):
    garages: list[GarageCandidateIn]
    lat: float | None = None
    lng: float | None = None
    max_distance_km: float | None = Field(default=None, gt=0)
    min_rating: float = Field(0.0, ge=0, le=5)
    sort_by: SortBy = "relevance"
    page: int = Field(1, ge=1)
    limit: int | None = Field(default=None, ge=1)


class GarageSearchHit(BaseModel):
    garage_id: str
    garage_name: str
    average_rating: float
    total_reviews: int
    response_time: str
    badges: list[str]
    is_featured: bool
    is_premium: bool
    distance_km: float | None = None
    score: float


class GarageSearchOut(BaseModel):
    garages: list[GarageSearchHit]
    total: int
    page: int
    total_pages: int


class CancellationQuoteRequest(BaseModel):
    pickup_time: str | datetime
    payment_amount: int = Field(0, ge=0)  # cents
    status: str
    stage: str | None = None
    is_admin: bool = False
    force_full_refund: bool = False


class RefundOut(BaseModel):
    eligible: bool
    can_cancel: bool
    percentage: int
    amount: int
    reason: str
    hours_until_pickup: int
    free_until: datetime | None = None


class CancellationQuoteOut(BaseModel):
    allowed: bool
    refund: RefundOut
    refund_amount: int
    refund_percentage: int
    refund_amount_formatted: str
    message: str
    policy_message: str
    admin_override: bool
