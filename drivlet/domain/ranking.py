# drivlet/domain/ranking.py
"""
Garage ranking for search results.

Each garage gets eight 0-100 sub-scores (tier, rating, trust, response,
completion, distance, availability, activity). The weighted sum is boosted
by subscription tier, rounded to 2dp and capped at 100.

Bands are piecewise-linear: value = start + (x - lower) * slope.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from .types import (
    Badge,
    GarageRankingInput,
    GarageRankingResult,
    ScoreBreakdown,
    SubscriptionTier,
)

SCORE_MIN = 0.0
SCORE_MAX = 100.0

# Must sum to 1.0
WEIGHTS: dict[str, float] = {
    "tier": 0.15,
    "rating": 0.25,
    "trust": 0.15,
    "response": 0.12,
    "completion": 0.10,
    "distance": 0.13,
    "availability": 0.05,
    "activity": 0.05,
}

TIER_SCORES: dict[SubscriptionTier, float] = {
    SubscriptionTier.free: 60.0,
    SubscriptionTier.analytics: 80.0,
    SubscriptionTier.premium: 100.0,
}

# Multiplicative boost applied to the weighted sum
TIER_RANKING_BOOST: dict[SubscriptionTier, float] = {
    SubscriptionTier.free: 0.0,
    SubscriptionTier.analytics: 0.10,
    SubscriptionTier.premium: 0.25,
}


@dataclass(frozen=True)
class Band:
    lower: float
    upper: float
    start: float
    slope: float

    def at(self, x: float) -> float:
        return self.start + (x - self.lower) * self.slope


# --- rating (0-5 stars), upper bound exclusive ---
NO_RATING_SCORE = 50.0
RATING_BANDS: tuple[Band, ...] = (
    Band(0.0, 3.0, 0.0, 13.33),  # poor
    Band(3.0, 3.5, 40.0, 40.0),  # okay
    Band(3.5, 4.0, 60.0, 30.0),  # good
    Band(4.0, 4.5, 75.0, 30.0),  # great
    Band(4.5, math.inf, 90.0, 20.0),  # excellent
)

# --- review count, upper bound exclusive ---
NO_REVIEWS_SCORE = 30.0
TRUST_BANDS: tuple[Band, ...] = (
    Band(0, 5, 40.0, 20.0 / 5),
    Band(5, 20, 60.0, 20.0 / 15),
    Band(20, 50, 80.0, 10.0 / 30),
    Band(50, math.inf, 90.0, 10.0 / 100),
)

# --- average hours to respond, upper bound inclusive ---
RESPONSE_INSTANT_HOURS = 1.0
RESPONSE_FLOOR = 20.0
RESPONSE_BANDS: tuple[Band, ...] = (
    Band(1, 4, 100.0, -20.0 / 3),
    Band(4, 12, 80.0, -20.0 / 8),
    Band(12, 24, 60.0, -20.0 / 12),
    Band(24, math.inf, 40.0, -20.0 / 24),
)

# --- distance from customer, upper bound inclusive ---
NO_DISTANCE_SCORE = 50.0
DISTANCE_NEARBY_KM = 5.0
DISTANCE_FLOOR = 20.0
DISTANCE_BANDS: tuple[Band, ...] = (
    Band(5, 10, 100.0, -20.0 / 5),
    Band(10, 20, 80.0, -20.0 / 10),
    Band(20, 30, 60.0, -20.0 / 10),
    Band(30, math.inf, 40.0, -20.0 / 20),
)

# --- completion / cancellation ---
CANCELLATION_PENALTY_FACTOR = 3.0
CANCELLATION_PENALTY_CAP = 30.0

# --- availability: (max hours until next slot, score) ---
UNAVAILABLE_SCORE = 20.0
AVAILABLE_NO_SLOT_SCORE = 80.0
AVAILABILITY_STEPS: tuple[tuple[float, float], ...] = (
    (24, 100.0),
    (48, 90.0),
    (72, 70.0),
    (168, 50.0),
)
AVAILABILITY_LATER_SCORE = 30.0

# --- activity ---
ACTIVITY_BASE = 50.0
RECENCY_STEPS: tuple[tuple[float, float], ...] = (  # (max days since active, bonus)
    (1, 30.0),
    (7, 20.0),
    (30, 10.0),
)
RECENCY_STALE_PENALTY = -10.0
BOOKINGS_STEPS: tuple[tuple[int, float], ...] = (  # (min completed bookings, bonus)
    (100, 20.0),
    (50, 15.0),
    (20, 10.0),
    (5, 5.0),
)

# --- badges ---
TOP_RATED_MIN_RATING = 4.5
TOP_RATED_MIN_REVIEWS = 10
QUICK_RESPONDER_MAX_HOURS = 2.0
TRUSTED_MIN_REVIEWS = 50
RELIABLE_MIN_COMPLETION = 0.95
RELIABLE_MIN_BOOKINGS = 20
NEW_MAX_REVIEWS = 10
NEW_MAX_BOOKINGS = 20

BADGE_INFO: dict[Badge, dict[str, str]] = {
    Badge.premium: {"label": "Premium Partner", "icon": "crown"},
    Badge.top_rated: {"label": "Top Rated", "icon": "star"},
    Badge.quick_responder: {"label": "Quick Responder", "icon": "zap"},
    Badge.trusted: {"label": "Highly Trusted", "icon": "shield-check"},
    Badge.reliable: {"label": "Reliable", "icon": "check-circle"},
    Badge.new: {"label": "New", "icon": "sparkles"},
}


def clamp(x: float, lo: float = SCORE_MIN, hi: float = SCORE_MAX) -> float:
    return max(lo, min(hi, x))


def round_half_up(x: float, ndigits: int = 2) -> float:
    """Exact halves round up (0.125 -> 0.13), unlike round()."""
    factor = 10**ndigits
    return math.floor(x * factor + 0.5) / factor


def _interpolate(x: float, bands: tuple[Band, ...], *, inclusive_upper: bool) -> float:
    for band in bands:
        inside = x <= band.upper if inclusive_upper else x < band.upper
        if inside:
            return band.at(x)
    return bands[-1].at(x)


def _now(now: datetime | None, ref: datetime) -> datetime:
    if now is None:
        now = datetime.now(ref.tzinfo) if ref.tzinfo else datetime.now()
    if (now.tzinfo is None) != (ref.tzinfo is None):
        now = now.replace(tzinfo=ref.tzinfo)
    return now


# ----- sub-scores -----

def tier_score(tier: SubscriptionTier) -> float:
    return TIER_SCORES[SubscriptionTier(tier)]


def rating_score(rating: float) -> float:
    if rating == 0:
        return NO_RATING_SCORE
    return clamp(_interpolate(rating, RATING_BANDS, inclusive_upper=False))


def trust_score(total_reviews: int) -> float:
    # no reviews isn't proof of poor quality
    if total_reviews <= 0:
        return NO_REVIEWS_SCORE
    return clamp(_interpolate(total_reviews, TRUST_BANDS, inclusive_upper=False))


def response_score(response_time_hours: float) -> float:
    if response_time_hours <= RESPONSE_INSTANT_HOURS:
        return SCORE_MAX
    raw = _interpolate(response_time_hours, RESPONSE_BANDS, inclusive_upper=True)
    return clamp(raw, lo=RESPONSE_FLOOR)


def completion_score(completion_rate: float, cancellation_rate: float) -> float:
    completion = completion_rate * 100
    penalty = min(CANCELLATION_PENALTY_CAP, cancellation_rate * 100 * CANCELLATION_PENALTY_FACTOR)
    return clamp(completion - penalty)


def distance_score(distance_km: float | None) -> float:
    if distance_km is None:
        return NO_DISTANCE_SCORE
    if distance_km <= DISTANCE_NEARBY_KM:
        return SCORE_MAX
    raw = _interpolate(distance_km, DISTANCE_BANDS, inclusive_upper=True)
    return clamp(raw, lo=DISTANCE_FLOOR)


def availability_score(
    is_available: bool,
    next_slot: datetime | None = None,
    *,
    now: datetime | None = None,
) -> float:
    if not is_available:
        return UNAVAILABLE_SCORE
    if next_slot is None:
        return AVAILABLE_NO_SLOT_SCORE

    now = _now(now, next_slot)
    hours_until_slot = (next_slot - now).total_seconds() / 3600
    for max_hours, score in AVAILABILITY_STEPS:
        if hours_until_slot <= max_hours:
            return score
    return AVAILABILITY_LATER_SCORE


def activity_score(
    last_active_at: datetime | None,
    total_bookings: int | None,
    *,
    now: datetime | None = None,
) -> float:
    score = ACTIVITY_BASE

    if last_active_at is not None:
        now = _now(now, last_active_at)
        days_since_active = (now - last_active_at).total_seconds() / 86400
        bonus = RECENCY_STALE_PENALTY
        for max_days, step_bonus in RECENCY_STEPS:
            if days_since_active <= max_days:
                bonus = step_bonus
                break
        score += bonus

    if total_bookings:
        for min_bookings, step_bonus in BOOKINGS_STEPS:
            if total_bookings >= min_bookings:
                score += step_bonus
                break

    return clamp(score)


# ----- composite -----

def determine_badges(g: GarageRankingInput) -> tuple[Badge, ...]:
    """Badges are independent of the score and may stack."""
    badges: list[Badge] = []

    if g.subscription_tier == SubscriptionTier.premium:
        badges.append(Badge.premium)
    if g.average_rating >= TOP_RATED_MIN_RATING and g.total_reviews >= TOP_RATED_MIN_REVIEWS:
        badges.append(Badge.top_rated)
    if g.response_time_hours <= QUICK_RESPONDER_MAX_HOURS:
        badges.append(Badge.quick_responder)
    if g.total_reviews >= TRUSTED_MIN_REVIEWS:
        badges.append(Badge.trusted)
    if g.completion_rate >= RELIABLE_MIN_COMPLETION and g.total_bookings_completed >= RELIABLE_MIN_BOOKINGS:
        badges.append(Badge.reliable)
    if g.total_reviews < NEW_MAX_REVIEWS and g.total_bookings_completed < NEW_MAX_BOOKINGS:
        badges.append(Badge.new)

    return tuple(badges)


def score_breakdown(g: GarageRankingInput, *, now: datetime | None = None) -> ScoreBreakdown:
    return ScoreBreakdown(
        tier_score=tier_score(g.subscription_tier),
        rating_score=rating_score(g.average_rating),
        trust_score=trust_score(g.total_reviews),
        response_score=response_score(g.response_time_hours),
        completion_score=completion_score(g.completion_rate, g.cancellation_rate),
        distance_score=distance_score(g.distance_km),
        availability_score=availability_score(g.is_available, g.next_available_slot, now=now),
        activity_score=activity_score(g.last_active_at, g.total_bookings_completed, now=now),
    )


def weighted_sum(b: ScoreBreakdown) -> float:
    return (
        b.tier_score * WEIGHTS["tier"]
        + b.rating_score * WEIGHTS["rating"]
        + b.trust_score * WEIGHTS["trust"]
        + b.response_score * WEIGHTS["response"]
        + b.completion_score * WEIGHTS["completion"]
        + b.distance_score * WEIGHTS["distance"]
        + b.availability_score * WEIGHTS["availability"]
        + b.activity_score * WEIGHTS["activity"]
    )


def calculate_garage_score(g: GarageRankingInput, *, now: datetime | None = None) -> GarageRankingResult:
    tier = SubscriptionTier(g.subscription_tier)
    breakdown = score_breakdown(g, now=now)

    score = weighted_sum(breakdown) * (1 + TIER_RANKING_BOOST[tier])
    score = clamp(round_half_up(score))

    return GarageRankingResult(
        garage_id=g.garage_id,
        garage_name=g.garage_name,
        score=score,
        breakdown=breakdown,
        badges=determine_badges(g),
        is_featured=tier == SubscriptionTier.premium or g.is_featured is True,
    )


def rank_garages(garages: Iterable[GarageRankingInput], *, now: datetime | None = None) -> list[GarageRankingResult]:
    """
    Featured garages first, then score descending.
    Equal keys keep input order (sorted() is stable).
    """
    if now is None:
        now = datetime.now().astimezone()
    results = [calculate_garage_score(g, now=now) for g in garages]
    return sorted(results, key=lambda r: (not r.is_featured, -r.score))
