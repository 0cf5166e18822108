# drivlet/service_layer/search.py
"""
Garage search: turn raw per-garage stats into ranking inputs, rank them,
then filter / re-sort / paginate for a results page.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Literal

from ..config import settings
from ..domain.geo import haversine_km, valid_coordinates
from ..domain.ranking import rank_garages
from ..domain.types import GarageRankingInput, GarageRankingResult, PriceLevel, SubscriptionTier
from .clock import booking_now

log = logging.getLogger(__name__)

SortBy = Literal["relevance", "rating", "distance"]

# Defaults when a garage has no booking history yet
UNKNOWN_RESPONSE_HOURS = 24.0
UNKNOWN_COMPLETION_RATE = 0.5
UNKNOWN_CANCELLATION_RATE = 0.0

# Sort key for garages without a distance when sorting by distance
FAR_AWAY_KM = 999.0


class InvalidSearchError(ValueError):
    pass


@dataclass(frozen=True)
class GarageCandidate:
    garage_id: str
    garage_name: str
    subscription_tier: SubscriptionTier = SubscriptionTier.free
    featured_placement: bool = False
    average_rating: float = 0.0
    total_reviews: int = 0
    total_bookings: int = 0
    completed_bookings: int = 0
    cancelled_bookings: int = 0
    avg_response_hours: float | None = None
    lat: float | None = None
    lon: float | None = None
    is_available: bool = True
    next_available_slot: datetime | None = None
    last_active_at: datetime | None = None
    price_level: PriceLevel | None = None


@dataclass(frozen=True)
class SearchHit:
    result: GarageRankingResult
    candidate: GarageCandidate
    distance_km: float | None
    response_time_hours: float


@dataclass(frozen=True)
class SearchPage:
    hits: list[SearchHit]
    total: int
    page: int
    total_pages: int


def to_ranking_input(c: GarageCandidate, origin: tuple[float, float] | None = None) -> GarageRankingInput:
    distance_km: float | None = None
    if origin is not None and c.lat is not None and c.lon is not None:
        distance_km = haversine_km(origin[0], origin[1], c.lat, c.lon)

    if c.avg_response_hours is not None and c.avg_response_hours > 0:
        response_hours = c.avg_response_hours
    else:
        response_hours = UNKNOWN_RESPONSE_HOURS

    if c.total_bookings > 0:
        completion_rate = c.completed_bookings / c.total_bookings
        cancellation_rate = c.cancelled_bookings / c.total_bookings
    else:
        completion_rate = UNKNOWN_COMPLETION_RATE
        cancellation_rate = UNKNOWN_CANCELLATION_RATE

    return GarageRankingInput(
        garage_id=c.garage_id,
        garage_name=c.garage_name,
        subscription_tier=SubscriptionTier(c.subscription_tier),
        is_featured=c.featured_placement,
        average_rating=c.average_rating,
        total_reviews=c.total_reviews,
        response_time_hours=response_hours,
        completion_rate=completion_rate,
        cancellation_rate=cancellation_rate,
        distance_km=distance_km,
        is_available=c.is_available,
        next_available_slot=c.next_available_slot,
        price_level=c.price_level,
        last_active_at=c.last_active_at,
        total_bookings_completed=c.completed_bookings,
    )


def _distance_key(ri: GarageRankingInput) -> float:
    return ri.distance_km if ri.distance_km is not None else FAR_AWAY_KM


def search_garages(
    candidates: Iterable[GarageCandidate],
    *,
    origin: tuple[float, float] | None = None,
    max_distance_km: float | None = None,
    min_rating: float = 0.0,
    sort_by: SortBy = "relevance",
    page: int = 1,
    limit: int | None = None,
    now: datetime | None = None,
) -> SearchPage:
    if origin is not None and not valid_coordinates(*origin):
        raise InvalidSearchError(
            "Invalid coordinates. Latitude must be -90 to 90, longitude must be -180 to 180."
        )

    page = max(1, page)
    if limit is None:
        limit = settings.SEARCH_DEFAULT_LIMIT
    limit = max(1, min(limit, settings.SEARCH_MAX_LIMIT))
    min_rating = max(0.0, min(5.0, min_rating))
    if max_distance_km is None:
        max_distance_km = settings.SEARCH_DEFAULT_MAX_DISTANCE_KM
    max_distance_km = max(1.0, max_distance_km)

    by_id: dict[str, tuple[GarageCandidate, GarageRankingInput]] = {}
    inputs: list[GarageRankingInput] = []
    for c in candidates:
        ri = to_ranking_input(c, origin)
        if origin is not None:
            # geo search only returns garages with coordinates inside the radius
            if ri.distance_km is None or ri.distance_km > max_distance_km:
                continue
        if min_rating > 0 and ri.average_rating < min_rating:
            continue
        if c.garage_id in by_id:
            raise InvalidSearchError(f"Duplicate garage_id in search candidates: {c.garage_id}")
        by_id[c.garage_id] = (c, ri)
        inputs.append(ri)

    ranked = rank_garages(inputs, now=now or booking_now())

    if sort_by == "rating":
        ranked.sort(key=lambda r: -by_id[r.garage_id][1].average_rating)
    elif sort_by == "distance" and origin is not None:
        ranked.sort(key=lambda r: _distance_key(by_id[r.garage_id][1]))

    total = len(ranked)
    total_pages = math.ceil(total / limit)
    window = ranked[(page - 1) * limit : page * limit]

    log.debug("garage search: %d candidates ranked, page %d/%d", total, page, total_pages)

    hits = [
        SearchHit(
            result=r,
            candidate=by_id[r.garage_id][0],
            distance_km=by_id[r.garage_id][1].distance_km,
            response_time_hours=by_id[r.garage_id][1].response_time_hours,
        )
        for r in window
    ]
    return SearchPage(hits=hits, total=total, page=page, total_pages=total_pages)
