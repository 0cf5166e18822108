# drivlet/entrypoints/api/routers/garages.py
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from ....domain.formatting import format_response_time
from ....domain.ranking import BADGE_INFO, rank_garages
from ....domain.types import GarageRankingInput, GarageRankingResult, PriceLevel, SubscriptionTier
from ....schemas import (
    BadgeOut,
    GarageCandidateIn,
    GarageRankingIn,
    GarageRankingOut,
    GarageSearchHit,
    GarageSearchOut,
    GarageSearchRequest,
    ScoreBreakdownOut,
)
from ....service_layer.clock import booking_now
from ....service_layer.search import GarageCandidate, InvalidSearchError, search_garages

router = APIRouter(tags=["garages"])


def _ranking_input(body: GarageRankingIn) -> GarageRankingInput:
    data = body.model_dump()
    data["subscription_tier"] = SubscriptionTier(body.subscription_tier)
    if body.price_level is not None:
        data["price_level"] = PriceLevel(body.price_level)
    return GarageRankingInput(**data)


def _candidate(body: GarageCandidateIn) -> GarageCandidate:
    data = body.model_dump()
    data["subscription_tier"] = SubscriptionTier(body.subscription_tier)
    if body.price_level is not None:
        data["price_level"] = PriceLevel(body.price_level)
    return GarageCandidate(**data)


def _ranking_out(r: GarageRankingResult) -> GarageRankingOut:
    return GarageRankingOut(
        garage_id=r.garage_id,
        garage_name=r.garage_name,
        score=r.score,
        breakdown=ScoreBreakdownOut(**asdict(r.breakdown)),
        badges=[BadgeOut(key=b.value, **BADGE_INFO[b]) for b in r.badges],
        is_featured=r.is_featured,
    )


@router.post("/garages/rank", response_model=list[GarageRankingOut])
def rank(body: list[GarageRankingIn]) -> list[GarageRankingOut]:
    ranked = rank_garages([_ranking_input(g) for g in body], now=booking_now())
    return [_ranking_out(r) for r in ranked]


@router.post("/garages/search", response_model=GarageSearchOut)
def search(body: GarageSearchRequest) -> GarageSearchOut:
    origin: tuple[float, float] | None = None
    if body.lat is not None and body.lng is not None:
        origin = (body.lat, body.lng)

    try:
        page = search_garages(
            [_candidate(g) for g in body.garages],
            origin=origin,
            max_distance_km=body.max_distance_km,
            min_rating=body.min_rating,
            sort_by=body.sort_by,
            page=body.page,
            limit=body.limit,
        )
    except InvalidSearchError as e:
        raise HTTPException(status_code=400, detail=str(e))

    hits: list[GarageSearchHit] = []
    for h in page.hits:
        c = h.candidate
        hits.append(
            GarageSearchHit(
                garage_id=h.result.garage_id,
                garage_name=h.result.garage_name,
                average_rating=c.average_rating,
                total_reviews=c.total_reviews,
                response_time=format_response_time(h.response_time_hours),
                badges=[b.value for b in h.result.badges],
                is_featured=h.result.is_featured,
                is_premium=c.subscription_tier == SubscriptionTier.premium,
                distance_km=round(h.distance_km, 1) if h.distance_km is not None else None,
                score=h.result.score,
            )
        )

    return GarageSearchOut(garages=hits, total=page.total, page=page.page, total_pages=page.total_pages)
