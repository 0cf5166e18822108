# drivlet/entrypoints/api/routers/health.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from ....config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/debug/config")
def debug_config() -> dict[str, Any]:
    return {
        "ENV": settings.ENV,
        "BOOKING_TIMEZONE": settings.BOOKING_TIMEZONE,
        "CURRENCY": settings.CURRENCY,
        "SEARCH_DEFAULT_LIMIT": settings.SEARCH_DEFAULT_LIMIT,
        "SEARCH_MAX_LIMIT": settings.SEARCH_MAX_LIMIT,
    }
