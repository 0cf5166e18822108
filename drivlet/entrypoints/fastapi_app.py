# drivlet/entrypoints/fastapi_app.py
from __future__ import annotations

import logging

from fastapi import FastAPI

from ..config import settings
from .api.routers import bookings, garages, health


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(levelname)s:%(name)s:%(message)s",
    )

    # Quiet the usual offenders
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="drivlet - Garage Ranking & Cancellation Policy")

    # Routers
    app.include_router(health.router)
    app.include_router(garages.router)
    app.include_router(bookings.router)

    return app
