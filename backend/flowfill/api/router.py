"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from flowfill.api import generators, health, place, sample

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(generators.router)
api_router.include_router(sample.router)
api_router.include_router(place.router)
