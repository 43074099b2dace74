"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from flowfill.config import APP_VERSION
from flowfill.dependencies import get_registry
from flowfill.engine.registry import GeneratorRegistry
from flowfill.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(registry: GeneratorRegistry = Depends(get_registry)) -> HealthResponse:
    return HealthResponse(status="ok", version=APP_VERSION, generators_registered=registry.count)
