"""FastAPI dependency injection."""

from __future__ import annotations

from fastapi import Request

from flowfill.config import settings
from flowfill.engine.config import EngineConfig
from flowfill.engine.registry import GeneratorRegistry


def get_registry(request: Request) -> GeneratorRegistry:
    return request.app.state.registry


def get_engine_config() -> EngineConfig:
    return EngineConfig(max_positions=settings.max_positions, max_candidates=settings.max_candidates)
