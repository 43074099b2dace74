"""GET /api/generators — registered shape generators and their parameters."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from flowfill.dependencies import get_registry
from flowfill.engine.errors import UnknownGeneratorError
from flowfill.engine.registry import GeneratorRegistry
from flowfill.models.responses import GeneratorInfo, GeneratorListResponse

router = APIRouter(prefix="/generators")


@router.get("", response_model=GeneratorListResponse)
async def list_generators(registry: GeneratorRegistry = Depends(get_registry)) -> GeneratorListResponse:
    return GeneratorListResponse(generators=[GeneratorInfo.from_generator(g) for g in registry.all()])


@router.get("/{generator_type}", response_model=GeneratorInfo)
async def get_generator(
    generator_type: str,
    registry: GeneratorRegistry = Depends(get_registry),
) -> GeneratorInfo:
    try:
        return GeneratorInfo.from_generator(registry.get(generator_type))
    except UnknownGeneratorError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
