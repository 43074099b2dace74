"""POST /api/place — run a placement pass for one flow path.

Passes are CPU-bound and synchronous; FastAPI runs these endpoints in its
worker threadpool.
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException

from flowfill.dependencies import get_engine_config, get_registry
from flowfill.engine.config import EngineConfig
from flowfill.engine.pipeline import create_pipeline
from flowfill.engine.registry import GeneratorRegistry
from flowfill.models.requests import PlaceRequest, StandaloneRequest
from flowfill.models.responses import InstanceModel, PlaceResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/place", response_model=PlaceResponse)
def place(
    req: PlaceRequest,
    registry: GeneratorRegistry = Depends(get_registry),
    config: EngineConfig = Depends(get_engine_config),
) -> PlaceResponse:
    start = time.perf_counter()
    try:
        flow_path = req.to_config()
        instances = create_pipeline(registry, config).place(flow_path)
    except ValueError as e:
        # ConfigurationError and malformed path data
        logger.warning("Rejected placement request %s: %s", req.id, e)
        raise HTTPException(status_code=422, detail=str(e)) from e

    elapsed = (time.perf_counter() - start) * 1000
    return PlaceResponse(
        flow_path_id=req.id,
        instances=[InstanceModel.from_instance(inst) for inst in instances],
        count=len(instances),
        processing_time_ms=round(elapsed, 1),
    )


@router.post("/place/standalone", response_model=InstanceModel)
def place_standalone(
    req: StandaloneRequest,
    registry: GeneratorRegistry = Depends(get_registry),
    config: EngineConfig = Depends(get_engine_config),
) -> InstanceModel:
    try:
        instance = create_pipeline(registry, config).place_standalone(
            req.type,
            req.generator_params(),
            (req.x, req.y),
            rotation=req.rotation,
            scale=req.scale,
            seed=req.seed,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return InstanceModel.from_instance(instance)
