"""POST /api/sample — t-values of a distribution along a curve of given length."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from flowfill.dependencies import get_engine_config
from flowfill.engine.config import EngineConfig
from flowfill.engine.distribution import sample_t_values
from flowfill.models.requests import SampleRequest
from flowfill.models.responses import SampleResponse

router = APIRouter()


@router.post("/sample", response_model=SampleResponse)
def sample(req: SampleRequest, config: EngineConfig = Depends(get_engine_config)) -> SampleResponse:
    t_values = sample_t_values(
        req.distribution.to_params(),
        req.curve_length_mm,
        req.generator_count,
        avg_shape_size_mm=req.avg_shape_size_mm,
        modifiers=[m.to_modifier() for m in req.modifiers],
        config=config,
    )
    return SampleResponse(t_values=t_values, count=len(t_values))
