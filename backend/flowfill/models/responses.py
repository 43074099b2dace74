"""API response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from flowfill.engine.model import GeneratedInstance
from flowfill.engine.params import Range, Scalar
from flowfill.engine.registry import Generator, ParamDefinition


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    generators_registered: int = 0


def _json_param(value: Any) -> Any:
    if isinstance(value, Range):
        return {"min": value.min, "max": value.max}
    if isinstance(value, Scalar):
        return value.value
    return value


class ParamDefinitionModel(BaseModel):
    name: str
    type: str
    label: str
    min: float | None = None
    max: float | None = None
    step: float | None = None
    unit: str | None = None
    description: str = ""
    options: list[str] = Field(default_factory=list)

    @classmethod
    def from_definition(cls, definition: ParamDefinition) -> ParamDefinitionModel:
        return cls(
            name=definition.name,
            type=definition.type,
            label=definition.label,
            min=definition.min,
            max=definition.max,
            step=definition.step,
            unit=definition.unit,
            description=definition.description,
            options=list(definition.options),
        )


class GeneratorInfo(BaseModel):
    type: str
    name: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    size_param: str = "size"
    default_params: dict[str, Any] = Field(default_factory=dict)
    param_definitions: list[ParamDefinitionModel] = Field(default_factory=list)

    @classmethod
    def from_generator(cls, generator: Generator) -> GeneratorInfo:
        return cls(
            type=generator.type,
            name=generator.name,
            description=generator.description,
            tags=list(generator.tags),
            size_param=generator.size_param,
            default_params={k: _json_param(v) for k, v in generator.default_params().items()},
            param_definitions=[ParamDefinitionModel.from_definition(d) for d in generator.param_definitions()],
        )


class GeneratorListResponse(BaseModel):
    generators: list[GeneratorInfo] = Field(default_factory=list)


class SampleResponse(BaseModel):
    t_values: list[float] = Field(default_factory=list)
    count: int = 0


class InstanceModel(BaseModel):
    id: str
    generator_type: str
    position: tuple[float, float]
    rotation: float = Field(description="Degrees")
    scale: float
    bounds: tuple[float, float, float, float] = Field(description="x, y, width, height in px")
    subpaths: list[list[tuple[float, float]]] = Field(default_factory=list)

    @classmethod
    def from_instance(cls, instance: GeneratedInstance) -> InstanceModel:
        return cls(
            id=instance.id,
            generator_type=instance.generator_type,
            position=instance.position,
            rotation=instance.rotation,
            scale=instance.scale,
            bounds=instance.shape.bounds.as_tuple(),
            subpaths=[[(float(x), float(y)) for x, y in path] for path in instance.shape.subpaths],
        )


class PlaceResponse(BaseModel):
    flow_path_id: str
    instances: list[InstanceModel] = Field(default_factory=list)
    count: int = 0
    processing_time_ms: float = 0.0
