"""API request models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from flowfill.engine.curve import SvgPathCurve
from flowfill.engine.model import (
    DistributionMode,
    DistributionParams,
    FillMode,
    FlowParams,
    FlowPathConfig,
    GeneratorConfig,
    Modifier,
    ModifierKind,
    PackingMode,
)
from flowfill.engine.params import ParamValue, Range, Scalar


class RangeModel(BaseModel):
    min: float
    max: float


def _param(value: float | RangeModel) -> ParamValue:
    if isinstance(value, RangeModel):
        return Range(value.min, value.max)
    return Scalar(float(value))


def _generator_param(value: Any) -> Any:
    """``{"min", "max"}`` mappings become ranges; anything else passes through."""
    if isinstance(value, dict) and set(value) == {"min", "max"}:
        return Range(float(value["min"]), float(value["max"]))
    return value


class ModifierModel(BaseModel):
    kind: ModifierKind
    enabled: bool = True
    t_start: float = Field(default=0.0, ge=0.0, le=1.0)
    t_end: float = Field(default=1.0, ge=0.0, le=1.0)
    value_start: float = 1.0
    value_end: float = 1.0
    easing: str = Field(default="linear", description="linear, ease-in, ease-out, ease-in-out or sine")

    def to_modifier(self) -> Modifier:
        return Modifier(
            kind=self.kind,
            enabled=self.enabled,
            t_start=self.t_start,
            t_end=self.t_end,
            value_start=self.value_start,
            value_end=self.value_end,
            easing=self.easing,
        )


class DistributionModel(BaseModel):
    mode: DistributionMode = DistributionMode.LINEAR
    density: float | RangeModel = Field(default=1.0, description="Shapes per mm of curve")
    spacing: tuple[float, float] = Field(default=(0.5, 1.5), description="Noise step multiplier range")
    seed: int = 0
    noise_scale: float = 0.3
    noise_strength: float = 1.0
    noise_threshold: float | None = None
    packing_mode: PackingMode = PackingMode.NORMAL
    min_spacing: float = Field(default=0.0, description="Extra spacing in mm; negative packs tighter")
    candidate_mode: DistributionMode = DistributionMode.RANDOM

    def to_params(self) -> DistributionParams:
        return DistributionParams(
            mode=self.mode,
            density=_param(self.density),
            spacing=self.spacing,
            seed=self.seed,
            noise_scale=self.noise_scale,
            noise_strength=self.noise_strength,
            noise_threshold=self.noise_threshold,
            packing_mode=self.packing_mode,
            min_spacing=self.min_spacing,
            candidate_mode=self.candidate_mode,
        )


class FlowModel(BaseModel):
    follow_curve: float | RangeModel = 1.0
    spread: float | RangeModel = Field(default=10.0, description="Tube width in mm")
    fill_mode: FillMode = FillMode.RANDOM
    boids_strength: float = Field(default=0.0, ge=0.0, le=1.0)
    boids_radius: float = Field(default=10.0, ge=0.0, description="Neighbour radius in mm")

    def to_params(self) -> FlowParams:
        return FlowParams(
            follow_curve=_param(self.follow_curve),
            spread=_param(self.spread),
            fill_mode=self.fill_mode,
            boids_strength=self.boids_strength,
            boids_radius=self.boids_radius,
        )


class GeneratorConfigModel(BaseModel):
    id: str
    type: str = Field(..., description="Registered generator type")
    weight: float = Field(default=1.0, ge=0.0)
    params: dict[str, Any] = Field(default_factory=dict)
    follow_normal: bool = False

    def to_config(self) -> GeneratorConfig:
        return GeneratorConfig(
            id=self.id,
            type=self.type,
            weight=self.weight,
            params={k: _generator_param(v) for k, v in self.params.items()},
            follow_normal=self.follow_normal,
        )


class SampleRequest(BaseModel):
    distribution: DistributionModel = Field(default_factory=DistributionModel)
    curve_length_mm: float = Field(..., ge=0.0)
    generator_count: int = Field(default=1, ge=1)
    avg_shape_size_mm: float | None = Field(default=None, gt=0.0)
    modifiers: list[ModifierModel] = Field(default_factory=list)


class PlaceRequest(BaseModel):
    id: str = "flow-path"
    path_data: str = Field(..., description="SVG path data (the d attribute) of the curve, in px")
    samples_per_segment: int = Field(default=32, ge=2, le=1024)
    distribution: DistributionModel = Field(default_factory=DistributionModel)
    flow: FlowModel = Field(default_factory=FlowModel)
    generators: list[GeneratorConfigModel] = Field(default_factory=list)
    modifiers: list[ModifierModel] = Field(default_factory=list)

    def to_config(self) -> FlowPathConfig:
        curve = SvgPathCurve.from_path_data(self.path_data, samples_per_segment=self.samples_per_segment)
        return FlowPathConfig(
            id=self.id,
            curve=curve,
            distribution=self.distribution.to_params(),
            flow=self.flow.to_params(),
            generators=[g.to_config() for g in self.generators],
            modifiers=[m.to_modifier() for m in self.modifiers],
        )


class StandaloneRequest(BaseModel):
    type: str
    params: dict[str, Any] = Field(default_factory=dict)
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    scale: float = Field(default=1.0, gt=0.0)
    seed: int = 0

    def generator_params(self) -> dict[str, Any]:
        return {k: _generator_param(v) for k, v in self.params.items()}
