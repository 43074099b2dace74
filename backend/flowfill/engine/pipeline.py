"""Instance pipeline — accepted placements → positioned, rotated, scaled shape instances."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from dataclasses import replace
from typing import Any

import numpy as np
from scipy.spatial import cKDTree

from flowfill.engine.config import EngineConfig
from flowfill.engine.errors import ConfigurationError
from flowfill.engine.model import (
    AABB,
    FlowPathConfig,
    GeneratedInstance,
    GeneratorConfig,
    Placement,
    Point2D,
    Shape,
)
from flowfill.engine.modifiers import rotation_offset, size_multiplier, spread_width
from flowfill.engine.params import Rng, average_generator_size, evaluate_animatable_params, resolve
from flowfill.engine.registry import GeneratorRegistry
from flowfill.engine.seeds import MINMAX_SEED_OFFSET, seeded_random, weighted_choice
from flowfill.engine.tube_filling import generate_tube_positions
from flowfill.engine.units import mm_to_px
from flowfill.utils.geometry import bbox_of_many, half_diagonal, rotate_about, scale_about, translate

logger = logging.getLogger(__name__)

ParamEvaluator = Callable[[dict[str, Any], float, Rng], dict[str, Any]]


def measure_bounds(subpaths: list[np.ndarray]) -> AABB:
    """Bounding box of a set of sub-paths."""
    return AABB.from_bounds(bbox_of_many(subpaths))


def transform_shape(
    shape: Shape,
    position: Point2D,
    rotation: float,
    scale: float,
) -> Shape:
    """Scale and rotate about the shape anchor, then move the anchor to ``position``."""
    anchor = shape.anchor
    dx = position[0] - anchor[0]
    dy = position[1] - anchor[1]

    subpaths: list[np.ndarray] = []
    for points in shape.subpaths:
        moved = np.asarray(points, dtype=np.float64)
        if scale != 1.0:
            moved = scale_about(moved, scale, anchor)
        moved = rotate_about(moved, rotation, anchor)
        subpaths.append(translate(moved, dx, dy))

    return Shape(subpaths=subpaths, bounds=measure_bounds(subpaths), anchor=position)


def _translate_instance(instance: GeneratedInstance, dx: float, dy: float) -> GeneratedInstance:
    shape = instance.shape
    subpaths = [translate(p, dx, dy) for p in shape.subpaths]
    position = (instance.position[0] + dx, instance.position[1] + dy)
    moved = Shape(subpaths=subpaths, bounds=measure_bounds(subpaths), anchor=position)
    return replace(instance, shape=moved, position=position)


def apply_boids(
    instances: list[GeneratedInstance],
    strength: float,
    radius_px: float,
) -> list[GeneratedInstance]:
    """One cohesion pass: move each instance toward the mean of its neighbours.

    Neighbours are the other instances within ``radius_px`` of the pre-pass
    positions. A single pass, not iterated to convergence.
    """
    if strength <= 0 or len(instances) < 2:
        return list(instances)

    positions = np.array([inst.position for inst in instances], dtype=np.float64)
    tree = cKDTree(positions)
    neighbours = tree.query_ball_point(positions, r=radius_px)

    relaxed: list[GeneratedInstance] = []
    for i, inst in enumerate(instances):
        others = [j for j in neighbours[i] if j != i]
        if not others:
            relaxed.append(inst)
            continue
        target = positions[others].mean(axis=0)
        dx, dy = (target - positions[i]) * strength
        relaxed.append(_translate_instance(inst, float(dx), float(dy)))
    return relaxed


class InstancePipeline:
    """Runs one placement pass for a flow path against an injected generator registry."""

    def __init__(
        self,
        registry: GeneratorRegistry,
        config: EngineConfig | None = None,
        param_evaluator: ParamEvaluator | None = None,
    ) -> None:
        self.registry = registry
        self.config = config or EngineConfig()
        self.param_evaluator = param_evaluator or evaluate_animatable_params

    def generator_radii(self, flow_path: FlowPathConfig) -> dict[str, float]:
        """Bounding-circle radius (px) of each generator's output sampled mid-curve."""
        probe_t = self.config.probe_t
        radii: dict[str, float] = {}
        for gen_config in flow_path.generators:
            generator = self.registry.get(gen_config.type)
            sample_rng = seeded_random(flow_path.distribution.seed)
            params = self.param_evaluator(gen_config.params, probe_t, sample_rng)
            sample = generator.generate(probe_t, params, 0)
            bounds = measure_bounds(sample.subpaths)
            radii[gen_config.id] = half_diagonal(bounds.width, bounds.height)
        return radii

    def _resolve_flow_values(self, flow_path: FlowPathConfig) -> tuple[float, float]:
        """Spread and density, resolved once per pass so the evaluators stay pure in t."""
        minmax_rng = seeded_random(flow_path.distribution.seed + MINMAX_SEED_OFFSET)
        spread = resolve(flow_path.flow.spread, minmax_rng)
        density = resolve(flow_path.distribution.density, minmax_rng)
        return spread, density

    def placements(self, flow_path: FlowPathConfig) -> list[Placement]:
        """Accepted tube placements for ``flow_path``."""
        if not flow_path.generators:
            raise ConfigurationError(f"Flow path {flow_path.id} has no generators")

        dist = flow_path.distribution
        flow = flow_path.flow
        modifiers = flow_path.modifiers

        avg_size = average_generator_size(
            flow_path.generators,
            self.registry.size_params(),
            self.config.default_shape_size_mm,
        )
        radii = self.generator_radii(flow_path)

        base_spread, base_density = self._resolve_flow_values(flow_path)

        def spread_evaluator(t: float) -> float:
            return spread_width(t, modifiers, base_spread)

        def density_evaluator(t: float) -> float:
            return base_density

        return generate_tube_positions(
            flow_path.curve,
            spread_evaluator,
            flow.fill_mode,
            density_evaluator,
            avg_size,
            dist.packing_mode,
            dist.min_spacing,
            modifiers,
            dist.seed,
            generators=flow_path.generators,
            generator_radii=radii,
            config=self.config,
        )

    def _generator_for(self, flow_path: FlowPathConfig, index: int) -> GeneratorConfig:
        # Packed pre-assignment only sizes the collision circle.
        return weighted_choice(flow_path.generators, flow_path.distribution.seed + index)

    def place(self, flow_path: FlowPathConfig) -> list[GeneratedInstance]:
        """Regenerate every instance of ``flow_path``."""
        start = time.perf_counter()
        placements = self.placements(flow_path)

        curve = flow_path.curve
        length = curve.length()
        seed = flow_path.distribution.seed
        instances: list[GeneratedInstance] = []

        for index, placement in enumerate(placements):
            gen_config = self._generator_for(flow_path, index)
            generator = self.registry.get(gen_config.type)

            rng = seeded_random(seed + index)
            params = self.param_evaluator(gen_config.params, placement.t, rng)
            shape = generator.generate(placement.t, params, seed + index)
            follow = resolve(flow_path.flow.follow_curve, rng)

            arc = placement.t * length
            if gen_config.follow_normal:
                vx, vy = curve.normal_at(arc)
            else:
                vx, vy = curve.tangent_at(arc)
            rotation = math.degrees(math.atan2(vy, vx)) * follow
            rotation += rotation_offset(placement.t, flow_path.modifiers)
            scale = size_multiplier(placement.t, flow_path.modifiers)

            instances.append(
                GeneratedInstance(
                    id=f"{flow_path.id}-instance-{index}",
                    shape=transform_shape(shape, placement.position, rotation, scale),
                    position=placement.position,
                    rotation=rotation,
                    scale=scale,
                    source_id=flow_path.id,
                    generator_type=gen_config.type,
                )
            )

        flow = flow_path.flow
        if flow.boids_strength > 0:
            instances = apply_boids(instances, flow.boids_strength, mm_to_px(flow.boids_radius))

        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "Placed %d instances on %s (%s fill) in %.0fms",
            len(instances),
            flow_path.id,
            flow.fill_mode.value,
            elapsed,
        )
        return instances

    def place_standalone(
        self,
        generator_type: str,
        params: dict[str, Any],
        position: Point2D,
        rotation: float = 0.0,
        scale: float = 1.0,
        seed: int = 0,
    ) -> GeneratedInstance:
        """A single instance at a fixed canvas position, parameters evaluated mid-curve."""
        generator = self.registry.get(generator_type)
        rng = seeded_random(seed)
        evaluated = self.param_evaluator(params, 0.5, rng)
        shape = generator.generate(0.5, evaluated, seed)

        return GeneratedInstance(
            id=f"standalone-{seed}",
            shape=transform_shape(shape, position, rotation, scale),
            position=position,
            rotation=rotation,
            scale=scale,
            source_id=f"standalone-{seed}",
            generator_type=generator_type,
        )


def create_pipeline(registry: GeneratorRegistry, config: EngineConfig | None = None) -> InstancePipeline:
    """Factory function for creating a pipeline instance."""
    return InstancePipeline(registry, config=config)
