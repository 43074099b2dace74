"""Tube filling — 2D placements inside a band around the curve.

The tube at t is the segment of the curve normal of half-width spread(t)/2
centred on the curve. Offsets are in mm; positions are in px.

Fill modes:
  grid    rows every spacing(t)/density(t) mm of arc length, columns across the tube
  noise   random t, noise-driven offset, greedy square collision rejection
  random  random t, uniform offset, greedy square collision rejection
  packed  random candidates with per-generator radii, sorted by t, greedy circle rejection
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence

from flowfill.engine.config import EngineConfig
from flowfill.engine.curve import Curve
from flowfill.engine.model import AABB, FillMode, GeneratorConfig, Modifier, PackingMode, Placement, Point2D
from flowfill.engine.modifiers import size_multiplier, spacing_multiplier
from flowfill.engine.noise_field import coherent_noise
from flowfill.engine.packing import has_box_collision, has_circle_collision, packing_tolerance
from flowfill.engine.seeds import ASSIGNMENT_SEED_OFFSET, seeded_random, weighted_pick
from flowfill.engine.spatial_index import SpatialIndex
from flowfill.engine.units import mm_to_px, px_to_mm
from flowfill.utils.geometry import half_diagonal

logger = logging.getLogger(__name__)

Evaluator = Callable[[float], float]

# Grid rows never advance by less than this (mm).
_MIN_ROW_SPACING_MM = 1e-3


def _safe_density(value: float, epsilon: float) -> float:
    if math.isnan(value) or value < epsilon:
        return epsilon
    return value


def _safe_spread(value: float) -> float:
    if math.isnan(value) or value < 0:
        return 0.0
    return value


def _tube_point(curve: Curve, t: float, offset_mm: float) -> Point2D:
    arc = t * curve.length()
    cx, cy = curve.point_at(arc)
    nx, ny = curve.normal_at(arc)
    offset_px = mm_to_px(offset_mm)
    return (cx + nx * offset_px, cy + ny * offset_px)


def expected_count(
    curve_length_mm: float,
    spread_evaluator: Evaluator,
    density_evaluator: Evaluator,
    config: EngineConfig,
) -> float:
    """Shapes expected in the tube: length × mean(density × spread) over evenly spaced samples."""
    n = max(1, config.expected_count_samples)
    total = 0.0
    for i in range(n):
        t = i / (n - 1) if n > 1 else 0.5
        density = _safe_density(density_evaluator(t), config.density_epsilon)
        total += density * _safe_spread(spread_evaluator(t))
    value = curve_length_mm * total / n
    if math.isnan(value):
        return 0.0
    return value


def candidate_count(expected: float, factor: float, config: EngineConfig) -> int:
    raw = expected * factor
    if raw > config.max_candidates:
        logger.warning("Tube candidates %.0f exceed safety cap, clamped to %d", raw, config.max_candidates)
        return config.max_candidates
    return max(config.min_candidates, int(math.ceil(raw)))


def generate_grid_positions(
    curve: Curve,
    spread_evaluator: Evaluator,
    density_evaluator: Evaluator,
    modifiers: Sequence[Modifier],
    config: EngineConfig,
) -> list[Placement]:
    positions: list[Placement] = []
    length_mm = px_to_mm(curve.length())
    cap = config.max_positions

    s = 0.0
    while s <= length_mm + 1e-9:
        t = s / length_mm if length_mm > 0 else 0.0
        density = _safe_density(density_evaluator(t), config.density_epsilon)
        spacing = max(spacing_multiplier(t, modifiers) / density, _MIN_ROW_SPACING_MM)

        spread = _safe_spread(spread_evaluator(t))
        half = spread / 2
        n_columns = max(1, int(math.floor(spread / spacing)))
        n_columns = min(n_columns, cap - len(positions))

        for col in range(n_columns):
            if n_columns == 1:
                offset = 0.0
            else:
                offset = -half + (col / (n_columns - 1)) * spread
            positions.append(Placement(t=t, offset=offset, position=_tube_point(curve, t, offset)))

        if length_mm <= 0:
            break
        if len(positions) >= cap:
            logger.warning("Grid fill hit the %d position safety cap", cap)
            break
        s += spacing

    logger.debug("Grid: %d positions", len(positions))
    return positions


def _scatter_positions(
    curve: Curve,
    spread_evaluator: Evaluator,
    density_evaluator: Evaluator,
    avg_shape_size_mm: float,
    tolerance: float,
    modifiers: Sequence[Modifier],
    seed: int,
    config: EngineConfig,
    use_noise: bool,
) -> list[Placement]:
    """Shared body of the noise and random modes; only the offset source differs."""
    length_mm = px_to_mm(curve.length())
    expected = expected_count(length_mm, spread_evaluator, density_evaluator, config)
    n_candidates = candidate_count(expected, config.noise_candidate_factor, config)

    rng = seeded_random(seed)
    index = SpatialIndex(mm_to_px(avg_shape_size_mm * config.cell_size_factor))
    positions: list[Placement] = []
    max_size = 0.0

    for i in range(n_candidates):
        t = rng()
        spread = _safe_spread(spread_evaluator(t))
        if use_noise:
            n = coherent_noise(t * config.noise_t_frequency, i * config.noise_index_frequency, seed)
            offset = n * spread / 2
        else:
            offset = (rng() - 0.5) * spread

        position = _tube_point(curve, t, offset)
        footprint_mm = avg_shape_size_mm * size_multiplier(t, modifiers)
        half_size = max(mm_to_px(footprint_mm * config.noise_radius_factor), 0.0)
        box = AABB.from_center(position[0], position[1], half_size)

        if has_box_collision(box, index, tolerance, max_size):
            continue
        positions.append(Placement(t=t, offset=offset, position=position, radius=half_size))
        index.add(box)
        max_size = max(max_size, 2 * half_size)

        if len(positions) >= config.max_positions:
            logger.warning("Scatter fill hit the %d position safety cap", config.max_positions)
            break

    logger.debug(
        "%s: %d/%d candidates accepted",
        "Noise" if use_noise else "Random",
        len(positions),
        n_candidates,
    )
    return positions


def generate_packed_positions(
    curve: Curve,
    spread_evaluator: Evaluator,
    density_evaluator: Evaluator,
    avg_shape_size_mm: float,
    packing_mode: PackingMode,
    tolerance: float,
    modifiers: Sequence[Modifier],
    seed: int,
    generators: Sequence[GeneratorConfig],
    generator_radii: dict[str, float],
    config: EngineConfig,
) -> list[Placement]:
    """Greedy circle packing with a pre-assigned generator and radius per candidate."""
    length_mm = px_to_mm(curve.length())
    expected = expected_count(length_mm, spread_evaluator, density_evaluator, config)
    multiplier = config.packed_multipliers.get(PackingMode(packing_mode), 5.0)
    n_candidates = candidate_count(expected, multiplier, config)

    avg_px = mm_to_px(avg_shape_size_mm)
    fallback_radius = half_diagonal(avg_px, avg_px)

    rng = seeded_random(seed)
    assign_rng = seeded_random(seed + ASSIGNMENT_SEED_OFFSET)

    candidates: list[tuple[float, float, str | None, float]] = []
    for _ in range(n_candidates):
        t = rng()
        spread = _safe_spread(spread_evaluator(t))
        offset = (rng() - 0.5) * spread

        generator_id: str | None = None
        base_radius = fallback_radius
        if generators:
            gen = weighted_pick(generators, assign_rng())
            generator_id = gen.id
            base_radius = generator_radii.get(gen.id, fallback_radius)

        radius = max(base_radius * size_multiplier(t, modifiers), 0.0)
        candidates.append((t, offset, generator_id, radius))

    # Stable sort: equal t keeps generation order.
    candidates.sort(key=lambda c: c[0])
    max_radius = max((c[3] for c in candidates), default=0.0)

    index = SpatialIndex(mm_to_px(avg_shape_size_mm * config.cell_size_factor))
    positions: list[Placement] = []

    for t, offset, generator_id, radius in candidates:
        position = _tube_point(curve, t, offset)
        if has_circle_collision(position, radius, index, tolerance, max_radius):
            continue
        positions.append(
            Placement(t=t, offset=offset, position=position, radius=radius, generator_id=generator_id)
        )
        index.add(AABB.from_center(position[0], position[1], radius))

        if len(positions) >= config.max_positions:
            logger.warning("Packed fill hit the %d position safety cap", config.max_positions)
            break

    logger.debug("Packed: %d/%d candidates accepted", len(positions), n_candidates)
    return positions


def generate_tube_positions(
    curve: Curve,
    spread_evaluator: Evaluator,
    fill_mode: FillMode | str,
    density_evaluator: Evaluator,
    avg_shape_size_mm: float,
    packing_mode: PackingMode | str,
    min_spacing_mm: float,
    modifiers: Sequence[Modifier],
    seed: int,
    generators: Sequence[GeneratorConfig] = (),
    generator_radii: dict[str, float] | None = None,
    config: EngineConfig | None = None,
) -> list[Placement]:
    """Placements inside the tube for one pass. Deterministic for a fixed seed."""
    cfg = config or EngineConfig()
    mode = FillMode(fill_mode)
    packing = PackingMode(packing_mode)
    tolerance = packing_tolerance(packing, min_spacing_mm)

    logger.debug(
        "Tube filling: mode=%s, packing=%s, tolerance=%.2f, avg size=%.1fmm",
        mode.value,
        packing.value,
        tolerance,
        avg_shape_size_mm,
    )

    if mode == FillMode.GRID:
        return generate_grid_positions(curve, spread_evaluator, density_evaluator, modifiers, cfg)
    if mode == FillMode.PACKED:
        return generate_packed_positions(
            curve,
            spread_evaluator,
            density_evaluator,
            avg_shape_size_mm,
            packing,
            tolerance,
            modifiers,
            seed,
            generators,
            generator_radii or {},
            cfg,
        )
    return _scatter_positions(
        curve,
        spread_evaluator,
        density_evaluator,
        avg_shape_size_mm,
        tolerance,
        modifiers,
        seed,
        cfg,
        use_noise=mode == FillMode.NOISE,
    )
