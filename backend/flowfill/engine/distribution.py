"""Distribution sampler — t values in [0, 1] along a curve.

Density is shapes per linear millimetre of curve, shared between the
attached generators so the total output follows the density setting.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from flowfill.engine.config import EngineConfig
from flowfill.engine.model import AABB, DistributionMode, DistributionParams, Modifier
from flowfill.engine.modifiers import size_multiplier, spacing_multiplier
from flowfill.engine.noise_field import coherent_noise01
from flowfill.engine.packing import has_box_collision, packing_tolerance
from flowfill.engine.params import resolve
from flowfill.engine.seeds import MINMAX_SEED_OFFSET, THRESHOLD_SEED_OFFSET, seeded_random
from flowfill.engine.spatial_index import SpatialIndex
from flowfill.utils.math_helpers import clamp, lerp

logger = logging.getLogger(__name__)

# Noise distribution samples the field along this row.
_NOISE_ROW = 0.5

# Degenerate spacing still advances t by this much per step.
_MIN_STEP = 1e-6


def target_count(
    params: DistributionParams,
    curve_length_mm: float,
    generator_count: int = 1,
    config: EngineConfig | None = None,
) -> int:
    """Number of t values for the density setting, at least 1 and at most ``max_positions``."""
    cfg = config or EngineConfig()
    density = resolve(params.density, seeded_random(params.seed + MINMAX_SEED_OFFSET))
    raw = curve_length_mm * density / max(1, generator_count)

    if math.isnan(raw) or raw < 1:
        return 1
    if raw > cfg.max_positions:
        logger.warning(
            "Distribution count %.0f exceeds safety cap, clamped to %d", raw, cfg.max_positions
        )
        return cfg.max_positions
    return int(math.floor(raw))


def linear_t_values(count: int) -> list[float]:
    if count <= 0:
        return []
    if count == 1:
        return [0.5]
    return [i / (count - 1) for i in range(count)]


def _random_t_values_unsorted(count: int, seed: int) -> list[float]:
    rng = seeded_random(seed)
    return [rng() for _ in range(count)]


def random_t_values(count: int, seed: int) -> list[float]:
    return sorted(_random_t_values_unsorted(count, seed))


def noise_t_values(
    count: int,
    seed: int,
    spacing: tuple[float, float],
    noise_scale: float = 0.3,
    noise_strength: float = 1.0,
    noise_threshold: float | None = None,
    modifiers: Sequence[Modifier] = (),
) -> list[float]:
    """Walk t forward with noise-modulated steps, then stretch so the last value is 1.0.

    A point whose threshold-channel noise is below ``noise_threshold`` is
    skipped, but its step still advances t; this produces clusters.
    """
    if count <= 0:
        return []

    min_spacing, max_spacing = spacing
    base_spacing = 1 / max(1, count - 1)

    t_values: list[float] = []
    current = 0.0

    for i in range(count):
        x = i * noise_scale
        n = coherent_noise01(x, _NOISE_ROW, seed)
        effective = 0.5 + (n - 0.5) * noise_strength
        step = base_spacing * lerp(min_spacing, max_spacing, effective)
        step *= spacing_multiplier(current, modifiers)
        current += max(step, _MIN_STEP)

        if noise_threshold is not None:
            spawn = coherent_noise01(x, _NOISE_ROW, seed + THRESHOLD_SEED_OFFSET)
            if spawn < noise_threshold:
                continue

        t_values.append(clamp(current, 0.0, 1.0))
        if current >= 1:
            break

    if t_values and t_values[-1] > 0:
        max_t = t_values[-1]
        return [t / max_t for t in t_values]
    return t_values


def _candidate_t_values(
    mode: DistributionMode,
    count: int,
    params: DistributionParams,
    modifiers: Sequence[Modifier],
) -> list[float]:
    """Candidates in generation order (random candidates are not sorted)."""
    if mode == DistributionMode.LINEAR:
        return linear_t_values(count)
    if mode == DistributionMode.NOISE:
        return noise_t_values(
            count,
            params.seed,
            params.spacing,
            params.noise_scale,
            params.noise_strength,
            params.noise_threshold,
            modifiers,
        )
    return _random_t_values_unsorted(count, params.seed)


def visual_density_t_values(
    params: DistributionParams,
    count: int,
    curve_length_mm: float,
    avg_shape_size_mm: float,
    modifiers: Sequence[Modifier] = (),
    config: EngineConfig | None = None,
) -> list[float]:
    """Greedy thinning of oversampled candidates by approximate footprint.

    Each candidate is a square of the average footprint (scaled by the size
    modifier at t) laid on the unrolled curve at ``t * length``. Output keeps
    acceptance order, so it is seed-deterministic but not sorted by t.
    """
    cfg = config or EngineConfig()
    n_candidates = min(count * cfg.visual_density_oversample, cfg.max_candidates)
    candidates = _candidate_t_values(params.candidate_mode, n_candidates, params, modifiers)

    tolerance = packing_tolerance(params.packing_mode, params.min_spacing)
    index = SpatialIndex(avg_shape_size_mm * cfg.cell_size_factor)

    accepted: list[float] = []
    max_size = 0.0
    for t in candidates:
        size = max(avg_shape_size_mm * size_multiplier(t, modifiers), 0.0)
        box = AABB.from_center(t * curve_length_mm, 0.0, size / 2)
        if has_box_collision(box, index, tolerance, max_size):
            continue
        accepted.append(t)
        index.add(box)
        max_size = max(max_size, size)
        if len(accepted) >= count:
            break

    logger.debug("Visual density: %d/%d candidates accepted", len(accepted), len(candidates))
    return accepted


def sample_t_values(
    params: DistributionParams,
    curve_length_mm: float,
    generator_count: int = 1,
    *,
    avg_shape_size_mm: float | None = None,
    modifiers: Sequence[Modifier] = (),
    config: EngineConfig | None = None,
) -> list[float]:
    """t values for the configured distribution mode."""
    cfg = config or EngineConfig()
    count = target_count(params, curve_length_mm, generator_count, cfg)

    if params.mode == DistributionMode.LINEAR:
        return linear_t_values(count)
    if params.mode == DistributionMode.RANDOM:
        return random_t_values(count, params.seed)
    if params.mode == DistributionMode.NOISE:
        return noise_t_values(
            count,
            params.seed,
            params.spacing,
            params.noise_scale,
            params.noise_strength,
            params.noise_threshold,
            modifiers,
        )
    if params.mode == DistributionMode.VISUAL_DENSITY:
        avg = cfg.default_shape_size_mm if avg_shape_size_mm is None else avg_shape_size_mm
        return visual_density_t_values(params, count, curve_length_mm, avg, modifiers, cfg)
    return linear_t_values(count)


def apply_spacing_constraints(t_values: Sequence[float], min_spacing: float) -> list[float]:
    """Drop values closer than ``min_spacing`` (in t) to the last kept value."""
    if len(t_values) <= 1:
        return list(t_values)

    result = [t_values[0]]
    for t in t_values[1:]:
        if t - result[-1] >= min_spacing:
            result.append(t)
    return result
