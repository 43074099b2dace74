"""Engine configuration — tunable constants for one placement pass."""

from __future__ import annotations

from dataclasses import dataclass, field

from flowfill.engine.model import PackingMode


def _default_packed_multipliers() -> dict[PackingMode, float]:
    # Tighter packing rejects more candidates, so it needs more of them.
    return {
        PackingMode.TIGHT: 10.0,
        PackingMode.NORMAL: 5.0,
        PackingMode.LOOSE: 5.0,
        PackingMode.ALLOW_OVERLAP: 1.5,
    }


@dataclass
class EngineConfig:
    """Controls candidate budgets and collision approximations."""

    # Safety ceilings
    max_positions: int = 10_000
    max_candidates: int = 100_000

    # Degenerate input floors
    density_epsilon: float = 0.01  # shapes per mm

    # Fallback footprint when a generator exposes no size parameter (mm)
    default_shape_size_mm: float = 5.0

    # Spatial index cell = factor x average footprint
    cell_size_factor: float = 2.0

    # Visual density: candidates = oversample x target count
    visual_density_oversample: int = 3

    # Noise / random fill
    noise_candidate_factor: float = 2.0
    min_candidates: int = 10
    noise_radius_factor: float = 0.35  # organic shapes pack closer than their boxes
    noise_t_frequency: float = 10.0
    noise_index_frequency: float = 0.1

    # Packed fill
    packed_multipliers: dict[PackingMode, float] = field(default_factory=_default_packed_multipliers)

    # Samples used to estimate the expected count over a variable tube
    expected_count_samples: int = 32

    # Generator footprint probe
    probe_t: float = 0.5
