"""Tests for the distribution sampler."""

import math

import pytest

from flowfill.engine.config import EngineConfig
from flowfill.engine.distribution import (
    apply_spacing_constraints,
    linear_t_values,
    noise_t_values,
    sample_t_values,
    target_count,
)
from flowfill.engine.model import AABB, DistributionParams, Modifier, ModifierKind, PackingMode
from flowfill.engine.packing import boxes_collide, packing_tolerance
from flowfill.engine.params import Range


def test_linear_100mm_at_one_per_mm():
    t_values = sample_t_values(DistributionParams(mode="linear", density=1.0), 100.0, 1)
    assert len(t_values) == 100
    assert t_values[0] == 0.0
    assert t_values[-1] == 1.0
    gaps = [b - a for a, b in zip(t_values, t_values[1:])]
    assert all(g == pytest.approx(1 / 99) for g in gaps)


def test_linear_count_scales_with_density():
    counts = []
    for density in (0.05, 0.1, 0.5, 1.0, 1.7, 3.0):
        params = DistributionParams(mode="linear", density=density)
        count = len(sample_t_values(params, 100.0, 1))
        assert count == max(1, math.floor(100.0 * density))
        counts.append(count)
    assert counts == sorted(counts)


def test_density_shared_between_generators():
    params = DistributionParams(mode="linear", density=1.0)
    assert len(sample_t_values(params, 100.0, 4)) == 25


def test_single_point_sits_mid_curve():
    assert linear_t_values(1) == [0.5]
    assert sample_t_values(DistributionParams(mode="linear", density=0.001), 100.0) == [0.5]


@pytest.mark.parametrize("density", [0.0, -3.0, float("nan")])
def test_degenerate_density_yields_one_point(density):
    assert target_count(DistributionParams(density=density), 100.0) == 1


def test_zero_length_curve_yields_one_point():
    only = sample_t_values(DistributionParams(mode="random"), 0.0)
    assert len(only) == 1 and 0.0 <= only[0] < 1.0
    assert len(sample_t_values(DistributionParams(mode="linear"), 0.0)) == 1


def test_runaway_density_is_capped():
    cfg = EngineConfig(max_positions=50)
    params = DistributionParams(mode="linear", density=1e9)
    assert len(sample_t_values(params, 100.0, config=cfg)) == 50


def test_range_density_resolves_once():
    params = DistributionParams(mode="linear", density=Range(2.0, 2.0))
    assert len(sample_t_values(params, 100.0)) == 200


def test_random_mode_sorted_and_deterministic():
    params = DistributionParams(mode="random", density=0.5, seed=11)
    first = sample_t_values(params, 100.0)
    second = sample_t_values(params, 100.0)
    assert first == second
    assert len(first) == 50
    assert first == sorted(first)
    assert all(0.0 <= t < 1.0 for t in first)
    assert first != sample_t_values(DistributionParams(mode="random", density=0.5, seed=12), 100.0)


def test_noise_mode_ends_on_one():
    params = DistributionParams(mode="noise", density=0.4, seed=3, spacing=(0.5, 1.5))
    t_values = sample_t_values(params, 100.0)
    assert t_values
    assert len(t_values) <= 40
    assert t_values[-1] == 1.0
    assert t_values == sorted(t_values)
    assert all(0.0 <= t <= 1.0 for t in t_values)
    assert t_values == sample_t_values(params, 100.0)


def test_noise_threshold_skips_points():
    plain = noise_t_values(40, 9, (0.5, 1.5))
    gated = noise_t_values(40, 9, (0.5, 1.5), noise_threshold=0.5)
    assert len(gated) <= len(plain)
    if gated:
        assert gated[-1] == 1.0


def test_noise_respects_spacing_modifier():
    wide = [Modifier.constant(ModifierKind.SPACING, 3.0)]
    plain = noise_t_values(30, 1, (1.0, 1.0))
    spaced = noise_t_values(30, 1, (1.0, 1.0), modifiers=wide)
    # Steps three times longer reach t = 1 in about a third of the points.
    assert len(spaced) < len(plain)


def test_visual_density_never_overlaps():
    params = DistributionParams(mode="visual-density", density=1.0, seed=4, packing_mode=PackingMode.NORMAL)
    length, avg = 100.0, 5.0
    t_values = sample_t_values(params, length, avg_shape_size_mm=avg)

    assert 0 < len(t_values) <= 100
    tol = packing_tolerance(PackingMode.NORMAL)
    boxes = [AABB.from_center(t * length, 0.0, avg / 2) for t in t_values]
    for i, a in enumerate(boxes):
        for b in boxes[i + 1:]:
            assert not boxes_collide(a, b, tol)


def test_visual_density_keeps_acceptance_order():
    params = DistributionParams(mode="visual-density", density=1.0, seed=4)
    t_values = sample_t_values(params, 100.0, avg_shape_size_mm=5.0)
    assert t_values == sample_t_values(params, 100.0, avg_shape_size_mm=5.0)
    assert t_values != sorted(t_values)


def test_visual_density_allow_overlap_accepts_up_to_target():
    params = DistributionParams(
        mode="visual-density", density=1.0, packing_mode=PackingMode.ALLOW_OVERLAP, candidate_mode="linear"
    )
    assert len(sample_t_values(params, 100.0, avg_shape_size_mm=5.0)) == 100


def test_spacing_constraints():
    assert apply_spacing_constraints([0.0, 0.05, 0.1, 0.3], 0.1) == [0.0, 0.1, 0.3]
    assert apply_spacing_constraints([0.4], 0.5) == [0.4]


def test_noise_zero_spacing_still_spans_curve():
    flat = noise_t_values(20, seed=3, spacing=(0.0, 0.0))
    assert len(flat) == 20
    assert flat[-1] == pytest.approx(1.0)
    assert all(b > a for a, b in zip(flat, flat[1:]))

    stalled = noise_t_values(
        10, seed=3, spacing=(0.5, 1.5), modifiers=[Modifier.constant(ModifierKind.SPACING, 0.0)]
    )
    assert stalled[-1] == pytest.approx(1.0)
    assert stalled[0] < stalled[-1]
