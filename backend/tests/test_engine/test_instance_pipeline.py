"""Tests for the instance pipeline."""

import dataclasses

import numpy as np
import pytest

from flowfill.engine.curve import PolylineCurve
from flowfill.engine.errors import ConfigurationError, UnknownGeneratorError
from flowfill.engine.model import (
    FillMode,
    GeneratedInstance,
    GeneratorConfig,
    Modifier,
    ModifierKind,
    PackingMode,
)
from flowfill.engine.params import Range
from flowfill.engine.pipeline import InstancePipeline, apply_boids, transform_shape
from flowfill.engine.seeds import weighted_choice
from flowfill.engine.units import mm_to_px
from flowfill.generators.base import build_shape
from tests.conftest import SquareGenerator, make_flow_path


def _snapshot(instances: list[GeneratedInstance]):
    return [
        (i.id, i.generator_type, i.position, i.rotation, i.scale, [p.tolist() for p in i.shape.subpaths])
        for i in instances
    ]


def test_empty_generator_list_is_a_configuration_error(registry):
    with pytest.raises(ConfigurationError):
        InstancePipeline(registry).place(make_flow_path(generators=[]))


def test_unknown_generator_aborts_the_pass(registry):
    flow = make_flow_path(
        generators=[GeneratorConfig(id="ok", type="square"), GeneratorConfig(id="bad", type="dragon")]
    )
    with pytest.raises(UnknownGeneratorError) as exc:
        InstancePipeline(registry).place(flow)
    assert exc.value.generator_type == "dragon"
    assert isinstance(exc.value, ValueError)


@pytest.mark.parametrize("fill_mode", list(FillMode))
def test_place_is_deterministic(registry, fill_mode):
    flow = make_flow_path(
        generators=[
            GeneratorConfig(id="a", type="polygon", params={"size": Range(2.0, 4.0)}),
            GeneratorConfig(id="b", type="leaf", weight=2.0, params={"size": 3.0}),
        ],
        dist_seed=21,
        dist_density=0.2,
        flow_fill_mode=fill_mode,
        flow_spread=Range(6.0, 12.0),
    )
    pipeline = InstancePipeline(registry)
    first = pipeline.place(flow)
    assert first
    assert _snapshot(first) == _snapshot(pipeline.place(flow))


def test_instance_ids_and_sources(registry):
    instances = InstancePipeline(registry).place(make_flow_path(id="river", flow_fill_mode="grid"))
    assert [i.id for i in instances[:3]] == ["river-instance-0", "river-instance-1", "river-instance-2"]
    assert all(i.source_id == "river" for i in instances)


def test_shape_is_moved_to_placement(registry):
    flow = make_flow_path(flow_fill_mode="grid", flow_spread=0.0, dist_density=0.1)
    pipeline = InstancePipeline(registry)
    placements = pipeline.placements(flow)
    instances = pipeline.place(flow)

    assert len(instances) == len(placements)
    half = mm_to_px(4.0) / 2
    for placement, inst in zip(placements, instances):
        assert inst.position == placement.position
        assert inst.rotation == pytest.approx(0.0)
        cx, cy = inst.shape.bounds.center
        assert cx == pytest.approx(placement.position[0])
        assert cy == pytest.approx(placement.position[1])
        assert inst.shape.bounds.width == pytest.approx(2 * half)


def test_rotation_follows_tangent_or_normal(registry):
    down = PolylineCurve([(0.0, 0.0), (0.0, mm_to_px(50))])
    tangent = InstancePipeline(registry).place(make_flow_path(curve=down, flow_fill_mode="grid"))
    assert all(i.rotation == pytest.approx(90.0) for i in tangent)

    normal = InstancePipeline(registry).place(
        make_flow_path(
            curve=down,
            flow_fill_mode="grid",
            generators=[GeneratorConfig(id="n", type="square", follow_normal=True)],
        )
    )
    assert all(i.rotation == pytest.approx(180.0) for i in normal)


def test_follow_curve_factor_and_rotation_modifier(registry):
    down = PolylineCurve([(0.0, 0.0), (0.0, mm_to_px(50))])
    flow = make_flow_path(
        curve=down,
        flow_fill_mode="grid",
        flow_follow_curve=0.5,
        modifiers=[Modifier.constant(ModifierKind.ROTATION, 10.0)],
    )
    instances = InstancePipeline(registry).place(flow)
    assert all(i.rotation == pytest.approx(55.0) for i in instances)


def test_follow_curve_range_varies_per_instance(registry):
    down = PolylineCurve([(0.0, 0.0), (0.0, mm_to_px(50))])
    flow = make_flow_path(curve=down, flow_fill_mode="grid", flow_follow_curve=Range(0.0, 1.0))
    instances = InstancePipeline(registry).place(flow)

    rotations = [i.rotation for i in instances]
    assert len({round(r, 6) for r in rotations}) > 1
    assert all(0.0 <= r <= 90.0 + 1e-9 for r in rotations)

    again = InstancePipeline(registry).place(flow)
    assert [i.rotation for i in again] == rotations


def test_size_modifier_scales_about_anchor(registry):
    flow = make_flow_path(
        flow_fill_mode="grid",
        flow_spread=0.0,
        dist_density=0.1,
        modifiers=[Modifier.constant(ModifierKind.SIZE, 2.0)],
    )
    instances = InstancePipeline(registry).place(flow)
    assert instances
    for inst in instances:
        assert inst.scale == 2.0
        assert inst.shape.bounds.width == pytest.approx(mm_to_px(8.0))
        assert inst.shape.bounds.center == pytest.approx(inst.position)


def test_packed_fill_picks_generator_by_placement_index(registry):
    flow = make_flow_path(
        generators=[
            GeneratorConfig(id="sq", type="square", params={"size": 2.0}),
            GeneratorConfig(id="poly", type="polygon", params={"size": 3.0}),
        ],
        flow_fill_mode="packed",
        dist_packing_mode=PackingMode.NORMAL,
        dist_seed=4,
    )
    instances = InstancePipeline(registry).place(flow)
    assert len(instances) > 1

    type_of = {"sq": "square", "poly": "polygon"}
    expected = [type_of[weighted_choice(flow.generators, 4 + i).id] for i in range(len(instances))]
    assert [i.generator_type for i in instances] == expected


def test_generator_radii_from_mid_curve_sample(registry):
    flow = make_flow_path(generators=[GeneratorConfig(id="sq", type="square", params={"size": 3.0})])
    radii = InstancePipeline(registry).generator_radii(flow)
    side = mm_to_px(3.0)
    assert radii["sq"] == pytest.approx(np.hypot(side, side) / 2)


def test_custom_param_evaluator_is_used(registry):
    seen = []

    def evaluator(params, t, rng):
        seen.append(t)
        return {"size": 1.0}

    pipeline = InstancePipeline(registry, param_evaluator=evaluator)
    instances = pipeline.place(make_flow_path(flow_fill_mode="grid", flow_spread=0.0, dist_density=0.1))
    assert instances
    assert all(inst.shape.bounds.width == pytest.approx(mm_to_px(1.0)) for inst in instances)
    assert 0.5 in seen  # footprint probe


def test_transform_order_scale_rotate_translate():
    square = SquareGenerator().generate(0.5, {"size": 2.0}, 0)
    moved = transform_shape(square, (100.0, 50.0), 90.0, 2.0)
    half = mm_to_px(2.0)  # scaled half side
    expected = np.array([(-half, -half), (half, -half), (half, half), (-half, half), (-half, -half)])
    rotated = expected @ np.array([[0.0, -1.0], [1.0, 0.0]]).T + np.array([100.0, 50.0])
    np.testing.assert_allclose(moved.subpaths[0], rotated, atol=1e-9)
    assert moved.anchor == (100.0, 50.0)


def _dot(id: str, x: float, y: float) -> GeneratedInstance:
    shape = build_shape([np.array([(x, y), (x + 1.0, y)])], anchor=(x, y))
    return GeneratedInstance(
        id=id, shape=shape, position=(x, y), rotation=0.0, scale=1.0, source_id="p", generator_type="dot"
    )


def test_boids_single_pass_uses_pre_pass_positions():
    instances = [_dot("a", 0.0, 0.0), _dot("b", 10.0, 0.0), _dot("c", 100.0, 0.0)]
    relaxed = apply_boids(instances, strength=0.5, radius_px=20.0)

    assert relaxed[0].position == pytest.approx((5.0, 0.0))
    assert relaxed[1].position == pytest.approx((5.0, 0.0))
    assert relaxed[2] is instances[2]
    np.testing.assert_allclose(relaxed[0].shape.subpaths[0], [(5.0, 0.0), (6.0, 0.0)])


def test_boids_disabled_by_zero_strength():
    instances = [_dot("a", 0.0, 0.0), _dot("b", 1.0, 0.0)]
    assert apply_boids(instances, 0.0, 50.0) == instances


def test_pipeline_runs_boids_pass(registry):
    base = make_flow_path(flow_fill_mode="grid", flow_spread=0.0, dist_density=0.5)
    nudged = dataclasses.replace(
        base, flow=dataclasses.replace(base.flow, boids_strength=0.5, boids_radius=5.0)
    )
    plain = InstancePipeline(registry).place(base)
    relaxed = InstancePipeline(registry).place(nudged)
    assert len(plain) == len(relaxed)
    # interior rows are symmetric about themselves, the ends get pulled inward
    assert relaxed[0].position[0] > plain[0].position[0]
    assert relaxed[-1].position[0] < plain[-1].position[0]


def test_place_standalone(registry):
    pipeline = InstancePipeline(registry)
    inst = pipeline.place_standalone("square", {"size": 2.0}, (40.0, 60.0), rotation=0.0, scale=3.0, seed=9)
    assert inst.position == (40.0, 60.0)
    assert inst.generator_type == "square"
    assert inst.shape.bounds.width == pytest.approx(mm_to_px(6.0))
    assert inst.shape.bounds.center == pytest.approx((40.0, 60.0))

    with pytest.raises(UnknownGeneratorError):
        pipeline.place_standalone("dragon", {}, (0.0, 0.0))
