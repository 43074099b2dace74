"""Tests for the arc-length curve adapters."""

import math

import numpy as np
import pytest
from svgpathtools import parse_path

from flowfill.engine.curve import Curve, PolylineCurve, SvgPathCurve
from tests.conftest import ARC_D, LINE_100MM_D, SQUARE_LOOP_D, WAVE_D


def test_polyline_length_and_lookup():
    curve = PolylineCurve([(0, 0), (3, 4)])
    assert curve.length() == pytest.approx(5.0)
    assert curve.point_at(2.5) == pytest.approx((1.5, 2.0))
    assert curve.tangent_at(1.0) == pytest.approx((0.6, 0.8))
    assert curve.normal_at(1.0) == pytest.approx((-0.8, 0.6))


def test_offsets_are_clamped():
    curve = PolylineCurve([(0, 0), (10, 0)])
    assert curve.point_at(-5) == pytest.approx((0.0, 0.0))
    assert curve.point_at(50) == pytest.approx((10.0, 0.0))


def test_duplicate_points_are_merged():
    curve = PolylineCurve([(0, 0), (0, 0), (10, 0), (10, 0)])
    assert len(curve.points) == 2
    assert curve.length() == pytest.approx(10.0)


def test_degenerate_curves():
    single = PolylineCurve([(5, 5)])
    assert single.length() == 0.0
    assert single.point_at(3.0) == (5.0, 5.0)
    assert single.tangent_at(0.0) == (1.0, 0.0)

    empty = PolylineCurve([])
    assert empty.length() == 0.0


def test_polyline_satisfies_curve_protocol():
    assert isinstance(PolylineCurve([(0, 0), (1, 0)]), Curve)


def test_svg_line_length():
    curve = SvgPathCurve.from_path_data(LINE_100MM_D)
    assert curve.length() == pytest.approx(1181.1023622047244)
    assert not curve.closed


@pytest.mark.parametrize("d", [WAVE_D, ARC_D])
def test_svg_curve_length_matches_path(d):
    curve = SvgPathCurve.from_path_data(d, samples_per_segment=64)
    assert curve.length() == pytest.approx(parse_path(d).length(), rel=5e-3)


def test_closed_loop():
    curve = SvgPathCurve.from_path_data(SQUARE_LOOP_D)
    assert curve.closed
    assert curve.length() == pytest.approx(800.0)
    start = curve.point_at(0.0)
    end = curve.point_at(curve.length())
    assert start == pytest.approx(end)


def test_tangent_and_normal_are_unit_and_perpendicular(wave_curve):
    length = wave_curve.length()
    for s in np.linspace(0, length, 17):
        tx, ty = wave_curve.tangent_at(s)
        nx, ny = wave_curve.normal_at(s)
        assert math.hypot(tx, ty) == pytest.approx(1.0)
        assert math.hypot(nx, ny) == pytest.approx(1.0)
        assert tx * nx + ty * ny == pytest.approx(0.0, abs=1e-9)


def test_normal_points_right_of_travel_on_y_down_canvas(straight_curve):
    # Travelling +x, the normal points +y (down the page).
    assert straight_curve.normal_at(10.0) == pytest.approx((0.0, 1.0))
