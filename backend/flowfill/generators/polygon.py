"""Polygon — regular or jittered n-gons, optionally with a centre dot."""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from shapely.geometry import Point

from flowfill.engine.model import Shape
from flowfill.engine.params import Range
from flowfill.engine.registry import ParamDefinition
from flowfill.engine.seeds import seeded_random
from flowfill.engine.units import mm_to_px
from flowfill.generators.base import build_shape, close_ring, exterior_rings, flag, number
from flowfill.utils.geometry import smooth_polyline


class PolygonGenerator:
    type = "polygon"
    name = "Polygon"
    description = "Geometric shapes with 3-12 sides and adjustable regularity"
    tags = ("geometric", "shape", "abstract", "mathematical")
    size_param = "size"

    def generate(self, t: float, params: dict[str, Any], seed: int) -> Shape:
        rng = seeded_random(seed)
        size = mm_to_px(number(params, "size", 5.0, rng))
        sides = max(3, int(number(params, "sides", 5, rng)))
        regularity = number(params, "regularity", 0.8, rng)

        step = 2 * math.pi / sides
        vertices = []
        for i in range(sides):
            angle = i * step - math.pi / 2  # first vertex at the top
            variation = (rng() - 0.5) * (1 - regularity) if regularity < 1 else 0.0
            radius = size / 2 * (1 + variation)
            vertices.append((math.cos(angle) * radius, math.sin(angle) * radius))

        outline = np.array(vertices, dtype=np.float64)
        if regularity > 0.9:
            outline = smooth_polyline(outline, closed=True, samples=sides * 8)
        subpaths = [close_ring(outline)]

        if flag(params, "centerDot"):
            subpaths.extend(exterior_rings(Point(0, 0).buffer(size * 0.1, quad_segs=8)))

        return build_shape(subpaths)

    def default_params(self) -> dict[str, Any]:
        return {
            "size": Range(3.0, 10.0),
            "sides": 5,
            "regularity": 0.8,
            "centerDot": False,
        }

    def param_definitions(self) -> list[ParamDefinition]:
        return [
            ParamDefinition("size", "range", "Size", 1, 50, 0.5, "mm", "Polygon size in millimetres"),
            ParamDefinition("sides", "number", "Sides", 3, 12, 1, None, "Number of sides"),
            ParamDefinition(
                "regularity", "slider", "Regularity", 0, 1, 0.1, None, "0 = irregular, 1 = regular"
            ),
            ParamDefinition("centerDot", "checkbox", "Center dot", description="Add a dot at the centre"),
        ]
