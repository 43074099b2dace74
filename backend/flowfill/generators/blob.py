"""Blob — an organic cluster of overlapping circles merged into one outline."""

from __future__ import annotations

import math
from typing import Any

from shapely.geometry import Point
from shapely.ops import unary_union

from flowfill.engine.model import Shape
from flowfill.engine.params import Range
from flowfill.engine.registry import ParamDefinition
from flowfill.engine.seeds import seeded_random
from flowfill.engine.units import mm_to_px
from flowfill.generators.base import build_shape, exterior_rings, number


class BlobGenerator:
    type = "blob"
    name = "Blob"
    description = "Soft organic clusters built from merged circles"
    tags = ("organic", "abstract", "cluster")
    size_param = "size"

    def generate(self, t: float, params: dict[str, Any], seed: int) -> Shape:
        rng = seeded_random(seed)
        size = mm_to_px(number(params, "size", 5.0, rng))
        lobes = max(1, int(number(params, "lobes", 4, rng)))
        spread = number(params, "spread", 0.5, rng)
        smoothing = number(params, "smoothing", 0.1, rng)

        radius = size / 4
        circles = [Point(0, 0).buffer(radius, quad_segs=12)]
        for i in range(lobes):
            angle = 2 * math.pi * (i + rng() * 0.5) / lobes
            distance = radius * spread * (0.5 + rng())
            lobe_radius = radius * (0.5 + rng() * 0.5)
            center = Point(math.cos(angle) * distance, math.sin(angle) * distance)
            circles.append(center.buffer(lobe_radius, quad_segs=12))

        merged = unary_union(circles)
        if smoothing > 0:
            # Close concave seams between lobes.
            amount = radius * smoothing
            merged = merged.buffer(amount, quad_segs=8).buffer(-amount, quad_segs=8)

        return build_shape(exterior_rings(merged))

    def default_params(self) -> dict[str, Any]:
        return {"size": Range(4.0, 9.0), "lobes": 4, "spread": 0.5, "smoothing": 0.1}

    def param_definitions(self) -> list[ParamDefinition]:
        return [
            ParamDefinition("size", "range", "Size", 1, 50, 0.5, "mm", "Overall blob diameter"),
            ParamDefinition("lobes", "number", "Lobes", 1, 12, 1),
            ParamDefinition("spread", "slider", "Spread", 0, 1.5, 0.05, None, "How far lobes sit from the centre"),
            ParamDefinition("smoothing", "slider", "Smoothing", 0, 1, 0.05),
        ]
