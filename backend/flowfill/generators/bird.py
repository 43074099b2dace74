"""Bird — flying silhouette: elliptical body, mirrored wings, optional head."""

from __future__ import annotations

from typing import Any

import numpy as np
from shapely import affinity
from shapely.geometry import Point

from flowfill.engine.model import Shape
from flowfill.engine.params import Range
from flowfill.engine.registry import ParamDefinition
from flowfill.engine.seeds import seeded_random
from flowfill.engine.units import mm_to_px
from flowfill.generators.base import build_shape, close_ring, exterior_rings, number
from flowfill.utils.geometry import smooth_polyline


class BirdGenerator:
    type = "bird"
    name = "Bird"
    description = "Flying bird silhouettes with adjustable wings and detail levels"
    tags = ("nature", "animal", "organic", "flying")
    size_param = "size"

    def generate(self, t: float, params: dict[str, Any], seed: int) -> Shape:
        rng = seeded_random(seed)
        size = mm_to_px(number(params, "size", 5.0, rng))
        span = number(params, "wingSpan", 0.8, rng)
        lift = number(params, "wingAngle", 0.3, rng)
        detail = number(params, "detailLevel", 0.5, rng)

        body = affinity.scale(Point(0, 0).buffer(size / 2, quad_segs=16), 1.0, 0.6)
        subpaths = exterior_rings(body)

        wing = np.array(
            [
                (0.0, 0.0),
                (-size * span * 0.7, -size * 0.2 - size * lift),
                (-size * span, -size * 0.1 + size * lift),
                (-size * span * 0.5, size * 0.3),
            ],
            dtype=np.float64,
        )
        left = close_ring(smooth_polyline(wing, closed=True, samples=32))
        right = left * np.array([-1.0, 1.0])
        subpaths.extend([left, right])

        if detail > 0.5:
            head = Point(size * 0.4, -size * 0.1).buffer(size * 0.25, quad_segs=8)
            subpaths.extend(exterior_rings(head))

        return build_shape(subpaths)

    def default_params(self) -> dict[str, Any]:
        return {"size": Range(3.0, 8.0), "wingSpan": 0.8, "wingAngle": 0.3, "detailLevel": 0.5}

    def param_definitions(self) -> list[ParamDefinition]:
        return [
            ParamDefinition("size", "range", "Size", 1, 50, 0.5, "mm", "Bird size in millimetres"),
            ParamDefinition("wingSpan", "slider", "Wing span", 0.3, 1.5, 0.1, None, "Wing width relative to the body"),
            ParamDefinition("wingAngle", "slider", "Wing angle", 0, 1, 0.1, None, "0 = flat, 1 = raised"),
            ParamDefinition("detailLevel", "slider", "Detail level", 0, 1, 0.1, None, "Above 0.5 draws the head"),
        ]
