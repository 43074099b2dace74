"""Leaf — tapered outline from base (anchor) to tip with mirrored veins."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from flowfill.engine.model import Shape
from flowfill.engine.params import Range
from flowfill.engine.registry import ParamDefinition
from flowfill.engine.seeds import seeded_random
from flowfill.engine.units import mm_to_px
from flowfill.generators.base import build_shape, close_ring, number
from flowfill.utils.geometry import smooth_polyline
from flowfill.utils.math_helpers import lerp

_OUTLINE_STEPS = 10


class LeafGenerator:
    type = "leaf"
    name = "Leaf"
    description = "Organic leaf shapes with customizable curvature and veins"
    tags = ("nature", "plant", "organic", "botanical")
    size_param = "size"

    def generate(self, t: float, params: dict[str, Any], seed: int) -> Shape:
        rng = seeded_random(seed)
        size = mm_to_px(number(params, "size", 8.0, rng))
        curvature = number(params, "curvature", 0.3, rng)
        veins = number(params, "veins", 0.5, rng)

        tip_y = -size
        base_y = 0.0
        max_width = size * 0.4

        def side(sign: float, progress: float) -> tuple[float, float]:
            y = lerp(tip_y, base_y, progress)
            bulge = math.sin(progress * math.pi)
            return (sign * bulge * max_width + bulge * curvature * size * 0.1, y)

        right = [side(1, i / _OUTLINE_STEPS) for i in range(1, _OUTLINE_STEPS)]
        left = [side(-1, i / _OUTLINE_STEPS) for i in range(_OUTLINE_STEPS - 1, 0, -1)]
        outline = np.array([(0.0, tip_y), *right, (0.0, base_y), *left], dtype=np.float64)
        subpaths = [close_ring(smooth_polyline(outline, closed=True, samples=64))]

        vein_count = int(math.floor(veins * 5))
        for i in range(1, vein_count + 1):
            progress = i / (vein_count + 1)
            y = lerp(tip_y * 0.9, base_y * 0.1, progress)
            reach = math.sin(progress * math.pi) * max_width * 0.8 * rng()
            end_y = y + size * 0.05
            subpaths.append(np.array([(0.0, y), (reach, end_y)]))
            subpaths.append(np.array([(0.0, y), (-reach, end_y)]))

        return build_shape(subpaths)

    def default_params(self) -> dict[str, Any]:
        return {"size": Range(5.0, 12.0), "curvature": 0.3, "veins": 0.5}

    def param_definitions(self) -> list[ParamDefinition]:
        return [
            ParamDefinition("size", "range", "Size", 1, 50, 0.5, "mm", "Leaf length in millimetres"),
            ParamDefinition("curvature", "slider", "Curvature", 0, 1, 0.1, None, "Sideways bend of the leaf"),
            ParamDefinition("veins", "slider", "Veins", 0, 1, 0.1, None, "Vein count (0 = none, 1 = max)"),
        ]
