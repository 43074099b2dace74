"""Grass — a single swaying blade rooted at the anchor, with optional seed head and tuft.

The blade is an open stroke; the seed head is a small closed ellipse at the tip.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from shapely import affinity
from shapely.geometry import Point

from flowfill.engine.model import Shape
from flowfill.engine.params import Range
from flowfill.engine.registry import ParamDefinition
from flowfill.engine.seeds import seeded_random
from flowfill.engine.units import mm_to_px
from flowfill.generators.base import build_shape, exterior_rings, flag, number
from flowfill.utils.geometry import smooth_polyline
from flowfill.utils.math_helpers import lerp

_BLADE_SEGMENTS = 8


class GrassGenerator:
    type = "grass"
    name = "Grass Blade"
    description = "Minimalist organic grass blades with natural sway"
    tags = ("nature", "organic", "plant", "minimal")
    size_param = "height"

    def generate(self, t: float, params: dict[str, Any], seed: int) -> Shape:
        rng = seeded_random(seed + int(t * 1000))
        height = mm_to_px(number(params, "height", 12.0, rng))
        base_width = mm_to_px(number(params, "baseWidth", 2.0, rng))
        sway = number(params, "sway", 0.0, rng)
        curve = number(params, "curvature", 0.5, rng) * (rng() - 0.5) * 2

        blade = []
        for i in range(_BLADE_SEGMENTS + 1):
            progress = i / _BLADE_SEGMENTS
            x = sway * height * progress * progress + curve * height * math.sin(progress * math.pi)
            blade.append((x, -height * progress))
        blade_path = smooth_polyline(np.array(blade, dtype=np.float64), closed=False, samples=32)
        subpaths = [blade_path]

        if flag(params, "seedHead", True) and rng() < number(params, "seedHeadChance", 0.3, rng):
            tip_x, tip_y = blade_path[-1]
            seed_size = mm_to_px(number(params, "seedHeadSize", 1.5, rng))
            head = affinity.scale(Point(0, 0).buffer(seed_size / 2, quad_segs=8), 0.6, 1.0)
            subpaths.extend(exterior_rings(affinity.translate(head, tip_x, tip_y)))

        if flag(params, "baseTuft", True) and rng() < 0.5:
            tuft_height = height * 0.15
            for _ in range(int(lerp(2, 4, rng()))):
                angle = math.radians((rng() - 0.5) * 60)
                length = lerp(tuft_height * 0.5, tuft_height, rng())
                start = (base_width * (rng() - 0.5), 0.0)
                end = (math.sin(angle) * length, -length)
                subpaths.append(np.array([start, end], dtype=np.float64))

        return build_shape(subpaths)

    def default_params(self) -> dict[str, Any]:
        return {
            "height": Range(8.0, 20.0),
            "baseWidth": 2.0,
            "sway": Range(-0.3, 0.3),
            "curvature": 0.5,
            "seedHead": True,
            "seedHeadChance": 0.3,
            "seedHeadSize": 1.5,
            "baseTuft": True,
        }

    def param_definitions(self) -> list[ParamDefinition]:
        return [
            ParamDefinition("height", "range", "Height", 3, 40, 0.5, "mm"),
            ParamDefinition("baseWidth", "slider", "Base width", 0.5, 5, 0.1, "mm"),
            ParamDefinition("sway", "range", "Sway", -1, 1, 0.05, None, "Negative leans left, positive right"),
            ParamDefinition("curvature", "slider", "Curvature", 0, 2, 0.1),
            ParamDefinition("seedHead", "checkbox", "Seed heads"),
            ParamDefinition("seedHeadChance", "slider", "Seed head chance", 0, 1, 0.05),
            ParamDefinition("seedHeadSize", "slider", "Seed head size", 0.5, 5, 0.1, "mm"),
            ParamDefinition("baseTuft", "checkbox", "Base tuft detail"),
        ]
