"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import numpy as np
import pytest

from flowfill.engine.curve import PolylineCurve, SvgPathCurve
from flowfill.engine.model import (
    DistributionParams,
    FlowParams,
    FlowPathConfig,
    GeneratorConfig,
    Shape,
)
from flowfill.engine.registry import GeneratorRegistry
from flowfill.engine.units import mm_to_px
from flowfill.generators.base import build_shape
from flowfill.generators.catalog import create_default_registry


# Sample curves as SVG path data (px at 300 DPI)

# 100 mm horizontal line
LINE_100MM_D = "M 0 0 L 1181.1023622047244 0"

WAVE_D = "M 0 300 C 300 0 600 600 900 300 S 1500 0 1800 300"

SQUARE_LOOP_D = "M 0 0 L 200 0 L 200 200 L 0 200 Z"

ARC_D = "M 100 500 A 400 400 0 0 1 900 500"


class SquareGenerator:
    """Axis-aligned square of side ``size`` mm centred on the anchor."""

    type = "square"
    name = "Square"
    description = "Test square"
    tags = ("test",)
    size_param = "size"

    def generate(self, t: float, params: dict[str, Any], seed: int) -> Shape:
        half = mm_to_px(float(params.get("size", 4.0))) / 2
        ring = np.array([(-half, -half), (half, -half), (half, half), (-half, half), (-half, -half)])
        return build_shape([ring])

    def default_params(self) -> dict[str, Any]:
        return {"size": 4.0}

    def param_definitions(self):
        return []


def line_curve(length_mm: float = 100.0) -> PolylineCurve:
    return PolylineCurve([(0.0, 0.0), (mm_to_px(length_mm), 0.0)])


def make_flow_path(
    curve=None,
    generators: list[GeneratorConfig] | None = None,
    modifiers=None,
    **kwargs: Any,
) -> FlowPathConfig:
    """Flow path on a 100 mm line with one 4 mm square generator unless overridden.

    Keyword arguments prefixed ``dist_`` / ``flow_`` go to the distribution / flow params.
    """
    dist = {k[5:]: v for k, v in kwargs.items() if k.startswith("dist_")}
    flow = {k[5:]: v for k, v in kwargs.items() if k.startswith("flow_")}
    return FlowPathConfig(
        id=kwargs.get("id", "path"),
        curve=curve or line_curve(),
        distribution=DistributionParams(**dist),
        flow=FlowParams(**flow),
        generators=generators if generators is not None else [GeneratorConfig(id="g1", type="square")],
        modifiers=modifiers or [],
    )


@pytest.fixture
def straight_curve() -> PolylineCurve:
    return line_curve()


@pytest.fixture
def wave_curve() -> SvgPathCurve:
    return SvgPathCurve.from_path_data(WAVE_D)


@pytest.fixture
def registry() -> GeneratorRegistry:
    reg = create_default_registry()
    reg.register(SquareGenerator())
    return reg
