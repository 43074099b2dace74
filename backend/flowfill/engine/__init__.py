"""FlowFill placement engine."""

from flowfill.engine.curve import Curve, PolylineCurve, SvgPathCurve
from flowfill.engine.distribution import sample_t_values
from flowfill.engine.errors import ConfigurationError, FlowFillError, UnknownGeneratorError
from flowfill.engine.pipeline import InstancePipeline
from flowfill.engine.registry import GeneratorRegistry
from flowfill.engine.tube_filling import generate_tube_positions

__all__ = [
    "Curve",
    "PolylineCurve",
    "SvgPathCurve",
    "sample_t_values",
    "ConfigurationError",
    "FlowFillError",
    "UnknownGeneratorError",
    "InstancePipeline",
    "GeneratorRegistry",
    "generate_tube_positions",
]
