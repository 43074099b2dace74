"""Parameter values that are either a fixed number or a {min, max} range.

A range is resolved to a concrete number by drawing once from an RNG stream.
Resolution is the only place a range consumes randomness, so a scalar never
shifts the stream of the values resolved after it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Union

from flowfill.utils.math_helpers import lerp

if TYPE_CHECKING:
    from flowfill.engine.model import GeneratorConfig

Rng = Callable[[], float]


@dataclass(frozen=True)
class Scalar:
    value: float

    def resolve(self, rng: Rng) -> float:
        return float(self.value)

    @property
    def midpoint(self) -> float:
        return float(self.value)


@dataclass(frozen=True)
class Range:
    min: float
    max: float

    def resolve(self, rng: Rng) -> float:
        return lerp(self.min, self.max, rng())

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2


ParamValue = Union[Scalar, Range]


def as_param(value: ParamValue | float | int) -> ParamValue:
    """Coerce a bare number to Scalar. Scalars and ranges pass through."""
    if isinstance(value, (Scalar, Range)):
        return value
    return Scalar(float(value))


def resolve(value: ParamValue, rng: Rng) -> float:
    return value.resolve(rng)


def evaluate_animatable_params(params: dict[str, Any], t: float, rng: Rng) -> dict[str, Any]:
    """Concrete generator parameters at position t.

    Ranges are resolved in key order; everything else is passed through.
    ``t`` is accepted so a timeline-aware evaluator can be swapped in with
    the same signature.
    """
    evaluated: dict[str, Any] = {}
    for name, value in params.items():
        if isinstance(value, (Scalar, Range)):
            evaluated[name] = value.resolve(rng)
        else:
            evaluated[name] = value
    return evaluated


def average_generator_size(
    generators: list[GeneratorConfig],
    size_params: dict[str, str] | None = None,
    default_mm: float = 5.0,
) -> float:
    """Mean footprint in mm over the configured generators.

    ``size_params`` maps a generator type to the name of its size parameter
    (``"size"`` when absent). A missing or non-numeric parameter counts as
    ``default_mm``.
    """
    if not generators:
        return default_mm

    total = 0.0
    for gen in generators:
        name = (size_params or {}).get(gen.type, "size")
        value = gen.params.get(name)
        if isinstance(value, (Scalar, Range)):
            total += value.midpoint
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            total += float(value)
        else:
            total += default_mm
    return total / len(generators)
