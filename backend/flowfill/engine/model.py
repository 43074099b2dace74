"""Placement data model — enums, boxes, placements, modifiers, shapes, instances.

Flow path configuration is read-only input owned by the caller. Placements
are ephemeral per pass; instances are frozen once created.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from flowfill.engine.params import ParamValue, Scalar, as_param
from flowfill.utils.math_helpers import evaluate_easing

if TYPE_CHECKING:
    from flowfill.engine.curve import Curve

Point2D = tuple[float, float]


class PackingMode(str, enum.Enum):
    TIGHT = "tight"
    NORMAL = "normal"
    LOOSE = "loose"
    ALLOW_OVERLAP = "allow-overlap"


class FillMode(str, enum.Enum):
    GRID = "grid"
    NOISE = "noise"
    RANDOM = "random"
    PACKED = "packed"


class DistributionMode(str, enum.Enum):
    LINEAR = "linear"
    RANDOM = "random"
    NOISE = "noise"
    VISUAL_DENSITY = "visual-density"


class ModifierKind(str, enum.Enum):
    SIZE = "size"
    ROTATION = "rotation"
    SPACING = "spacing"
    SPREAD = "spread"


@dataclass(frozen=True, eq=False)
class AABB:
    """Axis-aligned box in a y-down space. Compared by identity."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_center(cls, cx: float, cy: float, half_w: float, half_h: float | None = None) -> AABB:
        hh = half_w if half_h is None else half_h
        return cls(cx - half_w, cy - hh, 2 * half_w, 2 * hh)

    @classmethod
    def from_bounds(cls, bounds: tuple[float, float, float, float]) -> AABB:
        xmin, ymin, xmax, ymax = bounds
        return cls(xmin, ymin, xmax - xmin, ymax - ymin)

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point2D:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def intersects(self, other: AABB) -> bool:
        """Strict overlap; boxes that only touch do not intersect."""
        return (
            other.right > self.left
            and other.bottom > self.top
            and other.left < self.right
            and other.top < self.bottom
        )

    def shrink(self, amount: float) -> AABB:
        """Move every edge inward by ``amount`` (negative grows the box)."""
        return AABB(self.x + amount, self.y + amount, self.width - 2 * amount, self.height - 2 * amount)

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class Placement:
    """An accepted position inside the tube."""

    t: float
    offset: float  # signed, mm; negative = left of the curve direction
    position: Point2D  # px
    radius: float = 0.0  # px collision radius used at acceptance
    generator_id: str | None = None  # pre-assigned by packed fill


@dataclass(frozen=True)
class Modifier:
    """A response curve over t: boundary values outside [t_start, t_end], eased inside."""

    kind: ModifierKind
    enabled: bool = True
    t_start: float = 0.0
    t_end: float = 1.0
    value_start: float = 1.0
    value_end: float = 1.0
    easing: str = "linear"

    @classmethod
    def constant(cls, kind: ModifierKind, value: float, enabled: bool = True) -> Modifier:
        return cls(kind=kind, enabled=enabled, value_start=value, value_end=value)

    def value_at(self, t: float) -> float:
        if t <= self.t_start:
            return self.value_start
        if t >= self.t_end:
            return self.value_end
        span = self.t_end - self.t_start
        local = (t - self.t_start) / span
        factor = evaluate_easing(local, self.easing)
        return self.value_start + (self.value_end - self.value_start) * factor


@dataclass
class DistributionParams:
    mode: DistributionMode = DistributionMode.LINEAR
    density: ParamValue = field(default_factory=lambda: Scalar(1.0))  # shapes per mm of curve
    spacing: tuple[float, float] = (0.5, 1.5)  # noise step multiplier range
    seed: int = 0
    noise_scale: float = 0.3
    noise_strength: float = 1.0
    noise_threshold: float | None = None
    packing_mode: PackingMode = PackingMode.NORMAL
    min_spacing: float = 0.0  # mm
    candidate_mode: DistributionMode = DistributionMode.RANDOM  # visual-density source

    def __post_init__(self) -> None:
        self.density = as_param(self.density)
        self.mode = DistributionMode(self.mode)
        self.packing_mode = PackingMode(self.packing_mode)
        self.candidate_mode = DistributionMode(self.candidate_mode)


@dataclass
class FlowParams:
    follow_curve: ParamValue = field(default_factory=lambda: Scalar(1.0))
    spread: ParamValue = field(default_factory=lambda: Scalar(10.0))  # tube width, mm
    fill_mode: FillMode = FillMode.RANDOM
    boids_strength: float = 0.0
    boids_radius: float = 10.0  # mm

    def __post_init__(self) -> None:
        self.follow_curve = as_param(self.follow_curve)
        self.spread = as_param(self.spread)
        self.fill_mode = FillMode(self.fill_mode)


@dataclass
class GeneratorConfig:
    id: str
    type: str
    weight: float = 1.0
    params: dict[str, Any] = field(default_factory=dict)
    follow_normal: bool = False


@dataclass
class FlowPathConfig:
    id: str
    curve: Curve
    distribution: DistributionParams = field(default_factory=DistributionParams)
    flow: FlowParams = field(default_factory=FlowParams)
    generators: list[GeneratorConfig] = field(default_factory=list)
    modifiers: list[Modifier] = field(default_factory=list)


@dataclass(frozen=True)
class Shape:
    """Generator output: open or closed polylines in px around a local anchor."""

    subpaths: list[NDArray[np.float64]]
    bounds: AABB
    anchor: Point2D = (0.0, 0.0)


@dataclass(frozen=True)
class GeneratedInstance:
    id: str
    shape: Shape
    position: Point2D
    rotation: float  # degrees
    scale: float
    source_id: str
    generator_type: str
