"""Shared helpers for the built-in generators.

Generators receive parameters already evaluated by the pipeline, but a raw
``Range``/``Scalar`` or ``{"min", "max"}`` mapping is still accepted and
resolved from the generator's own stream.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

from flowfill.engine.model import AABB, Shape
from flowfill.engine.params import Range, Rng, Scalar
from flowfill.utils.geometry import bbox_of_many


def number(params: dict[str, Any], name: str, default: float, rng: Rng) -> float:
    value = params.get(name, default)
    if isinstance(value, dict) and "min" in value and "max" in value:
        value = Range(float(value["min"]), float(value["max"]))
    if isinstance(value, (Scalar, Range)):
        return value.resolve(rng)
    if value is None:
        return float(default)
    return float(value)


def flag(params: dict[str, Any], name: str, default: bool = False) -> bool:
    return bool(params.get(name, default))


def exterior_rings(geom: BaseGeometry) -> list[NDArray[np.float64]]:
    """Outer rings of a (multi)polygon as closed Nx2 arrays."""
    if geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        polygons = [geom]
    elif isinstance(geom, MultiPolygon):
        polygons = list(geom.geoms)
    else:
        return []
    return [np.asarray(p.exterior.coords, dtype=np.float64) for p in polygons]


def close_ring(points: NDArray[np.float64]) -> NDArray[np.float64]:
    if len(points) == 0 or np.allclose(points[0], points[-1]):
        return points
    return np.vstack([points, points[:1]])


def build_shape(subpaths: list[NDArray[np.float64]], anchor: tuple[float, float] = (0.0, 0.0)) -> Shape:
    paths = [np.asarray(p, dtype=np.float64) for p in subpaths if len(p) > 0]
    return Shape(subpaths=paths, bounds=AABB.from_bounds(bbox_of_many(paths)), anchor=anchor)
