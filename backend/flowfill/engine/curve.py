"""Curve protocol plus arc-length parameterised reference curves.

The engine only consumes ``Curve``: length, point, tangent and normal at an
arc-length offset in px. ``SvgPathCurve`` builds one from SVG path data via
svgpathtools by dense sampling; lookups then interpolate on the cumulative
arc length, so every offset is a true arc-length offset.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray
from svgpathtools import Path, parse_path

from flowfill.engine.model import Point2D
from flowfill.utils.geometry import arc_lengths

logger = logging.getLogger(__name__)

# Consecutive samples closer than this are merged.
_DUPLICATE_EPS = 1e-9


@runtime_checkable
class Curve(Protocol):
    def length(self) -> float: ...

    def point_at(self, offset: float) -> Point2D: ...

    def tangent_at(self, offset: float) -> Point2D: ...

    def normal_at(self, offset: float) -> Point2D: ...


def _normalize(vx: float, vy: float) -> Point2D:
    norm = float(np.hypot(vx, vy))
    if norm < 1e-12:
        return (1.0, 0.0)
    return (vx / norm, vy / norm)


class PolylineCurve:
    """Piecewise-linear curve through ``points`` (Nx2, px).

    Tangents are estimated with ``np.gradient`` over the samples and
    interpolated along the arc length; the normal is the tangent rotated
    +90° (``(-ty, tx)``), i.e. to the right of travel on a y-down canvas.
    """

    def __init__(self, points: NDArray[np.float64] | list[Point2D], closed: bool = False) -> None:
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if len(pts) == 0:
            pts = np.zeros((1, 2))
        if closed and len(pts) > 1 and not np.allclose(pts[0], pts[-1]):
            pts = np.vstack([pts, pts[:1]])

        cumulative = arc_lengths(pts)
        keep = np.concatenate([[True], np.diff(cumulative) > _DUPLICATE_EPS])
        self.points = pts[keep]
        self.closed = closed
        self._cumulative = cumulative[keep]
        self._length = float(self._cumulative[-1])

        if len(self.points) >= 2:
            grad = np.gradient(self.points, axis=0)
            norms = np.linalg.norm(grad, axis=1, keepdims=True)
            norms[norms < 1e-12] = 1.0
            self._tangents = grad / norms
        else:
            self._tangents = np.array([[1.0, 0.0]])

    def length(self) -> float:
        return self._length

    def _clamp(self, offset: float) -> float:
        return min(max(float(offset), 0.0), self._length)

    def point_at(self, offset: float) -> Point2D:
        if len(self.points) == 1:
            return (float(self.points[0, 0]), float(self.points[0, 1]))
        s = self._clamp(offset)
        x = np.interp(s, self._cumulative, self.points[:, 0])
        y = np.interp(s, self._cumulative, self.points[:, 1])
        return (float(x), float(y))

    def tangent_at(self, offset: float) -> Point2D:
        if len(self.points) == 1:
            return (1.0, 0.0)
        s = self._clamp(offset)
        tx = np.interp(s, self._cumulative, self._tangents[:, 0])
        ty = np.interp(s, self._cumulative, self._tangents[:, 1])
        return _normalize(float(tx), float(ty))

    def normal_at(self, offset: float) -> Point2D:
        tx, ty = self.tangent_at(offset)
        return (-ty, tx)


class SvgPathCurve(PolylineCurve):
    """Curve from SVG path data (lines, quadratic/cubic beziers, arcs)."""

    def __init__(self, path: Path, samples_per_segment: int = 32) -> None:
        samples: list[Point2D] = []
        ts = np.linspace(0.0, 1.0, max(2, samples_per_segment))
        for seg in path:
            for t in ts:
                pt = seg.point(float(t))
                samples.append((pt.real, pt.imag))

        closed = bool(len(path)) and path.isclosed()
        super().__init__(samples, closed=closed)
        self.path = path
        logger.debug(
            "SvgPathCurve: %d segments, %d samples, length %.1fpx",
            len(path),
            len(self.points),
            self.length(),
        )

    @classmethod
    def from_path_data(cls, d: str, samples_per_segment: int = 32) -> SvgPathCurve:
        return cls(parse_path(d), samples_per_segment=samples_per_segment)
