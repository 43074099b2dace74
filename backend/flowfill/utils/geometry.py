"""Leaf-node geometry helpers over Nx2 point arrays. No engine imports."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray
from scipy.interpolate import splev, splprep


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def bbox_of_many(subpaths: list[NDArray[np.float64]]) -> tuple[float, float, float, float]:
    """Union bounding box of several point arrays. Empty input → zero box at origin."""
    non_empty = [p for p in subpaths if len(p) > 0]
    if not non_empty:
        return (0.0, 0.0, 0.0, 0.0)
    return bbox(np.vstack(non_empty))


def arc_lengths(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Cumulative arc-length along a point sequence."""
    diffs = np.diff(points, axis=0)
    segment_lengths = np.sqrt(np.sum(diffs**2, axis=1))
    return np.concatenate([[0.0], np.cumsum(segment_lengths)])


def rotation_matrix(degrees: float) -> NDArray[np.float64]:
    """2x2 rotation matrix. Positive angles rotate clockwise on a y-down canvas."""
    rad = math.radians(degrees)
    c, s = math.cos(rad), math.sin(rad)
    return np.array([[c, -s], [s, c]])


def scale_about(
    points: NDArray[np.float64], factor: float, origin: tuple[float, float]
) -> NDArray[np.float64]:
    o = np.asarray(origin, dtype=np.float64)
    return (points - o) * factor + o


def rotate_about(
    points: NDArray[np.float64], degrees: float, origin: tuple[float, float]
) -> NDArray[np.float64]:
    o = np.asarray(origin, dtype=np.float64)
    return (points - o) @ rotation_matrix(degrees).T + o


def translate(points: NDArray[np.float64], dx: float, dy: float) -> NDArray[np.float64]:
    return points + np.array([dx, dy])


def half_diagonal(width: float, height: float) -> float:
    """Circumradius of a width x height box."""
    return math.sqrt(width * width + height * height) / 2


def smooth_polyline(
    points: NDArray[np.float64], closed: bool, samples: int = 64
) -> NDArray[np.float64]:
    """Resample ``points`` along a cubic B-spline through them.

    Closed input is fitted periodically and returned without repeating the
    first point. Degenerate input comes back unchanged.
    """
    pts = np.asarray(points, dtype=np.float64)
    if len(pts) < 4:
        return pts

    try:
        if closed:
            ring = np.vstack([pts, pts[:1]])
            tck, _ = splprep([ring[:, 0], ring[:, 1]], s=0, per=True, k=3)
            u_fine = np.linspace(0, 1, samples, endpoint=False)
        else:
            tck, _ = splprep([pts[:, 0], pts[:, 1]], s=0, k=3)
            u_fine = np.linspace(0, 1, samples)
        sx, sy = splev(u_fine, tck)
    except (ValueError, TypeError):
        return pts

    return np.column_stack([sx, sy])
