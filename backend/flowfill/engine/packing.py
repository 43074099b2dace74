"""Packing policy — symbolic packing mode → signed overlap tolerance, plus collision tests.

Tolerance τ scales how much clearance two footprints need:
  boxes    shrink each box by min(width, height) · τ · 0.5 per side
  circles  minimum centre distance is (r1 + r2) · (1 + τ)
τ ≥ 1.0 disables collision checking entirely.
"""

from __future__ import annotations

import math

from flowfill.engine.model import AABB, PackingMode, Point2D
from flowfill.engine.spatial_index import SpatialIndex

_BASE_TOLERANCE: dict[PackingMode, float] = {
    # Organic shapes occupy less than their box, so tight packing lets boxes overlap.
    PackingMode.TIGHT: -0.20,
    PackingMode.NORMAL: 0.10,
    PackingMode.LOOSE: 0.25,
    PackingMode.ALLOW_OVERLAP: 1.0,
}

# Tolerance added per millimetre of requested minimum spacing.
SPACING_TOLERANCE_PER_MM = 0.05

NO_COLLISION_THRESHOLD = 1.0


def packing_tolerance(mode: PackingMode | str, min_spacing_mm: float = 0.0) -> float:
    """Final signed tolerance for a packing mode and a spacing nudge in mm."""
    base = _BASE_TOLERANCE[PackingMode(mode)]
    return base + min_spacing_mm * SPACING_TOLERANCE_PER_MM


def collisions_disabled(tolerance: float) -> bool:
    return tolerance >= NO_COLLISION_THRESHOLD


def boxes_collide(a: AABB, b: AABB, tolerance: float = 0.0) -> bool:
    if collisions_disabled(tolerance):
        return False
    if tolerance == 0:
        return a.intersects(b)

    shrunk_a = a.shrink(min(a.width, a.height) * tolerance * 0.5)
    shrunk_b = b.shrink(min(b.width, b.height) * tolerance * 0.5)
    return shrunk_a.intersects(shrunk_b)


def circles_collide(c1: Point2D, r1: float, c2: Point2D, r2: float, tolerance: float = 0.0) -> bool:
    if collisions_disabled(tolerance):
        return False
    min_distance = (r1 + r2) * (1 + tolerance)
    return math.hypot(c1[0] - c2[0], c1[1] - c2[1]) < min_distance


def box_query_box(box: AABB, tolerance: float, max_size: float | None = None) -> AABB:
    """Query region reaching every stored box (min dimension ≤ ``max_size``) that can collide.

    Negative tolerance grows both boxes before the test, so the region grows
    by both expansions.
    """
    if tolerance >= 0:
        return box
    own = min(box.width, box.height)
    other = own if max_size is None else max_size
    return box.shrink((own + other) * tolerance * 0.5)


def has_box_collision(
    box: AABB,
    index: SpatialIndex,
    tolerance: float,
    max_size: float | None = None,
) -> bool:
    """True when ``box`` collides with any box already in ``index``."""
    if collisions_disabled(tolerance):
        return False
    query = box_query_box(box, tolerance, max_size)
    return any(boxes_collide(box, other, tolerance) for other in index.nearby(query))


def circle_query_box(center: Point2D, radius: float, max_radius: float, tolerance: float) -> AABB:
    """Query region guaranteed to reach every stored circle (radius ≤ ``max_radius``) that can collide."""
    k = 1 + max(tolerance, 0.0)
    half = radius * k + max_radius * (k - 1)
    return AABB.from_center(center[0], center[1], half)


def has_circle_collision(
    center: Point2D,
    radius: float,
    index: SpatialIndex,
    tolerance: float,
    max_radius: float,
) -> bool:
    """Circle test against an index of square circle boxes (half-size = radius)."""
    if collisions_disabled(tolerance):
        return False
    query = circle_query_box(center, radius, max_radius, tolerance)
    for other in index.nearby(query):
        other_radius = other.width / 2
        if circles_collide(center, radius, other.center, other_radius, tolerance):
            return True
    return False
