"""Uniform-grid broad phase over axis-aligned boxes.

A box is registered in every cell its edges span. A query visits exactly
the cells its own box spans, so the result is a superset of the boxes that
can intersect it and never misses one.
"""

from __future__ import annotations

import math
from collections.abc import Iterator

from flowfill.engine.model import AABB

_MIN_CELL_SIZE = 1e-3

CellKey = tuple[int, int]


class SpatialIndex:
    """Grid index for one placement pass. Not safe for concurrent mutation."""

    def __init__(self, cell_size: float = 50.0) -> None:
        # Same unit as the boxes added to the index.
        self.cell_size = max(float(cell_size), _MIN_CELL_SIZE)
        self._cells: dict[CellKey, list[AABB]] = {}
        self._count = 0

    def _cell_keys(self, box: AABB) -> Iterator[CellKey]:
        size = self.cell_size
        min_x = math.floor(box.left / size)
        max_x = math.floor(box.right / size)
        min_y = math.floor(box.top / size)
        max_y = math.floor(box.bottom / size)
        for cx in range(min_x, max_x + 1):
            for cy in range(min_y, max_y + 1):
                yield (cx, cy)

    def add(self, box: AABB) -> None:
        for key in self._cell_keys(box):
            self._cells.setdefault(key, []).append(box)
        self._count += 1

    def nearby(self, box: AABB) -> list[AABB]:
        """Boxes sharing at least one cell with ``box``, deduplicated, in insertion order per cell."""
        seen: dict[int, AABB] = {}
        for key in self._cell_keys(box):
            for other in self._cells.get(key, ()):
                seen.setdefault(id(other), other)
        return list(seen.values())

    def clear(self) -> None:
        self._cells.clear()
        self._count = 0

    def __len__(self) -> int:
        return self._count

    @property
    def cell_count(self) -> int:
        return len(self._cells)
