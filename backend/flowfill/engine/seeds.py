"""Seeded random streams and the seed-derivation convention.

Every stream in a placement pass is derived from the flow path's base seed
by a fixed additive offset. The offsets are part of the reproducibility
contract: changing one changes the output of every saved project.

    seed + 0              t candidates (random/noise/packed fill, random distribution)
    seed + index          per-instance generator choice, params, shape seed, follow_curve
    seed + 999            Scalar/Range resolution of spread and density
    seed + 1000           noise-distribution spawn threshold channel
    seed + 2000           packed-fill generator pre-assignment
"""

from __future__ import annotations

import random
from typing import Any, Callable, Sequence, TypeVar

from flowfill.engine.errors import ConfigurationError

MINMAX_SEED_OFFSET = 999
THRESHOLD_SEED_OFFSET = 1000
ASSIGNMENT_SEED_OFFSET = 2000

T = TypeVar("T")


def seeded_random(seed: int) -> Callable[[], float]:
    """Return a function yielding floats in [0, 1) from a stream fixed by ``seed``."""
    return random.Random(int(seed)).random


def _item_weight(item: Any) -> float:
    return max(0.0, float(item.weight))


def weighted_pick(items: Sequence[T], r: float) -> T:
    """Pick the item whose cumulative weight interval contains ``r * total``.

    Zero total weight degenerates to the first item.
    """
    if not items:
        raise ConfigurationError("Cannot choose from an empty generator list")

    total = sum(_item_weight(item) for item in items)
    remaining = r * total
    for item in items:
        remaining -= _item_weight(item)
        if remaining <= 0:
            return item
    return items[-1]


def weighted_choice(items: Sequence[T], seed: int) -> T:
    """Weighted pick with a fresh stream seeded by ``seed`` (one draw)."""
    return weighted_pick(items, seeded_random(seed)())
