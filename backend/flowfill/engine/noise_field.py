"""2D coherent noise for organic spacing and tube offsets.

Wraps ``noise.pnoise2``. Raw Perlin output sits roughly in [-0.7, 0.7]; it
is rescaled and clamped to [-1, 1] so callers can multiply by a half-width
and stay inside the band.
"""

from __future__ import annotations

import math

from noise import pnoise2

# pnoise2 indexes a 256-entry permutation table; base must stay inside it.
_PERMUTATION_SIZE = 256
# Seeds sharing a permutation base are separated along y.
_SEED_Y_SHIFT = 17.31
_RANGE_SCALE = math.sqrt(2.0)


def coherent_noise(x: float, y: float, seed: int = 0, octaves: int = 1) -> float:
    """Deterministic smooth noise in [-1, 1]."""
    seed = int(seed)
    base = seed % _PERMUTATION_SIZE
    shifted_y = y + (seed // _PERMUTATION_SIZE) * _SEED_Y_SHIFT
    value = pnoise2(float(x), float(shifted_y), octaves=octaves, base=base)
    return max(-1.0, min(1.0, value * _RANGE_SCALE))


def coherent_noise01(x: float, y: float, seed: int = 0) -> float:
    """Same field mapped to [0, 1]."""
    return (coherent_noise(x, y, seed) + 1) / 2
