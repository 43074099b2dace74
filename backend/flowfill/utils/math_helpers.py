"""Math helpers — interpolation, clamping, easing. No engine imports."""

from __future__ import annotations

import math


def lerp(a: float, b: float, t: float) -> float:
    """Unclamped linear interpolation."""
    return a + (b - a) * t


def clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


EASINGS = ("linear", "ease-in", "ease-out", "ease-in-out", "sine")


def evaluate_easing(t: float, easing: str) -> float:
    """Evaluate an easing curve at t. Input is clamped to [0, 1]; output is in [0, 1].

    Unknown names fall back to linear.
    """
    x = clamp(t, 0.0, 1.0)

    if easing == "ease-in":
        return x * x
    if easing == "ease-out":
        return 1 - (1 - x) * (1 - x)
    if easing == "ease-in-out":
        if x < 0.5:
            return 2 * x * x
        return 1 - (-2 * x + 2) ** 2 / 2
    if easing == "sine":
        return math.sin(x * math.pi - math.pi / 2) * 0.5 + 0.5
    return x
