"""Modifier evaluation — compose enabled modifiers into per-t multipliers and offsets.

Size and spacing multiply, rotation adds (degrees), spread overrides: the
last enabled spread modifier in list order wins.
"""

from __future__ import annotations

from collections.abc import Iterable

from flowfill.engine.model import Modifier, ModifierKind


def _enabled(modifiers: Iterable[Modifier], kind: ModifierKind) -> Iterable[Modifier]:
    return (m for m in modifiers if m.kind == kind and m.enabled)


def size_multiplier(t: float, modifiers: Iterable[Modifier]) -> float:
    multiplier = 1.0
    for mod in _enabled(modifiers, ModifierKind.SIZE):
        multiplier *= mod.value_at(t)
    return multiplier


def rotation_offset(t: float, modifiers: Iterable[Modifier]) -> float:
    rotation = 0.0
    for mod in _enabled(modifiers, ModifierKind.ROTATION):
        rotation += mod.value_at(t)
    return rotation


def spacing_multiplier(t: float, modifiers: Iterable[Modifier]) -> float:
    multiplier = 1.0
    for mod in _enabled(modifiers, ModifierKind.SPACING):
        multiplier *= mod.value_at(t)
    return multiplier


def spread_width(t: float, modifiers: Iterable[Modifier], base: float) -> float:
    spread = base
    for mod in _enabled(modifiers, ModifierKind.SPREAD):
        spread = mod.value_at(t)
    return spread
