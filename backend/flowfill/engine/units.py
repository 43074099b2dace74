"""Physical unit conversion. All user-facing sizes are millimetres; geometry is pixels at 300 DPI."""

from __future__ import annotations

DPI = 300.0
MM_PER_INCH = 25.4

# 1 mm = 300 / 25.4 ≈ 11.811 px
PX_PER_MM = DPI / MM_PER_INCH


def mm_to_px(mm: float) -> float:
    return mm * PX_PER_MM


def px_to_mm(px: float) -> float:
    return px / PX_PER_MM
