"""
Preset-independent rendering policies: gradient opacity and unit distance.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from config import GRADIENT_OPACITY_POINTS, MIN_UNIT_DISTANCE
from transfer.curves import OpacityCurve


@dataclass(frozen=True)
class VolumeGeometry:
    """Voxel spacing (x, y, z) in mm."""
    spacing: Tuple[float, float, float] = (1.0, 1.0, 1.0)

    @staticmethod
    def from_spacing(spacing: Sequence[float]) -> "VolumeGeometry":
        sx, sy, sz = (float(s) for s in spacing)
        return VolumeGeometry((sx, sy, sz))


def gradient_opacity_curve() -> OpacityCurve:
    """
    Opacity multiplier over gradient magnitude.

    Flat regions (gradient below 50) contribute nothing, so noise inside
    homogeneous tissue does not fog the view while edges stay visible.
    """
    return OpacityCurve.from_points(GRADIENT_OPACITY_POINTS)


def unit_distance(spacing: Sequence[float]) -> float:
    """Half the voxel diagonal, never below ``MIN_UNIT_DISTANCE``."""
    sx, sy, sz = (float(s) for s in spacing)
    return max(MIN_UNIT_DISTANCE, 0.5 * math.sqrt(sx * sx + sy * sy + sz * sz))


__all__ = ["VolumeGeometry", "gradient_opacity_curve", "unit_distance"]
