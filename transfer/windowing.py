"""
Window/level math shared by the windowed presets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NamedTuple

from config import MIN_WINDOW_WIDTH

logger = logging.getLogger(__name__)


def _floor_width(width: float) -> float:
    width = float(width)
    if width < MIN_WINDOW_WIDTH:
        logger.warning("Window width %g below %g HU; flooring to %g", width, MIN_WINDOW_WIDTH, MIN_WINDOW_WIDTH)
        return MIN_WINDOW_WIDTH
    return width


@dataclass(frozen=True)
class WindowLevel:
    """Window center (level) and width in Hounsfield Units."""
    center: float
    width: float

    @staticmethod
    def create(center: float, width: float) -> "WindowLevel":
        """Build a window with the width floored to ``MIN_WINDOW_WIDTH``."""
        return WindowLevel(float(center), _floor_width(width))


class WindowBounds(NamedTuple):
    low: float
    high: float
    mid1: float
    mid2: float


def derive_bounds(wl: WindowLevel) -> WindowBounds:
    """
    Landmarks of a window ramp: its edges and the quarter/three-quarter points.

    The width is floored again here so a directly constructed
    ``WindowLevel(c, 0)`` still yields ``low < mid1 < mid2 < high``.
    """
    width = _floor_width(wl.width)
    low = wl.center - width / 2.0
    high = wl.center + width / 2.0
    return WindowBounds(
        low=low,
        high=high,
        mid1=low + width * 0.25,
        mid2=low + width * 0.75,
    )


__all__ = ["WindowLevel", "WindowBounds", "derive_bounds"]
