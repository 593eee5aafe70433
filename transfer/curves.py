"""
Immutable control-point curves consumed by the volume renderer.

Curves are plain value objects: builders create new ones for every preset
selection and the render side converts them into VTK functions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, NamedTuple, Tuple


class ColorPoint(NamedTuple):
    position: float
    r: float
    g: float
    b: float


class OpacityPoint(NamedTuple):
    position: float
    opacity: float


def _check_unit(value: float, what: str) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{what} must be in [0, 1], got {value}")


def _check_increasing(positions: List[float], what: str) -> None:
    for prev, cur in zip(positions, positions[1:]):
        if not cur > prev:
            raise ValueError(f"{what} positions must be strictly increasing: {prev} -> {cur}")


@dataclass(frozen=True)
class ColorCurve:
    """Ordered RGB control points (scalar position -> color)."""
    points: Tuple[ColorPoint, ...]

    def __post_init__(self):
        for p in self.points:
            for channel in (p.r, p.g, p.b):
                _check_unit(channel, "Color component")
        _check_increasing([p.position for p in self.points], "Color")

    @staticmethod
    def from_points(points: Iterable[Tuple[float, float, float, float]]) -> "ColorCurve":
        return ColorCurve(tuple(ColorPoint(*map(float, p)) for p in points))

    def __iter__(self) -> Iterator[ColorPoint]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def positions(self) -> List[float]:
        return [p.position for p in self.points]


@dataclass(frozen=True)
class OpacityCurve:
    """Ordered scalar opacity control points (position -> opacity)."""
    points: Tuple[OpacityPoint, ...]

    def __post_init__(self):
        for p in self.points:
            _check_unit(p.opacity, "Opacity")
        _check_increasing([p.position for p in self.points], "Opacity")

    @staticmethod
    def from_points(points: Iterable[Tuple[float, float]]) -> "OpacityCurve":
        return OpacityCurve(tuple(OpacityPoint(*map(float, p)) for p in points))

    def __iter__(self) -> Iterator[OpacityPoint]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def positions(self) -> List[float]:
        return [p.position for p in self.points]

    @property
    def values(self) -> List[float]:
        return [p.opacity for p in self.points]

    def value_at(self, position: float) -> float:
        """Piecewise-linear evaluation, clamped to the end points."""
        pts = self.points
        if not pts:
            return 0.0
        if position <= pts[0].position:
            return pts[0].opacity
        for a, b in zip(pts, pts[1:]):
            if position <= b.position:
                t = (position - a.position) / (b.position - a.position)
                return a.opacity + t * (b.opacity - a.opacity)
        return pts[-1].opacity


@dataclass(frozen=True)
class TransferFunction:
    """Color and opacity curves produced by one preset build."""
    preset: str
    color: ColorCurve
    opacity: OpacityCurve


__all__ = ["ColorPoint", "OpacityPoint", "ColorCurve", "OpacityCurve", "TransferFunction"]
