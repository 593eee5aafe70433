"""
Transfer function builders.

Each builder is a pure function returning a fresh ``TransferFunction``. All
landmarks are written in Hounsfield Units and converted with ``to_scalar`` so
the curves line up with the volume's stored scalars whatever its rescale.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from transfer.curves import ColorCurve, OpacityCurve, TransferFunction
from transfer.rescale import RescaleParameters, to_scalar
from transfer.windowing import WindowLevel, derive_bounds

RGB = Tuple[float, float, float]

# Opacity below/above the window edges (HU offsets)
WINDOW_SHOULDER_BELOW = 200.0
WINDOW_SHOULDER_ABOVE = 500.0

# Grayscale ramp across (low, mid1, mid2, high)
WINDOW_GRAYS = (0.0, 0.5, 0.8, 1.0)
# Opacity at (low - shoulder, low, mid1, mid2, high, high + shoulder)
WINDOW_OPACITIES = (0.00, 0.02, 0.10, 0.35, 0.80, 0.95)


def _strictly_increasing(values, what: str) -> None:
    for prev, cur in zip(values, values[1:]):
        if not cur > prev:
            raise ValueError(f"{what} must be strictly increasing, got {tuple(values)}")


@dataclass(frozen=True)
class BoneOnlyLandmarks:
    """
    HU landmarks for the bone-only preset.

    Everything below ``floor`` is fully transparent. The floor has been tuned
    between 150 and 180 HU; either works as long as the ordering holds.
    """
    floor: float = 150.0
    ramp: float = 250.0
    cortical: float = 700.0
    dense: float = 1500.0
    ceiling: float = 3000.0
    opacities: Tuple[float, ...] = (0.00, 0.02, 0.45, 0.90, 0.97)
    colors: Tuple[RGB, ...] = (
        (0.90, 0.82, 0.68),
        (0.92, 0.86, 0.74),
        (0.96, 0.93, 0.86),
        (1.00, 1.00, 1.00),
        (1.00, 1.00, 1.00),
    )

    def __post_init__(self):
        _strictly_increasing(self.hu_values, "Bone-only landmarks")
        _strictly_increasing(self.opacities, "Bone-only opacities")
        if len(self.opacities) != 5 or len(self.colors) != 5:
            raise ValueError("Bone-only preset needs 5 opacities and 5 colors")

    @property
    def hu_values(self) -> Tuple[float, ...]:
        return (self.floor, self.ramp, self.cortical, self.dense, self.ceiling)


@dataclass(frozen=True)
class CinematicLandmarks:
    """HU landmarks for the stylised (non-diagnostic) skull preset."""
    air: float = -1000.0
    fat: float = -100.0
    water: float = 0.0
    soft_high: float = 150.0
    trabecular: float = 300.0
    cortical: float = 700.0
    teeth: float = 1500.0
    maximum: float = 3000.0
    opacities: Tuple[float, ...] = (0.00, 0.00, 0.05, 0.12, 0.35, 0.80, 0.95, 0.98)
    colors: Tuple[RGB, ...] = (
        (0.00, 0.00, 0.00),
        (0.55, 0.25, 0.10),
        (0.80, 0.45, 0.25),
        (0.90, 0.60, 0.38),
        (0.95, 0.85, 0.70),
        (0.98, 0.94, 0.86),
        (1.00, 1.00, 1.00),
        (1.00, 1.00, 1.00),
    )

    def __post_init__(self):
        _strictly_increasing(self.hu_values, "Cinematic landmarks")
        if len(self.opacities) != 8 or len(self.colors) != 8:
            raise ValueError("Cinematic preset needs 8 opacities and 8 colors")
        # air and fat stay invisible; from water onward opacity must climb
        if self.opacities[0] != 0.0 or self.opacities[1] != 0.0:
            raise ValueError("Cinematic air/fat opacity must be 0")
        _strictly_increasing(self.opacities[1:], "Cinematic opacities")

    @property
    def hu_values(self) -> Tuple[float, ...]:
        return (
            self.air, self.fat, self.water, self.soft_high,
            self.trabecular, self.cortical, self.teeth, self.maximum,
        )


BONE_ONLY_LANDMARKS = BoneOnlyLandmarks()
CINEMATIC_LANDMARKS = CinematicLandmarks()


def _sorted_by_position(points: List[tuple]) -> List[tuple]:
    # A negative slope reverses HU order in scalar space.
    return sorted(points, key=lambda p: p[0])


def _assemble(preset: str, rescale: RescaleParameters,
              color_hu, colors, opacity_hu, opacities) -> TransferFunction:
    color_points = [(to_scalar(hu, rescale), *rgb) for hu, rgb in zip(color_hu, colors)]
    opacity_points = [(to_scalar(hu, rescale), a) for hu, a in zip(opacity_hu, opacities)]
    return TransferFunction(
        preset=preset,
        color=ColorCurve.from_points(_sorted_by_position(color_points)),
        opacity=OpacityCurve.from_points(_sorted_by_position(opacity_points)),
    )


def build_windowed(wl: WindowLevel, rescale: RescaleParameters, preset: str = "windowed") -> TransferFunction:
    """
    Grayscale ramp over a window with soft opacity shoulders.

    Color runs black -> mid gray -> light gray -> white across
    (low, mid1, mid2, high). Opacity starts 200 HU below the window and keeps
    climbing until 500 HU above it so there is no hard cutoff at either edge.
    """
    low, high, mid1, mid2 = derive_bounds(wl)

    color_hu = (low, mid1, mid2, high)
    colors = [(g, g, g) for g in WINDOW_GRAYS]
    opacity_hu = (low - WINDOW_SHOULDER_BELOW, low, mid1, mid2, high, high + WINDOW_SHOULDER_ABOVE)

    return _assemble(preset, rescale, color_hu, colors, opacity_hu, WINDOW_OPACITIES)


def build_bone_only(rescale: RescaleParameters,
                    landmarks: BoneOnlyLandmarks = BONE_ONLY_LANDMARKS) -> TransferFunction:
    """Hide everything below trabecular bone; ramp bone tone to white."""
    hu = landmarks.hu_values
    return _assemble("bone-only", rescale, hu, landmarks.colors, hu, landmarks.opacities)


def build_cinematic(rescale: RescaleParameters,
                    landmarks: CinematicLandmarks = CINEMATIC_LANDMARKS) -> TransferFunction:
    """Amber soft tissue fading into pale bone and opaque white enamel."""
    hu = landmarks.hu_values
    return _assemble("cinematic", rescale, hu, landmarks.colors, hu, landmarks.opacities)


__all__ = [
    "BoneOnlyLandmarks",
    "CinematicLandmarks",
    "BONE_ONLY_LANDMARKS",
    "CINEMATIC_LANDMARKS",
    "build_windowed",
    "build_bone_only",
    "build_cinematic",
]
