"""
Transfer function preset engine: HU rescale, windowing, builders, policies.
"""

from transfer.rescale import RescaleParameters, to_scalar, to_hu
from transfer.windowing import WindowLevel, WindowBounds, derive_bounds
from transfer.curves import ColorPoint, OpacityPoint, ColorCurve, OpacityCurve, TransferFunction
from transfer.builders import (
    BoneOnlyLandmarks,
    CinematicLandmarks,
    build_windowed,
    build_bone_only,
    build_cinematic,
)
from transfer.policies import VolumeGeometry, gradient_opacity_curve, unit_distance
from transfer.presets import (
    Preset,
    PresetSelection,
    WINDOW_PRESETS,
    select_preset,
    build_transfer_function,
)

__all__ = [
    'RescaleParameters', 'to_scalar', 'to_hu',
    'WindowLevel', 'WindowBounds', 'derive_bounds',
    'ColorPoint', 'OpacityPoint', 'ColorCurve', 'OpacityCurve', 'TransferFunction',
    'BoneOnlyLandmarks', 'CinematicLandmarks',
    'build_windowed', 'build_bone_only', 'build_cinematic',
    'VolumeGeometry', 'gradient_opacity_curve', 'unit_distance',
    'Preset', 'PresetSelection', 'WINDOW_PRESETS',
    'select_preset', 'build_transfer_function',
]
