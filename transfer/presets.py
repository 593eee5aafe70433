"""
Preset enumeration and selection.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from config import DEFAULT_PRESET
from transfer.builders import build_bone_only, build_cinematic, build_windowed
from transfer.curves import TransferFunction
from transfer.rescale import RescaleParameters
from transfer.windowing import WindowLevel

logger = logging.getLogger(__name__)


class Preset(Enum):
    SOFT = "soft"
    BONE = "bone"
    LUNG = "lung"
    BONE_ONLY = "bone-only"
    CINEMATIC = "cinematic"

    @property
    def is_windowed(self) -> bool:
        return self in WINDOW_PRESETS


WINDOW_PRESETS: Dict[Preset, WindowLevel] = {
    Preset.SOFT: WindowLevel(40.0, 400.0),
    Preset.BONE: WindowLevel(300.0, 1500.0),
    Preset.LUNG: WindowLevel(-600.0, 1500.0),
}


@dataclass(frozen=True)
class PresetSelection:
    """
    Result of resolving a user token.

    Attributes:
        preset (Preset): Selected preset.
        requested (str): Token as given by the user.
        fallback (bool): True when the token was not recognised.
    """
    preset: Preset
    requested: str = ""
    fallback: bool = False

    @property
    def window(self) -> Optional[WindowLevel]:
        return WINDOW_PRESETS.get(self.preset)


def normalize_token(name: Optional[str]) -> str:
    return (name or "").strip().lower().replace("_", "-")


def select_preset(name: Optional[str], bone_only: bool = False) -> PresetSelection:
    """
    Resolve a preset token.

    Bone-only (token or flag) wins over everything, then cinematic, then the
    windowed presets. Unknown tokens fall back to the default preset with a
    RuntimeWarning.
    """
    token = normalize_token(name)
    requested = name or ""

    if bone_only or token == Preset.BONE_ONLY.value:
        if bone_only and token and token != Preset.BONE_ONLY.value:
            logger.info("bone-only flag set; ignoring preset '%s'", requested)
        return PresetSelection(Preset.BONE_ONLY, requested)
    if token == Preset.CINEMATIC.value:
        return PresetSelection(Preset.CINEMATIC, requested)
    for preset in WINDOW_PRESETS:
        if token == preset.value:
            return PresetSelection(preset, requested)

    fallback = Preset(DEFAULT_PRESET)
    message = f"Unknown preset '{requested}', falling back to '{fallback.value}'"
    logger.warning(message)
    warnings.warn(message, RuntimeWarning, stacklevel=2)
    return PresetSelection(fallback, requested, fallback=True)


def _windowed(preset: Preset) -> Callable[[RescaleParameters], TransferFunction]:
    def build(rescale: RescaleParameters) -> TransferFunction:
        return build_windowed(WINDOW_PRESETS[preset], rescale, preset=preset.value)
    return build


BUILDERS: Dict[Preset, Callable[[RescaleParameters], TransferFunction]] = {
    Preset.SOFT: _windowed(Preset.SOFT),
    Preset.BONE: _windowed(Preset.BONE),
    Preset.LUNG: _windowed(Preset.LUNG),
    Preset.BONE_ONLY: build_bone_only,
    Preset.CINEMATIC: build_cinematic,
}


def build_transfer_function(selection: PresetSelection, rescale: RescaleParameters) -> TransferFunction:
    """Build fresh color/opacity curves for a resolved preset."""
    if rescale is None:
        raise ValueError("RescaleParameters are required to build a transfer function")
    tf = BUILDERS[selection.preset](rescale)
    logger.debug("Built '%s' transfer function (%d color / %d opacity points, %s)",
                 tf.preset, len(tf.color), len(tf.opacity), rescale.describe())
    return tf


__all__ = [
    "Preset",
    "PresetSelection",
    "WINDOW_PRESETS",
    "BUILDERS",
    "normalize_token",
    "select_preset",
    "build_transfer_function",
]
