"""
Data Transfer Objects (DTOs) for the viewer.

Design rules
------------
* All DTOs are immutable (frozen=True).  The CLI builds a new DTO and
  *pushes* it to the engine; the engine never reads argparse state.
* ``from_dict`` / ``to_dict`` keep serialisation in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Optional, Dict, Any

from config import (
    BACKGROUND_COLOR,
    DEFAULT_PRESET,
    LOADER_MAX_WORKERS,
    LOADER_SERIES_INDEX,
    VOLUME_AMBIENT,
    VOLUME_DIFFUSE,
    VOLUME_INTERPOLATION,
    VOLUME_SHADE,
    VOLUME_SPECULAR,
    WINDOW_SIZE,
)


# ---------------------------------------------------------------------------
# Render parameters DTO
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RenderParamsDTO:
    """
    Immutable snapshot of every rendering parameter.

    ``preset`` is the raw user token; it is resolved by
    ``transfer.select_preset`` at render time so unknown names still reach
    the fallback warning.
    """

    preset:         str                         = DEFAULT_PRESET
    bone_only:      bool                        = False
    shade:          bool                        = VOLUME_SHADE
    interpolation:  str                         = VOLUME_INTERPOLATION
    ambient:        float                       = VOLUME_AMBIENT
    diffuse:        float                       = VOLUME_DIFFUSE
    specular:       float                       = VOLUME_SPECULAR
    background:     Tuple[float, float, float]  = BACKGROUND_COLOR
    window_size:    Tuple[int, int]             = WINDOW_SIZE

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "RenderParamsDTO":
        """Build from a plain dictionary (e.g. a ``render_params`` config block)."""
        bg = d.get("background", list(BACKGROUND_COLOR))
        size = d.get("window_size", list(WINDOW_SIZE))
        return RenderParamsDTO(
            preset        = str(d.get("preset",        DEFAULT_PRESET)),
            bone_only     = bool(d.get("bone_only",    False)),
            shade         = bool(d.get("shade",        VOLUME_SHADE)),
            interpolation = str(d.get("interpolation", VOLUME_INTERPOLATION)),
            ambient       = float(d.get("ambient",     VOLUME_AMBIENT)),
            diffuse       = float(d.get("diffuse",     VOLUME_DIFFUSE)),
            specular      = float(d.get("specular",    VOLUME_SPECULAR)),
            background    = (float(bg[0]), float(bg[1]), float(bg[2])),
            window_size   = (int(size[0]), int(size[1])),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialise back to a plain dictionary (for YAML / JSON export)."""
        return {
            "preset":        self.preset,
            "bone_only":     self.bone_only,
            "shade":         self.shade,
            "interpolation": self.interpolation,
            "ambient":       self.ambient,
            "diffuse":       self.diffuse,
            "specular":      self.specular,
            "background":    list(self.background),
            "window_size":   list(self.window_size),
        }


# ---------------------------------------------------------------------------
# Viewer run DTO
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ViewerDTO:
    """
    Immutable configuration for one viewer run.

    Used by the CLI and by unit tests that render headless.
    """

    # Input
    input_path:       str                       = ""
    loader_type:      str                       = "dicom"    # "dicom" | "dummy"
    series_index:     int                       = LOADER_SERIES_INDEX
    max_workers:      int                       = LOADER_MAX_WORKERS

    # True: keep stored scalars and map HU landmarks through the rescale.
    # False: convert the volume to HU on load and use identity mapping.
    map_hu_to_scalar: bool                      = True

    # Output
    off_screen:       bool                      = False
    screenshot:       Optional[str]             = None

    render_params:    RenderParamsDTO           = RenderParamsDTO()

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ViewerDTO":
        rp_raw = d.get("render_params")
        rp     = RenderParamsDTO.from_dict(rp_raw) if rp_raw else RenderParamsDTO()
        return ViewerDTO(
            input_path       = str(d.get("input_path",        "")),
            loader_type      = str(d.get("loader_type",       "dicom")),
            series_index     = int(d.get("series_index",      LOADER_SERIES_INDEX)),
            max_workers      = int(d.get("max_workers",       LOADER_MAX_WORKERS)),
            map_hu_to_scalar = bool(d.get("map_hu_to_scalar", True)),
            off_screen       = bool(d.get("off_screen",       False)),
            screenshot       = d.get("screenshot"),
            render_params    = rp,
        )

    @staticmethod
    def from_yaml(path: str) -> "ViewerDTO":
        """Load config from a YAML file."""
        import yaml  # soft dependency, only needed for config files
        with open(path, encoding="utf-8") as fh:
            d = yaml.safe_load(fh)
        return ViewerDTO.from_dict(d or {})

    @staticmethod
    def from_json(path: str) -> "ViewerDTO":
        """Load config from a JSON file."""
        import json
        with open(path, encoding="utf-8") as fh:
            d = json.load(fh)
        return ViewerDTO.from_dict(d)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input_path":       self.input_path,
            "loader_type":      self.loader_type,
            "series_index":     self.series_index,
            "max_workers":      self.max_workers,
            "map_hu_to_scalar": self.map_hu_to_scalar,
            "off_screen":       self.off_screen,
            "screenshot":       self.screenshot,
            "render_params":    self.render_params.to_dict(),
        }
