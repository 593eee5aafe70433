"""
Core rendering engine for CT volume visualization.
Provides the PyVista scene (grid, smart volume mapper, camera, window)
independent of any GUI framework.
"""

from typing import Optional, Tuple
import numpy as np
import pyvista as pv

from core import BaseVisualizer, VolumeData
from core.dto import RenderParamsDTO
from rendering.volume_property import VolumePropertyHolder
from transfer.presets import PresetSelection, select_preset
from config import WINDOW_TITLE


def raw_zyx_to_grid_xyz(raw_data: np.ndarray) -> np.ndarray:
    """
    Reorder a raw volume from (z, y, x) to (x, y, z) for VTK/PyVista grids.
    """
    arr = np.asarray(raw_data)
    if arr.ndim != 3:
        raise ValueError(f"Expected 3D volume, got shape={arr.shape}")
    return np.transpose(arr, (2, 1, 0))


def build_grid(raw_data: np.ndarray,
               spacing: Tuple[float, float, float],
               origin: Tuple[float, float, float]) -> pv.ImageData:
    """
    Create a PyVista ImageData with one point per voxel.

    Input raw_data is expected in storage order (z, y, x). Scalars are kept
    as point data so transfer function positions address voxel values
    directly.
    """
    raw_xyz = raw_zyx_to_grid_xyz(raw_data)
    grid = pv.ImageData()
    grid.dimensions = raw_xyz.shape
    grid.origin = origin
    grid.spacing = spacing
    grid.point_data["values"] = np.ascontiguousarray(raw_xyz.ravel(order="F"))
    return grid


class RenderEngine(BaseVisualizer):
    """
    Handles PyVista volume rendering with preset transfer functions.
    """

    def __init__(self, plotter=None, params: Optional[RenderParamsDTO] = None,
                 off_screen: bool = False, status_callback=None):
        """
        Initialize engine with renderer dependencies.

        Args:
            plotter: Existing PyVista plotter; a new ``pv.Plotter`` is created when omitted.
            params: Render parameters (preset, shading, window size, background).
            off_screen: Create the plotter off-screen (screenshots, CI).
            status_callback: Optional callback for status updates.
        """
        self.params = params or RenderParamsDTO()
        self._status_callback = status_callback
        if plotter is None:
            plotter = pv.Plotter(off_screen=off_screen, window_size=list(self.params.window_size))
        self.plotter = plotter
        self.plotter.set_background(self.params.background)

        self.data: Optional[VolumeData] = None
        self.grid: Optional[pv.ImageData] = None
        self.volume_actor = None
        self.properties = VolumePropertyHolder()

    def inject_params(self, dto: RenderParamsDTO) -> None:
        """Replace render parameters; takes effect on the next ``render_volume``."""
        self.params = dto

    def update_status(self, message: str):
        """Update status via callback."""
        if self._status_callback:
            self._status_callback(message)
        else:
            print(f"[RenderEngine] {message}")

    def set_data(self, data: VolumeData):
        """Set volume data and prepare grid. Clears the previous volume first."""
        if data.raw_data is None:
            raise ValueError("VolumeData has no voxel data")
        if self.volume_actor is not None:
            self.update_status("Clearing previous data...")
            self.plotter.remove_actor(self.volume_actor, render=False)
            self.volume_actor = None
        self.data = data
        self.grid = build_grid(data.raw_data, data.spacing, data.origin)

    def resolve_selection(self) -> PresetSelection:
        return select_preset(self.params.preset, bone_only=self.params.bone_only)

    def render_volume(self, selection: Optional[PresetSelection] = None, reset_view: bool = True):
        """
        Render (or re-style) the volume with a preset.

        On re-selection the grid and actor are kept; only a freshly built
        property is swapped onto the actor.
        """
        if self.grid is None or self.data is None:
            raise RuntimeError("No volume loaded; call set_data() first")
        selection = selection or self.resolve_selection()

        self.properties.rebuild(selection, self.data.rescale, self.data.geometry, self.params)

        if self.volume_actor is None:
            self.update_status(f"Rendering volume (preset={selection.preset.value})...")
            self.volume_actor = self.plotter.add_volume(
                self.grid,
                scalars="values",
                mapper="smart",
                blending="composite",
                show_scalar_bar=False,
                render=False,
            )
            self.properties.attach(self.volume_actor)
            self.plotter.enable_trackball_style()
            if reset_view:
                self.reset_camera()
        else:
            self.update_status(f"Switching preset to {selection.preset.value}...")
            self.properties.attach(self.volume_actor)
            self.plotter.render()
        return self.volume_actor

    def reset_camera(self):
        self.plotter.reset_camera()

    def screenshot(self, path: str):
        """Render and write the current view to an image file."""
        self.plotter.show(auto_close=False)
        self.plotter.screenshot(path)
        self.update_status(f"Screenshot saved: {path}")

    def show(self):
        """Open the interactive window (blocks until closed)."""
        self.plotter.show(title=WINDOW_TITLE)

    def close(self):
        self.plotter.close()
