"""
Rendering package: volume property assembly and the PyVista scene.
"""

from rendering.volume_property import VolumePropertyHolder, build_volume_property
from rendering.render_engine import RenderEngine, build_grid

__all__ = [
    'VolumePropertyHolder',
    'build_volume_property',
    'RenderEngine',
    'build_grid',
]
