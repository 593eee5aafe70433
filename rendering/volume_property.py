"""
Assembly of transfer function curves into a VTK volume property.

A property is always built from scratch; ``VolumePropertyHolder`` swaps the
finished object into place so the renderer never reads a half-filled curve.
"""

import logging
from typing import Optional

import vtk

from core.dto import RenderParamsDTO
from transfer.curves import ColorCurve, OpacityCurve, TransferFunction
from transfer.policies import VolumeGeometry, gradient_opacity_curve, unit_distance
from transfer.presets import PresetSelection, build_transfer_function
from transfer.rescale import RescaleParameters

logger = logging.getLogger(__name__)


def to_vtk_color(curve: ColorCurve) -> vtk.vtkColorTransferFunction:
    ctf = vtk.vtkColorTransferFunction()
    for p in curve:
        ctf.AddRGBPoint(p.position, p.r, p.g, p.b)
    return ctf


def to_vtk_opacity(curve: OpacityCurve) -> vtk.vtkPiecewiseFunction:
    otf = vtk.vtkPiecewiseFunction()
    for p in curve:
        otf.AddPoint(p.position, p.opacity)
    return otf


def build_volume_property(tf: TransferFunction,
                          geometry: VolumeGeometry,
                          params: Optional[RenderParamsDTO] = None) -> vtk.vtkVolumeProperty:
    """
    Create a new ``vtkVolumeProperty`` for a transfer function.

    Args:
        tf: Color and scalar opacity curves (stored scalar domain).
        geometry: Voxel spacing, used for the opacity unit distance.
        params: Shading/interpolation settings; defaults when omitted.

    Raises:
        ValueError: ``tf`` or ``geometry`` is missing.
    """
    if tf is None or geometry is None:
        raise ValueError("A transfer function and volume geometry are required")
    params = params or RenderParamsDTO()

    prop = vtk.vtkVolumeProperty()
    prop.SetColor(to_vtk_color(tf.color))
    prop.SetScalarOpacity(to_vtk_opacity(tf.opacity))
    prop.SetGradientOpacity(to_vtk_opacity(gradient_opacity_curve()))
    prop.SetScalarOpacityUnitDistance(unit_distance(geometry.spacing))

    if params.interpolation == 'nearest':
        prop.SetInterpolationTypeToNearest()
    else:
        prop.SetInterpolationTypeToLinear()

    if params.shade:
        prop.ShadeOn()
    else:
        prop.ShadeOff()
    prop.SetAmbient(params.ambient)
    prop.SetDiffuse(params.diffuse)
    prop.SetSpecular(params.specular)
    return prop


class VolumePropertyHolder:
    """
    Owns the property currently attached to the volume actor.

    ``rebuild`` builds curves and property off to the side and replaces the
    reference in one assignment; the old property is never modified.
    """

    def __init__(self):
        self.property: Optional[vtk.vtkVolumeProperty] = None
        self.transfer_function: Optional[TransferFunction] = None
        self.selection: Optional[PresetSelection] = None

    def rebuild(self, selection: PresetSelection, rescale: RescaleParameters,
                geometry: VolumeGeometry, params: Optional[RenderParamsDTO] = None) -> vtk.vtkVolumeProperty:
        if rescale is None or geometry is None:
            raise ValueError("RescaleParameters and VolumeGeometry are required")
        tf = build_transfer_function(selection, rescale)
        prop = build_volume_property(tf, geometry, params)
        logger.info("Preset '%s' -> scalar range [%.1f, %.1f], unit distance %.3f",
                    tf.preset, tf.opacity.positions[0], tf.opacity.positions[-1],
                    prop.GetScalarOpacityUnitDistance())
        self.transfer_function, self.selection, self.property = tf, selection, prop
        return prop

    def attach(self, volume_actor) -> None:
        """Point a ``vtkVolume`` (or PyVista ``Volume``) at the current property."""
        if self.property is None:
            raise RuntimeError("No volume property built yet")
        volume_actor.SetProperty(self.property)
