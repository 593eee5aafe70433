"""
Core module containing base classes and data structures.
"""

from core.base import VolumeData, BaseLoader, BaseVisualizer
from core.dto import RenderParamsDTO, ViewerDTO
from core.progress import ProgressEvent, LoadProgress, ProgressPrinter, round_percent

__all__ = [
    'VolumeData', 'BaseLoader', 'BaseVisualizer',
    'RenderParamsDTO', 'ViewerDTO',
    'ProgressEvent', 'LoadProgress', 'ProgressPrinter', 'round_percent',
]
