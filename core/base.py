"""
Core data structures and abstract base classes.
"""

import numpy as np
from dataclasses import dataclass, field
from abc import ABC, abstractmethod
from typing import Tuple, Dict, Any, Optional, Callable

from transfer.rescale import RescaleParameters
from transfer.policies import VolumeGeometry


@dataclass
class VolumeData:
    """
    Unified Data Transfer Object (DTO) for a reconstructed CT volume.
    
    Attributes:
        raw_data (Optional[np.ndarray]): 3D Matrix (Z, Y, X) of stored scalars.
        spacing (Tuple[float, float, float]): Voxel spacing (x, y, z) in mm.
        origin (Tuple[float, float, float]): Origin coordinates (x, y, z) in mm.
        rescale (RescaleParameters): Linear map from stored scalars to HU.
        metadata (Dict[str, Any]): Arbitrary metadata (PatientID, SeriesDescription, etc.).
    """
    raw_data: Optional[np.ndarray] = None
    spacing: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    origin: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rescale: RescaleParameters = field(default_factory=RescaleParameters.identity)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def dimensions(self) -> Tuple[int, int, int]:
        """Returns the shape of the volume (Z, Y, X) if raw_data exists."""
        if self.raw_data is not None:
            return self.raw_data.shape
        return (0, 0, 0)

    @property
    def extent(self) -> Tuple[int, int, int, int, int, int]:
        """VTK-style index extent (x0, x1, y0, y1, z0, z1)."""
        nz, ny, nx = self.dimensions
        return (0, max(nx - 1, 0), 0, max(ny - 1, 0), 0, max(nz - 1, 0))

    @property
    def geometry(self) -> VolumeGeometry:
        return VolumeGeometry.from_spacing(self.spacing)

    @property
    def scalar_range(self) -> Tuple[float, float]:
        if self.raw_data is None or self.raw_data.size == 0:
            return (0.0, 0.0)
        return (float(np.min(self.raw_data)), float(np.max(self.raw_data)))


class BaseLoader(ABC):
    """Abstract base class for data acquisition strategies."""

    @abstractmethod
    def load(self, source: str, callback: Optional[Callable[[int, str], None]] = None) -> VolumeData:
        """
        Load data from a source path.
        
        Args:
            source (str): Path to file or directory.
            callback: Optional progress callback (percent, message).
            
        Returns:
            VolumeData: Loaded data object.
        """
        pass


class BaseVisualizer(ABC):
    """Abstract base class for visualization controllers."""

    @abstractmethod
    def set_data(self, data: VolumeData) -> None:
        """Set valid data to the visualizer."""
        pass

    @abstractmethod
    def show(self) -> None:
        """Show the visualization window."""
        pass
