"""
Hounsfield Unit <-> stored scalar conversion.

CT slices store raw integers; the DICOM linear rescale maps them to HU:

    HU = scalar * RescaleSlope + RescaleIntercept

Transfer function landmarks are authored in HU, so every landmark is mapped
back into the stored scalar domain before it is handed to the renderer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from config import DEFAULT_RESCALE_SLOPE, DEFAULT_RESCALE_INTERCEPT

logger = logging.getLogger(__name__)

# Where a RescaleParameters value came from.
SOURCE_METADATA = "metadata"   # read from RescaleSlope/RescaleIntercept tags
SOURCE_MISSING = "missing"     # one or both tags absent, defaults substituted
SOURCE_IDENTITY = "identity"   # volume scalars are already HU


@dataclass(frozen=True)
class RescaleParameters:
    """
    Per-volume linear rescale.

    Attributes:
        slope (float): RescaleSlope as stored. May be 0 for malformed headers.
        intercept (float): RescaleIntercept as stored.
        source (str): One of ``metadata``, ``missing`` or ``identity``.
    """
    slope: float = DEFAULT_RESCALE_SLOPE
    intercept: float = DEFAULT_RESCALE_INTERCEPT
    source: str = SOURCE_METADATA

    @property
    def effective_slope(self) -> float:
        """Slope used for division; 0 is replaced by 1."""
        return self.slope if self.slope != 0.0 else 1.0

    @property
    def is_degenerate(self) -> bool:
        return self.slope == 0.0

    @property
    def is_identity(self) -> bool:
        return self.effective_slope == 1.0 and self.intercept == 0.0

    @staticmethod
    def identity() -> "RescaleParameters":
        """Rescale for volumes whose scalars are already Hounsfield Units."""
        return RescaleParameters(1.0, 0.0, SOURCE_IDENTITY)

    @staticmethod
    def from_values(slope, intercept) -> "RescaleParameters":
        """
        Build from optional tag values (``None`` means the tag was absent).

        Missing tags fall back to 1.0 / 0.0 and a zero slope is kept as-is but
        reported; both cases are logged because they change how the HU window
        lands on the stored data.
        """
        missing = [name for name, v in (("RescaleSlope", slope), ("RescaleIntercept", intercept)) if v is None]
        if missing:
            logger.warning(
                "Missing rescale metadata (%s); defaulting to slope=%s, intercept=%s",
                ", ".join(missing), DEFAULT_RESCALE_SLOPE, DEFAULT_RESCALE_INTERCEPT,
            )
        params = RescaleParameters(
            slope=float(slope) if slope is not None else DEFAULT_RESCALE_SLOPE,
            intercept=float(intercept) if intercept is not None else DEFAULT_RESCALE_INTERCEPT,
            source=SOURCE_MISSING if missing else SOURCE_METADATA,
        )
        if params.is_degenerate:
            logger.warning("RescaleSlope is 0 (malformed metadata); using slope=1.0 for HU mapping")
        return params

    @staticmethod
    def from_dataset(ds) -> "RescaleParameters":
        """Read (0028,1053) RescaleSlope and (0028,1052) RescaleIntercept from a pydicom dataset."""
        return RescaleParameters.from_values(
            getattr(ds, "RescaleSlope", None),
            getattr(ds, "RescaleIntercept", None),
        )

    def describe(self) -> str:
        text = f"slope={self.slope:g}, intercept={self.intercept:g} ({self.source})"
        if self.is_degenerate:
            text += " [zero slope replaced by 1.0]"
        return text


def to_scalar(hu: float, params: RescaleParameters) -> float:
    """Map a Hounsfield Unit value into the stored scalar domain."""
    return (float(hu) - params.intercept) / params.effective_slope


def to_hu(scalar: float, params: RescaleParameters) -> float:
    """Map a stored scalar back to Hounsfield Units."""
    return float(scalar) * params.effective_slope + params.intercept


__all__ = [
    "RescaleParameters",
    "to_scalar",
    "to_hu",
    "SOURCE_METADATA",
    "SOURCE_MISSING",
    "SOURCE_IDENTITY",
]
