"""
Synthetic data generators for testing.
"""

import numpy as np
from typing import Optional, Callable

from core import BaseLoader, VolumeData
from transfer.rescale import RescaleParameters, to_scalar

# Typical CT encoding: stored = HU + 1024
PHANTOM_RESCALE = RescaleParameters(slope=1.0, intercept=-1024.0)


class DummyLoader(BaseLoader):
    """Synthetic head phantom: air, fat, soft tissue, skull shell and dense teeth."""

    def __init__(self, rescale: RescaleParameters = PHANTOM_RESCALE, seed: Optional[int] = 0,
                 noise_hu: float = 10.0):
        self.rescale = rescale
        self.seed = seed
        self.noise_hu = noise_hu

    def load(self, size: int = 96, callback: Optional[Callable[[int, str], None]] = None) -> VolumeData:
        size = int(size)
        print(f"[Loader] Generating synthetic head phantom (size={size})...")
        rng = np.random.default_rng(self.seed)
        if callback:
            callback(0, "Initializing air background...")

        zz, yy, xx = np.ogrid[:size, :size, :size]
        c = (size - 1) / 2.0
        # Normalised ellipsoidal radius, slightly elongated along Y
        r = np.sqrt(((xx - c) / (0.42 * size)) ** 2
                    + ((yy - c) / (0.46 * size)) ** 2
                    + ((zz - c) / (0.40 * size)) ** 2)

        hu = np.full((size, size, size), -1000.0, dtype=np.float32)

        # 1) Layers from the outside in.
        if callback:
            callback(20, "Adding fat, skull and tissue layers...")
        hu[r <= 1.00] = -100.0     # subcutaneous fat
        hu[r <= 0.94] = 1000.0     # cortical skull shell
        hu[r <= 0.86] = 400.0      # trabecular bone
        hu[r <= 0.80] = 40.0       # brain / soft tissue
        hu[r <= 0.20] = 0.0        # ventricles (water)

        # 2) Dense "teeth" blobs along the lower front edge.
        if callback:
            callback(60, "Placing dense structures...")
        radius = max(1, size // 24)
        for k in range(-2, 3):
            cz, cy, cx = int(c + 0.15 * size), int(c + 0.36 * size), int(c + k * 2.5 * radius)
            blob = (zz - cz) ** 2 + (yy - cy) ** 2 + (xx - cx) ** 2 <= radius ** 2
            hu[blob] = 1800.0

        # 3) Acquisition noise.
        if self.noise_hu > 0:
            hu += rng.normal(0.0, self.noise_hu, hu.shape).astype(np.float32)

        # 4) Encode as stored scalars.
        slope = self.rescale.effective_slope
        stored = ((hu - self.rescale.intercept) / slope).astype(np.float32)

        if callback:
            callback(100, "Generation complete.")

        return VolumeData(
            raw_data=stored,
            spacing=(0.8, 0.8, 1.0),
            origin=(0.0, 0.0, 0.0),
            rescale=self.rescale,
            metadata={
                "Type": "Synthetic",
                "Description": "Ellipsoidal head phantom",
                "AirScalar": to_scalar(-1000.0, self.rescale),
            },
        )
