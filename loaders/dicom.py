"""
DICOM series discovery and loading for CT volumes.

The loader resolves a directory into studies/series, reads the chosen series
in parallel, orders slices along Z and returns the stored scalars together
with the rescale and spacing metadata the transfer function engine needs.
"""

import os
import re
import logging
import numpy as np
import pydicom
import concurrent.futures
from dataclasses import dataclass, field
from glob import glob
from typing import Dict, List, Tuple, Optional, Callable

from pydicom.errors import InvalidDicomError

from core import BaseLoader, VolumeData
from transfer.rescale import RescaleParameters
from config import LOADER_MAX_WORKERS, LOADER_SERIES_INDEX

logger = logging.getLogger(__name__)


def _natural_sort_key(text: str):
    """Natural sorting key for filenames like img_1, img_2, ..., img_10"""
    return [int(c) if c.isdigit() else c.lower() for c in re.split(r'(\d+)', text)]


# ==========================================
# Shared Utility Functions
# ==========================================

def _validate_path(folder_path: str) -> None:
    """Validate folder path exists."""
    if not os.path.isdir(folder_path):
        raise FileNotFoundError(f"Directory does not exist: {folder_path}")


def _calculate_z_spacing(ds1, ds2=None) -> float:
    """
    Calculate Z-spacing from DICOM headers.
    
    Args:
        ds1: First DICOM dataset
        ds2: Second DICOM dataset (optional, for calculating from position difference)
    """
    if ds2 is not None:
        if hasattr(ds1, 'ImagePositionPatient') and hasattr(ds2, 'ImagePositionPatient'):
            dz = abs(float(ds2.ImagePositionPatient[2]) - float(ds1.ImagePositionPatient[2]))
            if dz > 0:
                return dz
    return float(getattr(ds1, 'SliceThickness', 1.0) or 1.0)


def _get_spacing_and_origin(ds1, ds2=None) -> Tuple[tuple, tuple]:
    """
    Extract spacing and origin from DICOM dataset.

    PixelSpacing is (row, column), i.e. (y, x); the returned spacing is (x, y, z).
    """
    pixel_spacing = getattr(ds1, 'PixelSpacing', (1.0, 1.0))
    spacing = (
        float(pixel_spacing[1]),
        float(pixel_spacing[0]),
        _calculate_z_spacing(ds1, ds2),
    )
    origin = tuple(float(v) for v in getattr(ds1, 'ImagePositionPatient', (0.0, 0.0, 0.0)))
    return spacing, origin


def _apply_rescale(arr: np.ndarray, slope: float, intercept: float) -> np.ndarray:
    """Apply a linear rescale to a float pixel array (in-place)."""
    if slope != 1.0:
        arr *= slope
    if intercept != 0.0:
        arr += intercept
    return arr


def _sort_slices_by_position(slices: List, loader_name: str = "Loader") -> List:
    """
    Sort DICOM slices by ImagePositionPatient Z-coordinate.

    Falls back to InstanceNumber, then to the incoming (filename) order.
    """
    if len(slices) < 2:
        return slices
    if all(hasattr(s, 'ImagePositionPatient') for s in slices):
        slices.sort(key=lambda s: float(s.ImagePositionPatient[2]))
        z_start = float(slices[0].ImagePositionPatient[2])
        z_end = float(slices[-1].ImagePositionPatient[2])
        print(f"[{loader_name}] Sorted by Z-position: {z_start:.2f} -> {z_end:.2f}")
    elif all(hasattr(s, 'InstanceNumber') for s in slices):
        slices.sort(key=lambda s: int(s.InstanceNumber))
        print(f"[{loader_name}] Sorted by InstanceNumber")
    else:
        print(f"[{loader_name}] Warning: no position headers, keeping filename order")
    return slices


def _extract_metadata(ds, slice_count: int, extra: dict = None) -> dict:
    """
    Extract common metadata from DICOM dataset.
    
    Args:
        ds: DICOM dataset
        slice_count: Number of slices
        extra: Additional metadata to include
    """
    metadata = {
        "PatientID": str(getattr(ds, "PatientID", "Unknown")),
        "Modality": str(getattr(ds, "Modality", "CT")),
        "StudyDescription": str(getattr(ds, "StudyDescription", "")),
        "SeriesDescription": str(getattr(ds, "SeriesDescription", "")),
        "SliceCount": slice_count,
        "SortMethod": "Header" if hasattr(ds, 'ImagePositionPatient') else "Filename"
    }
    if extra:
        metadata.update(extra)
    return metadata


def _find_dicom_files(folder_path: str) -> List[str]:
    """List regular files in the folder, natural-sorted by name."""
    files = [f for f in glob(os.path.join(folder_path, "*")) if os.path.isfile(f)]
    if not files:
        raise FileNotFoundError(f"No files found in {folder_path}")
    files.sort(key=lambda f: _natural_sort_key(os.path.basename(f)))
    return files


# ==========================================
# Series discovery
# ==========================================

@dataclass
class SeriesInfo:
    """One DICOM series found in a directory."""
    study_uid: str
    series_uid: str
    study_index: int = 0
    series_number: Optional[int] = None
    description: str = ""
    files: List[str] = field(default_factory=list)

    @property
    def slice_count(self) -> int:
        return len(self.files)


def discover_series(folder_path: str,
                    callback: Optional[Callable[[int, str], None]] = None) -> List[SeriesInfo]:
    """
    Group the readable DICOM files of a directory by study and series.

    Files that are not DICOM (or lack pixel data) are skipped. The result is
    ordered by study, then by SeriesNumber.

    Raises:
        FileNotFoundError: Directory missing or no DICOM image files inside.
    """
    _validate_path(folder_path)
    files = _find_dicom_files(folder_path)

    groups: Dict[Tuple[str, str], SeriesInfo] = {}
    total = len(files)
    for i, f in enumerate(files):
        if callback and i % 50 == 0:
            callback(int(20 * i / total), f"Reading header {i + 1}/{total}...")
        try:
            ds = pydicom.dcmread(f, stop_before_pixels=True)
        except (InvalidDicomError, OSError) as e:
            logger.debug("Skipping non-DICOM file %s: %s", f, e)
            continue
        if not hasattr(ds, "Rows"):
            continue
        key = (str(getattr(ds, "StudyInstanceUID", "")), str(getattr(ds, "SeriesInstanceUID", "")))
        info = groups.get(key)
        if info is None:
            number = getattr(ds, "SeriesNumber", None)
            info = SeriesInfo(
                study_uid=key[0],
                series_uid=key[1],
                series_number=int(number) if number not in (None, "") else None,
                description=str(getattr(ds, "SeriesDescription", "")),
            )
            groups[key] = info
        info.files.append(f)

    if not groups:
        raise FileNotFoundError(f"No valid DICOM series found in {folder_path}")

    study_order: List[str] = []
    for study_uid, _ in groups:
        if study_uid not in study_order:
            study_order.append(study_uid)

    series = list(groups.values())
    for info in series:
        info.study_index = study_order.index(info.study_uid)
    series.sort(key=lambda s: (s.study_index, s.series_number if s.series_number is not None else 0))

    for study_index in range(len(study_order)):
        print(f"[Loader] Study {study_index}:")
        for k, info in enumerate(series):
            if info.study_index == study_index:
                print(f"[Loader]   Series {k}: {info.slice_count} files {info.description!r}")
    return series


# ==========================================
# Loader
# ==========================================

class DicomSeriesLoader(BaseLoader):
    """Concrete DICOM series loader for clinical CT scans.

    The returned ``VolumeData.raw_data`` holds stored scalars by default so
    transfer functions can be mapped through ``VolumeData.rescale``. With
    ``map_hu_to_scalar=False`` the volume is converted to HU on load and the
    rescale is reported as identity.
    """

    def __init__(self, series_index: int = LOADER_SERIES_INDEX,
                 map_hu_to_scalar: bool = True,
                 max_workers: int = LOADER_MAX_WORKERS):
        """
        Args:
            series_index: Index into ``discover_series`` output (-1 = last series).
            map_hu_to_scalar: Keep stored scalars and map HU landmarks through the rescale.
            max_workers: Number of parallel threads for file reading.
        """
        self.series_index = series_index
        self.map_hu_to_scalar = map_hu_to_scalar
        self.max_workers = max_workers

    def load(self, folder_path: str, callback: Optional[Callable[[int, str], None]] = None) -> VolumeData:
        print(f"[Loader] Scanning folder: {folder_path} ...")
        if callback: callback(0, "Scanning directory...")

        series = discover_series(folder_path, callback)
        try:
            chosen = series[self.series_index]
        except IndexError:
            raise ValueError(
                f"Series index {self.series_index} out of range ({len(series)} series found)"
            ) from None

        if callback: callback(20, f"Reading {chosen.slice_count} slices...")
        slices = self._parallel_read_files(chosen.files, callback)
        if not slices:
            raise ValueError("No valid DICOM slices loaded.")

        slices = _sort_slices_by_position(slices, "Loader")

        if callback: callback(50, "Building 3D volume...")
        volume, rescale = self._build_volume(slices, callback)
        ds2 = slices[1] if len(slices) > 1 else None
        spacing, origin = _get_spacing_and_origin(slices[0], ds2)

        metadata = _extract_metadata(slices[0], len(slices), {
            "SeriesInstanceUID": chosen.series_uid,
            "StudyInstanceUID": chosen.study_uid,
            "MapHUToScalar": self.map_hu_to_scalar,
        })

        print(f"[Loader] Loading complete: {volume.shape}, Voxel Spacing: {spacing}")
        if callback: callback(100, "Loading complete.")
        return VolumeData(raw_data=volume, spacing=spacing, origin=origin,
                          rescale=rescale, metadata=metadata)

    def _parallel_read_files(self, files: List[str], 
                             callback: Optional[Callable] = None) -> List[pydicom.dataset.FileDataset]:
        """Parallel DICOM file reading using ThreadPoolExecutor."""
        def read_single(args):
            idx, f = args
            try:
                return (idx, pydicom.dcmread(f))
            except (InvalidDicomError, OSError) as e:
                print(f"Warning: Failed to read {f} - {e}")
                return (idx, None)
        
        total = len(files)
        results = [None] * total
        
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(read_single, (i, f)): i for i, f in enumerate(files)}
            completed = 0
            for future in concurrent.futures.as_completed(futures):
                idx, ds = future.result()
                results[idx] = ds
                completed += 1
                if callback and completed % 20 == 0:
                    percent = 20 + int(30 * completed / total)
                    callback(percent, f"Reading slice {completed}/{total}...")
        
        return [r for r in results if r is not None]

    def _build_volume(self, slices: List[pydicom.dataset.FileDataset],
                      callback: Optional[Callable] = None) -> Tuple[np.ndarray, RescaleParameters]:
        """
        Stack slices into a (Z, Y, X) float32 volume.

        Slices whose rescale differs from the first slice are brought into
        the first slice's scalar domain so one rescale describes the volume.
        """
        reference = RescaleParameters.from_dataset(slices[0])

        img_shape = list(slices[0].pixel_array.shape)
        img_shape.insert(0, len(slices))
        volume = np.empty(img_shape, dtype=np.float32)

        total = len(slices)
        mismatched = 0
        for i, s in enumerate(slices):
            if callback and i % 20 == 0:
                percent = 50 + int(45 * i / total)
                callback(percent, f"Stacking slice {i+1}/{total}...")

            arr = s.pixel_array.astype(np.float32)
            slope = float(getattr(s, 'RescaleSlope', reference.slope))
            intercept = float(getattr(s, 'RescaleIntercept', reference.intercept))
            if not self.map_hu_to_scalar:
                _apply_rescale(arr, slope if slope != 0.0 else 1.0, intercept)
            elif slope != reference.slope or intercept != reference.intercept:
                mismatched += 1
                _apply_rescale(arr, slope if slope != 0.0 else 1.0, intercept - reference.intercept)
                arr /= reference.effective_slope
            volume[i] = arr

        if mismatched:
            logger.warning("%d slices had a different rescale; normalised to %s",
                           mismatched, reference.describe())

        if not self.map_hu_to_scalar:
            return volume, RescaleParameters.identity()
        return volume, reference
