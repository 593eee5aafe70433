"""
Data loaders package.
"""

from loaders.dicom import DicomSeriesLoader, SeriesInfo, discover_series
from loaders.dummy import DummyLoader

__all__ = [
    'DicomSeriesLoader',
    'SeriesInfo',
    'discover_series',
    'DummyLoader',
]
