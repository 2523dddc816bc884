"""Data models and schemas.

Defines the data structures used throughout the pipeline:
- RasterDataset: The payload, header, and sidecar files of one raster
- HeaderRecord: Ordered key/value entries parsed from the text header
- DerivedMetadata: Flat geospatial metadata attached to the page blob
"""

from raster_uploader.models.dataset import RasterDataset
from raster_uploader.models.header import HeaderEntry, HeaderRecord
from raster_uploader.models.metadata import DerivedMetadata

__all__ = [
    "DerivedMetadata",
    "HeaderEntry",
    "HeaderRecord",
    "RasterDataset",
]
