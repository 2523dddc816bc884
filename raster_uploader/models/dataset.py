"""Data model for a raster dataset on disk.

A RasterDataset groups the three files of one ENVI-style raster:
the raw ``.bin`` payload, its ``.hdr`` text header, and an optional
``.bin.aux.xml`` sidecar carrying the no-data value.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from raster_uploader.core.constants import HEADER_SUFFIX, PAYLOAD_SUFFIX, SIDECAR_SUFFIX


@dataclass(frozen=True, slots=True)
class RasterDataset:
    """One raster dataset selected for upload.

    Attributes:
        name: Base file name with the payload extension stripped.  Also
            the name of the page blob.
        payload_path: Path to the raw pixel payload.
        header_path: Path to the text header.
        sidecar_path: Path to the optional auxiliary metadata sidecar.
    """

    name: str
    payload_path: Path
    header_path: Path
    sidecar_path: Path

    @classmethod
    def from_payload(cls, payload_path: Path | str) -> RasterDataset:
        """Build a dataset from the path of its ``.bin`` payload.

        ``x.bin`` → header ``x.hdr``, sidecar ``x.bin.aux.xml``, name ``x``.
        """
        payload = Path(payload_path)
        name = payload.name.removesuffix(PAYLOAD_SUFFIX)
        if payload.suffix == PAYLOAD_SUFFIX:
            header = payload.with_suffix(HEADER_SUFFIX)
        else:
            header = payload.with_name(payload.name + HEADER_SUFFIX)
        return cls(
            name=name,
            payload_path=payload,
            header_path=header,
            sidecar_path=payload.with_name(payload.name + SIDECAR_SUFFIX),
        )
