"""Pydantic model for the metadata attached to each page blob.

The model is flat: every field becomes one string-valued entry in the
blob's metadata.  Field names are the blob metadata keys consumers of
the container read, so they are lowercase without separators.

- **Header fields**: ``rowlength``, ``columnlength``, ``headeroffset``,
  ``minx``, ``maxy``, ``resolution``, ``crs``, ``valuelength``
- **Sidecar field**: ``nullvalue``
- **Derived bounds**: ``maxx``, ``miny``

Every field is optional.  Absent fields are omitted from the committed
metadata rather than written as empty strings.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

#: Bytes per value for the supported ENVI data types.
VALID_VALUE_LENGTHS = frozenset({1, 2, 4, 8})

#: Order in which fields are written to blob metadata.
METADATA_KEYS: tuple[str, ...] = (
    "nullvalue",
    "rowlength",
    "columnlength",
    "headeroffset",
    "minx",
    "maxy",
    "resolution",
    "crs",
    "valuelength",
    "maxx",
    "miny",
)


class DerivedMetadata(BaseModel):
    """Geospatial metadata derived from a header record and sidecar.

    Attributes:
        rowlength: Pixels per row (header ``samples``).
        columnlength: Rows in the raster (header ``lines``).
        headeroffset: Bytes of embedded header before the pixel data.
        minx: Left edge of the raster in CRS units.
        maxy: Top edge of the raster in CRS units.
        resolution: Pixel size in CRS units.
        crs: Coordinate reference system token, braces stripped.
        valuelength: Bytes per pixel value (1, 2, 4, or 8).
        nullvalue: No-data sentinel from the sidecar, if any.
        maxx: Right edge, ``minx + resolution * rowlength``.
        miny: Bottom edge, ``maxy - resolution * columnlength``.
    """

    rowlength: int | None = None
    columnlength: int | None = None
    headeroffset: int | None = None
    minx: float | None = None
    maxy: float | None = None
    resolution: float | None = None
    crs: str | None = None
    valuelength: int | None = None
    nullvalue: float | None = None
    maxx: float | None = None
    miny: float | None = None

    model_config = {"frozen": True}

    @field_validator("valuelength")
    @classmethod
    def _check_value_length(cls, value: int | None) -> int | None:
        if value is not None and value not in VALID_VALUE_LENGTHS:
            msg = f"valuelength must be one of {sorted(VALID_VALUE_LENGTHS)}, got {value}"
            raise ValueError(msg)
        return value

    @property
    def bounds(self) -> tuple[float, float, float, float] | None:
        """Bounding box ``(minx, miny, maxx, maxy)`` once derived."""
        if None in (self.minx, self.miny, self.maxx, self.maxy):
            return None
        return (self.minx, self.miny, self.maxx, self.maxy)  # type: ignore[return-value]

    def to_blob_metadata(self) -> dict[str, str]:
        """Serialise present fields to string key/value pairs.

        Numbers use Python's shortest round-trip representation, so
        ``503000.0`` is written as ``"503000.0"`` and ``100`` as ``"100"``.
        """
        values = self.model_dump(exclude_none=True)
        return {key: str(values[key]) for key in METADATA_KEYS if key in values}
