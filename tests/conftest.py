"""Shared pytest fixtures for the raster uploader test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from raster_uploader.models.dataset import RasterDataset

# ---------------------------------------------------------------------------
# Sample files
# ---------------------------------------------------------------------------

SAMPLE_HEADER = """ENVI
description = {
  Sample raster exported for upload tests}
samples = 100
lines = 50
bands = 1
header offset = 0
file type = ENVI Standard
data type = 4
interleave = bsq
byte order = 0
map info = {UTM, 1, 1, 500000.0, 4000000.0, 30.0, 30.0, {WGS-84}}
"""

SAMPLE_SIDECAR = """<PAMDataset>
  <PAMRasterBand band="1">
    <NoDataValue>-9999</NoDataValue>
    <Metadata>
      <MDI key="STATISTICS_MINIMUM">0</MDI>
    </Metadata>
  </PAMRasterBand>
</PAMDataset>
"""

DatasetFactory = Callable[..., RasterDataset]


@pytest.fixture()
def sample_header() -> str:
    """A well-formed ENVI header (100 x 50, float32, UTM WGS-84)."""
    return SAMPLE_HEADER


@pytest.fixture()
def make_dataset(tmp_path: Path) -> DatasetFactory:
    """Return a factory that writes a dataset's files under ``tmp_path``.

    Keyword args:
        name: Dataset base name (default ``"tile"``).
        payload_size: Payload length in bytes (default 1000).
        header: Header text, or ``None`` to omit the header file.
        sidecar: Sidecar XML text, or ``None`` to omit the sidecar.
    """

    def _make(
        name: str = "tile",
        *,
        payload_size: int = 1000,
        header: str | None = SAMPLE_HEADER,
        sidecar: str | None = None,
    ) -> RasterDataset:
        payload = tmp_path / f"{name}.bin"
        payload.write_bytes(b"\x01" * payload_size)
        dataset = RasterDataset.from_payload(payload)
        if header is not None:
            dataset.header_path.write_text(header, encoding="utf-8")
        if sidecar is not None:
            dataset.sidecar_path.write_text(sidecar, encoding="utf-8")
        return dataset

    return _make


# ---------------------------------------------------------------------------
# Blob store mocks
# ---------------------------------------------------------------------------


def make_blob_client(name: str) -> MagicMock:
    """Build a mock async ``BlobClient`` for blob *name*."""
    blob = MagicMock(name=f"blob:{name}")
    blob.blob_name = name
    blob.upload_blob = AsyncMock(return_value={})
    blob.set_blob_metadata = AsyncMock(return_value={})
    return blob


@pytest.fixture()
def container_client() -> MagicMock:
    """Mock async ``ContainerClient`` handing out one blob mock per name.

    ``container_client.blobs`` maps blob name → blob mock.
    """
    container = MagicMock(name="container")
    container.container_name = "rasters"
    container.blobs = {}

    def _get_blob_client(name: str) -> MagicMock:
        if name not in container.blobs:
            container.blobs[name] = make_blob_client(name)
        return container.blobs[name]

    container.get_blob_client.side_effect = _get_blob_client
    container.create_container = AsyncMock(return_value={})
    return container
