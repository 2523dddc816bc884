"""Tests for the write_metadata activity.

Covers:
- every present field written as a string
- absent fields omitted
- single commit call
- transport failures wrapped in MetadataCommitError, not retried
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.core.exceptions import ResourceNotFoundError, ServiceRequestError

from raster_uploader.activities.write_metadata import MetadataCommitError, write_blob_metadata
from raster_uploader.models.metadata import DerivedMetadata


def _blob_client() -> MagicMock:
    blob = MagicMock()
    blob.blob_name = "tile"
    blob.set_blob_metadata = AsyncMock(return_value={})
    return blob


def _metadata(**overrides: object) -> DerivedMetadata:
    values: dict[str, object] = {
        "rowlength": 100,
        "columnlength": 50,
        "headeroffset": 0,
        "minx": 500000.0,
        "maxy": 4000000.0,
        "resolution": 30.0,
        "crs": "WGS-84",
        "valuelength": 4,
        "maxx": 503000.0,
        "miny": 3998500.0,
    }
    values.update(overrides)
    return DerivedMetadata(**values)  # type: ignore[arg-type]


class TestWriteBlobMetadata:
    @pytest.mark.asyncio()
    async def test_commits_all_present_fields_once(self) -> None:
        blob = _blob_client()

        pairs = await write_blob_metadata(blob, _metadata())

        blob.set_blob_metadata.assert_awaited_once_with(metadata=pairs)
        assert pairs == {
            "rowlength": "100",
            "columnlength": "50",
            "headeroffset": "0",
            "minx": "500000.0",
            "maxy": "4000000.0",
            "resolution": "30.0",
            "crs": "WGS-84",
            "valuelength": "4",
            "maxx": "503000.0",
            "miny": "3998500.0",
        }

    @pytest.mark.asyncio()
    async def test_values_are_strings(self) -> None:
        pairs = await write_blob_metadata(_blob_client(), _metadata(nullvalue=-9999.0))
        assert all(isinstance(v, str) for v in pairs.values())
        assert pairs["nullvalue"] == "-9999.0"

    @pytest.mark.asyncio()
    async def test_absent_fields_omitted(self) -> None:
        pairs = await write_blob_metadata(_blob_client(), _metadata(valuelength=None))
        assert "valuelength" not in pairs
        assert "nullvalue" not in pairs

    @pytest.mark.asyncio()
    @pytest.mark.parametrize(
        "error",
        [ResourceNotFoundError(message="no such blob"), ServiceRequestError(message="dns")],
    )
    async def test_transport_failure_wrapped(self, error: Exception) -> None:
        blob = _blob_client()
        blob.set_blob_metadata.side_effect = error

        with pytest.raises(MetadataCommitError) as exc_info:
            await write_blob_metadata(blob, _metadata())

        assert exc_info.value.stage == "write_metadata"
        assert exc_info.value.code == "METADATA_COMMIT_FAILED"
        assert exc_info.value.__cause__ is error
        blob.set_blob_metadata.assert_awaited_once()
