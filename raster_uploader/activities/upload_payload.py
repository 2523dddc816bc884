"""Upload payload activity — send a page-aligned payload as a page blob.

The payload is streamed from disk into the blob named after the
dataset.  Each chunk is read in a worker thread, keeping the event loop
free for the other uploads.  Existing content is overwritten.  The
payload must already be page-aligned (see ``pad_payload``); a
misaligned payload is rejected before any bytes are sent.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from azure.core.exceptions import AzureError
from azure.storage.blob import BlobType

from raster_uploader.core.constants import BYTES_PER_PAGE, UPLOAD_CHUNK_SIZE
from raster_uploader.core.exceptions import DatasetNotFoundError, TransientError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from azure.storage.blob.aio import BlobClient

    from raster_uploader.models.dataset import RasterDataset

logger = logging.getLogger("raster_uploader.activities.upload_payload")


class UploadTransportError(TransientError):
    """Raised when the payload cannot be uploaded to the blob store."""

    default_stage = "upload_payload"
    default_code = "UPLOAD_FAILED"


async def upload_page_blob(blob_client: BlobClient, dataset: RasterDataset) -> int:
    """Upload the dataset's payload as the page blob's content.

    Args:
        blob_client: Async client for the dataset's page blob.
        dataset: The dataset whose payload is uploaded.

    Returns:
        Number of bytes uploaded.

    Raises:
        DatasetNotFoundError: If the payload does not exist.
        UploadTransportError: If the payload is not page-aligned or the
            store rejects the upload.
    """
    try:
        length = dataset.payload_path.stat().st_size
    except FileNotFoundError as exc:
        raise DatasetNotFoundError(dataset.payload_path, stage="upload_payload") from exc

    if length % BYTES_PER_PAGE:
        msg = (
            f"Payload {dataset.payload_path.name} is {length} bytes, "
            f"not a multiple of {BYTES_PER_PAGE}"
        )
        raise UploadTransportError(msg, retryable=False)

    logger.info(
        "Starting upload | file=%s | blob=%s | size=%d",
        dataset.payload_path.name,
        dataset.name,
        length,
    )
    try:
        await blob_client.upload_blob(
            _read_chunks(dataset.payload_path, UPLOAD_CHUNK_SIZE),
            blob_type=BlobType.PAGEBLOB,
            length=length,
            overwrite=True,
        )
    except AzureError as exc:
        msg = f"Failed to upload {dataset.payload_path.name} to blob {dataset.name}: {exc}"
        raise UploadTransportError(msg) from exc

    logger.info("Upload completed | blob=%s | size=%d", dataset.name, length)
    return length


async def _read_chunks(path: Path, chunk_size: int) -> AsyncIterator[bytes]:
    """Yield the file's content, reading each chunk in a worker thread."""
    stream = await asyncio.to_thread(path.open, "rb")
    try:
        while True:
            chunk = await asyncio.to_thread(stream.read, chunk_size)
            if not chunk:
                return
            yield chunk
    finally:
        stream.close()
