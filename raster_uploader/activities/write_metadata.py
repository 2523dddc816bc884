"""Write metadata activity — commit derived metadata to a page blob.

Every present field of a ``DerivedMetadata`` becomes one string-valued
entry in the blob's metadata.  The whole set is committed in a single
``set_blob_metadata`` call, which replaces any metadata already on the
blob.  Transport failures are not retried.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from azure.core.exceptions import AzureError

from raster_uploader.core.exceptions import TransientError

if TYPE_CHECKING:
    from azure.storage.blob.aio import BlobClient

    from raster_uploader.models.metadata import DerivedMetadata

logger = logging.getLogger("raster_uploader.activities.write_metadata")


class MetadataCommitError(TransientError):
    """Raised when blob metadata cannot be committed."""

    default_stage = "write_metadata"
    default_code = "METADATA_COMMIT_FAILED"


async def write_blob_metadata(
    blob_client: BlobClient,
    metadata: DerivedMetadata,
) -> dict[str, str]:
    """Commit *metadata* to the blob behind *blob_client*.

    Args:
        blob_client: Async client for the target page blob.
        metadata: Derived metadata for the dataset.

    Returns:
        The string key/value pairs that were committed.

    Raises:
        MetadataCommitError: If the store rejects the commit.
    """
    pairs = metadata.to_blob_metadata()
    try:
        await blob_client.set_blob_metadata(metadata=pairs)
    except AzureError as exc:
        msg = f"Failed to commit metadata to blob {blob_client.blob_name}: {exc}"
        raise MetadataCommitError(msg) from exc

    logger.info(
        "Metadata committed | blob=%s | keys=%s",
        blob_client.blob_name,
        ",".join(pairs),
    )
    return pairs
