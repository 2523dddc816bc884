"""Pad payload activity — grow a payload to a whole number of pages.

Page blobs only accept content whose length is an exact multiple of
512 bytes.  ``pad_to_page`` appends zero bytes to the end of the
payload file until it is, mutating the file in place.

The change is permanent: the on-disk payload keeps its padding after
upload.  Padding never truncates, and padding an aligned payload is a
no-op, so re-running the uploader over the same directory is safe.
"""

from __future__ import annotations

import logging
from pathlib import Path

from raster_uploader.core.constants import BYTES_PER_PAGE
from raster_uploader.core.exceptions import DatasetNotFoundError

logger = logging.getLogger("raster_uploader.activities.pad_payload")


def padding_needed(length: int, *, page_size: int = BYTES_PER_PAGE) -> int:
    """Return how many zero bytes bring *length* up to a page boundary."""
    if length < 0:
        msg = f"length must be >= 0, got {length}"
        raise ValueError(msg)
    return -length % page_size


def pad_to_page(payload_path: Path | str, *, page_size: int = BYTES_PER_PAGE) -> int:
    """Append zero bytes so the payload length is a multiple of *page_size*.

    Args:
        payload_path: Path to the ``.bin`` payload.
        page_size: Block size in bytes (512 for page blobs).

    Returns:
        Number of bytes appended (0 if already aligned).

    Raises:
        DatasetNotFoundError: If the payload does not exist.
    """
    path = Path(payload_path)
    try:
        length = path.stat().st_size
    except FileNotFoundError as exc:
        raise DatasetNotFoundError(path, stage="pad_payload") from exc

    needed = padding_needed(length, page_size=page_size)
    if needed == 0:
        return 0

    logger.info(
        "Payload length not a multiple of %d, padding end | file=%s | length=%d | appended=%d",
        page_size,
        path.name,
        length,
        needed,
    )
    with path.open("ab") as handle:
        handle.write(bytes(needed))
    return needed
