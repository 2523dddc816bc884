"""Dataset selection from the uploader configuration.

Either one explicit payload file, or every ``*.bin`` payload directly
inside a directory (not recursive), sorted by name so runs are
deterministic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from raster_uploader.core.constants import PAYLOAD_SUFFIX
from raster_uploader.core.exceptions import DatasetNotFoundError
from raster_uploader.models.dataset import RasterDataset

if TYPE_CHECKING:
    from raster_uploader.core.config import UploaderConfig

logger = logging.getLogger("raster_uploader.utils.datasets")


def select_datasets(config: UploaderConfig) -> list[RasterDataset]:
    """Return the datasets selected by *config*.

    Raises:
        DatasetNotFoundError: If the directory or the single payload
            file does not exist.
    """
    if config.uses_directory:
        return find_datasets(config.directory_path)

    payload = Path(config.file_path)
    if not payload.is_file():
        raise DatasetNotFoundError(payload)
    return [RasterDataset.from_payload(payload)]


def find_datasets(directory: Path | str) -> list[RasterDataset]:
    """Return a dataset for every payload file in *directory*.

    Raises:
        DatasetNotFoundError: If *directory* is not a directory.
    """
    root = Path(directory)
    if not root.is_dir():
        raise DatasetNotFoundError(root)

    datasets = [
        RasterDataset.from_payload(path)
        for path in sorted(root.glob(f"*{PAYLOAD_SUFFIX}"))
        if path.is_file()
    ]
    logger.info("Found %d dataset(s) in %s", len(datasets), root)
    return datasets
