"""Upload orchestrator — run every selected dataset's pipeline concurrently.

Per-dataset pipeline (strictly sequential):

1. Resolve the page blob named after the dataset.
2. Pad the payload to a whole number of 512-byte pages.
3. Upload the payload (skipped when ``only_metadata`` is set).
4. Parse header → derive metadata (with sidecar null value) → commit.

Fan-out / fan-in:
    One asyncio task per dataset, with no concurrency limit.  Tasks
    share no state: each owns its dataset's files and blob.  The
    orchestrator waits for every task, and a failure in one never
    cancels or blocks the others.  All failures are collected into the
    returned ``UploadReport``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from raster_uploader.activities.derive_metadata import derive_metadata, read_null_value
from raster_uploader.activities.pad_payload import pad_to_page
from raster_uploader.activities.parse_header import parse_header_file
from raster_uploader.activities.upload_payload import upload_page_blob
from raster_uploader.activities.write_metadata import write_blob_metadata
from raster_uploader.core.exceptions import PipelineError
from raster_uploader.utils.datasets import select_datasets

if TYPE_CHECKING:
    from azure.storage.blob.aio import ContainerClient

    from raster_uploader.core.config import UploaderConfig
    from raster_uploader.models.dataset import RasterDataset

logger = logging.getLogger("raster_uploader.orchestrators.upload_pipeline")


# ---------------------------------------------------------------------------
# Result contracts
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DatasetResult:
    """Outcome of a dataset pipeline that completed.

    Attributes:
        dataset: Dataset (and blob) name.
        padded_bytes: Zero bytes appended to the payload.
        uploaded_bytes: Payload bytes uploaded (0 for metadata-only runs).
        metadata: The committed blob metadata.
    """

    dataset: str
    padded_bytes: int = 0
    uploaded_bytes: int = 0
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class DatasetFailure:
    """A dataset pipeline that raised."""

    dataset: str
    error: Exception

    def to_error_dict(self) -> dict[str, object]:
        """Structured payload for logging."""
        if isinstance(self.error, PipelineError):
            return self.error.to_error_dict()
        return {
            "category": "unexpected",
            "code": type(self.error).__name__,
            "stage": "",
            "message": str(self.error),
            "retryable": False,
            "correlation_id": self.dataset,
        }


class UploadBatchError(PipelineError):
    """Raised by ``UploadReport.raise_for_failures`` when any dataset failed.

    Attributes:
        failures: Every per-dataset failure.
    """

    default_stage = "upload_rasters"
    default_code = "UPLOAD_BATCH_FAILED"

    def __init__(self, failures: list[DatasetFailure]) -> None:
        self.failures = list(failures)
        names = ", ".join(f.dataset for f in self.failures)
        super().__init__(f"{len(self.failures)} dataset(s) failed: {names}")


@dataclass(slots=True)
class UploadReport:
    """Aggregated outcome of one uploader run."""

    succeeded: list[DatasetResult] = field(default_factory=list)
    failures: list[DatasetFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether every dataset completed."""
        return not self.failures

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failures)

    def raise_for_failures(self) -> None:
        """Raise ``UploadBatchError`` carrying every failure, if any."""
        if self.failures:
            raise UploadBatchError(self.failures)


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------


async def upload_dataset(
    dataset: RasterDataset,
    container_client: ContainerClient,
    *,
    only_metadata: bool = False,
) -> DatasetResult:
    """Run the pad → upload → metadata pipeline for one dataset.

    Raises:
        PipelineError: Any step's error, with ``correlation_id`` set to
            the dataset name.
    """
    try:
        blob_client = container_client.get_blob_client(dataset.name)

        padded = await asyncio.to_thread(pad_to_page, dataset.payload_path)

        uploaded = 0
        if not only_metadata:
            uploaded = await upload_page_blob(blob_client, dataset)

        logger.info("Reading metadata | file=%s", dataset.payload_path.name)
        record = await asyncio.to_thread(parse_header_file, dataset.header_path)
        null_value = await asyncio.to_thread(read_null_value, dataset.sidecar_path)
        metadata = derive_metadata(record, null_value=null_value)
        pairs = await write_blob_metadata(blob_client, metadata)
    except PipelineError as exc:
        exc.correlation_id = exc.correlation_id or dataset.name
        raise

    return DatasetResult(
        dataset=dataset.name,
        padded_bytes=padded,
        uploaded_bytes=uploaded,
        metadata=pairs,
    )


async def upload_rasters(
    config: UploaderConfig,
    container_client: ContainerClient,
    *,
    datasets: list[RasterDataset] | None = None,
) -> UploadReport:
    """Upload every dataset selected by *config* concurrently.

    Args:
        config: Immutable uploader configuration.
        container_client: Async client for the target container.
        datasets: Explicit dataset list; defaults to ``select_datasets(config)``.

    Returns:
        An ``UploadReport`` with one entry per dataset.

    Raises:
        DatasetNotFoundError: If the configured file or directory is missing.
    """
    if datasets is None:
        datasets = select_datasets(config)

    logger.info(
        "Upload started | datasets=%d | container=%s | only_metadata=%s",
        len(datasets),
        config.container_reference,
        config.only_metadata,
    )

    outcomes = await asyncio.gather(
        *(
            upload_dataset(dataset, container_client, only_metadata=config.only_metadata)
            for dataset in datasets
        ),
        return_exceptions=True,
    )

    report = UploadReport()
    for dataset, outcome in zip(datasets, outcomes, strict=True):
        if isinstance(outcome, DatasetResult):
            report.succeeded.append(outcome)
        elif isinstance(outcome, Exception):
            failure = DatasetFailure(dataset=dataset.name, error=outcome)
            logger.error(
                "Dataset failed | dataset=%s | error=%s",
                dataset.name,
                failure.to_error_dict(),
            )
            report.failures.append(failure)
        else:
            raise outcome

    logger.info(
        "Upload finished | succeeded=%d | failed=%d",
        len(report.succeeded),
        len(report.failures),
    )
    return report
