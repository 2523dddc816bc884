"""Unified pipeline exception taxonomy.

Provides a shared base exception hierarchy for every step of the upload
pipeline.  Every domain exception inherits from ``PipelineError`` and
carries structured context fields so the orchestrator can report
per-dataset failures consistently.

Taxonomy categories
-------------------
- ``ValidationError``: malformed input files or values, never retryable.
- ``TransientError``: remote store failures (network, throttle).
- ``PermanentError``: unrecoverable failures such as missing files.
- ``ContractError``: misconfigured boundaries (missing connection string).

Nothing in the pipeline retries; ``retryable`` is informational and tells
an operator whether re-running the upload is likely to help.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for logging.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline-domain errors.

    Subclasses set the ``default_*`` class attributes; keyword arguments
    override them per instance.

    Attributes:
        message: Human-readable error description.
        stage: Pipeline stage where the error occurred
            (e.g. ``"parse_header"``, ``"write_metadata"``).
        code: Machine-readable error code (e.g. ``"HEADER_PARSE_FAILED"``).
        retryable: Whether re-running the upload may succeed.
        correlation_id: Name of the dataset being processed.
    """

    default_stage: str = ""
    default_code: str = ""
    default_retryable: bool = False
    #: Fixed category; when empty it follows ``retryable``.
    category_name: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool | None = None,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = self.default_retryable if retryable is None else retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        if self.category_name:
            return self.category_name
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(PipelineError):
    """A header, sidecar or value that cannot be interpreted."""

    category_name = "validation"


class TransientError(PipelineError):
    """A blob store failure that re-running the upload may clear."""

    category_name = "transient"
    default_retryable = True


class PermanentError(PipelineError):
    """A failure that re-running will not fix, such as a missing file."""

    category_name = "permanent"


class ContractError(PipelineError):
    """Misconfigured boundary between the uploader and the blob store."""

    category_name = "contract"


# ---------------------------------------------------------------------------
# Shared dataset errors
# ---------------------------------------------------------------------------


class DatasetNotFoundError(PermanentError):
    """Raised when a dataset's payload or header file does not exist.

    Attributes:
        path: The missing file path.
    """

    default_stage = "select_datasets"
    default_code = "DATASET_NOT_FOUND"

    def __init__(self, path: object, **kwargs: object) -> None:
        self.path = str(path)
        super().__init__(f"Dataset file not found: {self.path}", **kwargs)
