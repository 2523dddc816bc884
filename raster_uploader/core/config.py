"""Uploader configuration loaded from the command line or environment.

The configuration is an immutable value built once at startup and
threaded through the orchestrator and every dataset pipeline.  No
module keeps configuration in process-wide state.

Fail-fast validation:
    ``validate()`` raises ``ConfigValidationError`` if the dataset
    selection is ambiguous or a required value is empty.  This catches
    bad configuration before any file is padded or uploaded.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from raster_uploader.core.exceptions import PipelineError

_TRUE_WORDS = frozenset({"true"})
_FALSE_WORDS = frozenset({"false", ""})


class ConfigValidationError(PipelineError):
    """Raised when configuration values are missing or inconsistent.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        reason: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        self.reason = message
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class UploaderConfig:
    """Immutable uploader configuration.

    Attributes:
        directory_path: Directory whose ``*.bin`` datasets are uploaded.
        file_path: A single ``.bin`` dataset to upload.
        container_reference: Name of the page blob container.
        store_key: Storage account connection string (opaque credential).
        only_metadata: Skip the payload upload and only refresh metadata.
    """

    directory_path: str = ""
    file_path: str = ""
    container_reference: str = ""
    store_key: str = ""
    only_metadata: bool = False

    @classmethod
    def from_env(cls) -> UploaderConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If the selection is ambiguous, a
                required value is empty, or ``RASTER_ONLY_METADATA`` is
                not a boolean word.
        """
        config = cls(
            directory_path=os.getenv("RASTER_DIRECTORY", ""),
            file_path=os.getenv("RASTER_FILE", ""),
            container_reference=os.getenv("RASTER_CONTAINER", ""),
            store_key=os.getenv("AZURE_STORAGE_CONNECTION_STRING", ""),
            only_metadata=parse_bool("RASTER_ONLY_METADATA", os.getenv("RASTER_ONLY_METADATA", "")),
        )
        config.validate()
        return config

    @property
    def uses_directory(self) -> bool:
        """Whether every dataset in ``directory_path`` is selected."""
        return bool(self.directory_path)

    def validate(self) -> None:
        """Validate the configuration.  Raises ``ConfigValidationError``."""
        if self.directory_path and self.file_path:
            raise ConfigValidationError(
                "file_path",
                self.file_path,
                "must not be set together with directory_path",
            )

        if not self.directory_path and not self.file_path:
            raise ConfigValidationError(
                "directory_path",
                self.directory_path,
                "either directory_path or file_path must be set",
            )

        if not self.container_reference.strip():
            raise ConfigValidationError(
                "container_reference",
                self.container_reference,
                "must not be empty",
            )

        if not self.store_key.strip():
            # Never echo the credential back.
            raise ConfigValidationError("store_key", "", "must not be empty")


def parse_bool(key: str, raw: str) -> bool:
    """Parse a ``true``/``false`` word (case-insensitive).

    An empty value means ``False``.

    Raises:
        ConfigValidationError: If *raw* is any other word.
    """
    word = raw.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ConfigValidationError(key, raw, "must be 'true' or 'false'")
