"""Command-line entry point — ENVI Raster Page Blob Uploader.

This module only wires arguments, logging, and the blob store connection
to the orchestrator.  All upload logic lives in
``raster_uploader.orchestrators.upload_pipeline``.

Usage::

    raster-uploader -d DIRECTORY | -fi FILE -cr CONTAINER -k KEY [-m true|false]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from typing import TYPE_CHECKING

from raster_uploader.core.config import ConfigValidationError, UploaderConfig, parse_bool
from raster_uploader.core.exceptions import PipelineError
from raster_uploader.core.ingress import ensure_container, get_container_client
from raster_uploader.orchestrators.upload_pipeline import UploadReport, upload_rasters

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("raster_uploader.cli")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="raster-uploader",
        description="Upload ENVI rasters (.bin, .hdr and .bin.aux.xml) to Azure page blob storage.",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-d",
        "--directory",
        dest="directory_path",
        default="",
        help="Directory containing files in ENVI format (.bin, .hdr and .bin.aux.xml)",
    )
    source.add_argument(
        "-fi",
        "--file",
        dest="file_path",
        default="",
        help="File in ENVI format (.bin, .hdr and .bin.aux.xml)",
    )
    parser.add_argument(
        "-cr",
        "--container",
        dest="container_reference",
        required=True,
        help="Azure container reference for page blob storage",
    )
    parser.add_argument(
        "-k",
        "--key",
        dest="store_key",
        required=True,
        help="Azure storage connection string (enclosed by double quotes)",
    )
    parser.add_argument(
        "-m",
        "--metadata",
        dest="only_metadata",
        type=_bool_arg,
        default=False,
        metavar="{true,false}",
        help="Only update metadata",
    )
    return parser


def parse_config(argv: Sequence[str] | None = None) -> UploaderConfig:
    """Parse *argv* into a validated ``UploaderConfig``.

    Raises:
        SystemExit: On invalid or missing arguments (exit code 2).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config = UploaderConfig(
        directory_path=args.directory_path,
        file_path=args.file_path,
        container_reference=args.container_reference,
        store_key=args.store_key,
        only_metadata=args.only_metadata,
    )
    try:
        config.validate()
    except ConfigValidationError as exc:
        parser.error(exc.message)
    return config


async def run(config: UploaderConfig) -> UploadReport:
    """Connect to the container, create it if needed, and upload."""
    container_client = get_container_client(config)
    async with container_client:
        await ensure_container(container_client)
        return await upload_rasters(config, container_client)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the uploader and return the process exit code."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(levelname)s: %(message)s",
    )
    # The Azure SDK logs every HTTP request at INFO.
    logging.getLogger("azure").setLevel(logging.WARNING)

    try:
        config = parse_config(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_USAGE

    try:
        report = asyncio.run(run(config))
    except PipelineError as exc:
        logger.error("Upload aborted | error=%s", exc.to_error_dict())
        return EXIT_FAILED

    if not report.ok:
        logger.error(
            "Upload incomplete | failed=%d | total=%d | datasets=%s",
            len(report.failures),
            report.total,
            ", ".join(f.dataset for f in report.failures),
        )
        return EXIT_FAILED
    return EXIT_OK


def _bool_arg(raw: str) -> bool:
    try:
        return parse_bool("metadata", raw)
    except ConfigValidationError as exc:
        raise argparse.ArgumentTypeError(exc.reason) from exc
