"""Thin boundary helpers for connecting to the page blob store.

- **get_container_client** — creates an ``azure.storage.blob.aio``
  container client from the configured connection string, failing fast
  with a structured error if unconfigured.
- **ensure_container** — creates the container if it does not exist.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from azure.core.exceptions import AzureError, ResourceExistsError

from raster_uploader.core.exceptions import ContractError, TransientError

if TYPE_CHECKING:
    from azure.storage.blob.aio import ContainerClient

    from raster_uploader.core.config import UploaderConfig

logger = logging.getLogger("raster_uploader.core.ingress")


def get_container_client(config: UploaderConfig) -> ContainerClient:
    """Create an async ``ContainerClient`` for ``config.container_reference``.

    Raises:
        ContractError: If the connection string is empty.
    """
    from azure.storage.blob.aio import ContainerClient

    if not config.store_key.strip():
        msg = "Storage connection string is not set"
        raise ContractError(msg, stage="ingress", code="MISSING_CONNECTION_STRING")

    return ContainerClient.from_connection_string(
        config.store_key,
        container_name=config.container_reference,
    )


async def ensure_container(container_client: ContainerClient) -> bool:
    """Create the container if it does not already exist.

    Returns:
        ``True`` if the container was created, ``False`` if it existed.

    Raises:
        TransientError: If the store cannot be reached.
    """
    logger.info("Connecting to blob store | container=%s", container_client.container_name)
    try:
        await container_client.create_container()
    except ResourceExistsError:
        return False
    except AzureError as exc:
        msg = f"Failed to create container {container_client.container_name}: {exc}"
        raise TransientError(msg, stage="ingress", code="CONTAINER_CREATE_FAILED") from exc

    logger.info("Container created | container=%s", container_client.container_name)
    return True
