"""Tests for the blob store boundary helpers."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from azure.core.exceptions import ResourceExistsError, ServiceRequestError

from raster_uploader.core.config import UploaderConfig
from raster_uploader.core.exceptions import ContractError, TransientError
from raster_uploader.core.ingress import ensure_container, get_container_client

_CONN = (
    "DefaultEndpointsProtocol=https;AccountName=acct;"
    "AccountKey=a2V5;EndpointSuffix=core.windows.net"
)


class TestGetContainerClient:
    def test_builds_client_from_connection_string(self) -> None:
        config = UploaderConfig(directory_path="/d", container_reference="rasters", store_key=_CONN)
        with patch("azure.storage.blob.aio.ContainerClient.from_connection_string") as factory:
            client = get_container_client(config)
        factory.assert_called_once_with(_CONN, container_name="rasters")
        assert client is factory.return_value

    def test_empty_connection_string(self) -> None:
        config = UploaderConfig(directory_path="/d", container_reference="rasters", store_key=" ")
        with pytest.raises(ContractError) as exc_info:
            get_container_client(config)
        assert exc_info.value.code == "MISSING_CONNECTION_STRING"
        assert exc_info.value.category == "contract"


class TestEnsureContainer:
    def _container(self) -> MagicMock:
        container = MagicMock()
        container.container_name = "rasters"
        container.create_container = AsyncMock(return_value={})
        return container

    @pytest.mark.asyncio()
    async def test_creates_when_absent(self) -> None:
        container = self._container()
        assert await ensure_container(container) is True
        container.create_container.assert_awaited_once()

    @pytest.mark.asyncio()
    async def test_existing_container_is_fine(self) -> None:
        container = self._container()
        container.create_container.side_effect = ResourceExistsError(message="exists")
        assert await ensure_container(container) is False

    @pytest.mark.asyncio()
    async def test_transport_failure(self) -> None:
        container = self._container()
        container.create_container.side_effect = ServiceRequestError(message="unreachable")
        with pytest.raises(TransientError) as exc_info:
            await ensure_container(container)
        assert exc_info.value.code == "CONTAINER_CREATE_FAILED"
