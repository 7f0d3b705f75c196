"""
Object storage for uploaded media.

Two backends are provided:

- ``AzureBlobStorage`` writes to an Azure Blob Storage container (production).
- ``LocalFileStorage`` writes under a local directory (development and tests).

Both return the public URL of the stored object.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import BinaryIO, Optional, Protocol

from azure.core.exceptions import AzureError
from azure.storage.blob import BlobServiceClient, ContentSettings

from prs_online.core.errors import StorageError
from prs_online.core.logging_config import get_logger
from prs_online.server.core.config import StorageConfig

logger = get_logger(__name__)


class ObjectStorage(Protocol):
    """Interface of an object store that serves uploaded files publicly."""

    async def upload(self, object_name: str, stream: BinaryIO, *, content_type: Optional[str] = None) -> str:
        """Copy ``stream`` to ``object_name`` and return its public URL."""
        ...


class AzureBlobStorage:
    """Azure Blob Storage backend."""

    def __init__(self, connection_string: str, container: str, cache_control: str) -> None:
        self.container = container
        self.cache_control = cache_control
        self._service = BlobServiceClient.from_connection_string(connection_string)

    def _upload_sync(self, object_name: str, stream: BinaryIO, content_type: Optional[str]) -> str:
        blob_client = self._service.get_blob_client(container=self.container, blob=object_name)
        blob_client.upload_blob(
            stream,
            overwrite=True,
            content_settings=ContentSettings(content_type=content_type, cache_control=self.cache_control),
        )
        return blob_client.url

    async def upload(self, object_name: str, stream: BinaryIO, *, content_type: Optional[str] = None) -> str:
        try:
            url = await asyncio.to_thread(self._upload_sync, object_name, stream, content_type)
        except AzureError as e:
            logger.error(f"Azure upload of {object_name} failed: {e}")
            raise StorageError(object_name, str(e)) from e
        logger.info(f"Uploaded {object_name} to container {self.container}")
        return url


class LocalFileStorage:
    """Filesystem backend serving files from ``public_base_url``."""

    def __init__(self, directory: str, public_base_url: str) -> None:
        self.directory = Path(directory)
        self.public_base_url = public_base_url.rstrip("/")

    def _write_sync(self, object_name: str, stream: BinaryIO) -> int:
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(self.directory / object_name, "wb") as target:
            shutil.copyfileobj(stream, target)
            return target.tell()

    async def upload(self, object_name: str, stream: BinaryIO, *, content_type: Optional[str] = None) -> str:
        try:
            size = await asyncio.to_thread(self._write_sync, object_name, stream)
        except OSError as e:
            raise StorageError(object_name, str(e)) from e
        logger.debug(f"Stored {object_name} ({size} bytes, {content_type}) in {self.directory}")
        return f"{self.public_base_url}/{object_name}"


def build_storage(config: StorageConfig) -> ObjectStorage:
    """Create the configured storage backend."""
    if config.backend == "azure":
        if not config.azure_connection_string:
            raise ValueError("storage.azure_connection_string is required for the azure backend")
        return AzureBlobStorage(config.azure_connection_string, config.azure_container, config.cache_control)
    return LocalFileStorage(config.local_directory, config.public_base_url)
