"""Azure Blob Storage implementation of the container store."""

import asyncio
import time
from collections.abc import AsyncIterator, Iterator

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import (
    BlobClient,
    BlobSasPermissions,
    BlobServiceClient,
    generate_blob_sas,
)

from src.commons.infrastructure.blob.base import (
    DEFAULT_CHUNK_SIZE,
    BlobItem,
    ContainerStoreBase,
    DeleteResult,
    HealthStatus,
    ObjectHandleBase,
)
from src.commons.telemetry import timed
from src.domain.value_objects import AccessWindow


async def _iter_chunks(chunks: Iterator[bytes]) -> AsyncIterator[bytes]:
    """Drain a blocking chunk iterator from the executor."""
    loop = asyncio.get_event_loop()
    while True:
        chunk = await loop.run_in_executor(None, next, chunks, b"")
        if not chunk:
            break
        yield chunk


async def _rechunk(
    source: AsyncIterator[bytes],
    chunk_size: int,
) -> AsyncIterator[bytes]:
    """Re-slice an async byte iterator into chunks of at most ``chunk_size``."""
    async for piece in source:
        for offset in range(0, len(piece), chunk_size):
            yield piece[offset : offset + chunk_size]


class AzureObjectHandle(ObjectHandleBase):
    """Handle wrapping an Azure ``BlobClient``."""

    def __init__(self, client: BlobClient) -> None:
        self._client = client

    @property
    def container(self) -> str:
        return str(self._client.container_name)

    @property
    def name(self) -> str:
        return str(self._client.blob_name)

    @timed
    async def write_all(self, data: bytes) -> None:
        loop = asyncio.get_event_loop()
        await loop.run_in_executor(
            None, lambda: self._client.upload_blob(data, overwrite=True)
        )

    async def open_read_stream(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> AsyncIterator[bytes]:
        """Start the download; the first range request happens here."""
        loop = asyncio.get_event_loop()
        downloader = await loop.run_in_executor(
            None,
            lambda: self._client.download_blob(max_concurrency=1),
        )
        # The SDK's chunk size is fixed at client level; re-slice to ours.
        return _rechunk(_iter_chunks(downloader.chunks()), chunk_size)

    @timed
    async def delete_if_exists(self) -> DeleteResult:
        loop = asyncio.get_event_loop()

        def _delete() -> DeleteResult:
            try:
                self._client.delete_blob()
            except ResourceNotFoundError:
                return DeleteResult(succeeded=False)
            return DeleteResult(succeeded=True)

        return await loop.run_in_executor(None, _delete)

    async def sign_read_url(self, window: AccessWindow) -> str:
        """Build a read-only SAS URL from the account key credential.

        Raises:
            ValueError: If the client was not built from an account key.
        """
        account_key = getattr(self._client.credential, "account_key", None)
        if not account_key:
            msg = (
                "An account key is required to sign URLs; "
                "use a connection string containing AccountKey"
            )
            raise ValueError(msg)

        sas_token = generate_blob_sas(
            account_name=self._client.account_name,
            container_name=self._client.container_name,
            blob_name=self._client.blob_name,
            account_key=account_key,
            permission=BlobSasPermissions(read=True),
            start=window.starts_on,
            expiry=window.expires_on,
        )
        return f"{self._client.url}?{sas_token}"


class AzureContainerStore(ContainerStoreBase):
    """Azure Blob Storage container store.

    The service client is built from the connection string on first use, so
    a malformed string surfaces as an operation error rather than at import.
    """

    def __init__(self, connection_string: str) -> None:
        """Initialize the store.

        Args:
            connection_string: Storage account connection string.
        """
        self._connection_string = connection_string
        self._service_client: BlobServiceClient | None = None

    @property
    def _service(self) -> BlobServiceClient:
        if self._service_client is None:
            if not self._connection_string:
                msg = "Azure storage connection string is not configured"
                raise ValueError(msg)
            self._service_client = BlobServiceClient.from_connection_string(
                self._connection_string
            )
        return self._service_client

    async def exists(self, container: str) -> bool:
        loop = asyncio.get_event_loop()
        client = self._service.get_container_client(container)
        return bool(await loop.run_in_executor(None, client.exists))

    async def create(self, container: str) -> None:
        loop = asyncio.get_event_loop()
        client = self._service.get_container_client(container)

        def _create() -> None:
            try:
                client.create_container()
            except ResourceExistsError:
                pass  # Created concurrently by another request

        await loop.run_in_executor(None, _create)

    def get_object_handle(self, container: str, blob_name: str) -> AzureObjectHandle:
        return AzureObjectHandle(
            self._service.get_blob_client(container=container, blob=blob_name)
        )

    @timed
    async def list_all(self, container: str) -> list[BlobItem]:
        """Flat listing; the SDK pager fetches every page."""
        loop = asyncio.get_event_loop()
        client = self._service.get_container_client(container)

        def _list() -> list[BlobItem]:
            return [
                BlobItem(
                    name=blob.name,
                    size_bytes=blob.size or 0,
                    last_modified=blob.last_modified,
                )
                for blob in client.list_blobs()
            ]

        return await loop.run_in_executor(None, _list)

    async def health_check(self) -> HealthStatus:
        """Check service health."""
        start = time.perf_counter()
        try:
            loop = asyncio.get_event_loop()
            service = self._service
            await loop.run_in_executor(None, service.get_account_information)
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthStatus(
                healthy=True,
                latency_ms=latency_ms,
                message="Azure Blob Storage is healthy",
                details={"account": str(service.account_name)},
            )
        except Exception as e:
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthStatus(
                healthy=False,
                latency_ms=latency_ms,
                message=f"Azure Blob Storage health check failed: {e}",
                details={"error": str(e)},
            )

    async def close(self) -> None:
        if self._service_client is not None:
            self._service_client.close()
            self._service_client = None
