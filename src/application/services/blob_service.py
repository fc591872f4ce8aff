"""Blob operations facade: upload, fetch, delete, sign and list."""

from collections.abc import AsyncIterator
from datetime import datetime, timedelta

from src.application.dtos.blobs import ListingEntry, UploadResponse
from src.commons.infrastructure.blob.base import ContainerStoreBase, ObjectHandleBase
from src.commons.settings.models import BlobStorageSettings
from src.commons.telemetry import (
    LogContext,
    get_logger,
    log_exceptions,
    set_log_context,
)
from src.domain.exceptions import (
    BlobHandleUnavailableException,
    BlobOperation,
    BlobOperationException,
)
from src.domain.value_objects import AccessWindow, BlobName


def _reason(exc: Exception) -> str:
    """Underlying message of ``exc`` without a trailing period."""
    return str(exc).rstrip(".") or type(exc).__name__


class BlobService:
    """Thin facade over a container store.

    Every operation is a single provider round trip (listing adds one
    signing call per blob). Provider errors never escape: they are wrapped
    into BlobOperationException naming the failed operation.
    """

    def __init__(
        self,
        store: ContainerStoreBase,
        settings: BlobStorageSettings,
    ) -> None:
        """Initialize the service.

        Args:
            store: Container store provider.
            settings: Blob storage configuration.
        """
        self._store = store
        self._default_container = settings.default_container
        self._separator = settings.key_separator
        self._lead = timedelta(minutes=settings.signed_url_lead_minutes)
        self._ttl = timedelta(minutes=settings.signed_url_ttl_minutes)
        self._chunk_size = settings.download_chunk_size
        self._logger = get_logger(__name__)

    @property
    def default_container(self) -> str:
        """Container used when callers don't name one."""
        return self._default_container

    def access_window(self, moment: datetime | None = None) -> AccessWindow:
        """Signing window around ``moment`` (defaults to now)."""
        return AccessWindow.around(moment, lead=self._lead, ttl=self._ttl)

    @staticmethod
    def _context(
        operation: BlobOperation,
        container: str,
        blob_name: str | None = None,
    ) -> LogContext:
        # Provider logs emitted inside an operation inherit these fields
        fields = {"operation": operation.value, "container": container}
        if blob_name:
            fields["blob_name"] = blob_name
        return LogContext(**fields)

    # =========================================================================
    # Resolution
    # =========================================================================

    async def _ensure_container(self, container: str) -> None:
        # Check-then-create without locking; store.create is idempotent.
        if not await self._store.exists(container):
            self._logger.info("Creating container", extra={"container": container})
            await self._store.create(container)

    async def get_blob_client(
        self,
        container: str,
        blob_name: str,
    ) -> ObjectHandleBase:
        """Resolve a handle to a blob, creating its container if needed.

        Args:
            container: Container name.
            blob_name: Blob key.

        Returns:
            Handle to the blob.

        Raises:
            BlobOperationException: If the container or handle cannot be obtained.
        """
        try:
            await self._ensure_container(container)
            handle = self._store.get_object_handle(container, blob_name)
            if handle is None:
                raise BlobHandleUnavailableException(container, blob_name)
            return handle
        except Exception as e:
            raise BlobOperationException(
                BlobOperation.RESOLVE,
                f"Error getting blob client: {_reason(e)}.",
            ) from e

    # =========================================================================
    # Operations
    # =========================================================================

    @log_exceptions(message="Upload failed")
    async def upload_file(
        self,
        data: bytes,
        filename: str | None,
        container: str | None = None,
    ) -> UploadResponse:
        """Store a file under a fresh unique key and sign a read URL for it.

        The payload is written in a single call. Nothing is cleaned up if a
        later step fails.

        Args:
            data: Complete file content.
            filename: Original filename from the client.
            container: Target container. Defaults to the configured one.

        Returns:
            Upload response with the stored key and a signed URL.

        Raises:
            BlobOperationException: If key generation, resolution, the write
                or signing fails.
        """
        container = container or self._default_container
        with self._context(BlobOperation.UPLOAD, container):
            try:
                blob_name = BlobName.generate(filename, self._separator).value
                set_log_context(blob_name=blob_name)
                handle = await self.get_blob_client(container, blob_name)
                await handle.write_all(data)
                url = await self._sign(handle)
            except Exception as e:
                raise BlobOperationException(
                    BlobOperation.UPLOAD,
                    f"Failed to upload file {filename}: {_reason(e)}.",
                ) from e

            self._logger.info("File uploaded", extra={"size_bytes": len(data)})
            return UploadResponse(
                message="File uploaded successfully",
                file_name=handle.name,
                container_name=handle.container,
                url=url,
            )

    @log_exceptions(message="Fetch failed")
    async def get_file(
        self,
        file_name: str,
        container: str | None = None,
    ) -> AsyncIterator[bytes]:
        """Start downloading a blob.

        The download is initiated here, so a missing blob fails before any
        byte reaches the client. Errors raised while iterating belong to the
        HTTP layer.

        Args:
            file_name: Blob key.
            container: Source container. Defaults to the configured one.

        Returns:
            Async iterator over the blob bytes, unmodified.

        Raises:
            BlobOperationException: If resolution or download start fails.
        """
        container = container or self._default_container
        with self._context(BlobOperation.GET_FILE, container, file_name):
            try:
                handle = await self.get_blob_client(container, file_name)
                stream = await handle.open_read_stream(self._chunk_size)
            except Exception as e:
                raise BlobOperationException(
                    BlobOperation.GET_FILE,
                    f"Failed to get file {file_name}: {_reason(e)}.",
                ) from e

            self._logger.debug("Streaming file")
            return stream

    @log_exceptions(message="Delete failed")
    async def delete_file(
        self,
        file_name: str,
        container: str | None = None,
    ) -> str:
        """Delete a blob.

        A delete that reports no success (e.g. the blob was absent) is a
        failure, not a silent no-op.

        Args:
            file_name: Blob key.
            container: Container name. Defaults to the configured one.

        Returns:
            Confirmation message naming the file.

        Raises:
            BlobOperationException: If the delete throws or does not succeed.
        """
        container = container or self._default_container
        with self._context(BlobOperation.DELETE, container, file_name):
            try:
                handle = await self.get_blob_client(container, file_name)
                result = await handle.delete_if_exists()
            except Exception as e:
                raise BlobOperationException(
                    BlobOperation.DELETE,
                    f"Failed to delete file {file_name}: {_reason(e)}.",
                ) from e

            if not result.succeeded:
                raise BlobOperationException(
                    BlobOperation.DELETE,
                    f"Failed to delete file {file_name}.",
                )

            self._logger.info("File deleted")
            return f"File {file_name} deleted successfully."

    @log_exceptions(message="Signing failed")
    async def generate_temporary_url(
        self,
        file_name: str,
        container: str | None = None,
    ) -> str:
        """Generate a read-only signed URL for a blob.

        Args:
            file_name: Blob key.
            container: Container name. Defaults to the configured one.

        Returns:
            Signed URL valid for the configured access window.

        Raises:
            BlobOperationException: If resolution or signing fails.
        """
        container = container or self._default_container
        with self._context(BlobOperation.GENERATE_URL, container, file_name):
            try:
                handle = await self.get_blob_client(container, file_name)
            except Exception as e:
                raise self._signing_error(e) from e
            return await self._sign(handle)

    @log_exceptions(message="Listing failed")
    async def list_files(self, container: str | None = None) -> list[ListingEntry]:
        """List every blob in a container, each with a fresh signed URL.

        URLs are signed one by one, in provider enumeration order.

        Args:
            container: Container name. Defaults to the configured one.

        Returns:
            One entry per blob.

        Raises:
            BlobOperationException: If enumeration or any signing fails.
        """
        container = container or self._default_container
        with self._context(BlobOperation.LIST, container):
            try:
                await self._ensure_container(container)
                items = await self._store.list_all(container)
                files: list[ListingEntry] = []
                for item in items:
                    handle = self._store.get_object_handle(container, item.name)
                    if handle is None:
                        raise BlobHandleUnavailableException(container, item.name)
                    files.append(
                        ListingEntry(
                            message=f"File {handle.name} listed successfully",
                            file_name=handle.name,
                            container_name=handle.container,
                            url=await self._sign(handle),
                        )
                    )
            except Exception as e:
                raise BlobOperationException(
                    BlobOperation.LIST,
                    f"Failed to list files: {_reason(e)}.",
                ) from e

            self._logger.info("Files listed", extra={"count": len(files)})
            return files

    # =========================================================================
    # Signing
    # =========================================================================

    @staticmethod
    def _signing_error(exc: Exception) -> BlobOperationException:
        return BlobOperationException(
            BlobOperation.GENERATE_URL,
            f"Failed to generate temporary URL: {_reason(exc)}.",
        )

    async def _sign(self, handle: ObjectHandleBase) -> str:
        try:
            return await handle.sign_read_url(self.access_window())
        except Exception as e:
            raise self._signing_error(e) from e
