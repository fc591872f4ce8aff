"""MinIO implementation of the container store."""

import asyncio
import io
import time
from collections.abc import AsyncIterator
from typing import Any

from minio import Minio
from minio.error import S3Error

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

_MISSING_OBJECT_CODES = frozenset({"NoSuchKey", "NoSuchObject"})
_BUCKET_EXISTS_CODES = frozenset({"BucketAlreadyOwnedByYou", "BucketAlreadyExists"})


async def _read_chunks(response: Any, chunk_size: int) -> AsyncIterator[bytes]:
    """Yield chunks from a MinIO HTTP response, releasing it afterwards."""
    loop = asyncio.get_event_loop()
    try:
        while True:
            chunk: bytes = await loop.run_in_executor(None, response.read, chunk_size)
            if not chunk:
                break
            yield chunk
    finally:
        response.close()
        response.release_conn()


class MinioObjectHandle(ObjectHandleBase):
    """Handle to a single MinIO object."""

    def __init__(self, client: Minio, bucket: str, path: str) -> None:
        self._client = client
        self._bucket = bucket
        self._path = path

    @property
    def container(self) -> str:
        return self._bucket

    @property
    def name(self) -> str:
        return self._path

    @timed
    async def write_all(self, data: bytes) -> None:
        """Upload the full payload with a single put_object call."""
        loop = asyncio.get_event_loop()

        def _upload() -> None:
            self._client.put_object(
                bucket_name=self._bucket,
                object_name=self._path,
                data=io.BytesIO(data),
                length=len(data),
            )

        await loop.run_in_executor(None, _upload)

    async def open_read_stream(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> AsyncIterator[bytes]:
        """Issue get_object and return a chunk iterator over the response."""
        loop = asyncio.get_event_loop()
        response = await loop.run_in_executor(
            None, self._client.get_object, self._bucket, self._path
        )
        return _read_chunks(response, chunk_size)

    @timed
    async def delete_if_exists(self) -> DeleteResult:
        """Delete the object, reporting failure when it was not there.

        MinIO's remove_object succeeds for missing keys, so existence is
        checked first with stat_object.
        """
        loop = asyncio.get_event_loop()

        def _delete() -> DeleteResult:
            try:
                self._client.stat_object(self._bucket, self._path)
            except S3Error as e:
                if e.code in _MISSING_OBJECT_CODES:
                    return DeleteResult(succeeded=False)
                raise
            self._client.remove_object(self._bucket, self._path)
            return DeleteResult(succeeded=True)

        return await loop.run_in_executor(None, _delete)

    async def sign_read_url(self, window: AccessWindow) -> str:
        """Presign a GET request dated at the window start.

        SigV4 presigned URLs are valid from ``request_date`` for ``expires``,
        which maps directly onto the access window.
        """
        loop = asyncio.get_event_loop()

        def _presign() -> str:
            url = self._client.presigned_get_object(
                bucket_name=self._bucket,
                object_name=self._path,
                expires=window.duration,
                request_date=window.starts_on,
            )
            return str(url)

        return await loop.run_in_executor(None, _presign)


class MinioContainerStore(ContainerStoreBase):
    """MinIO implementation of the container store.

    Works with both MinIO (local development) and AWS S3. Containers map
    to buckets.
    """

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        secure: bool = False,
        region: str | None = None,
    ) -> None:
        """Initialize MinIO client.

        Args:
            endpoint: MinIO/S3 endpoint (e.g., "localhost:9000").
            access_key: Access key ID.
            secret_key: Secret access key.
            secure: Use HTTPS connection.
            region: AWS region (optional, for S3).
        """
        self._client = Minio(
            endpoint=endpoint,
            access_key=access_key,
            secret_key=secret_key,
            secure=secure,
            region=region,
        )
        self._endpoint = endpoint

    async def exists(self, container: str) -> bool:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self._client.bucket_exists, container)

    async def create(self, container: str) -> None:
        loop = asyncio.get_event_loop()

        def _create() -> None:
            try:
                self._client.make_bucket(container)
            except S3Error as e:
                if e.code not in _BUCKET_EXISTS_CODES:
                    raise

        await loop.run_in_executor(None, _create)

    def get_object_handle(self, container: str, blob_name: str) -> MinioObjectHandle:
        return MinioObjectHandle(self._client, container, blob_name)

    @timed
    async def list_all(self, container: str) -> list[BlobItem]:
        """List all objects recursively; the SDK pages transparently."""
        loop = asyncio.get_event_loop()

        def _list() -> list[BlobItem]:
            objects = self._client.list_objects(
                bucket_name=container,
                recursive=True,
            )
            return [
                BlobItem(
                    name=obj.object_name or "",
                    size_bytes=obj.size or 0,
                    last_modified=obj.last_modified,
                )
                for obj in objects
            ]

        return await loop.run_in_executor(None, _list)

    async def health_check(self) -> HealthStatus:
        """Check service health."""
        start = time.perf_counter()
        try:
            loop = asyncio.get_event_loop()
            await loop.run_in_executor(None, self._client.list_buckets)
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthStatus(
                healthy=True,
                latency_ms=latency_ms,
                message="MinIO is healthy",
                details={"endpoint": self._endpoint},
            )
        except Exception as e:
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthStatus(
                healthy=False,
                latency_ms=latency_ms,
                message=f"MinIO health check failed: {e}",
                details={"endpoint": self._endpoint, "error": str(e)},
            )
