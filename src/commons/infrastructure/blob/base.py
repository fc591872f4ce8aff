"""Abstract base classes for container and blob operations."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime

from src.domain.value_objects import AccessWindow

DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass
class BlobItem:
    """A single entry returned by a container listing."""

    name: str
    size_bytes: int = 0
    last_modified: datetime | None = None


@dataclass
class DeleteResult:
    """Outcome of a delete-if-exists call."""

    succeeded: bool


@dataclass
class HealthStatus:
    """Health check result."""

    healthy: bool
    latency_ms: float
    message: str | None = None
    details: dict[str, str] | None = None


class ObjectHandleBase(ABC):
    """Handle to one blob inside a container.

    Handles are cheap client-side references; creating one does not touch
    the provider.
    """

    @property
    @abstractmethod
    def container(self) -> str:
        """Name of the owning container."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Key of the blob."""

    @abstractmethod
    async def write_all(self, data: bytes) -> None:
        """Upload the full payload in one call, replacing any existing blob.

        Args:
            data: Complete blob content.
        """

    @abstractmethod
    async def open_read_stream(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> AsyncIterator[bytes]:
        """Start a download and return an iterator over its chunks.

        The download is initiated before this coroutine returns, so a
        missing blob raises here rather than during iteration.

        Args:
            chunk_size: Size of each chunk in bytes.

        Returns:
            Async iterator yielding the blob content.
        """

    @abstractmethod
    async def delete_if_exists(self) -> DeleteResult:
        """Delete the blob if present.

        Returns:
            Result with ``succeeded=False`` when nothing was deleted.
        """

    @abstractmethod
    async def sign_read_url(self, window: AccessWindow) -> str:
        """Generate a read-only URL valid for the given window.

        Args:
            window: Validity window of the signature.

        Returns:
            Signed URL string.
        """


class ContainerStoreBase(ABC):
    """Abstract store of named containers.

    Implementations should handle:
    - Azure Blob Storage
    - MinIO / AWS S3
    """

    @abstractmethod
    async def exists(self, container: str) -> bool:
        """Check if a container exists.

        Args:
            container: Container name.

        Returns:
            True if exists, False otherwise.
        """

    @abstractmethod
    async def create(self, container: str) -> None:
        """Create a container.

        Creating a container that already exists is not an error, so
        concurrent first uses of a new container are safe.

        Args:
            container: Container name.
        """

    @abstractmethod
    def get_object_handle(
        self,
        container: str,
        blob_name: str,
    ) -> ObjectHandleBase | None:
        """Get a handle to a blob.

        Args:
            container: Container name.
            blob_name: Blob key.

        Returns:
            Handle for the blob, or None if the provider cannot build one.
        """

    @abstractmethod
    async def list_all(self, container: str) -> list[BlobItem]:
        """List every blob in a container.

        All provider pages are consumed before returning.

        Args:
            container: Container name.

        Returns:
            Blobs in provider enumeration order.
        """

    @abstractmethod
    async def health_check(self) -> HealthStatus:
        """Check service health.

        Returns:
            Health status with latency info.
        """

    async def close(self) -> None:  # noqa: B027
        """Release provider resources."""
