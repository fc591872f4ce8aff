"""Shared fixtures: an in-memory container store standing in for a provider."""

from collections.abc import AsyncIterator
from urllib.parse import urlencode

import pytest

from src.commons.infrastructure.blob.base import (
    DEFAULT_CHUNK_SIZE,
    BlobItem,
    ContainerStoreBase,
    DeleteResult,
    HealthStatus,
    ObjectHandleBase,
)
from src.commons.settings.models import BlobStorageSettings
from src.domain.value_objects import AccessWindow


class InMemoryObjectHandle(ObjectHandleBase):
    """Handle over a dict-backed container."""

    def __init__(self, store: "InMemoryContainerStore", container: str, name: str):
        self._store = store
        self._container = container
        self._name = name

    @property
    def container(self) -> str:
        return self._container

    @property
    def name(self) -> str:
        return self._name

    async def write_all(self, data: bytes) -> None:
        self._store.containers[self._container][self._name] = bytes(data)

    async def open_read_stream(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> AsyncIterator[bytes]:
        try:
            data = self._store.containers[self._container][self._name]
        except KeyError:
            raise LookupError(f"The specified blob does not exist: {self._name}") from None

        async def _chunks() -> AsyncIterator[bytes]:
            for offset in range(0, len(data), chunk_size):
                yield data[offset : offset + chunk_size]

        return _chunks()

    async def delete_if_exists(self) -> DeleteResult:
        blobs = self._store.containers.get(self._container, {})
        if self._name not in blobs:
            return DeleteResult(succeeded=False)
        del blobs[self._name]
        return DeleteResult(succeeded=True)

    async def sign_read_url(self, window: AccessWindow) -> str:
        self._store.signed_windows.append(window)
        query = urlencode(
            {
                "sp": "r",
                "st": window.starts_on.isoformat(),
                "se": window.expires_on.isoformat(),
            }
        )
        return f"memory://{self._container}/{self._name}?{query}"


class InMemoryContainerStore(ContainerStoreBase):
    """Container store keeping blobs in nested dicts."""

    def __init__(self) -> None:
        self.containers: dict[str, dict[str, bytes]] = {}
        self.created: list[str] = []
        self.signed_windows: list[AccessWindow] = []

    async def exists(self, container: str) -> bool:
        return container in self.containers

    async def create(self, container: str) -> None:
        self.created.append(container)
        self.containers.setdefault(container, {})

    def get_object_handle(self, container: str, blob_name: str) -> InMemoryObjectHandle:
        return InMemoryObjectHandle(self, container, blob_name)

    async def list_all(self, container: str) -> list[BlobItem]:
        blobs = self.containers.get(container, {})
        return [
            BlobItem(name=name, size_bytes=len(data))
            for name, data in sorted(blobs.items())
        ]

    async def health_check(self) -> HealthStatus:
        return HealthStatus(healthy=True, latency_ms=0.1, message="in-memory")


@pytest.fixture
def memory_store() -> InMemoryContainerStore:
    """Fresh in-memory container store."""
    return InMemoryContainerStore()


@pytest.fixture
def blob_settings() -> BlobStorageSettings:
    """Blob settings with a test container as default."""
    return BlobStorageSettings(
        provider="azure",
        default_container="container-test",
        connection_string="UseDevelopmentStorage=true",
        download_chunk_size=1024,
    )
