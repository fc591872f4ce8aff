"""Blob storage abstractions and implementations."""

from src.commons.infrastructure.blob.azure_provider import (
    AzureContainerStore,
    AzureObjectHandle,
)
from src.commons.infrastructure.blob.base import (
    DEFAULT_CHUNK_SIZE,
    BlobItem,
    ContainerStoreBase,
    DeleteResult,
    HealthStatus,
    ObjectHandleBase,
)
from src.commons.infrastructure.blob.minio_provider import (
    MinioContainerStore,
    MinioObjectHandle,
)

__all__ = [
    # Base classes
    "BlobItem",
    "ContainerStoreBase",
    "DEFAULT_CHUNK_SIZE",
    "DeleteResult",
    "HealthStatus",
    "ObjectHandleBase",
    # Implementations
    "AzureContainerStore",
    "AzureObjectHandle",
    "MinioContainerStore",
    "MinioObjectHandle",
]
