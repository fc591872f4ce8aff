"""Domain layer - blob naming, signing windows and errors."""

from src.domain.exceptions import (
    BlobHandleUnavailableException,
    BlobOperation,
    BlobOperationException,
    DomainException,
    InvalidBlobNameException,
)
from src.domain.value_objects import AccessWindow, BlobName

__all__ = [
    # Exceptions
    "DomainException",
    "BlobOperationException",
    "BlobHandleUnavailableException",
    "BlobOperation",
    "InvalidBlobNameException",
    # Value Objects
    "AccessWindow",
    "BlobName",
]
