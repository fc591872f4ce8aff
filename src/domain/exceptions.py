"""Domain exceptions for the blob gateway."""

from enum import Enum


class BlobOperation(str, Enum):
    """Operations that can fail with a BlobOperationException."""

    RESOLVE = "resolve"
    UPLOAD = "upload"
    GET_FILE = "get_file"
    DELETE = "delete"
    GENERATE_URL = "generate_temporary_url"
    LIST = "list"


class DomainException(Exception):
    """Base exception for domain errors."""


class BlobOperationException(DomainException):
    """Raised when a blob operation cannot be completed.

    This is the only error kind surfaced to callers. Provider errors are
    always wrapped into it, with the failing operation recorded so the API
    layer can report it.
    """

    def __init__(self, operation: BlobOperation, message: str) -> None:
        self.operation = operation
        self.message = message
        super().__init__(message)


class BlobHandleUnavailableException(DomainException):
    """Raised when the provider returns no handle for a blob."""

    def __init__(self, container: str, blob_name: str) -> None:
        self.container = container
        self.blob_name = blob_name
        super().__init__(
            f"Blob client is undefined for container: {container} "
            f"and blob: {blob_name}."
        )


class InvalidBlobNameException(DomainException):
    """Raised when a blob name cannot be derived from a client filename."""

    def __init__(self, filename: str, reason: str = "Invalid filename") -> None:
        self.filename = filename
        self.reason = reason
        super().__init__(f"Invalid filename '{filename}': {reason}")
