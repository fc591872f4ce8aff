"""Application services for blob management."""

from src.application.services.blob_service import BlobService

__all__ = [
    "BlobService",
]
