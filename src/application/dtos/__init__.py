"""Data transfer objects for the API boundary."""

from src.application.dtos.blobs import ListingEntry, UploadResponse

__all__ = [
    "ListingEntry",
    "UploadResponse",
]
