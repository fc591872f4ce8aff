"""Application layer - use cases and orchestration.

This layer contains:
- Services: the blob operations facade
- DTOs: Data transfer objects for API boundaries
"""

from src.application.dtos import ListingEntry, UploadResponse
from src.application.services import BlobService

__all__ = [
    # DTOs
    "ListingEntry",
    "UploadResponse",
    # Services
    "BlobService",
]
