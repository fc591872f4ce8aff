"""Domain value objects."""

from src.domain.value_objects.access_window import AccessWindow
from src.domain.value_objects.blob_name import BlobName

__all__ = [
    "AccessWindow",
    "BlobName",
]
