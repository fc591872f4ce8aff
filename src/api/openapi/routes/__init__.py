"""API route handlers."""

from src.api.openapi.routes import blobs, health

__all__ = [
    "blobs",
    "health",
]
