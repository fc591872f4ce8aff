"""FastAPI dependency injection for services and settings."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from src.application.services.blob_service import BlobService
from src.commons.settings.loader import get_settings as _load_settings
from src.commons.settings.models import Settings
from src.infrastructure.factory import (
    InfrastructureFactory,
    get_factory,
    reset_factory,
)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Application settings loaded from config files and environment.
    """
    return _load_settings()


def get_infrastructure_factory(
    settings: Annotated[Settings, Depends(get_settings)],
) -> InfrastructureFactory:
    """Get infrastructure factory with the configured providers."""
    return get_factory(settings)


def get_blob_service(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> BlobService:
    """Get the blob service bound to the configured container store.

    Args:
        factory: Infrastructure factory.
        settings: Application settings.

    Returns:
        Configured blob service.
    """
    return BlobService(
        store=factory.get_container_store(),
        settings=settings.blob_storage,
    )


# Type aliases for cleaner route signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]
FactoryDep = Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)]
BlobServiceDep = Annotated[BlobService, Depends(get_blob_service)]


async def init_services(settings: Settings) -> None:
    """Initialize infrastructure on startup so misconfiguration fails fast.

    Args:
        settings: Application settings.
    """
    factory = get_factory(settings)
    factory.get_container_store()


async def shutdown_services() -> None:
    """Shutdown all infrastructure services."""
    try:
        factory = get_factory()
        await factory.close_all()
    except ValueError:
        pass  # Factory not initialized
    finally:
        reset_factory()
        get_settings.cache_clear()
