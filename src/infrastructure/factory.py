"""Infrastructure factory for creating service instances from configuration."""

from typing import Any, cast

from src.commons.infrastructure.blob import (
    AzureContainerStore,
    ContainerStoreBase,
    MinioContainerStore,
)
from src.commons.settings.models import Settings
from src.commons.telemetry import get_logger

logger = get_logger(__name__)


class InfrastructureFactory:
    """Factory for creating infrastructure service instances.

    Creates concrete implementations based on configuration settings and
    keeps one instance of each for the life of the process.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize factory with settings.

        Args:
            settings: Application settings.
        """
        self._settings = settings
        self._instances: dict[str, Any] = {}

    def get_container_store(self) -> ContainerStoreBase:
        """Get the container store for the configured provider.

        Returns:
            Configured container store.

        Raises:
            ValueError: If the provider is not supported.
        """
        if "container_store" not in self._instances:
            blob_settings = self._settings.blob_storage
            store: ContainerStoreBase
            if blob_settings.provider == "azure":
                store = AzureContainerStore(
                    connection_string=blob_settings.connection_string,
                )
            elif blob_settings.provider == "minio":
                store = MinioContainerStore(
                    endpoint=blob_settings.endpoint,
                    access_key=blob_settings.access_key,
                    secret_key=blob_settings.secret_key,
                    secure=blob_settings.use_ssl,
                    region=blob_settings.region,
                )
            else:
                msg = f"Unsupported blob storage provider: {blob_settings.provider}"
                raise ValueError(msg)

            logger.info(
                "Container store created",
                extra={"provider": blob_settings.provider},
            )
            self._instances["container_store"] = store
        return cast("ContainerStoreBase", self._instances["container_store"])

    async def close_all(self) -> None:
        """Close all service connections."""
        for name, instance in self._instances.items():
            try:
                await instance.close()
            except Exception:
                logger.warning("Failed to close %s", name, exc_info=True)

        self._instances.clear()


class _FactoryHolder:
    """Holder for the factory singleton to avoid global statements."""

    instance: InfrastructureFactory | None = None


def get_factory(settings: Settings | None = None) -> InfrastructureFactory:
    """Get or create the infrastructure factory singleton.

    Args:
        settings: Settings to use. Required on first call.

    Returns:
        Infrastructure factory instance.

    Raises:
        ValueError: If settings not provided on first call.
    """
    if _FactoryHolder.instance is None:
        if settings is None:
            raise ValueError("Settings required to initialize factory")
        _FactoryHolder.instance = InfrastructureFactory(settings)

    return _FactoryHolder.instance


def reset_factory() -> None:
    """Reset the factory singleton (for testing)."""
    _FactoryHolder.instance = None
