"""Settings loader with hierarchical configuration support."""

import json
import os
from pathlib import Path
from typing import Any

from src.commons.settings.models import Settings


class SettingsLoader:
    """Loads and merges configuration from multiple sources.

    Configuration precedence (highest to lowest):
    1. Environment variables (BLOB_GATEWAY__SECTION__KEY)
    2. Legacy environment variables (AZURE_STORAGE_CONNECTION, ...)
    3. Environment-specific config (appsettings.{env}.json)
    4. Base config (appsettings.json)
    """

    ENV_PREFIX = "BLOB_GATEWAY__"

    # Unprefixed variables understood for existing deployments
    LEGACY_ENV_VARS: dict[str, tuple[str, ...]] = {
        "AZURE_STORAGE_CONNECTION": ("blob_storage", "connection_string"),
        "AZURE_STORAGE_CONTAINER_NAME": ("blob_storage", "default_container"),
    }

    def __init__(
        self,
        config_dir: Path | None = None,
        environment: str | None = None,
    ) -> None:
        """Initialize the settings loader.

        Args:
            config_dir: Directory containing configuration files.
                       Defaults to 'config' in current working directory.
            environment: Environment name (dev, staging, prod).
                        Defaults to BLOB_GATEWAY__APP__ENVIRONMENT or 'dev'.
        """
        self.config_dir = config_dir or Path("config")
        self.environment = environment or os.getenv(
            f"{self.ENV_PREFIX}APP__ENVIRONMENT", "dev"
        )

    def load(self) -> Settings:
        """Load settings with proper precedence.

        Returns:
            Fully resolved Settings instance.
        """
        config = self._load_json("appsettings.json")
        config = self._deep_merge(
            config, self._load_json(f"appsettings.{self.environment}.json")
        )
        config = self._deep_merge(config, self._load_legacy_env_vars())
        config = self._deep_merge(config, self._load_env_vars())
        return Settings(**config)

    def _load_env_vars(self) -> dict[str, Any]:
        """Load environment variables with the BLOB_GATEWAY__ prefix.

        Parses env vars like BLOB_GATEWAY__BLOB_STORAGE__PROVIDER into nested
        dicts: {"blob_storage": {"provider": "value"}}
        """
        result: dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue
            key_path = key[len(self.ENV_PREFIX) :].lower().split("__")
            self._set_path(result, key_path, self._coerce_value(value))

        return result

    def _load_legacy_env_vars(self) -> dict[str, Any]:
        """Map unprefixed legacy variables onto their settings paths."""
        result: dict[str, Any] = {}
        for name, key_path in self.LEGACY_ENV_VARS.items():
            value = os.getenv(name)
            if value:
                self._set_path(result, list(key_path), value)
        return result

    @staticmethod
    def _set_path(target: dict[str, Any], key_path: list[str], value: Any) -> None:
        current = target
        for part in key_path[:-1]:
            current = current.setdefault(part, {})
        current[key_path[-1]] = value

    def _coerce_value(self, value: str) -> Any:
        """Decode JSON lists/dicts; leave every other value as a string.

        Scalars stay strings so the typed models decide: "8081" becomes an
        int port, while "2024" stays a valid container name.
        """
        # JSON for lists/dicts like CORS_ORIGINS
        if value.startswith(("[", "{")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _load_json(self, filename: str) -> dict[str, Any]:
        """Load JSON config file, or an empty dict if it doesn't exist."""
        path = self.config_dir / filename
        if path.exists():
            with path.open(encoding="utf-8") as f:
                return dict(json.load(f))
        return {}

    def _deep_merge(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """Deep merge two dictionaries, ``override`` winning on conflicts."""
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


# Global settings instance
_settings: Settings | None = None


def get_settings(
    config_dir: Path | None = None,
    environment: str | None = None,
    *,
    reload: bool = False,
) -> Settings:
    """Get or create the global settings instance.

    Args:
        config_dir: Optional config directory override.
        environment: Optional environment override.
        reload: Force reload settings from files.

    Returns:
        Settings instance.
    """
    global _settings  # noqa: PLW0603
    if _settings is None or reload:
        loader = SettingsLoader(config_dir=config_dir, environment=environment)
        _settings = loader.load()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance. Useful for testing."""
    global _settings  # noqa: PLW0603
    _settings = None
