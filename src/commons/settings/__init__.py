"""Settings management module."""

from src.commons.settings.loader import SettingsLoader, get_settings, reset_settings
from src.commons.settings.models import (
    AppSettings,
    BlobStorageSettings,
    ServerSettings,
    Settings,
    TelemetrySettings,
)

__all__ = [
    # Loader
    "SettingsLoader",
    "get_settings",
    "reset_settings",
    # Main settings
    "Settings",
    "AppSettings",
    "ServerSettings",
    # Storage
    "BlobStorageSettings",
    # Telemetry
    "TelemetrySettings",
]
