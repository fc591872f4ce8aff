"""Pydantic settings models for application configuration."""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseModel):
    """Application-level settings."""

    name: str = "blob-gateway"
    version: str = "0.1.0"
    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class ServerSettings(BaseModel):
    """HTTP server settings."""

    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    workers: int = Field(default=1, ge=1, le=32)
    reload: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    api_prefix: str = ""
    docs_enabled: bool = True


class BlobStorageSettings(BaseModel):
    """Blob storage settings (Azure Blob Storage or MinIO/S3)."""

    provider: Literal["azure", "minio"] = "azure"
    default_container: str = "uploads"

    # Azure
    connection_string: str = ""

    # MinIO / S3
    endpoint: str = "localhost:9000"
    access_key: str = ""
    secret_key: str = ""
    use_ssl: bool = False
    region: str | None = None

    # Blob naming and signing
    key_separator: str = "_"
    signed_url_lead_minutes: int = Field(default=100, ge=0)
    signed_url_ttl_minutes: int = Field(default=100, ge=1)
    download_chunk_size: int = Field(default=64 * 1024, ge=1024)


class TelemetrySettings(BaseModel):
    """Logging settings."""

    log_format: Literal["json", "text"] = "json"
    log_level: str | None = None


class Settings(BaseSettings):
    """Root settings container with environment loading."""

    app: AppSettings = Field(default_factory=AppSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    blob_storage: BlobStorageSettings = Field(default_factory=BlobStorageSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BLOB_GATEWAY__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )
