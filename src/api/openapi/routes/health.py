"""Health check endpoints."""

from enum import Enum

from fastapi import APIRouter
from pydantic import BaseModel, Field

from src.api.dependencies import FactoryDep, SettingsDep
from src.commons.telemetry import get_logger

router = APIRouter()
logger = get_logger(__name__)


class HealthStatus(str, Enum):
    """Health check status."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status of a single component."""

    name: str = Field(description="Component name")
    status: HealthStatus = Field(description="Component health status")
    message: str | None = Field(default=None, description="Additional details")
    latency_ms: float | None = Field(default=None, description="Check latency")


class HealthResponse(BaseModel):
    """Health check response."""

    status: HealthStatus = Field(description="Overall health status")
    version: str = Field(description="Application version")
    environment: str = Field(description="Deployment environment")
    components: list[ComponentHealth] = Field(
        default_factory=list,
        description="Individual component health",
    )


class LivenessResponse(BaseModel):
    """Simple liveness response."""

    status: str = Field(default="ok")


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool = Field(description="Whether the service is ready to accept requests")
    checks: dict[str, bool] = Field(
        default_factory=dict,
        description="Individual readiness checks",
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Get overall health status of the service and its storage provider.",
)
async def health_check(
    settings: SettingsDep,
    factory: FactoryDep,
) -> HealthResponse:
    """Check health of the storage provider."""
    try:
        result = await factory.get_container_store().health_check()
        component = ComponentHealth(
            name="blob_storage",
            status=HealthStatus.HEALTHY if result.healthy else HealthStatus.UNHEALTHY,
            message=result.message or f"Provider: {settings.blob_storage.provider}",
            latency_ms=round(result.latency_ms, 2),
        )
    except Exception as e:
        component = ComponentHealth(
            name="blob_storage",
            status=HealthStatus.UNHEALTHY,
            message=str(e),
        )

    return HealthResponse(
        status=component.status,
        version=settings.app.version,
        environment=settings.app.environment,
        components=[component],
    )


@router.get(
    "/health/live",
    response_model=LivenessResponse,
    summary="Liveness probe",
    description="Simple liveness check for Kubernetes probes.",
)
async def liveness() -> LivenessResponse:
    """Simple liveness check - just verifies the app is running."""
    return LivenessResponse(status="ok")


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description=(
        "Ready once the container store is built and the default container "
        "can be queried."
    ),
)
async def readiness(
    settings: SettingsDep,
    factory: FactoryDep,
) -> ReadinessResponse:
    """Check the store is configured and the provider answers."""
    checks = {"blob_storage": False, "default_container": False}

    try:
        store = factory.get_container_store()
        checks["blob_storage"] = True
        await store.exists(settings.blob_storage.default_container)
        checks["default_container"] = True
    except Exception:
        logger.warning("Readiness check failed", exc_info=True)

    return ReadinessResponse(ready=all(checks.values()), checks=checks)
