"""Infrastructure layer - provider wiring."""

from src.infrastructure.factory import (
    InfrastructureFactory,
    get_factory,
    reset_factory,
)

__all__ = [
    "InfrastructureFactory",
    "get_factory",
    "reset_factory",
]
