"""Слой application (сервисы и use-cases)."""

from guardbot.application.contracts import (
    ActuatorContract,
    AdminLookupContract,
    ConfigStoreContract,
    FloodStateContract,
    ModerationPipelineContract,
)

__all__ = [
    "ActuatorContract",
    "AdminLookupContract",
    "ConfigStoreContract",
    "FloodStateContract",
    "ModerationPipelineContract",
]
