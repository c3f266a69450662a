"""Infrastructure settings __init__ - exports all infrastructure settings."""

from infrastructure.configuration.infrastructure.broker import BrokerSettings
from infrastructure.configuration.infrastructure.circuit_breaker import (
    CircuitBreakerSettings,
)
from infrastructure.configuration.infrastructure.retry import RetrySettings
from infrastructure.configuration.infrastructure.server import ServerSettings
from infrastructure.configuration.infrastructure.store import StoreSettings

__all__ = [
    "BrokerSettings",
    "CircuitBreakerSettings",
    "RetrySettings",
    "ServerSettings",
    "StoreSettings",
]
