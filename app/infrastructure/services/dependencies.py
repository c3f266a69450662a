"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated
from fastapi import Depends
from infrastructure.configuration import Settings
from infrastructure.messaging import BrokerClient
from infrastructure.persistence import KeyValueStore
from infrastructure.resilience import CircuitBreakerRegistry
from infrastructure.services.providers import (
    get_settings,
    get_circuit_breakers,
    get_key_value_store,
    get_broker_client,
)

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Process-wide circuit breaker registry
CircuitBreakersDep = Annotated[CircuitBreakerRegistry, Depends(get_circuit_breakers)]

# Key-value store (status records, idempotency reservations)
KeyValueStoreDep = Annotated[KeyValueStore, Depends(get_key_value_store)]

# Shared broker client
BrokerClientDep = Annotated[BrokerClient, Depends(get_broker_client)]

__all__ = [
    "SettingsDep",
    "CircuitBreakersDep",
    "KeyValueStoreDep",
    "BrokerClientDep",
]
