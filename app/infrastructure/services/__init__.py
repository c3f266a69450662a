"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    SettingsDep,
    CircuitBreakersDep,
    KeyValueStoreDep,
    BrokerClientDep,
)
from infrastructure.services.providers import (
    get_settings,
    get_circuit_breakers,
    get_key_value_store,
    get_broker_client,
)

__all__ = [
    "SettingsDep",
    "CircuitBreakersDep",
    "KeyValueStoreDep",
    "BrokerClientDep",
    "get_settings",
    "get_circuit_breakers",
    "get_key_value_store",
    "get_broker_client",
]
