"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the
notification pipeline using Pydantic BaseSettings with domain-based
organization.

Exports:
    Settings: Main settings class (for testing/overrides)
    RetrySettings: Retry settings class (for testing)
    CircuitBreakerSettings: Circuit breaker defaults (for testing)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    broker_url = settings.broker.url
    ttl = settings.store.status_ttl_seconds
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.infrastructure.circuit_breaker import (
    CircuitBreakerSettings,
)
from infrastructure.configuration.infrastructure.retry import RetrySettings

__all__ = ["Settings", "RetrySettings", "CircuitBreakerSettings"]
