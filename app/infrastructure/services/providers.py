"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.messaging import BrokerClient
from infrastructure.persistence import KeyValueStore, create_key_value_store
from infrastructure.resilience import CircuitBreakerRegistry


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process.

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/config")
        def get_config(settings: SettingsDep):
            return settings.model_dump()

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_circuit_breakers() -> CircuitBreakerRegistry:
    """
    Get the process-wide circuit breaker registry.

    Every component issuing guarded calls receives this registry, so all
    callers of one dependency share the same breaker state.
    """
    return CircuitBreakerRegistry.from_settings(get_settings().circuit_breaker)


@lru_cache
def get_key_value_store() -> KeyValueStore:
    """Get the key-value store selected by ``STORE_BACKEND``."""
    return create_key_value_store(get_settings())


@lru_cache
def get_broker_client() -> BrokerClient:
    """
    Get the process-wide broker client.

    The client is returned unconnected; the API lifespan and the worker
    entry point call ``connect()`` during startup.
    """
    return BrokerClient(get_settings().broker)
