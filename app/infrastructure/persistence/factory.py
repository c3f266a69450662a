"""Key-value store factory."""

from typing import TYPE_CHECKING

from infrastructure.logging import get_module_logger
from infrastructure.persistence.base import KeyValueStore
from infrastructure.persistence.memory import InMemoryKeyValueStore
from infrastructure.persistence.redis_store import RedisKeyValueStore

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()


def create_key_value_store(settings: "Settings") -> KeyValueStore:
    """Create the key-value store selected by ``STORE_BACKEND``.

    Args:
        settings: Settings instance with store configuration.

    Returns:
        KeyValueStore implementation.

    Raises:
        ValueError: If the backend is unknown.
    """
    backend = settings.store.backend

    if backend == "memory":
        logger.info("initialized_key_value_store", backend="memory")
        return InMemoryKeyValueStore()

    if backend == "redis":
        logger.info("initialized_key_value_store", backend="redis")
        return RedisKeyValueStore(url=settings.store.redis_url)

    raise ValueError(f"Unknown store backend: {backend}")
