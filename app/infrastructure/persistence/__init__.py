"""Key-value persistence for status records and idempotency reservations.

Usage:
    from infrastructure.persistence import create_key_value_store

    store = create_key_value_store(settings)
    if store.set_if_absent("idempotency:abc", "n-1", ttl_seconds=86400):
        ...
"""

from infrastructure.persistence.base import KeyValueStore, StoreUnavailableError
from infrastructure.persistence.factory import create_key_value_store
from infrastructure.persistence.memory import InMemoryKeyValueStore
from infrastructure.persistence.redis_store import RedisKeyValueStore

__all__ = [
    "KeyValueStore",
    "StoreUnavailableError",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
    "create_key_value_store",
]
