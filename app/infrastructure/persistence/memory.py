"""In-memory key-value store for development and tests."""

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from infrastructure.persistence.base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Thread-safe in-memory store with lazy TTL expiry.

    Not shared across processes; use the Redis store for any deployment
    that runs the API and workers separately.

    Args:
        clock: Time source in seconds, injectable for tests.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._data: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def _live(self, key: str) -> Optional[str]:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._data[key]
            return None
        return value

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._live(key)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._data[key] = (value, self._clock() + ttl_seconds)

    def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        with self._lock:
            if self._live(key) is not None:
                return False
            self._data[key] = (value, self._clock() + ttl_seconds)
            return True

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def ping(self) -> bool:
        return True

    def clear(self) -> None:
        """Remove all entries (tests only)."""
        with self._lock:
            self._data.clear()

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {"backend": "memory", "keys": len(self._data)}
