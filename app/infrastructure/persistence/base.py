"""Key-value store abstract base class."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class StoreUnavailableError(Exception):
    """Raised when the backing store cannot be reached."""


class KeyValueStore(ABC):
    """Abstract base class for key-value store implementations.

    Values are strings (callers serialize). Every write carries a TTL so
    that nothing in the store grows without bound. Implementations must
    raise StoreUnavailableError for connectivity failures rather than
    returning a miss.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get the value for key, or None if absent/expired."""

    @abstractmethod
    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Unconditionally store value under key for ttl_seconds."""

    @abstractmethod
    def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        """Atomically store value only if key does not exist.

        Returns:
            True if the value was written, False if the key already existed.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key; a missing key is not an error."""

    @abstractmethod
    def ping(self) -> bool:
        """Return True when the store is reachable."""

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """Get store statistics (implementation-specific)."""
