"""Redis-backed key-value store."""

from typing import Any, Dict, Optional

import redis
import structlog

from infrastructure.persistence.base import KeyValueStore, StoreUnavailableError

logger = structlog.get_logger()


class RedisKeyValueStore(KeyValueStore):
    """Key-value store on Redis.

    ``set_if_absent`` maps to ``SET key value EX ttl NX``, which is atomic
    on the server, so concurrent first submissions of the same idempotency
    key cannot both win.

    Args:
        client: A ``redis.Redis`` client. Built from ``url`` when omitted.
        url: Redis connection URL.
    """

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        url: str = "redis://localhost:6379/0",
    ):
        self._client = client or redis.Redis.from_url(url, decode_responses=True)
        logger.info("initialized_redis_store")

    def get(self, key: str) -> Optional[str]:
        try:
            value = self._client.get(key)
        except redis.RedisError as e:
            raise StoreUnavailableError(f"Redis GET failed: {e}") from e
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self._client.set(key, value, ex=ttl_seconds)
        except redis.RedisError as e:
            raise StoreUnavailableError(f"Redis SET failed: {e}") from e

    def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        try:
            return bool(self._client.set(key, value, ex=ttl_seconds, nx=True))
        except redis.RedisError as e:
            raise StoreUnavailableError(f"Redis SET NX failed: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except redis.RedisError as e:
            raise StoreUnavailableError(f"Redis DEL failed: {e}") from e

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            logger.warning("redis_ping_failed", error=str(e))
            return False

    def close(self) -> None:
        self._client.close()

    def get_stats(self) -> Dict[str, Any]:
        try:
            keys = self._client.dbsize()
        except redis.RedisError as e:
            raise StoreUnavailableError(f"Redis DBSIZE failed: {e}") from e
        return {"backend": "redis", "keys": keys}
