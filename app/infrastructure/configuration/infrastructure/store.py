"""Key-value store infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class StoreSettings(InfrastructureSettings):
    """Key-value store configuration for status records and idempotency keys.

    Environment Variables:
        STORE_BACKEND: Backend type - 'redis' or 'memory' (default: redis)
        REDIS_URL: Redis connection URL
        STATUS_TTL_SECONDS: Retention of status records (default: 24h)
        IDEMPOTENCY_TTL_SECONDS: Retention of idempotency reservations (default: 24h)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.store.backend == "redis":
            url = settings.store.redis_url
        ```
    """

    backend: str = Field(
        default="redis",
        alias="STORE_BACKEND",
        pattern="^(redis|memory)$",
        description="Store backend: 'redis' or 'memory'",
    )
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")
    status_ttl_seconds: int = Field(
        default=86400,
        gt=0,
        alias="STATUS_TTL_SECONDS",
        description="Time-to-live for status records (seconds, 24 hours)",
    )
    idempotency_ttl_seconds: int = Field(
        default=86400,
        gt=0,
        alias="IDEMPOTENCY_TTL_SECONDS",
        description="Time-to-live for idempotency reservations (seconds, 24 hours)",
    )
