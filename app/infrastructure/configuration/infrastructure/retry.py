"""Retry infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RetrySettings(InfrastructureSettings):
    """Retry configuration for failed deliveries.

    Environment Variables:
        RETRY_MAX_RETRIES: Retries before a message is terminal (default: 3)
        RETRY_BASE_DELAY_MS: Base exponential backoff delay (default: 1000ms)

    Exponential Backoff:
        Delay calculation: base_delay * (2 ^ retry_count)

        Example with defaults (base=1000ms):
            Retry 1: 2000ms
            Retry 2: 4000ms
            Retry 3: 8000ms

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        max_retries = settings.retry.max_retries
        ```
    """

    max_retries: int = Field(
        default=3,
        ge=0,
        alias="RETRY_MAX_RETRIES",
        description="Maximum retries before a message is moved to the failure queue",
    )
    base_delay_ms: int = Field(
        default=1000,
        gt=0,
        alias="RETRY_BASE_DELAY_MS",
        description="Base delay for exponential backoff (milliseconds)",
    )
