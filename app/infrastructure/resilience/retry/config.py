"""Retry policy configuration.

This module defines the retry budget and exponential backoff used when a
delivery attempt fails.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.configuration import RetrySettings


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_retries: Retries allowed before a message becomes terminal
        base_delay_ms: Base delay for exponential backoff

    Example:
        config = RetryConfig(max_retries=3, base_delay_ms=1000)
        config.should_retry(0)          # True
        config.calculate_delay_ms(2)    # 4000
    """

    max_retries: int = 3
    base_delay_ms: int = 1000

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay_ms < 1:
            raise ValueError("base_delay_ms must be at least 1")

    @classmethod
    def from_settings(cls, settings: "RetrySettings") -> "RetryConfig":
        return cls(
            max_retries=settings.max_retries,
            base_delay_ms=settings.base_delay_ms,
        )

    def should_retry(self, retry_count: int) -> bool:
        """True iff another retry fits in the budget."""
        return retry_count < self.max_retries

    def calculate_delay_ms(self, retry_count: int) -> int:
        """Backoff delay for the given retry number: base * 2^retry_count."""
        if retry_count < 0:
            raise ValueError("retry_count must be >= 0")
        return self.base_delay_ms * (2**retry_count)
