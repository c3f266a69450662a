"""Retry policy for failed deliveries."""

from infrastructure.resilience.retry.config import RetryConfig

__all__ = ["RetryConfig"]
