"""Resilience patterns and implementations.

This module contains resilience-related infrastructure components: the
circuit breaker, its registry, and the retry policy.
"""

from infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerOpenError,
    CircuitBreakerTimeoutError,
    CircuitState,
)
from infrastructure.resilience.guarded import guarded_result_call
from infrastructure.resilience.registry import CircuitBreakerRegistry
from infrastructure.resilience.retry import RetryConfig

__all__ = [
    # Circuit Breaker
    "CircuitBreaker",
    "CircuitBreakerOpenError",
    "CircuitBreakerTimeoutError",
    "CircuitState",
    "CircuitBreakerRegistry",
    "guarded_result_call",
    # Retry
    "RetryConfig",
]
