"""Circuit breaker infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class CircuitBreakerSettings(InfrastructureSettings):
    """Defaults applied to every circuit breaker created by the registry.

    Environment Variables:
        CIRCUIT_BREAKER_FAILURE_THRESHOLD: Failures before opening (default: 5)
        CIRCUIT_BREAKER_SUCCESS_THRESHOLD: Half-open successes before closing (default: 2)
        CIRCUIT_BREAKER_RESET_TIMEOUT_SECONDS: Open duration (default: 30s)
        CIRCUIT_BREAKER_CALL_TIMEOUT_SECONDS: Per-call timeout (default: 60s)
        CIRCUIT_BREAKER_HALF_OPEN_MAX_CALLS: Concurrent half-open probes (default: 1)
    """

    failure_threshold: int = Field(
        default=5, gt=0, alias="CIRCUIT_BREAKER_FAILURE_THRESHOLD"
    )
    success_threshold: int = Field(
        default=2, gt=0, alias="CIRCUIT_BREAKER_SUCCESS_THRESHOLD"
    )
    reset_timeout_seconds: float = Field(
        default=30.0, gt=0, alias="CIRCUIT_BREAKER_RESET_TIMEOUT_SECONDS"
    )
    call_timeout_seconds: float = Field(
        default=60.0, gt=0, alias="CIRCUIT_BREAKER_CALL_TIMEOUT_SECONDS"
    )
    half_open_max_calls: int = Field(
        default=1, gt=0, alias="CIRCUIT_BREAKER_HALF_OPEN_MAX_CALLS"
    )
