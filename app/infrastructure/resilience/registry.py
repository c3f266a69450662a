"""Circuit breaker registry.

Process-wide collection of circuit breakers keyed by dependency name. The
registry is an explicit object created at startup and passed to every
component that issues guarded calls, so all callers of one dependency share
the same breaker state.
"""

import threading
import time
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from infrastructure.logging import get_module_logger
from infrastructure.resilience.circuit_breaker import CircuitBreaker, CircuitState

if TYPE_CHECKING:
    from infrastructure.configuration import CircuitBreakerSettings

logger = get_module_logger()


class CircuitBreakerRegistry:
    """Thread-safe registry of named circuit breakers.

    Breakers created through the registry share its defaults unless
    overridden per name.

    Usage:
        registry = CircuitBreakerRegistry.from_settings(settings.circuit_breaker)
        breaker = registry.get_or_create("broker")
        breaker.call(client.publish, payload, routing_key="email")
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        success_threshold: int = 2,
        reset_timeout: float = 30.0,
        call_timeout: Optional[float] = 60.0,
        half_open_max_calls: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._defaults: Dict[str, Any] = {
            "failure_threshold": failure_threshold,
            "success_threshold": success_threshold,
            "reset_timeout": reset_timeout,
            "call_timeout": call_timeout,
            "half_open_max_calls": half_open_max_calls,
        }
        self._clock = clock
        self._breakers: Dict[str, CircuitBreaker] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: "CircuitBreakerSettings",
        clock: Callable[[], float] = time.monotonic,
    ) -> "CircuitBreakerRegistry":
        """Build a registry whose defaults come from settings."""
        return cls(
            failure_threshold=settings.failure_threshold,
            success_threshold=settings.success_threshold,
            reset_timeout=settings.reset_timeout_seconds,
            call_timeout=settings.call_timeout_seconds,
            half_open_max_calls=settings.half_open_max_calls,
            clock=clock,
        )

    def get_or_create(self, name: str, **overrides: Any) -> CircuitBreaker:
        """Get the breaker for ``name``, creating it on first use.

        Args:
            name: Dependency name
            **overrides: CircuitBreaker keyword arguments that replace the
                registry defaults. Ignored when the breaker already exists.

        Returns:
            CircuitBreaker instance shared by every caller of ``name``
        """
        with self._lock:
            breaker = self._breakers.get(name)
            if breaker is None:
                options = {**self._defaults, **overrides}
                breaker = CircuitBreaker(name=name, clock=self._clock, **options)
                self._breakers[name] = breaker
                logger.info("circuit_breaker_registered", name=name, **options)
            return breaker

    def get(self, name: str) -> Optional[CircuitBreaker]:
        """Get a circuit breaker by name."""
        with self._lock:
            return self._breakers.get(name)

    def get_all_stats(self) -> Dict[str, Dict[str, Any]]:
        """Get statistics for all registered circuit breakers."""
        with self._lock:
            breakers = list(self._breakers.values())
        return {cb.name: cb.get_stats() for cb in breakers}

    def get_open(self) -> List[str]:
        """Get names of circuit breakers that are currently OPEN."""
        with self._lock:
            breakers = list(self._breakers.values())
        return [cb.name for cb in breakers if cb.state == CircuitState.OPEN]

    def reset(self, name: str) -> None:
        """Manually reset a circuit breaker.

        Raises:
            KeyError: If circuit breaker not found
        """
        breaker = self.get(name)
        if breaker is None:
            raise KeyError(f"Circuit breaker '{name}' not found")
        breaker.reset()

    def reset_all(self) -> None:
        """Reset every registered breaker to CLOSED."""
        with self._lock:
            breakers = list(self._breakers.values())
        for breaker in breakers:
            breaker.reset()

    def shutdown(self) -> None:
        """Release the executors held by every breaker."""
        with self._lock:
            breakers = list(self._breakers.values())
        for breaker in breakers:
            breaker.shutdown()
