"""Circuit breaker implementation for downstream dependencies.

The circuit breaker pattern prevents cascading failures by:
1. CLOSED state: Normal operation, calls pass through
2. OPEN state: Fast-fail calls without invoking the dependency
3. HALF_OPEN state: Probe recovery with a limited number of calls

State transitions:
- CLOSED -> OPEN: After failure_threshold consecutive failures
- OPEN -> HALF_OPEN: Once the clock reaches next_attempt_at
- HALF_OPEN -> CLOSED: After success_threshold successful probes
- HALF_OPEN -> OPEN: On any probe failure, with a fresh next_attempt_at

Every call is bounded by ``call_timeout``; a call that does not finish in
time counts as a failure. The worker thread running a timed-out call is
not interrupted and finishes in the background.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from enum import Enum
from typing import Any, Callable, Optional

from infrastructure.logging import get_module_logger

logger = get_module_logger()


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Failing, reject calls immediately
    HALF_OPEN = "half_open"  # Testing recovery


class CircuitBreakerOpenError(Exception):
    """Raised when circuit breaker is open and the call is rejected."""

    def __init__(self, name: str, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.name = name
        self.retry_after = retry_after


class CircuitBreakerTimeoutError(TimeoutError):
    """Raised when a guarded call exceeds the breaker's call timeout."""


class CircuitBreaker:
    """Circuit breaker for a single named dependency.

    Args:
        name: Name of the dependency (e.g. "broker", "transport:email")
        failure_threshold: Consecutive failures before opening
        success_threshold: Successful half-open probes before closing
        reset_timeout: Seconds to stay OPEN before probing
        call_timeout: Seconds a single call may take; ``None`` disables the bound
        half_open_max_calls: Concurrent probes admitted while HALF_OPEN
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        success_threshold: int = 2,
        reset_timeout: float = 30.0,
        call_timeout: Optional[float] = 60.0,
        half_open_max_calls: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ):
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")
        if success_threshold < 1:
            raise ValueError("success_threshold must be at least 1")
        if half_open_max_calls < 1:
            raise ValueError("half_open_max_calls must be at least 1")

        self.name = name
        self.failure_threshold = failure_threshold
        self.success_threshold = success_threshold
        self.reset_timeout = reset_timeout
        self.call_timeout = call_timeout
        self.half_open_max_calls = half_open_max_calls
        self._clock = clock

        # State management
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._next_attempt_at: Optional[float] = None
        self._half_open_calls = 0

        # Thread safety
        self._lock = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def state(self) -> CircuitState:
        """Get current circuit state."""
        with self._lock:
            return self._state

    @property
    def next_attempt_at(self) -> Optional[float]:
        """Clock value after which an OPEN circuit admits a probe."""
        with self._lock:
            return self._next_attempt_at

    def call(
        self,
        func: Callable,
        *args,
        fallback: Optional[Callable[[], Any]] = None,
        **kwargs,
    ) -> Any:
        """Execute function through circuit breaker.

        Args:
            func: Function to call
            *args, **kwargs: Arguments to pass to function
            fallback: Optional zero-argument callable whose result is returned
                instead of raising when the circuit rejects the call

        Returns:
            Result from function (or from ``fallback`` when rejected)

        Raises:
            CircuitBreakerOpenError: If circuit rejects the call and no fallback
            CircuitBreakerTimeoutError: If the call exceeds ``call_timeout``
            Exception: Any exception raised by func
        """
        try:
            is_probe = self._admit()
        except CircuitBreakerOpenError:
            if fallback is not None:
                return fallback()
            raise

        try:
            result = self._invoke(func, *args, **kwargs)
        except Exception as e:
            self._on_failure(e, is_probe)
            raise

        self._on_success(is_probe)
        return result

    def _admit(self) -> bool:
        """Gate a call; returns True when the call is a half-open probe."""
        with self._lock:
            if self._state == CircuitState.OPEN:
                now = self._clock()
                if self._should_attempt_reset(now):
                    self._transition_to_half_open()
                else:
                    remaining = max(0.0, self._next_attempt_at - now)
                    logger.warning(
                        "circuit_breaker_rejected",
                        name=self.name,
                        failure_count=self._failure_count,
                        retry_in_seconds=round(remaining, 3),
                    )
                    raise CircuitBreakerOpenError(
                        self.name,
                        f"Circuit breaker '{self.name}' is OPEN. "
                        f"Retry in {remaining:.1f} seconds.",
                        retry_after=remaining,
                    )

            if self._state == CircuitState.HALF_OPEN:
                if self._half_open_calls >= self.half_open_max_calls:
                    logger.debug(
                        "circuit_breaker_half_open_limit",
                        name=self.name,
                        calls=self._half_open_calls,
                    )
                    raise CircuitBreakerOpenError(
                        self.name,
                        f"Circuit breaker '{self.name}' is HALF_OPEN "
                        f"(max concurrent probes reached).",
                    )
                self._half_open_calls += 1
                return True

            return False

    def _invoke(self, func: Callable, *args, **kwargs) -> Any:
        if self.call_timeout is None:
            return func(*args, **kwargs)

        future = self._get_executor().submit(func, *args, **kwargs)
        try:
            return future.result(timeout=self.call_timeout)
        except FutureTimeoutError as e:
            future.cancel()
            raise CircuitBreakerTimeoutError(
                f"Call through circuit breaker '{self.name}' timed out "
                f"after {self.call_timeout}s"
            ) from e

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    thread_name_prefix=f"breaker-{self.name}"
                )
            return self._executor

    def _on_success(self, is_probe: bool):
        """Handle successful call."""
        with self._lock:
            if self._state == CircuitState.HALF_OPEN and is_probe:
                self._half_open_calls = max(0, self._half_open_calls - 1)
                self._success_count += 1
                logger.info(
                    "circuit_breaker_success_half_open",
                    name=self.name,
                    success_count=self._success_count,
                    threshold=self.success_threshold,
                )
                if self._success_count >= self.success_threshold:
                    self._transition_to_closed()
            elif self._state == CircuitState.CLOSED:
                if self._failure_count > 0:
                    logger.debug(
                        "circuit_breaker_failure_count_reset",
                        name=self.name,
                        previous_failures=self._failure_count,
                    )
                    self._failure_count = 0

    def _on_failure(self, exception: Exception, is_probe: bool):
        """Handle failed call."""
        with self._lock:
            if self._state == CircuitState.HALF_OPEN and is_probe:
                logger.warning(
                    "circuit_breaker_recovery_failed",
                    name=self.name,
                    error=str(exception),
                )
                self._transition_to_open()
            elif self._state == CircuitState.CLOSED:
                self._failure_count += 1
                if self._failure_count >= self.failure_threshold:
                    logger.error(
                        "circuit_breaker_threshold_exceeded",
                        name=self.name,
                        failure_count=self._failure_count,
                        threshold=self.failure_threshold,
                        error=str(exception),
                    )
                    self._transition_to_open()
                else:
                    logger.warning(
                        "circuit_breaker_failure",
                        name=self.name,
                        failure_count=self._failure_count,
                        threshold=self.failure_threshold,
                        error=str(exception),
                    )

    def _should_attempt_reset(self, now: float) -> bool:
        """Check if enough time has passed to attempt recovery."""
        if self._next_attempt_at is None:
            return True
        return now >= self._next_attempt_at

    def _transition_to_closed(self):
        """Transition to CLOSED state."""
        logger.info("circuit_breaker_closed", name=self.name)
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._half_open_calls = 0
        self._next_attempt_at = None

    def _transition_to_open(self):
        """Transition to OPEN state."""
        self._state = CircuitState.OPEN
        self._next_attempt_at = self._clock() + self.reset_timeout
        self._success_count = 0
        self._half_open_calls = 0
        logger.error(
            "circuit_breaker_opened",
            name=self.name,
            reset_timeout=self.reset_timeout,
        )

    def _transition_to_half_open(self):
        """Transition to HALF_OPEN state."""
        logger.info("circuit_breaker_half_open", name=self.name)
        self._state = CircuitState.HALF_OPEN
        self._failure_count = 0
        self._success_count = 0
        self._half_open_calls = 0

    def get_stats(self) -> dict:
        """Get circuit breaker statistics."""
        with self._lock:
            retry_in = None
            if self._state == CircuitState.OPEN and self._next_attempt_at is not None:
                retry_in = round(max(0.0, self._next_attempt_at - self._clock()), 3)
            return {
                "name": self.name,
                "state": self._state.value,
                "failure_count": self._failure_count,
                "success_count": self._success_count,
                "next_attempt_at": self._next_attempt_at,
                "retry_in_seconds": retry_in,
                "half_open_calls": self._half_open_calls,
            }

    def reset(self):
        """Manually reset circuit breaker (for testing/admin operations)."""
        with self._lock:
            logger.info("circuit_breaker_manual_reset", name=self.name)
            self._transition_to_closed()

    def shutdown(self):
        """Release the timeout executor without waiting for stuck calls."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)
