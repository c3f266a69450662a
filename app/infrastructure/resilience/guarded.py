"""Run result-returning calls through a circuit breaker.

Collaborators report failures as OperationResult instead of raising. The
breaker only counts exceptions, so retryable results are raised inside
the guarded call and converted back to results outside it.
"""

from typing import Any, Callable

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult
from infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerOpenError,
    CircuitBreakerTimeoutError,
)

logger = get_module_logger()


class RetryableResultError(Exception):
    """Carries a retryable OperationResult through the breaker."""

    def __init__(self, result: OperationResult):
        super().__init__(result.message)
        self.result = result


def guarded_result_call(
    breaker: CircuitBreaker, func: Callable[..., OperationResult], *args: Any, **kwargs: Any
) -> OperationResult:
    """Call ``func`` through ``breaker`` and always return an OperationResult.

    - Retryable results count as breaker failures and are returned as-is
    - Non-retryable failures (not found, permanent) do not trip the breaker
    - An open circuit yields UNAVAILABLE without calling ``func``
    - A timeout or unexpected exception yields TRANSIENT_ERROR
    """

    def attempt() -> OperationResult:
        result = func(*args, **kwargs)
        if result.is_retryable:
            raise RetryableResultError(result)
        return result

    try:
        return breaker.call(attempt)
    except RetryableResultError as e:
        return e.result
    except CircuitBreakerOpenError as e:
        retry_after = int(e.retry_after) if e.retry_after is not None else None
        return OperationResult.unavailable(
            str(e), error_code="CIRCUIT_OPEN", retry_after=retry_after
        )
    except CircuitBreakerTimeoutError as e:
        return OperationResult.transient_error(str(e), error_code="TIMEOUT")
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("guarded_call_failed", breaker=breaker.name, error=str(e))
        return OperationResult.transient_error(
            f"{type(e).__name__}: {e}", error_code="UNEXPECTED_ERROR"
        )
