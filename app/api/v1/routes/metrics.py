"""Pipeline introspection endpoints."""

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Request

from api.dependencies.delivery import AppBreakersDep, PipelineMetricsDep
from api.dependencies.rate_limits import get_limiter
from infrastructure.logging import get_module_logger
from modules.delivery.schemas import BreakerResetResponse

logger = get_module_logger()
router = APIRouter(prefix="/metrics", tags=["Metrics"])
limiter = get_limiter()


@router.get("")
@limiter.limit("50/minute")
def get_metrics(
    request: Request,  # pylint: disable=unused-argument
    metrics: PipelineMetricsDep,
) -> Dict[str, Any]:
    """Queue depths per channel and failure queue, status store statistics
    and circuit breaker states."""
    return metrics.snapshot()


@router.post(
    "/circuit-breakers/{name}/reset",
    response_model=BreakerResetResponse,
    tags=["admin"],
)
@limiter.limit("10/minute")
def reset_circuit_breaker(
    request: Request,  # pylint: disable=unused-argument
    name: str,
    breakers: AppBreakersDep,
) -> BreakerResetResponse:
    """Manually reset a circuit breaker to CLOSED state.

    Use this when a dependency has recovered but the circuit is still open.

    Raises:
        HTTPException: 404 if no breaker with that name exists.
    """
    try:
        breakers.reset(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Circuit breaker '{name}' not found")
    logger.warning("circuit_breaker_manually_reset", breaker=name)
    return BreakerResetResponse(name=name, state=breakers.get(name).state.value)


@router.post(
    "/circuit-breakers/reset",
    response_model=List[BreakerResetResponse],
    tags=["admin"],
)
@limiter.limit("10/minute")
def reset_all_circuit_breakers(
    request: Request,  # pylint: disable=unused-argument
    breakers: AppBreakersDep,
) -> List[BreakerResetResponse]:
    """Reset every registered circuit breaker to CLOSED state."""
    breakers.reset_all()
    logger.warning("circuit_breakers_manually_reset")
    return [
        BreakerResetResponse(name=name, state=stats["state"])
        for name, stats in breakers.get_all_stats().items()
    ]
