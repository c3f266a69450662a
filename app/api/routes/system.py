from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from infrastructure.configuration.settings import settings
from infrastructure.logging import get_module_logger
from api.dependencies.rate_limits import get_limiter

logger = get_module_logger()
router = APIRouter(tags=["System"])
limiter = get_limiter()


def _broker_up(request: Request) -> bool:
    broker = getattr(request.app.state, "broker", None)
    return broker is not None and broker.is_connected()


def _store_up(request: Request) -> bool:
    store = getattr(request.app.state, "store", None)
    return store is not None and store.ping()


# Load balancers poll these endpoints, so they get a generous rate limit
@router.get("/version")
@limiter.limit("50/minute")
def get_version(request: Request):  # pylint: disable=unused-argument
    """Get the version of the application."""
    return {"version": settings.GIT_SHA}


@router.get("/health")
@limiter.limit("50/minute")
def get_health(request: Request):
    """Healthcheck endpoint.

    Reports the broker connection and the key-value store separately and
    answers 503 when either is down.
    """
    broker = "up" if _broker_up(request) else "down"
    store = "up" if _store_up(request) else "down"
    healthy = broker == "up" and store == "up"
    if not healthy:
        logger.warning("health_degraded", broker=broker, store=store)
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={"status": "ok" if healthy else "degraded", "broker": broker, "store": store},
    )
