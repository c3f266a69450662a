"""Per-client rate limiting (slowapi).

Clients are keyed by the first ``X-Forwarded-For`` hop when the API runs
behind a load balancer, otherwise by the peer address.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from infrastructure.configuration.settings import settings


def client_key(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",")[0].strip()
    return first_hop or get_remote_address(request)


limiter = Limiter(key_func=client_key)

# Default per-route limit for the notifications API
API_RATE_LIMIT = settings.server.RATE_LIMIT


async def rate_limit_handler(_request: Request, exc: Exception):
    """Answer 429 with the same ``{message, error_code}`` shape as other API errors."""
    if isinstance(exc, RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={"message": "Rate limit exceeded", "error_code": "RATE_LIMITED"},
        )


def setup_rate_limiter(app: FastAPI):
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)


def get_limiter() -> Limiter:
    return limiter
