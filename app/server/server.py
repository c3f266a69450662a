from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.router import api_router
from api.dependencies.rate_limits import setup_rate_limiter
from infrastructure.configuration.settings import settings
from server.lifespan import lifespan


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware, routes and lifespan."""
    app = FastAPI(title="Notification Pipeline", lifespan=lifespan)
    setup_rate_limiter(app)

    allow_origins = settings.server.cors_origins or (
        ["*"]
        if settings.is_production
        else [
            "http://localhost:8000",
            "http://127.0.0.1:8000",
        ]
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app


handler = create_app()
