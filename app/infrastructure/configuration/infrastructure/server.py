"""Server infrastructure settings."""

from typing import List

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """HTTP server runtime configuration.

    Environment Variables:
        API_HOST: Bind address for the API server (default: 0.0.0.0)
        API_PORT: Bind port for the API server (default: 8000)
        API_RATE_LIMIT: slowapi limit applied to notification routes
        BACKEND_CORS_ORIGINS: Comma separated list of allowed origins

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        limit = settings.server.RATE_LIMIT
        ```
    """

    HOST: str = Field(default="0.0.0.0", alias="API_HOST")
    PORT: int = Field(default=8000, alias="API_PORT")
    RATE_LIMIT: str = Field(default="100/minute", alias="API_RATE_LIMIT")
    BACKEND_CORS_ORIGINS: str = Field(default="", alias="BACKEND_CORS_ORIGINS")

    @property
    def cors_origins(self) -> List[str]:
        """Allowed CORS origins parsed from the comma separated setting."""
        return [
            origin.strip()
            for origin in self.BACKEND_CORS_ORIGINS.split(",")
            if origin.strip()
        ]
