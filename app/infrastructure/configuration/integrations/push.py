"""Push provider integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class PushSettings(IntegrationSettings):
    """Push notification provider API configuration.

    Environment Variables:
        PUSH_API_URL: Send endpoint of the push provider
        PUSH_API_KEY: Bearer key for the push provider
        PUSH_TIMEOUT_SECONDS: HTTP timeout for sends (default: 10s)
    """

    PUSH_API_URL: str = Field(default="", alias="PUSH_API_URL")
    PUSH_API_KEY: str | None = Field(default=None, alias="PUSH_API_KEY")
    PUSH_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0, alias="PUSH_TIMEOUT_SECONDS")
